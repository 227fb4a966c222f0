"""
Attendance rollups: closed sessions -> daily -> monthly -> yearly.

Every stage is an upsert keyed by its natural key and recomputes from
its source table, so the pipeline can be re-run or resumed after a
partial failure and always converges on the same rows.
"""
from collections import defaultdict
from typing import Dict, Optional, Set, Tuple
from sqlalchemy import and_, exists, not_
from sqlalchemy.orm import Session
from gymtrack.core.db_transaction import db_transaction
from gymtrack.core.logging_config import get_logger
from gymtrack.core.upsert import upsert
from gymtrack.models.attendance import (
    Attendance,
    DailyAttendance,
    MonthlyAttendanceSummary,
    YearlyAttendanceSummary,
)

logger = get_logger("attendance_summary_service")


def _closed_sessions(db: Session):
    return db.query(Attendance).filter(
        Attendance.check_out_time.isnot(None),
        Attendance.time_spent_minutes.isnot(None),
    )


def has_pending_attendance_records(db: Session) -> bool:
    """
    True when a closed session is missing from daily_attendance or its
    check-in, check-out or minutes differ from the stored daily row.
    """
    in_sync = exists().where(
        and_(
            DailyAttendance.member_id == Attendance.member_id,
            DailyAttendance.attendance_date == Attendance.attendance_date,
            DailyAttendance.check_in == Attendance.check_in_time,
            DailyAttendance.check_out == Attendance.check_out_time,
            DailyAttendance.time_spent_minutes == Attendance.time_spent_minutes,
        )
    )
    pending = _closed_sessions(db).filter(not_(in_sync)).first()
    return pending is not None


def copy_sessions_to_daily(db: Session) -> int:
    """Stage 1: upsert every closed session into daily_attendance. Returns rows written."""
    written = 0
    with db_transaction(db, "copy_sessions_to_daily"):
        for session in _closed_sessions(db).all():
            _, changed = upsert(
                db,
                DailyAttendance,
                key={"member_id": session.member_id, "attendance_date": session.attendance_date},
                values={
                    "check_in": session.check_in_time,
                    "check_out": session.check_out_time,
                    "time_spent_minutes": session.time_spent_minutes,
                },
            )
            written += int(changed)
    logger.info(f"Completed attendance records copied to daily_attendance ({written} written).")
    return written


def aggregate_monthly(db: Session) -> int:
    """Stage 2: regroup daily_attendance by (member, year, month)."""
    present_days: Dict[Tuple[int, int, int], Set] = defaultdict(set)
    minutes: Dict[Tuple[int, int, int], int] = defaultdict(int)
    for daily in db.query(DailyAttendance).all():
        key = (daily.member_id, daily.attendance_date.year, daily.attendance_date.month)
        present_days[key].add(daily.attendance_date)
        minutes[key] += daily.time_spent_minutes

    written = 0
    with db_transaction(db, "aggregate_monthly"):
        for (member_id, year, month), dates in present_days.items():
            _, changed = upsert(
                db,
                MonthlyAttendanceSummary,
                key={"member_id": member_id, "year": year, "month": month},
                values={
                    "total_present_days": len(dates),
                    "total_minutes_spent": minutes[(member_id, year, month)],
                },
            )
            written += int(changed)
    logger.info(f"Monthly attendance summaries generated/updated ({written} written).")
    return written


def aggregate_yearly(db: Session) -> int:
    """Stage 3: regroup monthly summaries by (member, year)."""
    present_days: Dict[Tuple[int, int], int] = defaultdict(int)
    minutes: Dict[Tuple[int, int], int] = defaultdict(int)
    for monthly in db.query(MonthlyAttendanceSummary).all():
        key = (monthly.member_id, monthly.year)
        present_days[key] += monthly.total_present_days
        minutes[key] += monthly.total_minutes_spent

    written = 0
    with db_transaction(db, "aggregate_yearly"):
        for (member_id, year), days in present_days.items():
            _, changed = upsert(
                db,
                YearlyAttendanceSummary,
                key={"member_id": member_id, "year": year},
                values={"total_present_days": days, "total_minutes_spent": minutes[(member_id, year)]},
            )
            written += int(changed)
    logger.info(f"Yearly attendance summaries generated/updated ({written} written).")
    return written


def generate_attendance_summaries(db: Session) -> Dict[str, int]:
    """Run all three stages in order; each commits on its own."""
    return {
        "daily": copy_sessions_to_daily(db),
        "monthly": aggregate_monthly(db),
        "yearly": aggregate_yearly(db),
    }


def generate_pending_summaries(db: Session) -> Optional[Dict[str, int]]:
    """Run the rollup only when closed sessions are out of sync; None when there was nothing to do."""
    if not has_pending_attendance_records(db):
        logger.info("No new or modified completed attendance records found to generate summaries.")
        return None
    return generate_attendance_summaries(db)


def get_monthly_summaries(db: Session, member_id: int, year: Optional[int] = None):
    query = db.query(MonthlyAttendanceSummary).filter(MonthlyAttendanceSummary.member_id == member_id)
    if year is not None:
        query = query.filter(MonthlyAttendanceSummary.year == year)
    return query.order_by(MonthlyAttendanceSummary.year, MonthlyAttendanceSummary.month).all()


def get_yearly_summaries(db: Session, member_id: int):
    return (
        db.query(YearlyAttendanceSummary)
        .filter(YearlyAttendanceSummary.member_id == member_id)
        .order_by(YearlyAttendanceSummary.year)
        .all()
    )
