"""
Attendance session tracking.

Each member has at most one session per calendar day, moving
NoSession -> CheckedIn -> CheckedOut. The first event of the day checks
the member in, the second checks them out once the minimum stay has
passed, and any further event that day is rejected.
"""
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from gymtrack.core.config import settings
from gymtrack.core.db_transaction import db_transaction
from gymtrack.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from gymtrack.core.logging_config import get_logger
from gymtrack.models.attendance import Attendance
from gymtrack.models.member import Member, MembershipStatusEnum
from gymtrack.schemas.attendance import AttendanceResponse
from gymtrack.services import attendance_summary_service, membership_service

logger = get_logger("attendance_service")


def elapsed_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two timestamps, truncated."""
    return int((end - start).total_seconds() // 60)


def to_attendance_response(attendance: Attendance) -> AttendanceResponse:
    time_spent = None
    if attendance.check_in_time is not None and attendance.check_out_time is not None:
        time_spent = elapsed_minutes(attendance.check_in_time, attendance.check_out_time)
    return AttendanceResponse(
        id=attendance.id,
        member_id=attendance.member_id,
        member_name=attendance.member.name if attendance.member else "N/A",
        attendance_date=attendance.attendance_date,
        check_in_time=attendance.check_in_time,
        check_out_time=attendance.check_out_time,
        time_spent_minutes=time_spent,
    )


def _ensure_membership_active(member: Member, today: date) -> None:
    status = membership_service.derive_member_status(member, today)
    if status == MembershipStatusEnum.EXPIRED:
        raise InvalidStateError("Member's membership has expired. Please renew the plan.")
    if status == MembershipStatusEnum.INACTIVE:
        raise InvalidStateError("Member's membership is inactive. Please assign a plan.")


def _find_session(db: Session, member_id: int, attendance_date: date) -> Optional[Attendance]:
    return db.query(Attendance).filter(
        Attendance.member_id == member_id,
        Attendance.attendance_date == attendance_date,
    ).first()


def record_attendance(
    db: Session,
    member_id: int,
    now: Optional[datetime] = None,
    min_stay_minutes: Optional[int] = None,
) -> Attendance:
    """Check the member in, or out if already checked in today."""
    now = now or datetime.now()
    today = now.date()
    min_stay = settings.MIN_STAY_MINUTES if min_stay_minutes is None else min_stay_minutes

    member = db.query(Member).filter(Member.id == member_id).first()
    if not member:
        raise NotFoundError(f"Member not found with id: {member_id}")
    _ensure_membership_active(member, today)

    existing = _find_session(db, member_id, today)

    if existing is None:
        attendance = Attendance(
            member_id=member_id,
            attendance_date=today,
            check_in_time=now,
        )
        with db_transaction(db, "check_in"):
            db.add(attendance)
            try:
                db.flush()
            except IntegrityError as e:
                # Lost a race with a concurrent check-in for the same day
                raise InvalidStateError("Member has already checked in today.") from e
        db.refresh(attendance)
        logger.info(f"Member {member_id} checked in at {now}", extra={"member_id": member_id})
        return attendance

    if existing.check_out_time is not None:
        raise InvalidStateError(
            f"Member has already checked in and checked out today at {existing.check_out_time.time()}."
        )

    if now < existing.check_in_time:
        raise InvalidStateError("Check-out time cannot be before check-in time.")

    spent = elapsed_minutes(existing.check_in_time, now)
    if spent < min_stay:
        raise InvalidStateError(
            f"Check-out not allowed. Member must stay at least {min_stay} minutes "
            f"(current duration: {spent} minutes)."
        )

    with db_transaction(db, "check_out"):
        existing.check_out_time = now
        existing.time_spent_minutes = spent
    db.refresh(existing)
    logger.info(f"Member {member_id} checked out after {spent} minutes", extra={"member_id": member_id})
    return existing


def check_out_all(
    db: Session,
    now: Optional[datetime] = None,
    min_stay_minutes: Optional[int] = None,
) -> int:
    """
    Close every eligible open session dated today.

    Members without an active plan and sessions younger than the minimum
    stay are skipped. Closed sessions are never touched, so repeated calls
    are safe. Returns the number of sessions closed.
    """
    now = now or datetime.now()
    today = now.date()
    min_stay = settings.MIN_STAY_MINUTES if min_stay_minutes is None else min_stay_minutes

    open_sessions = db.query(Attendance).filter(
        Attendance.check_out_time.is_(None),
        Attendance.attendance_date == today,
    ).all()

    checked_out_count = 0
    with db_transaction(db, "check_out_all"):
        for attendance in open_sessions:
            member = attendance.member
            if member is None or not membership_service.has_active_plan(member, today):
                logger.info(f"Skipping check-out for non-active member {attendance.member_id}.")
                continue

            spent = elapsed_minutes(attendance.check_in_time, now)
            if spent < min_stay:
                logger.info(
                    f"Skipping check-out for member {attendance.member_id} "
                    f"(less than {min_stay} minutes stay: {spent} min)."
                )
                continue

            if now > attendance.check_in_time:
                attendance.check_out_time = now
                attendance.time_spent_minutes = spent
                checked_out_count += 1

    logger.info(f"Bulk check-out closed {checked_out_count} of {len(open_sessions)} open session(s)")
    return checked_out_count


def end_of_day_check_out(
    db: Session,
    now: Optional[datetime] = None,
    min_stay_minutes: Optional[int] = None,
) -> Tuple[int, Optional[Dict[str, int]]]:
    """
    Bulk check-out followed by the attendance rollup.

    Summaries are regenerated only when at least one session was closed;
    returns the closed count and the rows written per stage (or None).
    """
    checked_out_count = check_out_all(db, now=now, min_stay_minutes=min_stay_minutes)
    if checked_out_count == 0:
        return 0, None
    return checked_out_count, attendance_summary_service.generate_attendance_summaries(db)


def get_daily_attendance_count(db: Session, start_date: date, end_date: date) -> Dict[date, int]:
    """Number of check-ins per day, inclusive of both ends."""
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")
    rows = (
        db.query(Attendance.attendance_date, func.count(Attendance.id))
        .filter(
            Attendance.attendance_date >= start_date,
            Attendance.attendance_date <= end_date,
        )
        .group_by(Attendance.attendance_date)
        .all()
    )
    return {attendance_date: count for attendance_date, count in rows}


def get_today_status(db: Session, member_id: int, today: Optional[date] = None) -> Optional[Attendance]:
    if not db.query(Member.id).filter(Member.id == member_id).first():
        raise NotFoundError(f"Member not found with id: {member_id}")
    return _find_session(db, member_id, today or date.today())


def list_member_attendance(db: Session, member_id: int) -> List[Attendance]:
    if not db.query(Member.id).filter(Member.id == member_id).first():
        raise NotFoundError(f"Member not found with id: {member_id}")
    return (
        db.query(Attendance)
        .filter(Attendance.member_id == member_id)
        .order_by(Attendance.attendance_date.desc())
        .all()
    )


def delete_attendance_record(db: Session, attendance_id: int) -> None:
    attendance = db.query(Attendance).filter(Attendance.id == attendance_id).first()
    if not attendance:
        raise NotFoundError(f"Attendance record not found with id: {attendance_id}")
    with db_transaction(db, "delete_attendance"):
        db.delete(attendance)
