from datetime import date
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from gymtrack.core.database import get_db
from gymtrack.schemas.attendance import (
    AttendanceResponse,
    AttendanceSummaryRunResponse,
    AttendanceSummaryStatusResponse,
    CheckOutAllResponse,
    MonthlyAttendanceSummaryResponse,
    YearlyAttendanceSummaryResponse,
)
from gymtrack.services import attendance_service, attendance_summary_service

router = APIRouter()


@router.post("/member/{member_id}", response_model=AttendanceResponse)
async def record_attendance(member_id: int, db: Session = Depends(get_db)):
    """Check a member in, or out if already checked in today"""
    attendance = attendance_service.record_attendance(db, member_id)
    return attendance_service.to_attendance_response(attendance)


@router.post("/check-out-all", response_model=CheckOutAllResponse)
async def check_out_all(db: Session = Depends(get_db)):
    """End-of-day sweep closing every eligible open session, then refreshing summaries"""
    checked_out_count, summaries = attendance_service.end_of_day_check_out(db)
    if checked_out_count > 0:
        message = f"Successfully checked out {checked_out_count} active members. Summaries updated."
    else:
        message = "No members found checked in today."
    return CheckOutAllResponse(checked_out_count=checked_out_count, message=message, summaries=summaries)


@router.get("/daily-count", response_model=Dict[date, int])
async def daily_attendance_count(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    return attendance_service.get_daily_attendance_count(db, start_date, end_date)


@router.get("/member/{member_id}/today", response_model=Optional[AttendanceResponse])
async def get_today_attendance(member_id: int, db: Session = Depends(get_db)):
    """Get today's session for a member, if any"""
    attendance = attendance_service.get_today_status(db, member_id)
    return attendance_service.to_attendance_response(attendance) if attendance else None


@router.get("/member/{member_id}", response_model=List[AttendanceResponse])
async def list_member_attendance(member_id: int, db: Session = Depends(get_db)):
    records = attendance_service.list_member_attendance(db, member_id)
    return [attendance_service.to_attendance_response(a) for a in records]


@router.delete("/{attendance_id}", status_code=204)
async def delete_attendance(attendance_id: int, db: Session = Depends(get_db)):
    attendance_service.delete_attendance_record(db, attendance_id)
    return None


@router.get("/summary/status", response_model=AttendanceSummaryStatusResponse)
async def summary_status(db: Session = Depends(get_db)):
    """Whether closed sessions are waiting to be rolled up"""
    return AttendanceSummaryStatusResponse(
        has_pending_records=attendance_summary_service.has_pending_attendance_records(db)
    )


@router.post("/summary/generate", response_model=AttendanceSummaryRunResponse)
async def generate_summaries(db: Session = Depends(get_db)):
    written = attendance_summary_service.generate_pending_summaries(db)
    if written is None:
        return AttendanceSummaryRunResponse(
            generated=False,
            message="No new or modified completed attendance records found to generate summaries.",
        )
    return AttendanceSummaryRunResponse(
        generated=True,
        message="Attendance summaries generated/updated successfully.",
        written=written,
    )


@router.get("/summary/member/{member_id}/monthly", response_model=List[MonthlyAttendanceSummaryResponse])
async def member_monthly_summary(
    member_id: int,
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    return attendance_summary_service.get_monthly_summaries(db, member_id, year)


@router.get("/summary/member/{member_id}/yearly", response_model=List[YearlyAttendanceSummaryResponse])
async def member_yearly_summary(member_id: int, db: Session = Depends(get_db)):
    return attendance_summary_service.get_yearly_summaries(db, member_id)
