from pydantic import BaseModel
from typing import Dict, Optional
from datetime import date, datetime


class AttendanceResponse(BaseModel):
    id: int
    member_id: int
    member_name: Optional[str] = None
    attendance_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime]
    time_spent_minutes: Optional[int]


class CheckOutAllResponse(BaseModel):
    checked_out_count: int
    message: str
    # Rows written by the rollup that runs after a non-empty sweep
    summaries: Optional[Dict[str, int]] = None


class AttendanceSummaryStatusResponse(BaseModel):
    has_pending_records: bool


class AttendanceSummaryRunResponse(BaseModel):
    generated: bool
    message: str
    written: Optional[Dict[str, int]] = None


class MonthlyAttendanceSummaryResponse(BaseModel):
    member_id: int
    year: int
    month: int
    total_present_days: int
    total_minutes_spent: int

    class Config:
        from_attributes = True


class YearlyAttendanceSummaryResponse(BaseModel):
    member_id: int
    year: int
    total_present_days: int
    total_minutes_spent: int

    class Config:
        from_attributes = True
