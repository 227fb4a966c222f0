from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from gymtrack.core.database import Base


class Attendance(Base):
    """A member's check-in/check-out session for one calendar day."""
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("member_id", "attendance_date", name="uq_attendance_member_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    attendance_date = Column(Date, nullable=False, index=True)
    check_in_time = Column(DateTime, nullable=False)
    check_out_time = Column(DateTime, nullable=True)
    time_spent_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    member = relationship("Member")


class DailyAttendance(Base):
    __tablename__ = "daily_attendance"
    __table_args__ = (
        UniqueConstraint("member_id", "attendance_date", name="uq_daily_attendance_member_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    attendance_date = Column(Date, nullable=False, index=True)
    check_in = Column(DateTime, nullable=False)
    check_out = Column(DateTime, nullable=False)
    time_spent_minutes = Column(Integer, nullable=False)


class MonthlyAttendanceSummary(Base):
    __tablename__ = "monthly_attendance_summary"
    __table_args__ = (
        UniqueConstraint("member_id", "year", "month", name="uq_monthly_summary_member_year_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    total_present_days = Column(Integer, nullable=False, default=0)
    total_minutes_spent = Column(Integer, nullable=False, default=0)


class YearlyAttendanceSummary(Base):
    __tablename__ = "yearly_attendance_summary"
    __table_args__ = (
        UniqueConstraint("member_id", "year", name="uq_yearly_summary_member_year"),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    total_present_days = Column(Integer, nullable=False, default=0)
    total_minutes_spent = Column(Integer, nullable=False, default=0)
