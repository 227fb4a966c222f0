from gymtrack.models.membership_plan import MembershipPlan
from gymtrack.models.member import Member, MembershipStatusEnum
from gymtrack.models.payment import Payment, PaymentMethodEnum
from gymtrack.models.attendance import (
    Attendance,
    DailyAttendance,
    MonthlyAttendanceSummary,
    YearlyAttendanceSummary,
)

__all__ = [
    "MembershipPlan",
    "Member",
    "MembershipStatusEnum",
    "Payment",
    "PaymentMethodEnum",
    "Attendance",
    "DailyAttendance",
    "MonthlyAttendanceSummary",
    "YearlyAttendanceSummary",
]
