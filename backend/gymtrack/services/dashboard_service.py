"""Read-only dashboard figures. Status is derived at read time; nothing is written."""
from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional
from sqlalchemy.orm import Session
from gymtrack.core.config import settings
from gymtrack.core.logging_config import get_logger
from gymtrack.models.member import Member, MembershipStatusEnum
from gymtrack.schemas.member import ExpiringMembershipResponse
from gymtrack.services import attendance_service, membership_service
from gymtrack.services.plan_service import get_plan_name

logger = get_logger("dashboard_service")


def _active_members(db: Session, today: date) -> List[Member]:
    members = db.query(Member).filter(Member.current_plan_id.isnot(None)).all()
    return [
        m for m in members
        if membership_service.derive_member_status(m, today) == MembershipStatusEnum.ACTIVE
    ]


def filter_members_by_status(
    db: Session,
    status: MembershipStatusEnum,
    today: Optional[date] = None,
) -> List[Member]:
    """Members whose derived status matches, ordered by name. The stored column may lag the calendar."""
    today = today or date.today()
    members = db.query(Member).order_by(Member.name).all()
    return [m for m in members if membership_service.derive_member_status(m, today) == status]


def get_total_active_members(db: Session, today: Optional[date] = None) -> int:
    return len(_active_members(db, today or date.today()))


def get_memberships_expiring_soon(
    db: Session,
    days: Optional[int] = None,
    today: Optional[date] = None,
) -> List[ExpiringMembershipResponse]:
    today = today or date.today()
    days = settings.EXPIRING_SOON_DAYS if days is None else days
    cutoff = today + timedelta(days=days)

    members = db.query(Member).filter(
        Member.current_plan_id.isnot(None),
        Member.current_plan_end_date >= today,
        Member.current_plan_end_date <= cutoff,
    ).order_by(Member.current_plan_end_date).all()

    return [
        ExpiringMembershipResponse(
            member_id=m.id,
            member_name=m.name,
            plan_id=m.current_plan_id,
            plan_name=get_plan_name(db, m.current_plan_id),
            end_date=m.current_plan_end_date,
        )
        for m in members
    ]


def get_plan_distribution(db: Session, today: Optional[date] = None) -> Dict[str, int]:
    distribution = Counter()
    for member in _active_members(db, today or date.today()):
        plan_name = get_plan_name(db, member.current_plan_id)
        if plan_name == "Unknown Plan":
            logger.warning(f"Active member {member.id} has missing plan id: {member.current_plan_id}")
        distribution[plan_name] += 1
    return dict(distribution)


def get_daily_attendance_data(db: Session, start_date: date, end_date: date) -> Dict[date, int]:
    return attendance_service.get_daily_attendance_count(db, start_date, end_date)
