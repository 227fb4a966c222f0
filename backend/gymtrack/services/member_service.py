"""
Member registry used by the lifecycle, ledger and attendance services.

Plan fields are never written here directly: creation and profile edits
go through ``membership_service.replace_plan`` so status stays derived.
"""
import random
from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from gymtrack.core.config import settings
from gymtrack.core.db_transaction import db_transaction
from gymtrack.core.exceptions import ConflictError, InternalError, NotFoundError
from gymtrack.core.logging_config import get_logger
from gymtrack.models.attendance import Attendance
from gymtrack.models.member import Member, MembershipStatusEnum
from gymtrack.models.payment import Payment
from gymtrack.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from gymtrack.services import membership_service
from gymtrack.services.plan_service import get_plan_name

logger = get_logger("member_service")

_random = random.SystemRandom()


def generate_unique_member_id(db: Session, max_attempts: Optional[int] = None) -> int:
    """Draw random ids from the configured range until one is free, giving up after max_attempts."""
    max_attempts = max_attempts or settings.MEMBER_ID_MAX_ATTEMPTS
    for _ in range(max_attempts):
        candidate = _random.randint(settings.MEMBER_ID_MIN, settings.MEMBER_ID_MAX)
        if not db.query(Member.id).filter(Member.id == candidate).first():
            return candidate
    logger.error(f"Member id allocation exhausted after {max_attempts} attempts")
    raise InternalError(f"Failed to generate a unique member id after {max_attempts} attempts.")


def get_member(db: Session, member_id: int) -> Member:
    member = db.query(Member).filter(Member.id == member_id).first()
    if not member:
        raise NotFoundError(f"Member not found with id: {member_id}")
    return member


def to_member_response(db: Session, member: Member, today: Optional[date] = None) -> MemberResponse:
    status = membership_service.derive_member_status(member, today)
    return MemberResponse(
        id=member.id,
        name=member.name,
        age=member.age,
        gender=member.gender,
        contact_number=member.contact_number,
        joining_date=member.joining_date,
        membership_status=status.value,
        current_plan_id=member.current_plan_id,
        current_plan_name=get_plan_name(db, member.current_plan_id),
        current_plan_start_date=member.current_plan_start_date,
        current_plan_end_date=member.current_plan_end_date,
        current_plan_is_active=status == MembershipStatusEnum.ACTIVE,
    )


def create_member(db: Session, member_in: MemberCreate, today: Optional[date] = None) -> Member:
    today = today or date.today()
    if member_in.id is not None:
        if db.query(Member.id).filter(Member.id == member_in.id).first():
            raise ConflictError(f"Member id {member_in.id} is already taken")
        member_id = member_in.id
    else:
        member_id = generate_unique_member_id(db)

    member = Member(
        id=member_id,
        name=member_in.name,
        age=member_in.age,
        gender=member_in.gender,
        contact_number=member_in.contact_number,
        joining_date=member_in.joining_date or today,
    )
    with db_transaction(db, "create_member"):
        membership_service.replace_plan(db, member, member_in.selected_plan_id, member.joining_date, today)
        db.add(member)
    db.refresh(member)
    logger.info(f"Created member {member.id} ({member.name}) with status {member.membership_status.value}")
    return member


def update_member(db: Session, member_id: int, member_in: MemberUpdate, today: Optional[date] = None) -> Member:
    member = get_member(db, member_id)
    with db_transaction(db, "update_member"):
        member.name = member_in.name
        member.age = member_in.age
        member.gender = member_in.gender
        member.contact_number = member_in.contact_number
        member.joining_date = member_in.joining_date
        membership_service.replace_plan(db, member, member_in.selected_plan_id, member_in.joining_date, today)
    db.refresh(member)
    return member


def delete_member(db: Session, member_id: int) -> None:
    """Deletes only a member with no dependent rows; callers remove attendance and payments first."""
    member = get_member(db, member_id)
    has_attendance = db.query(Attendance.id).filter(Attendance.member_id == member_id).first()
    has_payments = db.query(Payment.id).filter(Payment.member_id == member_id).first()
    if has_attendance or has_payments:
        raise ConflictError(
            "Cannot delete member with attendance or payment records. Please remove those records first."
        )
    with db_transaction(db, "delete_member"):
        db.delete(member)
    logger.info(f"Deleted member {member_id}")


def search_members(db: Session, query: Optional[str] = None) -> List[Member]:
    q = db.query(Member)
    if query and query.strip():
        pattern = f"%{query.strip()}%"
        q = q.filter(or_(Member.name.ilike(pattern), Member.contact_number.ilike(pattern)))
    return q.order_by(Member.name).all()
