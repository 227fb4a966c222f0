"""Membership plan catalog: lookup plus plain create/update."""
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from gymtrack.core.db_transaction import db_transaction
from gymtrack.core.exceptions import ConflictError, NotFoundError, ValidationError
from gymtrack.core.logging_config import get_logger
from gymtrack.models.membership_plan import MembershipPlan
from gymtrack.schemas.membership import MembershipPlanCreate, MembershipPlanUpdate

logger = get_logger("plan_service")

REQUIRED_PLAN_FIELDS = ("plan_name", "price", "duration_months")


def get_plan(db: Session, plan_id: int) -> MembershipPlan:
    plan = db.query(MembershipPlan).filter(MembershipPlan.id == plan_id).first()
    if not plan:
        raise NotFoundError(f"Membership plan not found with id: {plan_id}")
    return plan


def get_plan_name(db: Session, plan_id: Optional[int]) -> Optional[str]:
    if plan_id is None:
        return None
    plan = db.query(MembershipPlan).filter(MembershipPlan.id == plan_id).first()
    return plan.plan_name if plan else "Unknown Plan"


def list_plans(db: Session) -> List[MembershipPlan]:
    return db.query(MembershipPlan).order_by(MembershipPlan.plan_name).all()


def _validate_plan_values(price: Optional[Decimal], duration_months: Optional[int]) -> None:
    if price is not None and price <= 0:
        raise ValidationError("Plan price must be greater than 0")
    if duration_months is not None and duration_months <= 0:
        raise ValidationError("Plan duration must be at least 1 month")


def _ensure_unique_name(db: Session, plan_name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(MembershipPlan).filter(MembershipPlan.plan_name == plan_name)
    if exclude_id is not None:
        query = query.filter(MembershipPlan.id != exclude_id)
    if query.first():
        raise ConflictError(f"Membership plan with name '{plan_name}' already exists")


def create_plan(db: Session, plan: MembershipPlanCreate) -> MembershipPlan:
    _validate_plan_values(plan.price, plan.duration_months)
    _ensure_unique_name(db, plan.plan_name)

    db_plan = MembershipPlan(
        plan_name=plan.plan_name,
        price=plan.price,
        duration_months=plan.duration_months,
        description=plan.description,
    )
    with db_transaction(db, "create_plan"):
        db.add(db_plan)
    db.refresh(db_plan)
    logger.info(f"Created membership plan '{db_plan.plan_name}' (id={db_plan.id})")
    return db_plan


def update_plan(db: Session, plan_id: int, plan_update: MembershipPlanUpdate) -> MembershipPlan:
    """Edits are label-only for existing payments: nothing referencing the plan is re-derived."""
    plan = get_plan(db, plan_id)
    update_data = plan_update.model_dump(exclude_unset=True)
    missing = [field for field in REQUIRED_PLAN_FIELDS if field in update_data and update_data[field] is None]
    if missing:
        raise ValidationError(f"Plan fields cannot be cleared: {', '.join(missing)}")
    _validate_plan_values(update_data.get("price"), update_data.get("duration_months"))
    if update_data.get("plan_name"):
        _ensure_unique_name(db, update_data["plan_name"], exclude_id=plan_id)

    with db_transaction(db, "update_plan"):
        for field, value in update_data.items():
            setattr(plan, field, value)
    db.refresh(plan)
    return plan
