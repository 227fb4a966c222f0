"""
Membership lifecycle for gymtrack members.

A member's ``membership_status`` is a materialized value: every path that
touches the plan id or plan dates must finish by calling
``refresh_membership_status`` so the stored status never goes stale.

Two mutation policies exist:
- ``assign_or_renew`` is used by the payment ledger. Renewals stack the
  new period after the current one so paid-for time is never lost.
- ``replace_plan`` is used by direct profile edits. It never extends or
  shortens a running plan and rejects ambiguous changes.

Two requests writing the same member race on its ``version_id`` column; the
later commit fails with ConflictError instead of silently dropping a
renewal.
"""
from datetime import date
from typing import Optional
from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session
from gymtrack.core.exceptions import ConflictError, NotFoundError
from gymtrack.core.logging_config import get_logger
from gymtrack.models.member import Member, MembershipStatusEnum
from gymtrack.models.membership_plan import MembershipPlan

logger = get_logger("membership_service")


def add_months(start: date, months: int) -> date:
    """Calendar month arithmetic, clamped to the last day of the target month."""
    return start + relativedelta(months=months)


def derive_status(
    plan_id: Optional[int],
    end_date: Optional[date],
    today: Optional[date] = None,
) -> MembershipStatusEnum:
    """
    Pure status derivation.

    Inactive when there is no plan id or no end date, Active while the end
    date is strictly after today, Expired otherwise.
    """
    if plan_id is None or end_date is None:
        return MembershipStatusEnum.INACTIVE
    today = today or date.today()
    if end_date > today:
        return MembershipStatusEnum.ACTIVE
    return MembershipStatusEnum.EXPIRED


def derive_member_status(member: Member, today: Optional[date] = None) -> MembershipStatusEnum:
    return derive_status(member.current_plan_id, member.current_plan_end_date, today)


def refresh_membership_status(member: Member, today: Optional[date] = None) -> Member:
    member.membership_status = derive_member_status(member, today)
    logger.info(
        f"Derived status for member {member.id} ({member.name}): {member.membership_status.value} "
        f"(plan end date: {member.current_plan_end_date})"
    )
    return member


def has_active_plan(member: Member, today: Optional[date] = None) -> bool:
    return derive_member_status(member, today) == MembershipStatusEnum.ACTIVE


def assign_or_renew(
    member: Member,
    plan: MembershipPlan,
    effective_date: date,
    today: Optional[date] = None,
) -> Member:
    """
    Apply a plan purchase to the member's plan window.

    An unexpired plan is renewed: the new period starts the day after the
    current end date and the end date moves forward by the plan duration,
    whatever ``effective_date`` says. A missing or expired plan is replaced
    by a fresh window starting at ``effective_date``.
    """
    today = today or date.today()
    if member.current_plan_id is not None and has_active_plan(member, today):
        current_end = member.current_plan_end_date
        member.current_plan_start_date = current_end + relativedelta(days=1)
        member.current_plan_end_date = add_months(current_end, plan.duration_months)
        member.current_plan_id = plan.id
        logger.info(
            f"Member {member.id} plan renewed/extended. New start date: {member.current_plan_start_date}, "
            f"new end date: {member.current_plan_end_date}",
            extra={"member_id": member.id, "plan_id": plan.id},
        )
    else:
        member.current_plan_id = plan.id
        member.current_plan_start_date = effective_date
        member.current_plan_end_date = add_months(effective_date, plan.duration_months)
        logger.info(
            f"Member {member.id} new plan assigned. End date: {member.current_plan_end_date}",
            extra={"member_id": member.id, "plan_id": plan.id},
        )
    return refresh_membership_status(member, today)


def replace_plan(
    db: Session,
    member: Member,
    new_plan_id: Optional[int],
    effective_date: date,
    today: Optional[date] = None,
) -> Member:
    """
    Apply an administrative plan change from a profile edit.

    - Same plan id: the window is left untouched.
    - Different plan while the current one is still active: ConflictError.
    - Different plan with no active plan: fresh window from ``effective_date``.
    - ``None``: plan and both dates are cleared.
    """
    today = today or date.today()

    if new_plan_id is None:
        member.current_plan_id = None
        member.current_plan_start_date = None
        member.current_plan_end_date = None
        logger.info(f"Plan removed from member {member.id}")
        return refresh_membership_status(member, today)

    if new_plan_id == member.current_plan_id:
        logger.info(f"Keeping existing plan dates for member {member.id} as re-assigned plan is identical.")
        return refresh_membership_status(member, today)

    new_plan = db.query(MembershipPlan).filter(MembershipPlan.id == new_plan_id).first()
    if not new_plan:
        raise NotFoundError(f"Membership plan not found with id: {new_plan_id}")

    if has_active_plan(member, today):
        current_plan = db.query(MembershipPlan).filter(MembershipPlan.id == member.current_plan_id).first()
        current_plan_name = current_plan.plan_name if current_plan else "Unknown Plan"
        raise ConflictError(
            f"Member already has an active membership plan ('{current_plan_name}'). "
            "Please remove the current plan before assigning a new one."
        )

    member.current_plan_id = new_plan.id
    member.current_plan_start_date = effective_date
    member.current_plan_end_date = add_months(effective_date, new_plan.duration_months)
    logger.info(
        f"Member {member.id} assigned plan '{new_plan.plan_name}' from {effective_date} "
        f"to {member.current_plan_end_date}"
    )
    return refresh_membership_status(member, today)
