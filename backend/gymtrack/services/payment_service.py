"""
Payment ledger for gymtrack.

Three kinds of payment are recorded:
- due settlement (``original_payment_id`` set): reduces the original
  payment's due, floored at 0, and never touches the plan window.
- plan purchase (``membership_plan_id`` set): charges the plan price,
  records any shortfall as due, and assigns or renews the member's plan.
- ad-hoc payment: neither set; the amount is its own fee.
"""
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional
from dateutil.relativedelta import relativedelta
from sqlalchemy import case
from sqlalchemy.orm import Session
from gymtrack.core.db_transaction import db_transaction
from gymtrack.core.exceptions import NotFoundError, ValidationError
from gymtrack.core.logging_config import get_logger
from gymtrack.models.member import Member
from gymtrack.models.membership_plan import MembershipPlan
from gymtrack.models.payment import AD_HOC_SESSION_LABEL, Payment, PaymentMethodEnum
from gymtrack.schemas.payment import PaymentAnalyticsResponse, PaymentCreate, PaymentResponse
from gymtrack.services import membership_service
from gymtrack.services.plan_service import get_plan_name

logger = get_logger("payment_service")

ZERO = Decimal("0.00")


def generate_membership_session(start_date: date, duration_months: int) -> str:
    """
    Human-readable label for the period a plan purchase covers.

    Single-month plans render as "Jan 2025"; longer plans as
    "Jan 2025 – Apr 2025", where the end is the last day of the period.
    """
    end_date = start_date + relativedelta(months=duration_months) - relativedelta(days=1)
    start_label = start_date.strftime("%b %Y")
    if duration_months == 1:
        return start_label
    return f"{start_label} – {end_date.strftime('%b %Y')}"


def to_payment_response(db: Session, payment: Payment) -> PaymentResponse:
    method = payment.payment_method
    return PaymentResponse(
        id=payment.id,
        member_id=payment.member_id,
        member_name=payment.member.name if payment.member else None,
        amount=payment.amount,
        due_amount=payment.due_amount,
        total_membership_fee=payment.total_membership_fee,
        membership_plan_id=payment.membership_plan_id,
        membership_plan_name=get_plan_name(db, payment.membership_plan_id),
        membership_session=payment.membership_session,
        payment_date=payment.payment_date,
        payment_method=method.value if isinstance(method, PaymentMethodEnum) else method,
        payment_method_detail=payment.payment_method_detail,
        transaction_id=payment.transaction_id,
        notes=payment.notes,
        original_payment_id=payment.original_payment_id,
        created_at=payment.created_at,
    )


def record_payment(db: Session, payment_in: PaymentCreate, today: Optional[date] = None) -> Payment:
    """
    Record a payment and apply its side effects in one transaction.

    Raises NotFoundError when the member, the original payment or the plan
    does not exist.
    """
    if payment_in.amount < 0:
        raise ValidationError("Payment amount cannot be negative")

    member = db.query(Member).filter(Member.id == payment_in.member_id).first()
    if not member:
        raise NotFoundError(f"Member not found with id: {payment_in.member_id}")

    payment = Payment(
        member_id=member.id,
        amount=payment_in.amount,
        payment_date=payment_in.payment_date,
        payment_method=payment_in.payment_method,
        payment_method_detail=payment_in.payment_method_detail,
        transaction_id=payment_in.transaction_id,
        notes=payment_in.notes,
    )

    with db_transaction(db, "record_payment"):
        if payment_in.original_payment_id is not None:
            original = db.query(Payment).filter(Payment.id == payment_in.original_payment_id).first()
            if not original:
                raise NotFoundError(f"Original payment not found with id: {payment_in.original_payment_id}")

            # Computed in SQL from the stored due, floored at 0; overpayment is absorbed
            amount = payment_in.amount
            db.query(Payment).filter(Payment.id == original.id).update(
                {Payment.due_amount: case((Payment.due_amount > amount, Payment.due_amount - amount), else_=ZERO)},
                synchronize_session=False,
            )
            db.refresh(original)

            payment.original_payment_id = original.id
            payment.total_membership_fee = ZERO
            payment.due_amount = ZERO
            payment.membership_plan_id = original.membership_plan_id
            payment.membership_session = original.membership_session
            logger.info(
                f"Updated original payment {original.id} due to: {original.due_amount}",
                extra={"original_payment_id": original.id, "member_id": member.id},
            )

        elif payment_in.membership_plan_id is not None:
            plan = db.query(MembershipPlan).filter(MembershipPlan.id == payment_in.membership_plan_id).first()
            if not plan:
                raise NotFoundError(f"Membership plan not found with id: {payment_in.membership_plan_id}")

            payment.membership_plan_id = plan.id
            payment.total_membership_fee = plan.price
            payment.due_amount = max(ZERO, plan.price - payment_in.amount)
            payment.membership_session = generate_membership_session(payment_in.payment_date, plan.duration_months)

            membership_service.assign_or_renew(member, plan, payment_in.payment_date, today)

        else:
            payment.total_membership_fee = payment_in.amount
            payment.due_amount = ZERO
            payment.membership_plan_id = None
            payment.membership_session = AD_HOC_SESSION_LABEL

        db.add(payment)

    db.refresh(payment)
    logger.info(
        f"Recorded payment {payment.id} for member {member.id}: amount={payment.amount}, due={payment.due_amount}",
        extra={"payment_id": payment.id, "member_id": member.id},
    )
    return payment


def get_payment(db: Session, payment_id: int) -> Payment:
    payment = db.query(Payment).filter(Payment.id == payment_id).first()
    if not payment:
        raise NotFoundError(f"Payment not found with id: {payment_id}")
    return payment


def list_payments(db: Session) -> List[Payment]:
    return db.query(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc()).all()


def list_payments_for_member(db: Session, member_id: int) -> List[Payment]:
    if not db.query(Member.id).filter(Member.id == member_id).first():
        raise NotFoundError(f"Member not found with id: {member_id}")
    return (
        db.query(Payment)
        .filter(Payment.member_id == member_id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .all()
    )


def get_outstanding_dues(db: Session) -> List[Payment]:
    return db.query(Payment).filter(Payment.due_amount > 0).order_by(Payment.payment_date).all()


def delete_payment(db: Session, payment_id: int) -> None:
    """
    Remove a payment row.

    Dues are not re-derived: deleting a settlement does not restore the
    original's due, and deleting an original leaves its settlements as-is.
    """
    payment = get_payment(db, payment_id)
    original_payment_id = payment.original_payment_id
    settlements = db.query(Payment.id).filter(Payment.original_payment_id == payment_id).count()
    with db_transaction(db, "delete_payment"):
        if settlements:
            # Keep the settlement rows; they only lose their link
            db.query(Payment).filter(Payment.original_payment_id == payment_id).update(
                {Payment.original_payment_id: None}, synchronize_session=False
            )
        db.delete(payment)
    if original_payment_id is not None:
        logger.warning(
            f"Deleted due settlement {payment_id}; original payment {original_payment_id} due was not restored"
        )
    else:
        logger.info(f"Deleted payment {payment_id} ({settlements} linked settlement(s) unlinked)")


def get_payment_analytics(db: Session, start_date: date, end_date: date) -> PaymentAnalyticsResponse:
    if start_date > end_date:
        raise ValidationError("Start date must not be after end date")

    payments = db.query(Payment).filter(
        Payment.payment_date >= start_date,
        Payment.payment_date <= end_date,
    ).all()

    amount_by_method: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    count_by_method: Dict[str, int] = defaultdict(int)
    amount_by_plan: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    total_collected = ZERO
    total_due = ZERO
    total_expected = ZERO

    for payment in payments:
        method = payment.payment_method
        method = method.value if isinstance(method, PaymentMethodEnum) else method
        total_collected += payment.amount
        total_due += payment.due_amount
        if payment.total_membership_fee is not None:
            total_expected += payment.total_membership_fee
        amount_by_method[method] += payment.amount
        count_by_method[method] += 1
        if payment.membership_plan_id is not None:
            amount_by_plan[get_plan_name(db, payment.membership_plan_id)] += payment.amount

    return PaymentAnalyticsResponse(
        start_date=start_date,
        end_date=end_date,
        total_amount_collected=total_collected,
        total_payments_count=len(payments),
        total_due_amount=total_due,
        total_expected_amount=total_expected,
        cash_collected=amount_by_method.get(PaymentMethodEnum.CASH.value, ZERO),
        card_collected=amount_by_method.get(PaymentMethodEnum.CARD.value, ZERO),
        online_collected=amount_by_method.get(PaymentMethodEnum.ONLINE.value, ZERO),
        amount_by_payment_method=dict(amount_by_method),
        count_by_payment_method=dict(count_by_method),
        amount_by_membership_plan=dict(amount_by_plan),
    )
