from datetime import date
from decimal import Decimal

import pytest

from gymtrack.core.exceptions import ConflictError, NotFoundError, ValidationError
from gymtrack.models import Member, MembershipStatusEnum, Payment, PaymentMethodEnum
from gymtrack.schemas.payment import PaymentCreate
from gymtrack.services import payment_service


def pay(db_session, member, amount, payment_date, plan=None, original=None,
        method=PaymentMethodEnum.CASH, today=None):
    payment_in = PaymentCreate(
        member_id=member.id,
        amount=Decimal(str(amount)),
        payment_date=payment_date,
        payment_method=method,
        membership_plan_id=plan.id if plan else None,
        original_payment_id=original.id if original else None,
    )
    return payment_service.record_payment(db_session, payment_in, today=today or payment_date)


class TestMembershipSessionLabel:
    def test_single_month(self):
        assert payment_service.generate_membership_session(date(2025, 1, 1), 1) == "Jan 2025"

    def test_multi_month_uses_last_day_of_period(self):
        assert payment_service.generate_membership_session(date(2025, 1, 1), 4) == "Jan 2025 – Apr 2025"
        assert payment_service.generate_membership_session(date(2025, 1, 15), 3) == "Jan 2025 – Apr 2025"


class TestRecordPayment:
    def test_partial_plan_purchase_records_due(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(today=date(2025, 1, 1))

        payment = pay(db_session, member, 600, date(2025, 1, 1), plan=plan)

        assert payment.total_membership_fee == Decimal("1000")
        assert payment.due_amount == Decimal("400")
        assert payment.membership_session == "Jan 2025"
        db_session.refresh(member)
        assert member.current_plan_start_date == date(2025, 1, 1)
        assert member.current_plan_end_date == date(2025, 2, 1)

    def test_overpaid_plan_purchase_has_no_due(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(today=date(2025, 1, 1))

        payment = pay(db_session, member, 1200, date(2025, 1, 1), plan=plan)

        assert payment.due_amount == Decimal("0")

    def test_plan_purchase_renews_active_member(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(plan=plan, start_date=date(2025, 1, 1), end_date=date(2025, 2, 1),
                             today=date(2025, 1, 20))

        pay(db_session, member, 1000, date(2025, 1, 20), plan=plan)

        db_session.refresh(member)
        assert member.current_plan_start_date == date(2025, 2, 2)
        assert member.current_plan_end_date == date(2025, 3, 1)

    def test_due_settlement_never_goes_negative(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1500", 1)
        member = make_member(today=date(2025, 1, 1))
        original = pay(db_session, member, 1000, date(2025, 1, 1), plan=plan)
        assert original.due_amount == Decimal("500")
        window = (member.current_plan_start_date, member.current_plan_end_date)

        settlement = pay(db_session, member, 700, date(2025, 1, 10), original=original)

        db_session.refresh(original)
        db_session.refresh(member)
        assert original.due_amount == Decimal("0")
        assert settlement.due_amount == Decimal("0")
        assert settlement.total_membership_fee == Decimal("0")
        assert settlement.membership_plan_id == plan.id
        assert settlement.membership_session == original.membership_session
        assert settlement.original_payment_id == original.id
        assert (member.current_plan_start_date, member.current_plan_end_date) == window

    def test_ad_hoc_payment(self, db_session, make_member):
        member = make_member(today=date(2025, 1, 1))

        payment = pay(db_session, member, 250, date(2025, 1, 5))

        assert payment.total_membership_fee == Decimal("250")
        assert payment.due_amount == Decimal("0")
        assert payment.membership_plan_id is None
        assert payment.membership_session == "Ad-hoc Payment"
        db_session.refresh(member)
        assert member.membership_status == MembershipStatusEnum.INACTIVE

    def test_unknown_member(self, db_session):
        payment_in = PaymentCreate(member_id=42, amount=Decimal("10"), payment_date=date(2025, 1, 1),
                                   payment_method=PaymentMethodEnum.CASH)
        with pytest.raises(NotFoundError):
            payment_service.record_payment(db_session, payment_in)

    def test_unknown_plan(self, db_session, make_member):
        member = make_member()
        payment_in = PaymentCreate(member_id=member.id, amount=Decimal("10"), payment_date=date(2025, 1, 1),
                                   payment_method=PaymentMethodEnum.CASH, membership_plan_id=77)
        with pytest.raises(NotFoundError):
            payment_service.record_payment(db_session, payment_in)
        assert db_session.query(Payment).count() == 0

    def test_unknown_original_payment(self, db_session, make_member):
        member = make_member()
        payment_in = PaymentCreate(member_id=member.id, amount=Decimal("10"), payment_date=date(2025, 1, 1),
                                   payment_method=PaymentMethodEnum.CASH, original_payment_id=77)
        with pytest.raises(NotFoundError):
            payment_service.record_payment(db_session, payment_in)


class TestLedgerQueries:
    def test_outstanding_dues(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(today=date(2025, 1, 1))
        owing = pay(db_session, member, 600, date(2025, 1, 1), plan=plan)
        pay(db_session, member, 100, date(2025, 1, 2))

        dues = payment_service.get_outstanding_dues(db_session)

        assert [p.id for p in dues] == [owing.id]

    def test_analytics_excludes_null_fee_from_expected(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(today=date(2025, 1, 1))
        original = pay(db_session, member, 600, date(2025, 1, 1), plan=plan)
        pay(db_session, member, 400, date(2025, 1, 15), original=original, method=PaymentMethodEnum.CARD)
        db_session.add(Payment(member_id=member.id, amount=Decimal("50"), due_amount=Decimal("0"),
                               total_membership_fee=None, payment_date=date(2025, 1, 20),
                               payment_method=PaymentMethodEnum.ONLINE))
        db_session.commit()
        # outside the range
        pay(db_session, member, 999, date(2025, 3, 1))

        analytics = payment_service.get_payment_analytics(db_session, date(2025, 1, 1), date(2025, 1, 31))

        assert analytics.total_payments_count == 3
        assert analytics.total_amount_collected == Decimal("1050")
        assert analytics.total_expected_amount == Decimal("1000")
        assert analytics.total_due_amount == Decimal("0")
        assert analytics.cash_collected == Decimal("600")
        assert analytics.card_collected == Decimal("400")
        assert analytics.online_collected == Decimal("50")
        assert analytics.count_by_payment_method == {"Cash": 1, "Card": 1, "Online": 1}
        assert analytics.amount_by_membership_plan == {"Basic": Decimal("1000")}

    def test_analytics_rejects_inverted_range(self, db_session):
        with pytest.raises(ValidationError):
            payment_service.get_payment_analytics(db_session, date(2025, 2, 1), date(2025, 1, 1))

    def test_list_payments_for_unknown_member(self, db_session):
        with pytest.raises(NotFoundError):
            payment_service.list_payments_for_member(db_session, 123)


class TestDeletePayment:
    def test_missing_payment(self, db_session):
        with pytest.raises(NotFoundError):
            payment_service.delete_payment(db_session, 5)

    def test_deleting_settlement_does_not_restore_due(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(today=date(2025, 1, 1))
        original = pay(db_session, member, 600, date(2025, 1, 1), plan=plan)
        settlement = pay(db_session, member, 400, date(2025, 1, 15), original=original)

        payment_service.delete_payment(db_session, settlement.id)

        db_session.refresh(original)
        assert original.due_amount == Decimal("0")
        assert db_session.query(Payment).count() == 1

    def test_deleting_original_keeps_settlements(self, db_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(today=date(2025, 1, 1))
        original = pay(db_session, member, 600, date(2025, 1, 1), plan=plan)
        settlement = pay(db_session, member, 100, date(2025, 1, 15), original=original)

        payment_service.delete_payment(db_session, original.id)

        db_session.refresh(settlement)
        assert settlement.original_payment_id is None
        assert settlement.amount == Decimal("100")


def test_join_pay_partially_then_settle(db_session, make_plan, make_member):
    plan = make_plan("Basic", "1000", 1)
    member = make_member(name="M", today=date(2025, 1, 1))

    first = pay(db_session, member, 600, date(2025, 1, 1), plan=plan, today=date(2025, 1, 1))
    db_session.refresh(member)
    assert first.due_amount == Decimal("400")
    assert member.current_plan_start_date == date(2025, 1, 1)
    assert member.current_plan_end_date == date(2025, 2, 1)
    assert member.membership_status == MembershipStatusEnum.ACTIVE

    pay(db_session, member, 400, date(2025, 1, 15), original=first, today=date(2025, 1, 15))

    db_session.refresh(first)
    db_session.refresh(member)
    assert first.due_amount == Decimal("0")
    assert member.current_plan_start_date == date(2025, 1, 1)
    assert member.current_plan_end_date == date(2025, 2, 1)


class TestConcurrentWrites:
    def test_settlement_applies_to_stored_due_not_stale_read(self, db_session, other_session, make_plan, make_member):
        plan = make_plan("Basic", "1500", 1)
        member = make_member(today=date(2025, 1, 1))
        original = pay(db_session, member, 1000, date(2025, 1, 1), plan=plan)

        # Second request loads the original while its due is still 500
        stale = other_session.query(Payment).filter(Payment.id == original.id).one()
        assert stale.due_amount == Decimal("500")

        pay(db_session, member, 500, date(2025, 1, 10), original=original)
        payment_service.record_payment(
            other_session,
            PaymentCreate(member_id=member.id, amount=Decimal("200"), payment_date=date(2025, 1, 11),
                          payment_method=PaymentMethodEnum.CASH, original_payment_id=original.id),
            today=date(2025, 1, 11),
        )

        db_session.refresh(original)
        assert original.due_amount == Decimal("0")
        assert db_session.query(Payment).filter(Payment.original_payment_id == original.id).count() == 2

    def test_renewal_on_stale_member_is_rejected(self, db_session, other_session, make_plan, make_member):
        plan = make_plan("Basic", "1000", 1)
        member = make_member(plan=plan, start_date=date(2025, 1, 1), end_date=date(2025, 2, 1),
                             today=date(2025, 1, 20))

        stale = other_session.query(Member).filter(Member.id == member.id).one()
        assert stale.current_plan_end_date == date(2025, 2, 1)

        pay(db_session, member, 1000, date(2025, 1, 20), plan=plan)
        with pytest.raises(ConflictError):
            payment_service.record_payment(
                other_session,
                PaymentCreate(member_id=member.id, amount=Decimal("1000"), payment_date=date(2025, 1, 20),
                              payment_method=PaymentMethodEnum.CASH, membership_plan_id=plan.id),
                today=date(2025, 1, 20),
            )

        db_session.refresh(member)
        assert member.current_plan_start_date == date(2025, 2, 2)
        assert member.current_plan_end_date == date(2025, 3, 1)
        assert db_session.query(Payment).count() == 1
