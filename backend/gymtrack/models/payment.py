from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from gymtrack.core.database import Base


class PaymentMethodEnum(str, enum.Enum):
    CASH = "Cash"
    CARD = "Card"
    ONLINE = "Online"
    UPI = "UPI"
    BANK_TRANSFER = "Bank Transfer"


AD_HOC_SESSION_LABEL = "Ad-hoc Payment"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    due_amount = Column(Numeric(12, 2), nullable=False, default=0)
    # Plan price for a plan purchase, 0 for a due settlement, the amount for ad-hoc
    total_membership_fee = Column(Numeric(12, 2), nullable=True)
    membership_plan_id = Column(Integer, ForeignKey("membership_plans.id"), nullable=True, index=True)
    membership_session = Column(String(100), nullable=True)
    payment_date = Column(Date, nullable=False, index=True)
    payment_method = Column(
        SQLEnum(PaymentMethodEnum, values_callable=lambda x: [e.value for e in x], native_enum=False),
        nullable=False,
    )
    payment_method_detail = Column(String(255), nullable=True)
    transaction_id = Column(String(100), nullable=True)
    notes = Column(Text)
    original_payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    member = relationship("Member")
    membership_plan = relationship("MembershipPlan")
