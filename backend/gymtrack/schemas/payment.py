from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import date, datetime
from decimal import Decimal
from gymtrack.models.payment import PaymentMethodEnum


class PaymentCreate(BaseModel):
    member_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., ge=0)
    payment_date: date
    payment_method: PaymentMethodEnum
    membership_plan_id: Optional[int] = None
    original_payment_id: Optional[int] = None
    payment_method_detail: Optional[str] = None
    transaction_id: Optional[str] = None
    notes: Optional[str] = None


class PaymentResponse(BaseModel):
    id: int
    member_id: int
    member_name: Optional[str] = None
    amount: Decimal
    due_amount: Decimal
    total_membership_fee: Optional[Decimal]
    membership_plan_id: Optional[int]
    membership_plan_name: Optional[str] = None
    membership_session: Optional[str]
    payment_date: date
    payment_method: str
    payment_method_detail: Optional[str]
    transaction_id: Optional[str]
    notes: Optional[str]
    original_payment_id: Optional[int]
    created_at: Optional[datetime] = None


class PaymentAnalyticsResponse(BaseModel):
    start_date: date
    end_date: date
    total_amount_collected: Decimal
    total_payments_count: int
    total_due_amount: Decimal
    total_expected_amount: Decimal
    cash_collected: Decimal
    card_collected: Decimal
    online_collected: Decimal
    amount_by_payment_method: Dict[str, Decimal]
    count_by_payment_method: Dict[str, int]
    amount_by_membership_plan: Dict[str, Decimal]
