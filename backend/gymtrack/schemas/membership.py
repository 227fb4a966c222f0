from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class MembershipPlanCreate(BaseModel):
    plan_name: str = Field(..., min_length=1)
    price: Decimal
    duration_months: int
    description: Optional[str] = None


class MembershipPlanUpdate(BaseModel):
    plan_name: Optional[str] = None
    price: Optional[Decimal] = None
    duration_months: Optional[int] = None
    description: Optional[str] = None


class MembershipPlanResponse(BaseModel):
    id: int
    plan_name: str
    price: Decimal
    duration_months: int
    description: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
