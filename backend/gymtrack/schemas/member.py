from pydantic import BaseModel, Field
from typing import Optional
from datetime import date


class MemberCreate(BaseModel):
    id: Optional[int] = Field(None, gt=0)
    name: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, gt=0)
    gender: Optional[str] = None
    contact_number: Optional[str] = None
    joining_date: Optional[date] = None
    selected_plan_id: Optional[int] = None


class MemberUpdate(BaseModel):
    name: str = Field(..., min_length=1)
    age: Optional[int] = Field(None, gt=0)
    gender: Optional[str] = None
    contact_number: Optional[str] = None
    joining_date: date
    # None clears the current plan
    selected_plan_id: Optional[int] = None


class MemberResponse(BaseModel):
    id: int
    name: str
    age: Optional[int]
    gender: Optional[str]
    contact_number: Optional[str]
    joining_date: date
    membership_status: str
    current_plan_id: Optional[int]
    current_plan_name: Optional[str] = None
    current_plan_start_date: Optional[date]
    current_plan_end_date: Optional[date]
    current_plan_is_active: bool = False


class ExpiringMembershipResponse(BaseModel):
    member_id: int
    member_name: str
    plan_id: int
    plan_name: str
    end_date: date
