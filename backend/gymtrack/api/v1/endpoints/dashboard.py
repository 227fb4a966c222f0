from datetime import date
from typing import Dict, List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from gymtrack.core.database import get_db
from gymtrack.models.member import MembershipStatusEnum
from gymtrack.schemas.member import ExpiringMembershipResponse, MemberResponse
from gymtrack.services import dashboard_service, member_service

router = APIRouter()


@router.get("/active-members")
async def total_active_members(db: Session = Depends(get_db)):
    return {"total_active_members": dashboard_service.get_total_active_members(db)}


@router.get("/expiring", response_model=List[ExpiringMembershipResponse])
async def memberships_expiring_soon(days: Optional[int] = Query(None, ge=0), db: Session = Depends(get_db)):
    return dashboard_service.get_memberships_expiring_soon(db, days)


@router.get("/plan-distribution", response_model=Dict[str, int])
async def plan_distribution(db: Session = Depends(get_db)):
    return dashboard_service.get_plan_distribution(db)


@router.get("/daily-attendance", response_model=Dict[date, int])
async def daily_attendance(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    return dashboard_service.get_daily_attendance_data(db, start_date, end_date)


@router.get("/members/filter-status", response_model=List[MemberResponse])
async def filter_members_by_status(status: MembershipStatusEnum = Query(...), db: Session = Depends(get_db)):
    """Members whose current derived status is Active, Expired or Inactive"""
    members = dashboard_service.filter_members_by_status(db, status)
    return [member_service.to_member_response(db, m) for m in members]
