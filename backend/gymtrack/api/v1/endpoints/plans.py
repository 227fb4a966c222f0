from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from gymtrack.core.database import get_db
from gymtrack.schemas.membership import MembershipPlanCreate, MembershipPlanResponse, MembershipPlanUpdate
from gymtrack.services import plan_service

router = APIRouter()


@router.post("/", response_model=MembershipPlanResponse, status_code=201)
async def create_plan(plan: MembershipPlanCreate, db: Session = Depends(get_db)):
    return plan_service.create_plan(db, plan)


@router.get("/", response_model=List[MembershipPlanResponse])
async def list_plans(db: Session = Depends(get_db)):
    return plan_service.list_plans(db)


@router.get("/{plan_id}", response_model=MembershipPlanResponse)
async def get_plan(plan_id: int, db: Session = Depends(get_db)):
    return plan_service.get_plan(db, plan_id)


@router.put("/{plan_id}", response_model=MembershipPlanResponse)
async def update_plan(plan_id: int, plan_update: MembershipPlanUpdate, db: Session = Depends(get_db)):
    return plan_service.update_plan(db, plan_id, plan_update)
