from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from gymtrack.core.database import get_db
from gymtrack.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from gymtrack.services import member_service

router = APIRouter()


@router.post("/", response_model=MemberResponse, status_code=201)
async def create_member(member: MemberCreate, db: Session = Depends(get_db)):
    """Register a member, optionally with an initial plan"""
    db_member = member_service.create_member(db, member)
    return member_service.to_member_response(db, db_member)


@router.get("/", response_model=List[MemberResponse])
async def search_members(query: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Search members by name or contact number"""
    return [member_service.to_member_response(db, m) for m in member_service.search_members(db, query)]


@router.get("/{member_id}", response_model=MemberResponse)
async def get_member(member_id: int, db: Session = Depends(get_db)):
    return member_service.to_member_response(db, member_service.get_member(db, member_id))


@router.put("/{member_id}", response_model=MemberResponse)
async def update_member(member_id: int, member_update: MemberUpdate, db: Session = Depends(get_db)):
    """Update profile fields and apply any plan change"""
    db_member = member_service.update_member(db, member_id, member_update)
    return member_service.to_member_response(db, db_member)


@router.delete("/{member_id}", status_code=204)
async def delete_member(member_id: int, db: Session = Depends(get_db)):
    member_service.delete_member(db, member_id)
    return None
