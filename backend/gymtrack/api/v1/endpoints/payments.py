from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from gymtrack.core.database import get_db
from gymtrack.schemas.payment import PaymentAnalyticsResponse, PaymentCreate, PaymentResponse
from gymtrack.services import payment_service

router = APIRouter()


@router.post("/", response_model=PaymentResponse, status_code=201)
async def record_payment(payment: PaymentCreate, db: Session = Depends(get_db)):
    """Record a plan purchase, a due settlement or an ad-hoc payment"""
    db_payment = payment_service.record_payment(db, payment)
    return payment_service.to_payment_response(db, db_payment)


@router.get("/", response_model=List[PaymentResponse])
async def list_payments(db: Session = Depends(get_db)):
    return [payment_service.to_payment_response(db, p) for p in payment_service.list_payments(db)]


@router.get("/due", response_model=List[PaymentResponse])
async def list_outstanding_dues(db: Session = Depends(get_db)):
    """Payments with an outstanding due amount"""
    return [payment_service.to_payment_response(db, p) for p in payment_service.get_outstanding_dues(db)]


@router.get("/analytics", response_model=PaymentAnalyticsResponse)
async def payment_analytics(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db)
):
    return payment_service.get_payment_analytics(db, start_date, end_date)


@router.get("/member/{member_id}", response_model=List[PaymentResponse])
async def list_member_payments(member_id: int, db: Session = Depends(get_db)):
    payments = payment_service.list_payments_for_member(db, member_id)
    return [payment_service.to_payment_response(db, p) for p in payments]


@router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: int, db: Session = Depends(get_db)):
    return payment_service.to_payment_response(db, payment_service.get_payment(db, payment_id))


@router.delete("/{payment_id}", status_code=204)
async def delete_payment(payment_id: int, db: Session = Depends(get_db)):
    payment_service.delete_payment(db, payment_id)
    return None
