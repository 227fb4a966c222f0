from fastapi import APIRouter
from gymtrack.api.v1.endpoints import (
    members,
    plans,
    payments,
    attendance,
    dashboard,
)

api_router = APIRouter()
api_router.include_router(members.router, prefix="/members", tags=["members"])
api_router.include_router(plans.router, prefix="/plans", tags=["plans"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
