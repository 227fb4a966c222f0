"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite schema built from the models,
so nothing leaks between tests.
"""
import os
import sys
from datetime import date, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add the backend directory to the path so `gymtrack` imports without installing
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gymtrack.core.database import Base
import gymtrack.models  # noqa: F401
from gymtrack.models import Member, MembershipPlan
from gymtrack.services import membership_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def other_session(db_session):
    """A second session on the same database, standing in for a concurrent request."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_plan(db_session):
    def _make(plan_name="Basic", price="1000", duration_months=1):
        plan = MembershipPlan(plan_name=plan_name, price=Decimal(price), duration_months=duration_months)
        db_session.add(plan)
        db_session.commit()
        db_session.refresh(plan)
        return plan
    return _make


@pytest.fixture
def make_member(db_session):
    """
    Insert a member directly. ``plan`` with ``end_date`` gives the member
    an existing window; status is derived against ``today``.
    """
    counter = {"next_id": 100001}

    def _make(name="Test Member", plan=None, start_date=None, end_date=None,
              today=None, contact_number="9999999999", member_id=None):
        if member_id is None:
            member_id = counter["next_id"]
            counter["next_id"] += 1
        member = Member(
            id=member_id,
            name=name,
            contact_number=contact_number,
            joining_date=start_date or date(2025, 1, 1),
            current_plan_id=plan.id if plan else None,
            current_plan_start_date=start_date,
            current_plan_end_date=end_date,
        )
        membership_service.refresh_membership_status(member, today)
        db_session.add(member)
        db_session.commit()
        db_session.refresh(member)
        return member
    return _make


@pytest.fixture
def active_member(make_plan, make_member):
    """A member holding a Basic plan that stays active well past every test date."""
    plan = make_plan()
    return make_member(
        name="Active Member",
        plan=plan,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 1) + timedelta(days=365),
        today=date(2025, 1, 10),
    )
