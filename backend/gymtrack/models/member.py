from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from gymtrack.core.database import Base


class MembershipStatusEnum(str, enum.Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    INACTIVE = "Inactive"


class Member(Base):
    __tablename__ = "members"

    # Ids are allocated by the member service, never by the database
    id = Column(Integer, primary_key=True, autoincrement=False, index=True)
    name = Column(String(255), nullable=False, index=True)
    age = Column(Integer, nullable=True)
    gender = Column(String(10), nullable=True)
    contact_number = Column(String(20), nullable=True, index=True)
    joining_date = Column(Date, nullable=False)
    current_plan_id = Column(Integer, ForeignKey("membership_plans.id"), nullable=True, index=True)
    current_plan_start_date = Column(Date, nullable=True)
    current_plan_end_date = Column(Date, nullable=True)
    membership_status = Column(
        SQLEnum(MembershipStatusEnum, values_callable=lambda x: [e.value for e in x], native_enum=False),
        nullable=False,
        default=MembershipStatusEnum.INACTIVE,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    # Bumped on every UPDATE; a stale write raises StaleDataError
    version_id = Column(Integer, nullable=False, server_default="1")

    current_plan = relationship("MembershipPlan", back_populates="members")

    __mapper_args__ = {"version_id_col": version_id}
