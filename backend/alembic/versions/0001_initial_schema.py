"""initial_schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "membership_plans",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("plan_name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("duration_months", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_membership_plans_id"), "membership_plans", ["id"], unique=False)
    op.create_index(op.f("ix_membership_plans_plan_name"), "membership_plans", ["plan_name"], unique=True)

    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(length=10), nullable=True),
        sa.Column("contact_number", sa.String(length=20), nullable=True),
        sa.Column("joining_date", sa.Date(), nullable=False),
        sa.Column("current_plan_id", sa.Integer(), nullable=True),
        sa.Column("current_plan_start_date", sa.Date(), nullable=True),
        sa.Column("current_plan_end_date", sa.Date(), nullable=True),
        sa.Column("membership_status", sa.String(length=8), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["current_plan_id"], ["membership_plans.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_members_id"), "members", ["id"], unique=False)
    op.create_index(op.f("ix_members_name"), "members", ["name"], unique=False)
    op.create_index(op.f("ix_members_contact_number"), "members", ["contact_number"], unique=False)
    op.create_index(op.f("ix_members_current_plan_id"), "members", ["current_plan_id"], unique=False)

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_membership_fee", sa.Numeric(12, 2), nullable=True),
        sa.Column("membership_plan_id", sa.Integer(), nullable=True),
        sa.Column("membership_session", sa.String(length=100), nullable=True),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("payment_method", sa.String(length=13), nullable=False),
        sa.Column("payment_method_detail", sa.String(length=255), nullable=True),
        sa.Column("transaction_id", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("original_payment_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.ForeignKeyConstraint(["membership_plan_id"], ["membership_plans.id"]),
        sa.ForeignKeyConstraint(["original_payment_id"], ["payments.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_payments_id"), "payments", ["id"], unique=False)
    op.create_index(op.f("ix_payments_member_id"), "payments", ["member_id"], unique=False)
    op.create_index(op.f("ix_payments_membership_plan_id"), "payments", ["membership_plan_id"], unique=False)
    op.create_index(op.f("ix_payments_payment_date"), "payments", ["payment_date"], unique=False)
    op.create_index(op.f("ix_payments_original_payment_id"), "payments", ["original_payment_id"], unique=False)

    op.create_table(
        "attendance",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("attendance_date", sa.Date(), nullable=False),
        sa.Column("check_in_time", sa.DateTime(), nullable=False),
        sa.Column("check_out_time", sa.DateTime(), nullable=True),
        sa.Column("time_spent_minutes", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id", "attendance_date", name="uq_attendance_member_date"),
    )
    op.create_index(op.f("ix_attendance_id"), "attendance", ["id"], unique=False)
    op.create_index(op.f("ix_attendance_member_id"), "attendance", ["member_id"], unique=False)
    op.create_index(op.f("ix_attendance_attendance_date"), "attendance", ["attendance_date"], unique=False)

    op.create_table(
        "daily_attendance",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("attendance_date", sa.Date(), nullable=False),
        sa.Column("check_in", sa.DateTime(), nullable=False),
        sa.Column("check_out", sa.DateTime(), nullable=False),
        sa.Column("time_spent_minutes", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id", "attendance_date", name="uq_daily_attendance_member_date"),
    )
    op.create_index(op.f("ix_daily_attendance_id"), "daily_attendance", ["id"], unique=False)
    op.create_index(op.f("ix_daily_attendance_member_id"), "daily_attendance", ["member_id"], unique=False)
    op.create_index(op.f("ix_daily_attendance_attendance_date"), "daily_attendance", ["attendance_date"], unique=False)

    op.create_table(
        "monthly_attendance_summary",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("total_present_days", sa.Integer(), nullable=False),
        sa.Column("total_minutes_spent", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id", "year", "month", name="uq_monthly_summary_member_year_month"),
    )
    op.create_index(op.f("ix_monthly_attendance_summary_id"), "monthly_attendance_summary", ["id"], unique=False)
    op.create_index(op.f("ix_monthly_attendance_summary_member_id"), "monthly_attendance_summary", ["member_id"], unique=False)

    op.create_table(
        "yearly_attendance_summary",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_present_days", sa.Integer(), nullable=False),
        sa.Column("total_minutes_spent", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["member_id"], ["members.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("member_id", "year", name="uq_yearly_summary_member_year"),
    )
    op.create_index(op.f("ix_yearly_attendance_summary_id"), "yearly_attendance_summary", ["id"], unique=False)
    op.create_index(op.f("ix_yearly_attendance_summary_member_id"), "yearly_attendance_summary", ["member_id"], unique=False)


def downgrade() -> None:
    op.drop_table("yearly_attendance_summary")
    op.drop_table("monthly_attendance_summary")
    op.drop_table("daily_attendance")
    op.drop_table("attendance")
    op.drop_table("payments")
    op.drop_table("members")
    op.drop_table("membership_plans")
