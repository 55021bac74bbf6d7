"""Initial schema — machines, work orders and their machine assignments.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Machines
    op.create_table(
        "machines",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("machine_id", sa.String(50), unique=True, nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("location", sa.String(100), nullable=True),
    )

    # Work orders
    op.create_table(
        "work_orders",
        sa.Column("wo_id", sa.String(64), primary_key=True),
        sa.Column("display_id", sa.String(50), nullable=True),
        sa.Column("item_code", sa.String(100), nullable=True),
        sa.Column("customer", sa.String(200), nullable=True),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="0"),
    )

    # Machine assignments
    op.create_table(
        "wo_machine_assignments",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "wo_id",
            sa.String(64),
            sa.ForeignKey("work_orders.wo_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "machine_id",
            sa.String(64),
            sa.ForeignKey("machines.id"),
            nullable=False,
        ),
        sa.Column("scheduled_start", sa.DateTime, nullable=False),
        sa.Column("scheduled_end", sa.DateTime, nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default="scheduled"
        ),
        sa.Column(
            "quantity_allocated", sa.Integer, nullable=False, server_default="0"
        ),
        sa.Column(
            "updated_at",
            sa.DateTime,
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint(
            "scheduled_end > scheduled_start", name="ck_assignments_interval"
        ),
    )
    op.create_index(
        "idx_assignments_machine_start",
        "wo_machine_assignments",
        ["machine_id", "scheduled_start"],
    )
    op.create_index("idx_assignments_status", "wo_machine_assignments", ["status"])


def downgrade() -> None:
    op.drop_table("wo_machine_assignments")
    op.drop_table("work_orders")
    op.drop_table("machines")
