"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.adapters.persistence.database import Base


class MachineModel(Base):
    __tablename__ = "machines"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    machine_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    location: Mapped[str | None] = mapped_column(String(100), nullable=True)

    assignments: Mapped[list["MachineAssignmentModel"]] = relationship(back_populates="machine")


class WorkOrderModel(Base):
    __tablename__ = "work_orders"

    wo_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    display_id: Mapped[str | None] = mapped_column(String(50), nullable=True)
    item_code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    customer: Mapped[str | None] = mapped_column(String(200), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    assignments: Mapped[list["MachineAssignmentModel"]] = relationship(back_populates="work_order")


class MachineAssignmentModel(Base):
    __tablename__ = "wo_machine_assignments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    wo_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("work_orders.wo_id", ondelete="CASCADE"), nullable=False
    )
    machine_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("machines.id"), nullable=False
    )
    scheduled_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    scheduled_end: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")
    quantity_allocated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    work_order: Mapped["WorkOrderModel"] = relationship(back_populates="assignments")
    machine: Mapped["MachineModel"] = relationship(back_populates="assignments")

    __table_args__ = (
        Index("idx_assignments_machine_start", "machine_id", "scheduled_start"),
        Index("idx_assignments_status", "status"),
        CheckConstraint("scheduled_end > scheduled_start", name="ck_assignments_interval"),
    )
