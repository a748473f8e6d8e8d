"""RepairOrder model: a work order; numbers are unique within a tenant."""

from enum import StrEnum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin


class RepairOrderStatus(StrEnum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    WAITING_PARTS = "waiting_parts"
    COMPLETED = "completed"
    INVOICED = "invoiced"
    CANCELLED = "cancelled"


class RepairOrder(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "repair_orders"
    __table_args__ = (
        UniqueConstraint("tenant_id", "order_number", name="uq_repair_orders_tenant_number"),
    )

    id: int | None = Field(default=None, primary_key=True)
    order_number: str = Field(max_length=50, nullable=False)
    customer_id: int = Field(foreign_key="customers.id", nullable=False, index=True)
    vehicle_id: int = Field(foreign_key="vehicles.id", nullable=False, index=True)
    assigned_technician_id: int | None = Field(default=None, foreign_key="staff.id", index=True)

    status: RepairOrderStatus = Field(default=RepairOrderStatus.OPEN)
    total: float = Field(default=0.0, ge=0)
