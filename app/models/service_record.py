"""ServiceRecord model: completed work in a vehicle's history."""

from datetime import datetime

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin


class ServiceRecord(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "service_records"

    id: int | None = Field(default=None, primary_key=True)
    vehicle_id: int = Field(foreign_key="vehicles.id", nullable=False, index=True)
    repair_order_id: int | None = Field(default=None, foreign_key="repair_orders.id", index=True)
    performed_by_staff_id: int | None = Field(default=None, foreign_key="staff.id")

    service_date: datetime = Field(nullable=False, index=True)
    service_type: str = Field(max_length=100, nullable=False)
    description: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    mileage: int | None = Field(default=None, ge=0)
    cost: float = Field(default=0.0, ge=0)
