"""Appointment model: a scheduled visit for a customer's vehicle."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Text
from sqlmodel import Column, Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin


class AppointmentStatus(StrEnum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class Appointment(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "appointments"

    id: int | None = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="customers.id", nullable=False, index=True)
    vehicle_id: int = Field(foreign_key="vehicles.id", nullable=False, index=True)
    assigned_staff_id: int | None = Field(default=None, foreign_key="staff.id", index=True)

    service_type: str = Field(max_length=100, nullable=False)
    scheduled_at: datetime = Field(nullable=False, index=True)
    duration_minutes: int = Field(default=60, ge=0)
    status: AppointmentStatus = Field(default=AppointmentStatus.SCHEDULED)
    notes: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
