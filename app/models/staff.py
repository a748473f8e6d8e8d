"""Staff model: an employee of one tenant; the unit of authorization."""

from datetime import datetime
from enum import StrEnum

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin, utcnow


class StaffRole(StrEnum):
    OWNER = "owner"
    MANAGER = "manager"
    DISPATCHER = "dispatcher"
    TECHNICIAN = "technician"
    ADVISOR = "advisor"


class StaffStatus(StrEnum):
    ACTIVE = "active"
    ON_LEAVE = "on_leave"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"


class Staff(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "staff"
    __table_args__ = (UniqueConstraint("tenant_id", "email", name="uq_staff_tenant_email"),)

    id: int | None = Field(default=None, primary_key=True)

    # Subject of an external identity provider, when staff sign in that way
    user_id: str | None = Field(default=None, max_length=255, index=True)

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: str = Field(max_length=320, nullable=False)
    phone: str = Field(default="", max_length=20)

    role: StaffRole = Field(default=StaffRole.TECHNICIAN)
    status: StaffStatus = Field(default=StaffStatus.ACTIVE)
    hire_date: datetime = Field(default_factory=utcnow)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ── Pydantic schemas ─────────────────────────────────────────

class StaffCreate(SQLModel):
    first_name: str = Field(max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: str = Field(max_length=320)
    phone: str = Field(default="", max_length=20)
    role: StaffRole = StaffRole.TECHNICIAN
    user_id: str | None = None


class StaffStatusUpdate(SQLModel):
    status: StaffStatus


class StaffAccountCreate(SQLModel):
    """Initial password for a staff member's login; the email is the staff email."""
    password: str = Field(min_length=8, max_length=128)


class StaffRead(SQLModel):
    id: int
    tenant_id: int
    first_name: str
    last_name: str
    email: str
    role: StaffRole
    status: StaffStatus
