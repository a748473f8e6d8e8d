"""Tenant model: top-level isolation boundary (one repair shop)."""

from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin


class TenantPlan(StrEnum):
    FREE = "free"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class TenantStatus(StrEnum):
    ACTIVE = "active"
    TRIAL = "trial"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


# (max_users, max_customers, max_vehicles)
PLAN_LIMITS: dict[TenantPlan, tuple[int, int, int]] = {
    TenantPlan.FREE: (2, 50, 100),
    TenantPlan.BASIC: (5, 100, 200),
    TenantPlan.PROFESSIONAL: (15, 1000, 2000),
    TenantPlan.ENTERPRISE: (100, 100000, 200000),
}


class Tenant(TimestampMixin, SQLModel, table=True):
    __tablename__ = "tenants"

    id: int | None = Field(default=None, primary_key=True)
    slug: str = Field(max_length=100, unique=True, nullable=False, index=True)
    name: str = Field(max_length=200, nullable=False)

    # Contact / profile
    email: str | None = Field(default=None, max_length=200)
    phone: str | None = Field(default=None, max_length=20)
    time_zone: str = Field(default="America/New_York", max_length=64)

    # Subscription: tenants are never deleted, only moved between statuses
    plan: TenantPlan = Field(default=TenantPlan.BASIC, index=True)
    status: TenantStatus = Field(default=TenantStatus.ACTIVE, index=True)
    trial_ends_at: datetime | None = Field(default=None)

    # Resource limits, seeded from PLAN_LIMITS
    max_users: int = Field(default=5)
    max_customers: int = Field(default=100)
    max_vehicles: int = Field(default=200)

    def apply_plan_limits(self) -> None:
        self.max_users, self.max_customers, self.max_vehicles = PLAN_LIMITS[self.plan]


# ── Pydantic schemas ─────────────────────────────────────────

class TenantRead(SQLModel):
    id: int
    slug: str
    name: str
    plan: TenantPlan
    status: TenantStatus
    time_zone: str
    max_users: int
    max_customers: int
    max_vehicles: int


class TenantPublicRead(SQLModel):
    """What an anonymous visitor of a shop's booking page may see."""
    slug: str
    name: str
    email: str | None
    phone: str | None
    time_zone: str


class TenantStatusUpdate(SQLModel):
    status: TenantStatus
