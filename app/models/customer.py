"""Customer model: a vehicle owner served by one shop."""

from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin


class Customer(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "customers"

    id: int | None = Field(default=None, primary_key=True)
    first_name: str = Field(max_length=100, nullable=False)
    last_name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=320, index=True)
    phone: str = Field(default="", max_length=20)
    address: str | None = Field(default=None, max_length=500)


# ── Pydantic schemas ─────────────────────────────────────────

class CustomerCreate(SQLModel):
    first_name: str = Field(max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=320)
    phone: str = Field(default="", max_length=20)
    address: str | None = Field(default=None, max_length=500)
    # Accepted for client compatibility, always overridden by the ambient tenant
    tenant_id: int | None = None


class CustomerUpdate(SQLModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    tenant_id: int | None = None


class CustomerRead(SQLModel):
    id: int
    tenant_id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str | None
    created_at: datetime
