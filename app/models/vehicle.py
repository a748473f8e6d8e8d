"""Vehicle model: belongs to a customer of the same tenant."""

from sqlmodel import Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin


class Vehicle(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "vehicles"

    id: int | None = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="customers.id", nullable=False, index=True)

    make: str = Field(max_length=50, nullable=False)
    model: str = Field(max_length=50, nullable=False)
    year: int = Field(ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    license_plate: str | None = Field(default=None, max_length=20)
    color: str | None = Field(default=None, max_length=30)
    mileage: int | None = Field(default=None, ge=0)


# ── Pydantic schemas ─────────────────────────────────────────

class VehicleCreate(SQLModel):
    customer_id: int
    make: str = Field(max_length=50)
    model: str = Field(max_length=50)
    year: int = Field(ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    license_plate: str | None = Field(default=None, max_length=20)
    color: str | None = Field(default=None, max_length=30)
    mileage: int | None = Field(default=None, ge=0)
    tenant_id: int | None = None


class VehicleRead(SQLModel):
    id: int
    tenant_id: int
    customer_id: int
    make: str
    model: str
    year: int
    vin: str | None
    license_plate: str | None
