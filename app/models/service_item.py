"""ServiceItem model: an entry in a shop's service catalogue."""

from sqlmodel import Field, SQLModel

from app.models.base import TenantScopedMixin, TimestampMixin


class ServiceItem(TenantScopedMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "service_items"

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(max_length=100, nullable=False)
    description: str = Field(default="", max_length=1000)
    price: float = Field(default=0.0, ge=0)
    duration_minutes: int = Field(default=60, ge=0)
    is_active: bool = Field(default=True)
    is_bookable_online: bool = Field(default=False)
