"""Shared base fields for all models."""

import uuid
from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


class TimestampMixin(SQLModel):
    """Created / updated timestamps injected into every table."""

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)


class TenantScopedMixin(SQLModel):
    """Marks a table as tenant-owned.

    Rows of these tables are only ever read or written through the
    ``ScopedGateway``, which pins ``tenant_id`` to the ambient tenant.
    """

    tenant_id: int = Field(foreign_key="tenants.id", nullable=False, index=True)
