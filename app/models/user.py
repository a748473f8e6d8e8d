"""User model: a login identity, optionally linked to a Staff row."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, nullable=False, unique=True, index=True)
    password_hash: str = Field(nullable=False)

    # Staff link supplies tenant / role claims; NULL for users not yet onboarded
    staff_id: int | None = Field(default=None, foreign_key="staff.id", unique=True)

    is_active: bool = Field(default=True)
    last_login_at: datetime | None = Field(default=None)


# ── Pydantic schemas ─────────────────────────────────────────

class StaffInfo(SQLModel):
    id: int
    first_name: str
    last_name: str
    role: str
    status: str
    tenant_id: int
    tenant_slug: str
    tenant_name: str


class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    staff: StaffInfo | None = None
