"""RefreshToken model: long-lived, rotating, revocable session secrets."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.base import utcnow


class RevocationReason:
    ROTATED = "rotated"
    LOGOUT = "logout"
    REUSE_DETECTED = "reuse-detected"


class RefreshToken(SQLModel, table=True):
    __tablename__ = "refresh_tokens"

    id: int | None = Field(default=None, primary_key=True)

    # SHA-256 of the raw token; the raw value only ever lives in the client cookie
    token_hash: str = Field(max_length=64, nullable=False, unique=True, index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    expires_at: datetime = Field(nullable=False, index=True)

    is_revoked: bool = Field(default=False, nullable=False)
    revoked_at: datetime | None = Field(default=None)
    revocation_reason: str | None = Field(default=None, max_length=50)

    # Forward pointer of the rotation chain (hash of the successor token)
    replaced_by_token_hash: str | None = Field(default=None, max_length=64, index=True)

    created_by_ip: str | None = Field(default=None, max_length=45)
    revoked_by_ip: str | None = Field(default=None, max_length=45)

    @property
    def is_active(self) -> bool:
        return not self.is_revoked and utcnow() < self.expires_at
