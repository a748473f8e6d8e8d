"""Access / refresh token lifecycle.

Access tokens are short-lived JWTs carrying the user's staff and tenant
claims. Refresh tokens are opaque random strings, stored only as SHA-256
hashes, and single-use: each exchange revokes the presented token and
issues a successor, linking the two through ``replaced_by_token_hash``.

The revoke step of a rotation is a conditional ``UPDATE`` on the still-active
row, so of two concurrent exchanges of the same token exactly one can win.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.config import get_settings
from app.core.errors import InvalidRefreshToken
from app.core.security import create_jwt, generate_refresh_token, hash_refresh_token
from app.models.base import utcnow
from app.models.refresh_token import RefreshToken, RevocationReason
from app.models.staff import Staff
from app.models.tenant import Tenant
from app.models.user import User

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass
class RotationResult:
    user: User
    access_token: str
    expires_at: datetime
    refresh_token: str


class TokenService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Access tokens ────────────────────────────────────────

    async def staff_claims(self, user: User) -> dict[str, Any]:
        """Tenant / role claims for a staff-linked user.

        Runs before any tenant is resolved (login, refresh), so the lookup
        is explicitly unscoped and keyed by the user's own staff link.
        """
        if user.staff_id is None:
            return {}
        stmt = (
            select(Staff, Tenant)
            .join(Tenant, Tenant.id == Staff.tenant_id)  # type: ignore[arg-type]
            .where(Staff.id == user.staff_id)
        )
        row = (await self.session.execute(stmt)).first()
        if row is None:
            return {}
        staff, tenant = row
        return {
            "staff_id": str(staff.id),
            "staff_role": str(staff.role),
            "staff_status": str(staff.status),
            "tenant_id": str(tenant.id),
            "tenant_slug": tenant.slug,
        }

    async def create_access_token(self, user: User) -> tuple[str, datetime]:
        claims = {"email": user.email, **(await self.staff_claims(user))}
        return create_jwt(subject=str(user.id), claims=claims)

    # ── Refresh tokens ───────────────────────────────────────

    def _new_row(self, token_hash: str, user_id: uuid.UUID, ip: str) -> RefreshToken:
        return RefreshToken(
            token_hash=token_hash,
            user_id=user_id,
            expires_at=utcnow() + timedelta(days=settings.refresh_token_expire_days),
            created_by_ip=ip,
        )

    async def issue_refresh_token(self, user_id: uuid.UUID, ip: str) -> tuple[str, RefreshToken]:
        """Persist a fresh refresh token. Returns the raw value (shown once) and its row."""
        raw = generate_refresh_token()
        row = self._new_row(hash_refresh_token(raw), user_id, ip)
        self.session.add(row)
        await self.session.commit()
        await self.remove_expired_refresh_tokens(user_id)
        return raw, row

    async def lookup(self, raw_token: str) -> RefreshToken | None:
        """Return the row for an *active* token, else None."""
        stmt = select(RefreshToken).where(
            RefreshToken.token_hash == hash_refresh_token(raw_token),
            RefreshToken.is_revoked.is_(False),  # type: ignore[attr-defined]
            RefreshToken.expires_at > utcnow(),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def rotate(self, raw_token: str, ip: str) -> RotationResult:
        """Exchange a refresh token for a new access + refresh token pair."""
        presented = hash_refresh_token(raw_token)
        successor_raw = generate_refresh_token()
        successor_hash = hash_refresh_token(successor_raw)
        now = utcnow()

        claim = (
            update(RefreshToken)
            .where(
                RefreshToken.token_hash == presented,
                RefreshToken.is_revoked.is_(False),  # type: ignore[attr-defined]
                RefreshToken.expires_at > now,
            )
            .values(
                is_revoked=True,
                revoked_at=now,
                revoked_by_ip=ip,
                revocation_reason=RevocationReason.ROTATED,
                replaced_by_token_hash=successor_hash,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(claim)
        if result.rowcount != 1:
            await self.session.rollback()
            await self._on_rejected(presented, ip)
            raise InvalidRefreshToken()

        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token_hash == presented)
            .execution_options(populate_existing=True)
        )
        previous = (await self.session.execute(stmt)).scalar_one()
        user = await self.session.get(User, previous.user_id)
        if user is None or not user.is_active:
            await self.session.rollback()
            raise InvalidRefreshToken()

        self.session.add(self._new_row(successor_hash, user.id, ip))
        access_token, expires_at = await self.create_access_token(user)
        await self.session.commit()

        await self.remove_expired_refresh_tokens(user.id)
        return RotationResult(
            user=user,
            access_token=access_token,
            expires_at=expires_at,
            refresh_token=successor_raw,
        )

    async def revoke(self, raw_token: str, ip: str, reason: str = RevocationReason.LOGOUT) -> bool:
        """Revoke one active token. Returns False if it was not active."""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.token_hash == hash_refresh_token(raw_token),
                RefreshToken.is_revoked.is_(False),  # type: ignore[attr-defined]
            )
            .values(is_revoked=True, revoked_at=utcnow(), revoked_by_ip=ip, revocation_reason=reason)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount == 1

    async def remove_expired_refresh_tokens(self, user_id: uuid.UUID) -> int:
        """Housekeeping; a failure here never fails the caller."""
        stmt = (
            delete(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.expires_at < utcnow())
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.warning("Expired refresh token cleanup failed for user %s", user_id, exc_info=True)
            return 0
        return result.rowcount

    # ── Replay handling ──────────────────────────────────────

    async def _on_rejected(self, token_hash: str, ip: str) -> None:
        stmt = select(RefreshToken).where(RefreshToken.token_hash == token_hash)
        token = (await self.session.execute(stmt)).scalar_one_or_none()
        if token is None or not token.is_revoked:
            return

        logger.warning(
            "Revoked refresh token %s presented by %s (user=%s, reason=%s)",
            token.id, ip, token.user_id, token.revocation_reason,
        )
        if token.revocation_reason != RevocationReason.ROTATED:
            return
        if not settings.refresh_reuse_revokes_chain:
            return

        revoked = await self._revoke_descendants(token, ip)
        await self.session.commit()
        if revoked:
            logger.warning(
                "Refresh token reuse for user %s: revoked %d descendant token(s)",
                token.user_id, revoked,
            )

    async def _revoke_descendants(self, token: RefreshToken, ip: str) -> int:
        revoked = 0
        seen = {token.token_hash}
        next_hash = token.replaced_by_token_hash
        now = utcnow()
        while next_hash and next_hash not in seen:
            seen.add(next_hash)
            stmt = select(RefreshToken).where(RefreshToken.token_hash == next_hash)
            child = (await self.session.execute(stmt)).scalar_one_or_none()
            if child is None:
                break
            if not child.is_revoked:
                child.is_revoked = True
                child.revoked_at = now
                child.revoked_by_ip = ip
                child.revocation_reason = RevocationReason.REUSE_DETECTED
                self.session.add(child)
                revoked += 1
            next_hash = child.replaced_by_token_hash
        return revoked
