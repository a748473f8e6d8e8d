"""Tenant-scoped data access.

Every statement built here carries ``tenant_id == <ambient tenant>``; with
no ambient tenant the predicate is a literal ``false`` so reads come back
empty instead of spanning all tenants. Writes are pinned to the ambient
tenant whatever ``tenant_id`` the caller put on the entity.

Do not use ``session.get`` for tenant-owned rows: it goes through the
identity map and skips the predicate.
"""

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from sqlalchemy import false, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from sqlmodel.sql.expression import SelectOfScalar

from app.core.errors import EntityNotFound
from app.core.tenant_context import current_tenant_id, require_tenant_id
from app.models.base import TenantScopedMixin, utcnow

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=TenantScopedMixin)


def _ensure_scoped(model: type) -> None:
    if not (isinstance(model, type) and issubclass(model, TenantScopedMixin)):
        raise TypeError(f"{getattr(model, '__name__', model)!r} is not a tenant-scoped model")


class ScopedGateway:
    """Wraps an ``AsyncSession`` and restricts it to the ambient tenant."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # ── Reads ────────────────────────────────────────────────

    def select(self, model: type[M]) -> SelectOfScalar[M]:
        _ensure_scoped(model)
        stmt = select(model)
        tenant_id = current_tenant_id()
        if tenant_id is None:
            return stmt.where(false())
        return stmt.where(model.tenant_id == tenant_id)

    async def list(
        self,
        model: type[M],
        *criteria: Any,
        order_by: Any = None,
        limit: int | None = None,
    ) -> Sequence[M]:
        stmt = self.select(model).where(*criteria)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def first(self, model: type[M], *criteria: Any) -> M | None:
        result = await self.session.execute(self.select(model).where(*criteria).limit(1))
        return result.scalars().first()

    async def get(self, model: type[M], entity_id: int) -> M | None:
        return await self.first(model, model.id == entity_id)  # type: ignore[attr-defined]

    async def get_or_404(self, model: type[M], entity_id: int) -> M:
        entity = await self.get(model, entity_id)
        if entity is None:
            raise EntityNotFound(model.__name__)
        return entity

    async def count(self, model: type[M], *criteria: Any) -> int:
        scoped = self.select(model).where(*criteria).subquery()
        result = await self.session.execute(select(func.count()).select_from(scoped))
        return result.scalar_one()

    async def related(
        self,
        parent_model: type[TenantScopedMixin],
        parent_id: int,
        child_model: type[M],
        foreign_key: Any,
        order_by: Any = None,
    ) -> Sequence[M]:
        """Children of a parent, with the tenant predicate on *both* sides."""
        await self.get_or_404(parent_model, parent_id)
        return await self.list(child_model, foreign_key == parent_id, order_by=order_by)

    # ── Writes ───────────────────────────────────────────────

    def add(self, entity: M) -> M:
        _ensure_scoped(type(entity))
        tenant_id = require_tenant_id()
        submitted = getattr(entity, "tenant_id", None)
        if submitted is not None and submitted != tenant_id:
            logger.warning(
                "Ignoring tenant_id=%s on new %s; pinned to ambient tenant %s",
                submitted, type(entity).__name__, tenant_id,
            )
        entity.tenant_id = tenant_id
        self.session.add(entity)
        return entity

    def update(self, entity: M, data: dict[str, Any]) -> M:
        self._ensure_owned(entity)
        data = {k: v for k, v in data.items() if k not in ("tenant_id", "id")}
        for field, value in data.items():
            setattr(entity, field, value)
        entity.tenant_id = require_tenant_id()
        if hasattr(entity, "updated_at"):
            entity.updated_at = utcnow()
        self.session.add(entity)
        return entity

    async def delete(self, entity: TenantScopedMixin) -> None:
        self._ensure_owned(entity)
        await self.session.delete(entity)

    def _ensure_owned(self, entity: TenantScopedMixin) -> None:
        _ensure_scoped(type(entity))
        if entity.tenant_id != require_tenant_id():
            # Indistinguishable from a missing row on purpose.
            raise EntityNotFound(type(entity).__name__)

    # ── Session pass-through ─────────────────────────────────

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def refresh(self, entity: TenantScopedMixin) -> None:
        await self.session.refresh(entity)
