"""Ambient, request-scoped tenant context.

Backed by a ``ContextVar`` so every asyncio task (one per request) sees only
the value it set itself. Nothing here is process-global state: a task started
while a tenant is set inherits a *copy*, and changes made inside a task never
leak back out to other tasks.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from app.core.errors import TenantContextMissing


@dataclass(frozen=True)
class TenantInfo:
    tenant_id: int
    tenant_slug: str


_current_tenant: ContextVar[TenantInfo | None] = ContextVar("current_tenant", default=None)


def get_tenant() -> TenantInfo | None:
    """Return the tenant bound to the running request, if any."""
    return _current_tenant.get()


def set_tenant(tenant_id: int, tenant_slug: str) -> TenantInfo:
    info = TenantInfo(tenant_id=tenant_id, tenant_slug=tenant_slug)
    _current_tenant.set(info)
    return info


def clear_tenant() -> None:
    _current_tenant.set(None)


def current_tenant_id() -> int | None:
    info = _current_tenant.get()
    return info.tenant_id if info else None


def require_tenant_id() -> int:
    """Return the ambient tenant id or raise ``TenantContextMissing``."""
    tenant_id = current_tenant_id()
    if tenant_id is None:
        raise TenantContextMissing()
    return tenant_id


@contextmanager
def tenant_scope(tenant_id: int, tenant_slug: str) -> Iterator[TenantInfo]:
    """Bind a tenant for the duration of a block, restoring the previous value."""
    token = _current_tenant.set(TenantInfo(tenant_id=tenant_id, tenant_slug=tenant_slug))
    try:
        yield _current_tenant.get()  # type: ignore[misc]
    finally:
        _current_tenant.reset(token)
