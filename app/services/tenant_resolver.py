"""Tenant resolution: derive the tenant of a request and bind it to the context.

Identifiers are looked for in a fixed order and the first non-empty one wins:

1. ``tenant_id`` claim of the authenticated principal
2. ``tenant_slug`` claim
3. the tenant-slug route parameter (``/v1/public/{tenant_slug}``)
4. the tenant header (``X-Tenant-Slug``)
5. the leftmost label of a host with at least three labels, unless reserved

A numeric identifier is looked up by id, anything else by slug. Only
*active* tenants resolve; everything else is ``TenantNotFound``.
"""

import ipaddress
import logging
from collections.abc import Callable, Mapping
from typing import Any

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core import cache
from app.core.config import get_settings
from app.core.errors import TenantContextMissing, TenantNotFound, TenantResolutionError
from app.core.tenant_context import TenantInfo, set_tenant
from app.models.tenant import Tenant, TenantStatus

logger = logging.getLogger(__name__)

settings = get_settings()

_MAX_TENANT_ID = 2**63 - 1

Claims = Mapping[str, Any]
Strategy = Callable[[Request, Claims], str | None]


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _from_claim(name: str) -> Strategy:
    def strategy(request: Request, claims: Claims) -> str | None:
        return _clean(claims.get(name))
    return strategy


def _from_route(request: Request, claims: Claims) -> str | None:
    return _clean(request.path_params.get(settings.tenant_route_param))


def _from_header(request: Request, claims: Claims) -> str | None:
    return _clean(request.headers.get(settings.tenant_header))


def _from_subdomain(request: Request, claims: Claims) -> str | None:
    host = (request.headers.get("host") or "").split(":")[0].strip().lower()
    if not host:
        return None
    try:
        ipaddress.ip_address(host)
        return None  # a dotted IP is not a subdomain
    except ValueError:
        pass
    labels = host.split(".")
    if len(labels) >= 3 and labels[0] not in settings.reserved_subdomain_set:
        return _clean(labels[0])
    return None


STRATEGIES: list[tuple[str, Strategy]] = [
    ("claim:tenant_id", _from_claim("tenant_id")),
    ("claim:tenant_slug", _from_claim("tenant_slug")),
    ("route", _from_route),
    ("header", _from_header),
    ("subdomain", _from_subdomain),
]


def find_tenant_identifier(request: Request, claims: Claims | None = None) -> tuple[str, str] | None:
    """Return ``(identifier, source)`` from the first strategy that yields one."""
    claims = claims or {}
    for source, strategy in STRATEGIES:
        identifier = strategy(request, claims)
        if identifier:
            return identifier, source
    return None


async def resolve_tenant(session: AsyncSession, identifier: str) -> TenantInfo:
    """Map an identifier to an active tenant, or raise ``TenantNotFound``."""
    stmt = select(Tenant).where(Tenant.status == TenantStatus.ACTIVE)
    if identifier.isascii() and identifier.isdigit():
        tenant_id = int(identifier)
        if tenant_id > _MAX_TENANT_ID:
            raise TenantNotFound()
        # "0001" and "1" share one cache entry
        key = cache.tenant_key(tenant_id)
        stmt = stmt.where(Tenant.id == tenant_id)
    else:
        key = cache.tenant_key(identifier)
        stmt = stmt.where(Tenant.slug == identifier)

    cached = cache.get(key, ttl=settings.tenant_cache_ttl)
    if cached is not None:
        return cached

    try:
        result = await session.execute(stmt)
        tenant = result.scalar_one_or_none()
    except SQLAlchemyError as exc:
        logger.exception("Error resolving tenant %r", identifier)
        raise TenantResolutionError() from exc

    if tenant is None:
        raise TenantNotFound()

    info = TenantInfo(tenant_id=tenant.id, tenant_slug=tenant.slug)  # type: ignore[arg-type]
    cache.put(key, info)
    return info


async def enter_tenant_context(
    request: Request,
    session: AsyncSession,
    claims: Claims | None,
    *,
    required: bool,
) -> TenantInfo | None:
    """Resolve the request's tenant and bind it to the ambient context.

    With ``required=False`` a request carrying no identifier at all proceeds
    with an empty context; this is only for endpoints that are tenant-agnostic.
    """
    found = find_tenant_identifier(request, claims)
    if found is None:
        if required:
            logger.info("No tenant identifier on %s %s", request.method, request.url.path)
            raise TenantContextMissing()
        logger.debug("No tenant identifier found in request")
        return None

    identifier, source = found
    try:
        info = await resolve_tenant(session, identifier)
    except TenantNotFound:
        logger.warning("Tenant %r not found or inactive (source=%s)", identifier, source)
        raise

    set_tenant(info.tenant_id, info.tenant_slug)
    logger.info(
        "Tenant resolved: id=%s slug=%s source=%s", info.tenant_id, info.tenant_slug, source
    )
    return info
