"""Lightweight in-memory TTL cache for tenant lookups.

The tenant resolver runs on every request; identical identifiers arriving
within a short window are answered from here instead of hitting the tenants
table. Only *active* tenants are stored, and any status change must call
``invalidate_tenant`` so a suspended shop stops resolving immediately.
"""

import time
from collections.abc import Hashable
from typing import Any

_cache: dict[Hashable, tuple[float, Any]] = {}

# Default TTL in seconds
DEFAULT_TTL = 30


def get(key: Hashable, ttl: float = DEFAULT_TTL) -> Any | None:
    """Return cached value if present and not expired, else None."""
    entry = _cache.get(key)
    if entry is None:
        return None
    stored_at, value = entry
    if time.monotonic() - stored_at > ttl:
        _cache.pop(key, None)
        return None
    return value


def put(key: Hashable, value: Any) -> None:
    """Store a value in the cache."""
    _cache[key] = (time.monotonic(), value)


def invalidate(key: Hashable) -> None:
    """Remove a specific cache entry."""
    _cache.pop(key, None)


def tenant_key(identifier: str | int) -> tuple[str, str]:
    return ("tenant", str(identifier))


def invalidate_tenant(tenant_id: int, slug: str) -> None:
    """Drop every key a tenant can be cached under."""
    invalidate(tenant_key(tenant_id))
    invalidate(tenant_key(slug))


def clear() -> None:
    """Clear all cached entries."""
    _cache.clear()
