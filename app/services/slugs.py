"""Tenant slug rules: URL-safe shop identifiers used in routes, headers and subdomains."""

import re
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.tenant import Tenant

MIN_LENGTH = 3
MAX_LENGTH = 30

_SLUG_RE = re.compile(r"^[a-z0-9-]+$")


def generate_slug(name: str) -> str:
    """Normalise a business name into a slug, e.g. "Precision Auto!" -> "precision-auto"."""
    if not name or not name.strip():
        return "shop-" + uuid.uuid4().hex[:8]

    slug = name.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")

    slug = slug[:MAX_LENGTH].rstrip("-")
    if len(slug) < MIN_LENGTH or slug.isdigit():
        slug = f"{slug[: MAX_LENGTH - 5]}-shop".strip("-")
    return slug


def is_valid_slug(slug: str) -> bool:
    # All-digit identifiers are resolved as tenant ids, never as slugs.
    if slug.isdigit():
        return False
    return MIN_LENGTH <= len(slug) <= MAX_LENGTH and bool(_SLUG_RE.match(slug))


async def is_slug_available(session: AsyncSession, slug: str) -> bool:
    if not is_valid_slug(slug):
        return False
    result = await session.execute(select(Tenant.id).where(Tenant.slug == slug))
    return result.first() is None


async def suggest_alternatives(session: AsyncSession, slug: str, count: int = 3) -> list[str]:
    """Numbered and trade-flavoured variants of a taken slug that are still free."""
    base = generate_slug(slug)
    candidates = [f"{base}-{i}" for i in range(2, count + 2)]
    candidates += [f"{base}-{suffix}" for suffix in ("auto", "motors", "garage", "service")]

    suggestions: list[str] = []
    for candidate in candidates:
        if len(candidate) <= MAX_LENGTH and await is_slug_available(session, candidate):
            suggestions.append(candidate)
            if len(suggestions) >= count:
                break
    return suggestions
