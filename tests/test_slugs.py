"""Slug normalisation and validation."""

import pytest

from app.services.slugs import generate_slug, is_slug_available, is_valid_slug


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Precision Auto!", "precision-auto"),
        ("  Joe's   Garage  ", "joes-garage"),
        ("AB", "ab-shop"),
        ("123", "123-shop"),
        ("9" * 40, "9" * 25 + "-shop"),
    ],
)
def test_generate_slug(name, expected):
    assert generate_slug(name) == expected


@pytest.mark.parametrize("slug", ["acme", "acme-2", "3rd-street", "a1b"])
def test_valid_slugs(slug):
    assert is_valid_slug(slug)


@pytest.mark.parametrize("slug", ["ab", "Acme", "acme_motors", "001", "123", "x" * 31])
def test_invalid_slugs(slug):
    assert not is_valid_slug(slug)


@pytest.mark.asyncio
async def test_all_digit_slug_never_available(session):
    assert not await is_slug_available(session, "001")
