"""Shared test fixtures: async SQLite in-memory DB, test client and shop factories."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production")

from collections.abc import AsyncGenerator  # noqa: E402
from dataclasses import dataclass  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

# Import all models so metadata is populated
import app.models  # noqa: E402, F401
from app.core import cache  # noqa: E402
from app.core.database import get_session  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.core.tenant_context import clear_tenant  # noqa: E402
from app.main import app  # noqa: E402
from app.models.staff import Staff, StaffRole, StaffStatus  # noqa: E402
from app.models.tenant import Tenant, TenantStatus  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.token_service import TokenService  # noqa: E402

PASSWORD = "correct-horse-battery"


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture(autouse=True)
def _reset_ambient_state():
    cache.clear()
    clear_tenant()
    yield
    cache.clear()
    clear_tenant()


@pytest.fixture
async def client(session) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override.

    https so the Secure refresh cookie is sent back by the client.
    """

    async def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Factories ────────────────────────────────────────────────

@dataclass
class Member:
    tenant: Tenant
    staff: Staff
    user: User
    headers: dict[str, str]


@pytest.fixture
def make_tenant(session):
    async def _make(slug: str, status: TenantStatus = TenantStatus.ACTIVE) -> Tenant:
        tenant = Tenant(slug=slug, name=f"{slug.title()} Garage", status=status)
        tenant.apply_plan_limits()
        session.add(tenant)
        await session.commit()
        await session.refresh(tenant)
        return tenant

    return _make


@pytest.fixture
def make_member(session):
    """Staff member of ``tenant`` plus a linked login and bearer headers."""

    async def _make(
        tenant: Tenant,
        role: StaffRole = StaffRole.OWNER,
        status: StaffStatus = StaffStatus.ACTIVE,
        email: str | None = None,
    ) -> Member:
        email = email or f"{role.value}.{status.value}@{tenant.slug}.test"
        staff = Staff(
            tenant_id=tenant.id,
            first_name=role.value.title(),
            last_name="Tester",
            email=email,
            role=role,
            status=status,
            user_id=f"ext|{tenant.slug}|{role.value}|{status.value}",
        )
        session.add(staff)
        await session.flush()
        user = User(email=email, password_hash=hash_password(PASSWORD), staff_id=staff.id)
        session.add(user)
        await session.commit()
        await session.refresh(staff)
        await session.refresh(user)

        token, _ = await TokenService(session).create_access_token(user)
        return Member(
            tenant=tenant,
            staff=staff,
            user=user,
            headers={"Authorization": f"Bearer {token}"},
        )

    return _make
