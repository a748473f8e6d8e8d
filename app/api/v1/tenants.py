"""Tenant bootstrap and current-tenant endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel, EmailStr, Field
from sqlmodel import select

from app.api.deps import ActiveStaff, CurrentTenant, RoleGuard, Session
from app.api.v1.auth import TokenResponse, issue_session
from app.core import cache
from app.core.errors import BadRequest, Conflict, TenantNotFound
from app.core.security import hash_password
from app.core.tenant_context import tenant_scope
from app.models.base import utcnow
from app.models.staff import Staff, StaffRole, StaffStatus
from app.models.tenant import Tenant, TenantPlan, TenantRead, TenantStatusUpdate
from app.models.user import User
from app.services.role_guard import OWNER_ONLY
from app.services.scoped_gateway import ScopedGateway
from app.services.slugs import generate_slug, is_slug_available, is_valid_slug, suggest_alternatives

router = APIRouter(prefix="/tenants", tags=["tenants"])


# ── Bootstrap request / response schemas ──────────────────────

class TenantBootstrapRequest(BaseModel):
    """Everything needed to create a new shop and its owner in one call."""
    tenant_name: str = Field(min_length=1, max_length=200)
    tenant_slug: str | None = Field(default=None, max_length=30)
    plan: TenantPlan = TenantPlan.BASIC
    owner_email: EmailStr
    owner_password: str = Field(min_length=8, max_length=128)
    owner_first_name: str = Field(default="", max_length=100)
    owner_last_name: str = Field(default="", max_length=100)


class TenantBootstrapResponse(TokenResponse):
    tenant: TenantRead


# ── Routes ────────────────────────────────────────────────────

@router.post(
    "",
    response_model=TenantBootstrapResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new tenant (bootstrap)",
)
async def bootstrap_tenant(
    body: TenantBootstrapRequest,
    request: Request,
    response: Response,
    session: Session,
) -> TenantBootstrapResponse:
    """Create a tenant, its owner staff member and the owner's login.

    This is the only unauthenticated write endpoint. The owner is signed in
    straight away: an access token is returned and the refresh cookie set.
    """
    slug = body.tenant_slug or generate_slug(body.tenant_name)
    if not is_valid_slug(slug):
        raise BadRequest("Slug must be 3-30 characters of a-z, 0-9 and '-'")
    if not await is_slug_available(session, slug):
        raise Conflict(
            f"Slug '{slug}' is already taken",
            suggestions=await suggest_alternatives(session, slug),
        )

    existing = await session.execute(select(User.id).where(User.email == body.owner_email))
    if existing.first() is not None:
        raise Conflict("An account with this email already exists")

    # 1. Tenant
    tenant = Tenant(name=body.tenant_name, slug=slug, plan=body.plan, email=body.owner_email)
    tenant.apply_plan_limits()
    session.add(tenant)
    await session.flush()  # populate tenant.id

    # 2. Owner staff, written through the gateway under the new tenant
    with tenant_scope(tenant.id, tenant.slug):  # type: ignore[arg-type]
        owner = ScopedGateway(session).add(
            Staff(
                tenant_id=tenant.id,
                first_name=body.owner_first_name,
                last_name=body.owner_last_name,
                email=body.owner_email,
                role=StaffRole.OWNER,
                status=StaffStatus.ACTIVE,
            )
        )
        await session.flush()

    # 3. Login identity linked to the owner
    user = User(
        email=body.owner_email,
        password_hash=hash_password(body.owner_password),
        staff_id=owner.id,
        last_login_at=utcnow(),
    )
    session.add(user)
    await session.commit()
    await session.refresh(tenant)
    await session.refresh(user)

    issued = await issue_session(session, user, request, response)
    return TenantBootstrapResponse(
        **issued.model_dump(),
        tenant=TenantRead.model_validate(tenant),
    )


@router.get("/current", response_model=TenantRead, summary="Get current tenant info")
async def get_current_tenant(
    staff: ActiveStaff,
    tenant: CurrentTenant,
    session: Session,
) -> TenantRead:
    row = await session.get(Tenant, tenant.tenant_id)
    if row is None:
        raise TenantNotFound()
    return TenantRead.model_validate(row)


@router.patch("/current/status", response_model=TenantRead)
async def update_tenant_status(
    body: TenantStatusUpdate,
    tenant: CurrentTenant,
    session: Session,
    staff: Staff = Depends(RoleGuard(OWNER_ONLY)),
) -> TenantRead:
    """Move the tenant between lifecycle states; tenants are never deleted."""
    row = await session.get(Tenant, tenant.tenant_id)
    if row is None:
        raise TenantNotFound()

    row.status = body.status
    row.updated_at = utcnow()
    session.add(row)
    await session.commit()
    await session.refresh(row)

    cache.invalidate_tenant(row.id, row.slug)  # type: ignore[arg-type]
    return TenantRead.model_validate(row)
