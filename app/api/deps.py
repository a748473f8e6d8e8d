"""FastAPI dependencies: principal, tenant context, scoped data access, role gate."""

from collections.abc import AsyncGenerator, Iterable
from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.core.errors import AuthenticationRequired
from app.core.security import decode_access_token
from app.core.tenant_context import TenantInfo, clear_tenant
from app.models.staff import Staff, StaffRole
from app.services.role_guard import ANY_STAFF, authorize_staff
from app.services.scoped_gateway import ScopedGateway
from app.services.tenant_resolver import enter_tenant_context

# auto_error=False: anonymous requests are allowed through to tenant resolution
bearer_scheme = HTTPBearer(auto_error=False)


class Principal:
    """Authenticated identity carried through a request."""

    __slots__ = ("user_id", "email", "claims")

    def __init__(self, user_id: str, email: str | None, claims: dict[str, Any]) -> None:
        self.user_id = user_id
        self.email = email
        self.claims = claims


async def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> Principal | None:
    """Decode the bearer access token, if one was sent."""
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError as exc:
        raise AuthenticationRequired("Invalid or expired access token") from exc

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationRequired("Malformed access token")
    return Principal(user_id=str(subject), email=payload.get("email"), claims=payload)


async def require_principal(
    principal: Annotated[Principal | None, Depends(get_principal)],
) -> Principal:
    if principal is None:
        raise AuthenticationRequired()
    return principal


def _claims(principal: Principal | None) -> dict[str, Any] | None:
    return principal.claims if principal else None


async def require_tenant(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
    principal: Annotated[Principal | None, Depends(get_principal)],
) -> AsyncGenerator[TenantInfo, None]:
    """Resolve the tenant for the request and clear it once the request is done."""
    try:
        info = await enter_tenant_context(request, session, _claims(principal), required=True)
        yield info  # type: ignore[misc]
    finally:
        clear_tenant()


async def optional_tenant(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
    principal: Annotated[Principal | None, Depends(get_principal)],
) -> AsyncGenerator[TenantInfo | None, None]:
    """Like ``require_tenant`` but lets identifier-less requests through unscoped."""
    try:
        yield await enter_tenant_context(request, session, _claims(principal), required=False)
    finally:
        clear_tenant()


async def get_gateway(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> ScopedGateway:
    return ScopedGateway(session)


class RoleGuard:
    """Route dependency admitting active staff of the resolved tenant.

    ``RoleGuard()`` admits any active staff member; ``RoleGuard(MANAGEMENT)``
    additionally requires one of the listed roles.
    """

    def __init__(self, roles: Iterable[StaffRole] = ANY_STAFF) -> None:
        self.roles = tuple(roles)

    async def __call__(
        self,
        request: Request,
        tenant: Annotated[TenantInfo, Depends(require_tenant)],
        principal: Annotated[Principal | None, Depends(get_principal)],
        gateway: Annotated[ScopedGateway, Depends(get_gateway)],
    ) -> Staff:
        staff = await authorize_staff(gateway, _claims(principal), self.roles)
        request.state.staff = staff
        request.state.staff_role = staff.role
        return staff


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


# Typed shorthand for use in route signatures
Session = Annotated[AsyncSession, Depends(get_session)]
Gateway = Annotated[ScopedGateway, Depends(get_gateway)]
CurrentPrincipal = Annotated[Principal, Depends(require_principal)]
CurrentTenant = Annotated[TenantInfo, Depends(require_tenant)]
OptionalTenant = Annotated[TenantInfo | None, Depends(optional_tenant)]
ActiveStaff = Annotated[Staff, Depends(RoleGuard())]
