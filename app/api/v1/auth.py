"""Authentication endpoints: register, login, refresh rotation, logout, current user."""

import uuid
from datetime import datetime

from fastapi import APIRouter, Cookie, Request, Response, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlmodel import select

from app.api.deps import CurrentPrincipal, Session, client_ip
from app.core.config import get_settings
from app.core.errors import (
    AuthenticationRequired,
    Conflict,
    InvalidCredentials,
    InvalidRefreshToken,
)
from app.core.security import hash_password, verify_password
from app.models.base import utcnow
from app.models.staff import Staff
from app.models.tenant import Tenant
from app.models.user import StaffInfo, User, UserRead
from app.services.token_service import TokenService

router = APIRouter(prefix="/auth", tags=["auth"])

settings = get_settings()


# ── Schemas ──────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    # Staff links are only made by management, see POST /v1/staff/{id}/account
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserRead


# ── Helpers ──────────────────────────────────────────────────

def set_refresh_cookie(response: Response, raw_token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=raw_token,
        httponly=True,
        secure=settings.refresh_cookie_secure,
        samesite="strict",
        max_age=settings.refresh_token_expire_days * 24 * 3600,
        path="/",
    )


async def user_read(session: Session, user: User) -> UserRead:
    """Render a user with its staff/tenant link (unscoped: keyed by the user's own link)."""
    staff_info = None
    if user.staff_id is not None:
        stmt = (
            select(Staff, Tenant)
            .join(Tenant, Tenant.id == Staff.tenant_id)  # type: ignore[arg-type]
            .where(Staff.id == user.staff_id)
        )
        row = (await session.execute(stmt)).first()
        if row is not None:
            staff, tenant = row
            staff_info = StaffInfo(
                id=staff.id,  # type: ignore[arg-type]
                first_name=staff.first_name,
                last_name=staff.last_name,
                role=staff.role,
                status=staff.status,
                tenant_id=tenant.id,  # type: ignore[arg-type]
                tenant_slug=tenant.slug,
                tenant_name=tenant.name,
            )
    return UserRead(id=user.id, email=user.email, staff=staff_info)


async def issue_session(
    session: Session, user: User, request: Request, response: Response
) -> TokenResponse:
    """Mint an access token plus a fresh refresh cookie for ``user``."""
    tokens = TokenService(session)
    raw_refresh, _ = await tokens.issue_refresh_token(user.id, client_ip(request))
    access_token, expires_at = await tokens.create_access_token(user)
    set_refresh_cookie(response, raw_refresh)
    return TokenResponse(
        access_token=access_token,
        expires_at=expires_at,
        user=await user_read(session, user),
    )


# ── Routes ───────────────────────────────────────────────────

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest, request: Request, response: Response, session: Session
) -> TokenResponse:
    """Create a login with no staff link; it carries no tenant claims."""
    existing = await session.execute(select(User.id).where(User.email == body.email))
    if existing.first() is not None:
        raise Conflict("An account with this email already exists")

    user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        last_login_at=utcnow(),
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return await issue_session(session, user, request, response)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest, request: Request, response: Response, session: Session
) -> TokenResponse:
    """Authenticate with email + password; the refresh token is set as a cookie."""
    result = await session.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise InvalidCredentials()
    if not user.is_active:
        raise AuthenticationRequired("Account is disabled")

    user.last_login_at = utcnow()
    session.add(user)
    await session.commit()
    return await issue_session(session, user, request, response)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    request: Request,
    response: Response,
    session: Session,
    refresh_token: str | None = Cookie(default=None, alias=settings.refresh_cookie_name),
) -> TokenResponse:
    """Exchange the refresh cookie for a new access token and a new refresh cookie."""
    if not refresh_token:
        raise InvalidRefreshToken()

    result = await TokenService(session).rotate(refresh_token, client_ip(request))
    set_refresh_cookie(response, result.refresh_token)
    return TokenResponse(
        access_token=result.access_token,
        expires_at=result.expires_at,
        user=await user_read(session, result.user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    response: Response,
    session: Session,
    refresh_token: str | None = Cookie(default=None, alias=settings.refresh_cookie_name),
) -> None:
    if refresh_token:
        await TokenService(session).revoke(refresh_token, client_ip(request))
    response.delete_cookie(settings.refresh_cookie_name, path="/")


@router.get("/me", response_model=UserRead)
async def get_me(principal: CurrentPrincipal, session: Session) -> UserRead:
    """Return the authenticated user and their staff/tenant link."""
    try:
        user_id = uuid.UUID(principal.user_id)
    except ValueError as exc:
        raise AuthenticationRequired("Malformed access token") from exc

    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise AuthenticationRequired()
    return await user_read(session, user)
