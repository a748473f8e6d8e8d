"""Error taxonomy and the handlers that render it as ``{"error": ...}`` bodies."""

import logging
from collections.abc import Iterable
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ShopError(Exception):
    """Base error carrying an HTTP status and extra body fields."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, **extra: Any) -> None:
        self.message = message or self.message
        self.extra = extra
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, **self.extra}


# ── Tenant resolution ────────────────────────────────────────

class TenantNotFound(ShopError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Tenant not found"


class TenantResolutionError(ShopError):
    message = "Error resolving tenant"


class TenantContextMissing(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Tenant context is required"


# ── Authentication / authorization ───────────────────────────

class AuthenticationRequired(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "User authentication required"


class InvalidCredentials(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class StaffNotFound(ShopError):
    # Same answer for "unknown" and "belongs to another tenant".
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Staff member not found or not part of this tenant"


class StaffInactive(ShopError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Staff member is not active"


class RoleMismatch(ShopError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, required: Iterable[str], actual: str) -> None:
        required = list(required)
        super().__init__(
            "This action requires one of the following roles: " + ", ".join(required),
            requiredRoles=required,
            userRole=actual,
        )


class InvalidRefreshToken(ShopError):
    # Revoked, expired and unknown tokens are deliberately indistinguishable.
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid or expired refresh token"


# ── Generic ──────────────────────────────────────────────────

class EntityNotFound(ShopError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str = "Resource") -> None:
        super().__init__(f"{entity} not found")


class Conflict(ShopError):
    status_code = status.HTTP_409_CONFLICT
    message = "Conflict"


class BadRequest(ShopError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Bad request"


# ── Handlers ─────────────────────────────────────────────────

async def shop_error_handler(request: Request, exc: ShopError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s", type(exc).__name__, request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShopError, shop_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
