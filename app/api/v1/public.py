"""Anonymous shop profile, addressed by slug in the path."""

from fastapi import APIRouter

from app.api.deps import CurrentTenant, Session
from app.core.errors import TenantNotFound
from app.models.tenant import Tenant, TenantPublicRead

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/{tenant_slug}", response_model=TenantPublicRead)
async def get_shop_profile(tenant_slug: str, tenant: CurrentTenant, session: Session) -> TenantPublicRead:
    row = await session.get(Tenant, tenant.tenant_id)
    if row is None:
        raise TenantNotFound()
    return TenantPublicRead.model_validate(row)
