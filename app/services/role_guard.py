"""Staff authorization: is this principal an active staff member of the ambient tenant?"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from app.core.errors import (
    AuthenticationRequired,
    RoleMismatch,
    StaffInactive,
    StaffNotFound,
)
from app.core.tenant_context import require_tenant_id
from app.models.staff import Staff, StaffRole, StaffStatus
from app.services.scoped_gateway import ScopedGateway

logger = logging.getLogger(__name__)

# Role sets used by the routers. An empty set means "any active staff".
ANY_STAFF: tuple[StaffRole, ...] = ()
OWNER_ONLY = (StaffRole.OWNER,)
MANAGEMENT = (StaffRole.OWNER, StaffRole.MANAGER)
DISPATCH = (StaffRole.OWNER, StaffRole.MANAGER, StaffRole.DISPATCHER)
WORKSHOP = (StaffRole.OWNER, StaffRole.MANAGER, StaffRole.TECHNICIAN)


async def load_staff(gateway: ScopedGateway, claims: Mapping[str, Any]) -> Staff:
    """Find the principal's Staff row *within the ambient tenant*.

    A direct ``staff_id`` claim wins; otherwise the subject is matched
    against ``Staff.user_id`` (external identity link).
    """
    raw_staff_id = claims.get("staff_id")
    if raw_staff_id is not None and str(raw_staff_id).isdigit():
        staff = await gateway.get(Staff, int(raw_staff_id))
    else:
        subject = claims.get("sub") or raw_staff_id
        if not subject:
            raise AuthenticationRequired()
        staff = await gateway.first(Staff, Staff.user_id == str(subject))

    if staff is None:
        raise StaffNotFound()
    return staff


async def authorize_staff(
    gateway: ScopedGateway,
    claims: Mapping[str, Any] | None,
    roles: Iterable[StaffRole] = ANY_STAFF,
) -> Staff:
    """Run the staff gate. Performs no writes."""
    tenant_id = require_tenant_id()
    if claims is None:
        raise AuthenticationRequired()

    staff = await load_staff(gateway, claims)

    if staff.status != StaffStatus.ACTIVE:
        logger.info("Staff %s of tenant %s rejected: status=%s", staff.id, tenant_id, staff.status)
        raise StaffInactive()

    allowed = tuple(roles)
    if allowed and staff.role not in allowed:
        logger.info("Staff %s of tenant %s rejected: role=%s", staff.id, tenant_id, staff.role)
        raise RoleMismatch([r.value for r in allowed], StaffRole(staff.role).value)

    return staff
