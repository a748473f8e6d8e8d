"""Staff directory of the current tenant."""

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_
from sqlmodel import select

from app.api.deps import ActiveStaff, Gateway, RoleGuard
from app.api.v1.auth import user_read
from app.core.errors import Conflict
from app.core.security import hash_password
from app.models.staff import (
    Staff,
    StaffAccountCreate,
    StaffCreate,
    StaffRead,
    StaffStatus,
    StaffStatusUpdate,
)
from app.models.user import User, UserRead
from app.services.role_guard import MANAGEMENT

router = APIRouter(prefix="/staff", tags=["staff"])

require_management = RoleGuard(MANAGEMENT)


@router.get("", response_model=list[StaffRead])
async def list_staff(staff: ActiveStaff, gateway: Gateway) -> list[StaffRead]:
    rows = await gateway.list(Staff, order_by=Staff.last_name)
    return [StaffRead.model_validate(s) for s in rows]


@router.post("", response_model=StaffRead, status_code=status.HTTP_201_CREATED)
async def create_staff(
    body: StaffCreate,
    gateway: Gateway,
    staff: Staff = Depends(require_management),
) -> StaffRead:
    if await gateway.first(Staff, Staff.email == body.email) is not None:
        raise Conflict("A staff member with this email already exists")

    member = gateway.add(Staff(**body.model_dump()))
    await gateway.commit()
    await gateway.refresh(member)
    return StaffRead.model_validate(member)


@router.post("/{staff_id}/account", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_staff_account(
    staff_id: int,
    body: StaffAccountCreate,
    gateway: Gateway,
    staff: Staff = Depends(require_management),
) -> UserRead:
    """Give a staff member of this tenant a login under their staff email."""
    member = await gateway.get_or_404(Staff, staff_id)
    if member.status != StaffStatus.ACTIVE:
        raise Conflict("Only active staff members can be given an account")

    session = gateway.session
    taken = await session.execute(
        select(User.id).where(or_(User.staff_id == member.id, User.email == member.email))
    )
    if taken.first() is not None:
        raise Conflict("Staff member or email already has an account")

    user = User(email=member.email, password_hash=hash_password(body.password), staff_id=member.id)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return await user_read(session, user)


@router.patch("/{staff_id}/status", response_model=StaffRead)
async def update_staff_status(
    staff_id: int,
    body: StaffStatusUpdate,
    gateway: Gateway,
    staff: Staff = Depends(require_management),
) -> StaffRead:
    member = await gateway.get_or_404(Staff, staff_id)
    gateway.update(member, {"status": body.status})
    await gateway.commit()
    await gateway.refresh(member)
    return StaffRead.model_validate(member)
