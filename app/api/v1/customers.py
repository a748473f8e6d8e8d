"""Customers of the current tenant, and their vehicles."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_

from app.api.deps import ActiveStaff, Gateway, RoleGuard
from app.models.customer import Customer, CustomerCreate, CustomerRead, CustomerUpdate
from app.models.staff import Staff
from app.models.vehicle import Vehicle, VehicleRead
from app.services.role_guard import MANAGEMENT

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("", response_model=list[CustomerRead])
async def list_customers(
    staff: ActiveStaff,
    gateway: Gateway,
    q: str | None = Query(default=None, max_length=100),
    limit: int = Query(default=100, ge=1, le=500),
) -> list[CustomerRead]:
    criteria = []
    if q:
        pattern = f"%{q}%"
        criteria.append(
            or_(
                Customer.last_name.ilike(pattern),  # type: ignore[attr-defined]
                Customer.first_name.ilike(pattern),  # type: ignore[attr-defined]
                Customer.email.ilike(pattern),  # type: ignore[attr-defined]
            )
        )
    rows = await gateway.list(Customer, *criteria, order_by=Customer.last_name, limit=limit)
    return [CustomerRead.model_validate(c) for c in rows]


@router.post("", response_model=CustomerRead, status_code=status.HTTP_201_CREATED)
async def create_customer(body: CustomerCreate, staff: ActiveStaff, gateway: Gateway) -> CustomerRead:
    # Any tenant_id in the payload is overridden by the ambient tenant.
    customer = gateway.add(Customer(**body.model_dump()))
    await gateway.commit()
    await gateway.refresh(customer)
    return CustomerRead.model_validate(customer)


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: int, staff: ActiveStaff, gateway: Gateway) -> CustomerRead:
    return CustomerRead.model_validate(await gateway.get_or_404(Customer, customer_id))


@router.patch("/{customer_id}", response_model=CustomerRead)
async def update_customer(
    customer_id: int, body: CustomerUpdate, staff: ActiveStaff, gateway: Gateway
) -> CustomerRead:
    customer = await gateway.get_or_404(Customer, customer_id)
    gateway.update(customer, body.model_dump(exclude_unset=True))
    await gateway.commit()
    await gateway.refresh(customer)
    return CustomerRead.model_validate(customer)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: int,
    gateway: Gateway,
    staff: Staff = Depends(RoleGuard(MANAGEMENT)),
) -> None:
    customer = await gateway.get_or_404(Customer, customer_id)
    for vehicle in await gateway.related(Customer, customer_id, Vehicle, Vehicle.customer_id):
        await gateway.delete(vehicle)
    await gateway.delete(customer)
    await gateway.commit()


@router.get("/{customer_id}/vehicles", response_model=list[VehicleRead])
async def list_customer_vehicles(
    customer_id: int, staff: ActiveStaff, gateway: Gateway
) -> list[VehicleRead]:
    rows = await gateway.related(
        Customer, customer_id, Vehicle, Vehicle.customer_id, order_by=Vehicle.id
    )
    return [VehicleRead.model_validate(v) for v in rows]
