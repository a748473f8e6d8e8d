"""Vehicles of the current tenant."""

from fastapi import APIRouter, status

from app.api.deps import ActiveStaff, Gateway
from app.core.errors import EntityNotFound
from app.models.customer import Customer
from app.models.vehicle import Vehicle, VehicleCreate, VehicleRead

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.get("", response_model=list[VehicleRead])
async def list_vehicles(staff: ActiveStaff, gateway: Gateway) -> list[VehicleRead]:
    rows = await gateway.list(Vehicle, order_by=Vehicle.id)
    return [VehicleRead.model_validate(v) for v in rows]


@router.post("", response_model=VehicleRead, status_code=status.HTTP_201_CREATED)
async def create_vehicle(body: VehicleCreate, staff: ActiveStaff, gateway: Gateway) -> VehicleRead:
    # The owning customer must be visible in this tenant too.
    if await gateway.get(Customer, body.customer_id) is None:
        raise EntityNotFound("Customer")

    vehicle = gateway.add(Vehicle(**body.model_dump()))
    await gateway.commit()
    await gateway.refresh(vehicle)
    return VehicleRead.model_validate(vehicle)


@router.get("/{vehicle_id}", response_model=VehicleRead)
async def get_vehicle(vehicle_id: int, staff: ActiveStaff, gateway: Gateway) -> VehicleRead:
    return VehicleRead.model_validate(await gateway.get_or_404(Vehicle, vehicle_id))
