"""Import all models so SQLModel.metadata picks them up."""

from app.models.appointment import Appointment, AppointmentStatus
from app.models.base import TenantScopedMixin
from app.models.customer import Customer, CustomerCreate, CustomerRead, CustomerUpdate
from app.models.refresh_token import RefreshToken, RevocationReason
from app.models.repair_order import RepairOrder, RepairOrderStatus
from app.models.service_item import ServiceItem
from app.models.service_record import ServiceRecord
from app.models.staff import (
    Staff,
    StaffAccountCreate,
    StaffCreate,
    StaffRead,
    StaffRole,
    StaffStatus,
    StaffStatusUpdate,
)
from app.models.tenant import (
    PLAN_LIMITS,
    Tenant,
    TenantPlan,
    TenantPublicRead,
    TenantRead,
    TenantStatus,
    TenantStatusUpdate,
)
from app.models.user import StaffInfo, User, UserRead
from app.models.vehicle import Vehicle, VehicleCreate, VehicleRead

__all__ = [
    "PLAN_LIMITS",
    "Appointment",
    "AppointmentStatus",
    "Customer",
    "CustomerCreate",
    "CustomerRead",
    "CustomerUpdate",
    "RefreshToken",
    "RepairOrder",
    "RepairOrderStatus",
    "RevocationReason",
    "ServiceItem",
    "ServiceRecord",
    "Staff",
    "StaffAccountCreate",
    "StaffCreate",
    "StaffInfo",
    "StaffRead",
    "StaffRole",
    "StaffStatus",
    "StaffStatusUpdate",
    "Tenant",
    "TenantPlan",
    "TenantPublicRead",
    "TenantRead",
    "TenantScopedMixin",
    "TenantStatus",
    "TenantStatusUpdate",
    "User",
    "UserRead",
    "Vehicle",
    "VehicleCreate",
    "VehicleRead",
]
