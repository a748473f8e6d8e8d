"""V1 API router aggregation."""

from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.api.v1.customers import router as customers_router
from app.api.v1.public import router as public_router
from app.api.v1.staff import router as staff_router
from app.api.v1.tenants import router as tenants_router
from app.api.v1.vehicles import router as vehicles_router

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(tenants_router)
v1_router.include_router(auth_router)
v1_router.include_router(public_router)
v1_router.include_router(staff_router)
v1_router.include_router(customers_router)
v1_router.include_router(vehicles_router)
