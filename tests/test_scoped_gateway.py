"""Scoped data gateway: tenant predicate on reads, tenant pinning on writes."""

import pytest
from sqlmodel import select

from app.core.errors import EntityNotFound, TenantContextMissing
from app.core.tenant_context import tenant_scope
from app.models.appointment import Appointment
from app.models.base import utcnow
from app.models.customer import Customer
from app.models.repair_order import RepairOrder
from app.models.service_item import ServiceItem
from app.models.service_record import ServiceRecord
from app.models.tenant import Tenant
from app.models.vehicle import Vehicle
from app.services.scoped_gateway import ScopedGateway


@pytest.fixture
async def two_shops(session, make_tenant):
    """Tenants A and B, each with one customer owning one vehicle."""
    shops = {}
    for slug in ("alpha", "bravo"):
        tenant = await make_tenant(slug)
        customer = Customer(tenant_id=tenant.id, first_name=slug.title(), last_name="Owner")
        session.add(customer)
        await session.flush()
        session.add(
            Vehicle(tenant_id=tenant.id, customer_id=customer.id, make="Ford", model=slug, year=2020)
        )
        shops[slug] = (tenant, customer)
    await session.commit()
    return shops


@pytest.mark.asyncio
async def test_reads_only_see_ambient_tenant(session, two_shops):
    alpha, alpha_customer = two_shops["alpha"]
    gateway = ScopedGateway(session)

    with tenant_scope(alpha.id, alpha.slug):
        customers = await gateway.list(Customer)
        assert [c.id for c in customers] == [alpha_customer.id]
        assert await gateway.count(Vehicle) == 1


@pytest.mark.asyncio
async def test_other_tenant_row_is_not_found(session, two_shops):
    alpha, _ = two_shops["alpha"]
    _, bravo_customer = two_shops["bravo"]
    gateway = ScopedGateway(session)

    with tenant_scope(alpha.id, alpha.slug):
        assert await gateway.get(Customer, bravo_customer.id) is None
        with pytest.raises(EntityNotFound):
            await gateway.get_or_404(Customer, bravo_customer.id)


@pytest.mark.asyncio
async def test_empty_context_fails_closed(session, two_shops):
    gateway = ScopedGateway(session)
    assert await gateway.list(Customer) == []
    assert await gateway.count(Vehicle) == 0


@pytest.mark.asyncio
async def test_insert_is_pinned_to_ambient_tenant(session, two_shops):
    alpha, _ = two_shops["alpha"]
    bravo, _ = two_shops["bravo"]
    gateway = ScopedGateway(session)

    with tenant_scope(alpha.id, alpha.slug):
        customer = gateway.add(Customer(tenant_id=bravo.id, first_name="Sneaky"))
        await gateway.commit()

    stored = (await session.execute(select(Customer).where(Customer.first_name == "Sneaky"))).scalar_one()
    assert stored.id == customer.id
    assert stored.tenant_id == alpha.id


@pytest.mark.asyncio
async def test_insert_without_context_is_refused(session, two_shops):
    with pytest.raises(TenantContextMissing):
        ScopedGateway(session).add(Customer(first_name="Orphan"))


@pytest.mark.asyncio
async def test_update_cannot_move_row_to_other_tenant(session, two_shops):
    alpha, alpha_customer = two_shops["alpha"]
    bravo, _ = two_shops["bravo"]
    gateway = ScopedGateway(session)

    with tenant_scope(alpha.id, alpha.slug):
        customer = await gateway.get_or_404(Customer, alpha_customer.id)
        gateway.update(customer, {"tenant_id": bravo.id, "phone": "555-0100"})
        await gateway.commit()

    await session.refresh(alpha_customer)
    assert alpha_customer.tenant_id == alpha.id
    assert alpha_customer.phone == "555-0100"


@pytest.mark.asyncio
async def test_update_and_delete_of_foreign_row_refused(session, two_shops):
    alpha, _ = two_shops["alpha"]
    _, bravo_customer = two_shops["bravo"]
    gateway = ScopedGateway(session)

    with tenant_scope(alpha.id, alpha.slug):
        with pytest.raises(EntityNotFound):
            gateway.update(bravo_customer, {"first_name": "Hijacked"})
        with pytest.raises(EntityNotFound):
            await gateway.delete(bravo_customer)


@pytest.mark.asyncio
async def test_related_collection_is_scoped(session, two_shops):
    alpha, alpha_customer = two_shops["alpha"]
    bravo, bravo_customer = two_shops["bravo"]

    # A vehicle of tenant B pointing at A's customer must stay invisible to A.
    session.add(
        Vehicle(tenant_id=bravo.id, customer_id=alpha_customer.id, make="VW", model="Golf", year=2018)
    )
    await session.commit()

    gateway = ScopedGateway(session)
    with tenant_scope(alpha.id, alpha.slug):
        vehicles = await gateway.related(Customer, alpha_customer.id, Vehicle, Vehicle.customer_id)
        assert [v.model for v in vehicles] == ["alpha"]
        with pytest.raises(EntityNotFound):
            await gateway.related(Customer, bravo_customer.id, Vehicle, Vehicle.customer_id)


def test_unscoped_model_rejected():
    with pytest.raises(TypeError):
        ScopedGateway(session=None).select(Tenant)


@pytest.mark.asyncio
async def test_workshop_entities_are_scoped(session, two_shops):
    """Order numbers repeat across shops; each shop sees only its own work."""
    gateway = ScopedGateway(session)
    for slug, (tenant, customer) in two_shops.items():
        with tenant_scope(tenant.id, tenant.slug):
            vehicle = (await gateway.related(Customer, customer.id, Vehicle, Vehicle.customer_id))[0]
            order = gateway.add(RepairOrder(
                order_number="RO-1001", customer_id=customer.id, vehicle_id=vehicle.id
            ))
            await gateway.flush()
            gateway.add(ServiceRecord(
                vehicle_id=vehicle.id,
                repair_order_id=order.id,
                service_date=utcnow(),
                service_type="Oil change",
            ))
            gateway.add(Appointment(
                customer_id=customer.id,
                vehicle_id=vehicle.id,
                service_type="Inspection",
                scheduled_at=utcnow(),
            ))
            gateway.add(ServiceItem(name=f"{slug} oil change", price=49.0))
    await gateway.commit()

    alpha, _ = two_shops["alpha"]
    with tenant_scope(alpha.id, alpha.slug):
        orders = await gateway.list(RepairOrder)
        assert [(o.order_number, o.tenant_id) for o in orders] == [("RO-1001", alpha.id)]
        assert await gateway.count(ServiceRecord) == 1
        assert await gateway.count(Appointment) == 1
        items = await gateway.list(ServiceItem)
        assert [i.name for i in items] == ["alpha oil change"]
