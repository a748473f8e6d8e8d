"""Customers and vehicles over HTTP: isolation between shops."""

import pytest
from httpx import AsyncClient

from app.models.staff import StaffRole


@pytest.fixture
async def shops(make_tenant, make_member):
    alpha = await make_member(await make_tenant("alpha"))
    bravo = await make_member(await make_tenant("bravo"))
    return alpha, bravo


async def _customer(client: AsyncClient, headers: dict, **body) -> dict:
    resp = await client.post("/v1/customers", json={"first_name": "Casey", **body}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_payload_tenant_id_is_ignored(client: AsyncClient, shops):
    alpha, bravo = shops
    created = await _customer(client, alpha.headers, tenant_id=bravo.tenant.id)
    assert created["tenant_id"] == alpha.tenant.id

    resp = await client.get("/v1/customers", headers=bravo.headers)
    assert resp.json() == []


@pytest.mark.asyncio
async def test_other_shop_cannot_read_or_change(client: AsyncClient, shops):
    alpha, bravo = shops
    created = await _customer(client, alpha.headers)
    url = f"/v1/customers/{created['id']}"

    assert (await client.get(url, headers=bravo.headers)).status_code == 404
    resp = await client.patch(url, json={"first_name": "Mallory"}, headers=bravo.headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Customer not found"}

    resp = await client.get(url, headers=alpha.headers)
    assert resp.json()["first_name"] == "Casey"


@pytest.mark.asyncio
async def test_update_and_search(client: AsyncClient, shops):
    alpha, _ = shops
    created = await _customer(client, alpha.headers, last_name="Jones")

    resp = await client.patch(
        f"/v1/customers/{created['id']}", json={"phone": "555-0101"}, headers=alpha.headers
    )
    assert resp.json()["phone"] == "555-0101"

    resp = await client.get("/v1/customers", params={"q": "jon"}, headers=alpha.headers)
    assert [c["id"] for c in resp.json()] == [created["id"]]


@pytest.mark.asyncio
async def test_vehicles_follow_customer_tenant(client: AsyncClient, shops):
    alpha, bravo = shops
    customer = await _customer(client, alpha.headers)
    vehicle = {"customer_id": customer["id"], "make": "Toyota", "model": "Corolla", "year": 2019}

    # Bravo cannot attach a vehicle to Alpha's customer
    resp = await client.post("/v1/vehicles", json=vehicle, headers=bravo.headers)
    assert resp.status_code == 404

    resp = await client.post("/v1/vehicles", json=vehicle, headers=alpha.headers)
    assert resp.status_code == 201
    vehicle_id = resp.json()["id"]

    resp = await client.get(f"/v1/customers/{customer['id']}/vehicles", headers=alpha.headers)
    assert [v["id"] for v in resp.json()] == [vehicle_id]

    resp = await client.get(f"/v1/customers/{customer['id']}/vehicles", headers=bravo.headers)
    assert resp.status_code == 404
    assert (await client.get(f"/v1/vehicles/{vehicle_id}", headers=bravo.headers)).status_code == 404
    assert (await client.get("/v1/vehicles", headers=bravo.headers)).json() == []


@pytest.mark.asyncio
async def test_delete_requires_management(client: AsyncClient, shops, make_member):
    alpha, _ = shops
    tech = await make_member(alpha.tenant, role=StaffRole.TECHNICIAN)
    customer = await _customer(client, tech.headers)
    url = f"/v1/customers/{customer['id']}"

    assert (await client.delete(url, headers=tech.headers)).status_code == 403
    assert (await client.delete(url, headers=alpha.headers)).status_code == 204
    assert (await client.get(url, headers=alpha.headers)).status_code == 404
