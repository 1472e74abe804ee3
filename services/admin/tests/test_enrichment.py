import asyncio
import uuid

import pytest

from app.admin.enrichment import (
    DELETED_VEHICLE,
    UNKNOWN_EMAIL,
    EmailResolver,
    load_vehicle_refs,
    registration_for,
    run_in_batches,
)

from conftest import ENDPOINT, FakeIdentity, add_vehicle, auth_headers


async def test_run_in_batches_keeps_order_and_bounds_concurrency() -> None:
    in_flight = 0
    peak = 0

    async def double(n: int) -> int:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1
        return n * 2

    result = await run_in_batches(list(range(25)), double, batch_size=10)
    assert result == [n * 2 for n in range(25)]
    assert peak == 10


async def test_run_in_batches_rejects_zero_batch() -> None:
    with pytest.raises(ValueError):
        await run_in_batches([1], asyncio.sleep, batch_size=0)


async def test_email_resolver_dedupes_and_falls_back() -> None:
    known, unknown = uuid.uuid4(), uuid.uuid4()
    provider = FakeIdentity({known: "k@vindoc.test"})
    resolver = EmailResolver(provider, batch_size=2)

    await resolver.resolve([known, unknown, known])
    await resolver.resolve([known])

    assert provider.calls == [known, unknown]
    assert resolver.email_for(known) == "k@vindoc.test"
    assert resolver.email_for(unknown) == UNKNOWN_EMAIL
    assert resolver.email_for(unknown, fallback="stored@vindoc.test") == "stored@vindoc.test"


async def test_vehicle_refs_single_query_and_deleted_sentinel(db) -> None:
    vehicle = await add_vehicle(db, uuid.uuid4(), "BR01AA0001", maker_model="ALTO")
    missing = uuid.uuid4()

    refs = await load_vehicle_refs(db, [vehicle.id, missing, vehicle.id])
    assert set(refs) == {vehicle.id}
    assert refs[vehicle.id].maker_model == "ALTO"
    assert registration_for(refs, vehicle.id) == "BR01AA0001"
    assert registration_for(refs, missing) == DELETED_VEHICLE


async def test_vehicle_refs_empty_page_skips_query() -> None:
    assert await load_vehicle_refs(None, []) == {}


async def test_page_lookups_never_exceed_batch_size(client, super_admin, db, identity) -> None:
    identity.delay = 0.005
    for i in range(23):
        await add_vehicle(db, uuid.uuid4(), f"OD02AA{i:04d}", minutes=i)

    response = await client.post(ENDPOINT, json={"type": "vehicles"}, headers=auth_headers())
    assert response.status_code == 200
    assert len(identity.calls) == 23
    assert identity.peak == 10
    assert all(v["userEmail"] == UNKNOWN_EMAIL for v in response.json()["vehicles"])
