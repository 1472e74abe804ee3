"""
Admin domain — batch enrichment of foreign references.

Admin listings reference users and vehicles by id; the console needs an email
and a registration number.  Resolution happens per page:

  * user emails     → identity provider, in sequential batches of
                      ``batch_size`` concurrent lookups (bounded peak load)
  * vehicle fields  → one ``WHERE id IN (...)`` query per page

Everything is best-effort.  An unresolvable user becomes ``UNKNOWN_EMAIL``;
a vehicle that no longer exists becomes ``DELETED_VEHICLE``.  Cancellation
(request deadline) propagates through ``asyncio.gather`` untouched.
"""
from __future__ import annotations

import asyncio
import uuid
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from app.identity.client import IdentityProvider
from app.models.vehicle import Vehicle

T = TypeVar("T")
R = TypeVar("R")

ENRICHMENT_BATCH_SIZE = 10
UNKNOWN_EMAIL = "Unknown"
DELETED_VEHICLE = "Deleted"


async def run_in_batches(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    batch_size: int = ENRICHMENT_BATCH_SIZE,
) -> list[R]:
    """Apply ``fn`` to every item; concurrent within a batch, batches one after another.

    Results keep the order of ``items``.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    results: list[R] = []
    for start in range(0, len(items), batch_size):
        batch = items[start:start + batch_size]
        results.extend(await asyncio.gather(*(fn(item) for item in batch)))
    return results


class EmailResolver:
    """Request-scoped user id → email lookup.

    Each distinct id hits the identity provider once per request; nothing is
    kept between requests.
    """

    def __init__(self, provider: IdentityProvider, batch_size: int = ENRICHMENT_BATCH_SIZE) -> None:
        self._provider = provider
        self._batch_size = batch_size
        self._emails: dict[uuid.UUID, str | None] = {}

    async def resolve(self, user_ids: Iterable[uuid.UUID]) -> None:
        pending = [uid for uid in dict.fromkeys(user_ids) if uid not in self._emails]
        if not pending:
            return
        emails = await run_in_batches(pending, self._provider.get_user_email, self._batch_size)
        self._emails.update(zip(pending, emails))

    def email_for(self, user_id: uuid.UUID, fallback: str = UNKNOWN_EMAIL) -> str:
        return self._emails.get(user_id) or fallback


@dataclass(frozen=True)
class VehicleRef:
    registration_number: str
    maker_model: str | None
    manufacturer: str | None


async def load_vehicle_refs(
    session: AsyncSession,
    vehicle_ids: Iterable[uuid.UUID],
) -> dict[uuid.UUID, VehicleRef]:
    """Display fields for the given vehicles, in a single query. Missing ids are absent."""
    ids = list(dict.fromkeys(vehicle_ids))
    if not ids:
        return {}
    result = await session.execute(
        sa.select(
            Vehicle.id,
            Vehicle.registration_number,
            Vehicle.maker_model,
            Vehicle.manufacturer,
        ).where(Vehicle.id.in_(ids))
    )
    return {
        row.id: VehicleRef(row.registration_number, row.maker_model, row.manufacturer)
        for row in result
    }


def registration_for(refs: dict[uuid.UUID, VehicleRef], vehicle_id: uuid.UUID) -> str:
    ref = refs.get(vehicle_id)
    return ref.registration_number if ref else DELETED_VEHICLE


def maker_model_for(refs: dict[uuid.UUID, VehicleRef], vehicle_id: uuid.UUID) -> str | None:
    ref = refs.get(vehicle_id)
    return ref.maker_model if ref else None
