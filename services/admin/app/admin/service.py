"""
Admin domain — read side: aggregates and paginated collections (zero FastAPI imports).

Every collection is ordered newest first by ``created_at``.  There is no
tiebreaker column, so rows sharing a timestamp may shift across a page
boundary while inserts are happening; callers accept that.
"""
from __future__ import annotations

import asyncio
import calendar
import operator
import uuid
from datetime import date, datetime, timezone
from functools import reduce
from typing import Any, TypeVar

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shared.models.pagination import PageRequest

from app.models.history import VehicleHistoryEvent
from app.models.marketplace import OwnershipClaim, VehicleListing, VehicleTransfer
from app.models.suspension import UserSuspension
from app.models.vehicle import Document, Vehicle

M = TypeVar("M")

_EXPIRY_COLUMNS = (
    Vehicle.insurance_expiry,
    Vehicle.pucc_valid_upto,
    Vehicle.fitness_valid_upto,
    Vehicle.road_tax_valid_upto,
)


# ── Overview ──────────────────────────────────────────────────────────────────

def month_bounds(today: date) -> tuple[date, date]:
    """First and last day of ``today``'s calendar month."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def _expiring_count_query(today: date) -> sa.Select:
    """Number of expiry dates (any of the four per vehicle) inside the current month."""
    start, end = month_bounds(today)
    hits = [sa.case((column.between(start, end), 1), else_=0) for column in _EXPIRY_COLUMNS]
    return sa.select(sa.func.coalesce(sa.func.sum(reduce(operator.add, hits)), 0))


async def _count(factory: async_sessionmaker[AsyncSession], query: sa.Select) -> int:
    # One session per query: an AsyncSession cannot run statements concurrently
    async with factory() as session:
        result = await session.execute(query)
        return int(result.scalar_one() or 0)


async def get_overview(
    factory: async_sessionmaker[AsyncSession],
    *,
    today: date | None = None,
) -> dict[str, int]:
    """Six independent counts, issued concurrently."""
    today = today or datetime.now(timezone.utc).date()
    count_all = sa.func.count()
    queries = {
        "total_users": sa.select(sa.func.count(sa.distinct(Vehicle.user_id))),
        "total_vehicles": sa.select(count_all).select_from(Vehicle),
        "verified_vehicles": sa.select(count_all).select_from(Vehicle).where(Vehicle.is_verified.is_(True)),
        "total_documents": sa.select(count_all).select_from(Document),
        "suspended_users": sa.select(count_all).select_from(UserSuspension),
        "expiring_this_month": _expiring_count_query(today),
    }
    counts = await asyncio.gather(*(_count(factory, q) for q in queries.values()))
    return dict(zip(queries, counts))


# ── Users (derived from vehicle ownership) ────────────────────────────────────

async def list_users(
    session: AsyncSession,
    params: PageRequest,
) -> tuple[list[Any], int]:
    """Return (owner rows, total distinct owners).

    Each row has ``user_id``, ``vehicle_count`` and ``join_date`` (the owner's
    first vehicle), ordered by join date, newest first.
    """
    total_r = await session.execute(sa.select(sa.func.count(sa.distinct(Vehicle.user_id))))
    total = total_r.scalar_one()

    join_date = sa.func.min(Vehicle.created_at).label("join_date")
    rows_r = await session.execute(
        sa.select(
            Vehicle.user_id,
            sa.func.count(Vehicle.id).label("vehicle_count"),
            join_date,
        )
        .group_by(Vehicle.user_id)
        .order_by(join_date.desc())
        .offset(params.offset())
        .limit(params.limit())
    )
    return list(rows_r), total


async def get_document_counts(
    session: AsyncSession,
    user_ids: list[uuid.UUID],
) -> dict[uuid.UUID, int]:
    if not user_ids:
        return {}
    result = await session.execute(
        sa.select(Document.user_id, sa.func.count(Document.id))
        .where(Document.user_id.in_(user_ids))
        .group_by(Document.user_id)
    )
    return {user_id: count for user_id, count in result}


async def get_suspensions(
    session: AsyncSession,
    user_ids: list[uuid.UUID],
) -> dict[uuid.UUID, UserSuspension]:
    if not user_ids:
        return {}
    result = await session.execute(
        sa.select(UserSuspension).where(UserSuspension.user_id.in_(user_ids))
    )
    return {s.user_id: s for s in result.scalars()}


# ── Plain collections ─────────────────────────────────────────────────────────

async def _paginate(
    session: AsyncSession,
    model: type[M],
    params: PageRequest,
) -> tuple[list[M], int]:
    total_r = await session.execute(sa.select(sa.func.count()).select_from(model))
    total = total_r.scalar_one()
    rows_r = await session.execute(
        sa.select(model)
        .order_by(model.created_at.desc())
        .offset(params.offset())
        .limit(params.limit())
    )
    return list(rows_r.scalars()), total


async def list_vehicles(session: AsyncSession, params: PageRequest) -> tuple[list[Vehicle], int]:
    return await _paginate(session, Vehicle, params)


async def list_activity(
    session: AsyncSession, params: PageRequest
) -> tuple[list[VehicleHistoryEvent], int]:
    return await _paginate(session, VehicleHistoryEvent, params)


async def list_transfers(
    session: AsyncSession, params: PageRequest
) -> tuple[list[VehicleTransfer], int]:
    return await _paginate(session, VehicleTransfer, params)


async def list_claims(
    session: AsyncSession, params: PageRequest
) -> tuple[list[OwnershipClaim], int]:
    return await _paginate(session, OwnershipClaim, params)


async def list_listings(
    session: AsyncSession, params: PageRequest
) -> tuple[list[VehicleListing], int]:
    return await _paginate(session, VehicleListing, params)


async def find_vehicle_by_registration(
    session: AsyncSession,
    registration_number: str,
) -> Vehicle | None:
    """Exact match on an already-normalised (trimmed, upper-cased) registration number."""
    result = await session.execute(
        sa.select(Vehicle).where(Vehicle.registration_number == registration_number)
    )
    return result.scalar_one_or_none()
