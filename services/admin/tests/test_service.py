import uuid
from datetime import date

import pytest

from app.admin.service import get_overview, month_bounds

from conftest import add_vehicle


@pytest.mark.parametrize(
    "today, first, last",
    [
        (date(2024, 2, 14), date(2024, 2, 1), date(2024, 2, 29)),
        (date(2023, 2, 1), date(2023, 2, 1), date(2023, 2, 28)),
        (date(2024, 12, 31), date(2024, 12, 1), date(2024, 12, 31)),
    ],
)
def test_month_bounds(today, first, last) -> None:
    assert month_bounds(today) == (first, last)


async def test_expiring_counts_every_date_column(db, session_factory) -> None:
    today = date(2024, 6, 10)
    await add_vehicle(
        db,
        uuid.uuid4(),
        "MP04AA0001",
        insurance_expiry=date(2024, 6, 1),
        pucc_valid_upto=date(2024, 6, 30),
        fitness_valid_upto=date(2024, 7, 1),
        road_tax_valid_upto=date(2024, 6, 15),
    )
    await add_vehicle(db, uuid.uuid4(), "MP04AA0002", insurance_expiry=date(2024, 5, 31))

    counts = await get_overview(session_factory, today=today)
    assert counts["expiring_this_month"] == 3
    assert counts["total_vehicles"] == 2
