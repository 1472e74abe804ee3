import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
# Largest page whose offset still fits a signed 64-bit OFFSET bind
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE + 1


def _as_positive_int(value: Any, default: int) -> int:
    """Lenient int coercion: anything unusable (missing, text, 0, bool) → default."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value or default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return number or default


class PageRequest(BaseModel):
    """Offset pagination params read from a request body.

    Out-of-range values are clamped rather than rejected:
    1 <= page <= MAX_PAGE and 1 <= page_size <= MAX_PAGE_SIZE.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    page: int = 1
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, alias="pageSize")

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, value: Any) -> int:
        return min(MAX_PAGE, max(1, _as_positive_int(value, 1)))

    @field_validator("page_size", mode="before")
    @classmethod
    def _clamp_page_size(cls, value: Any) -> int:
        return min(MAX_PAGE_SIZE, max(1, _as_positive_int(value, DEFAULT_PAGE_SIZE)))

    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def limit(self) -> int:
        return self.page_size


class Pagination(BaseModel):
    """Page metadata returned next to every paginated collection."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    page_size: int = Field(alias="pageSize")
    total_count: int = Field(alias="totalCount")
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def build(cls, params: PageRequest, total_count: int) -> "Pagination":
        return cls(
            page=params.page,
            page_size=params.page_size,
            total_count=total_count,
            total_pages=math.ceil(total_count / params.page_size),
        )
