"""
Filter, sort and paginate views over any entity collection.

All functions are pure: they never modify their input and work on pydantic
models and plain mappings alike.
"""

import math
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Generic, Iterable, Literal, Mapping, Sequence, TypeVar

from pydantic import BaseModel, Field

from tms.common.logging_utils import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

Direction = Literal["ascending", "descending"]

_MISSING = object()


def field_value(record: Any, key: str) -> Any:
    """Read ``key`` from a model (attribute or alias) or a mapping; missing gives the sentinel."""
    if isinstance(record, Mapping):
        return record.get(key, _MISSING)
    if isinstance(record, BaseModel):
        if key in type(record).model_fields:
            return getattr(record, key)
        for name, info in type(record).model_fields.items():
            if info.alias == key:
                return getattr(record, name)
        return _MISSING
    return getattr(record, key, _MISSING)


def _record_values(record: Any) -> Iterable[Any]:
    if isinstance(record, BaseModel):
        return record.model_dump().values()
    if isinstance(record, Mapping):
        return record.values()
    return vars(record).values()


def _leaves(value: Any) -> Iterable[Any]:
    """Flatten nested models, mappings and sequences into leaf values."""
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if isinstance(value, Mapping):
        for inner in value.values():
            yield from _leaves(inner)
    elif isinstance(value, (list, tuple, set)):
        for inner in value:
            yield from _leaves(inner)
    else:
        yield value


def render(value: Any) -> str:
    """String rendering used for text search and status comparison."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def filter_by_text(records: Sequence[R], term: str | None) -> list[R]:
    """
    Keep records where ``term`` appears in any field value.

    Matching is a case-insensitive substring test against the string
    rendering of every leaf value. An empty term keeps everything.
    """
    if not term or not term.strip():
        return list(records)
    needle = term.strip().casefold()
    return [
        record
        for record in records
        if any(needle in render(leaf).casefold() for value in _record_values(record) for leaf in _leaves(value))
    ]


def filter_by_status(records: Sequence[R], status: Any | None) -> list[R]:
    """
    Keep records whose ``status`` equals ``status``.

    Comparison is case-insensitive on the rendered value. An empty filter
    keeps everything, as do records of kinds without a status field.
    """
    wanted = render(status).strip().casefold()
    if not wanted:
        return list(records)

    kept = []
    for record in records:
        value = field_value(record, "status")
        if value is _MISSING or render(value).casefold() == wanted:
            kept.append(record)
    return kept


class SortConfig(BaseModel):
    """Sort key and direction for a list view."""

    key: str = Field(..., min_length=1, description="Field to sort on")
    direction: Direction = Field(default="ascending", description="Sort direction")

    class Config:
        frozen = True

    @classmethod
    def toggle(cls, current: "SortConfig | None", key: str) -> "SortConfig":
        """
        Next sort config after the user picks ``key``.

        The same key flips ascending to descending and back; a new key
        always starts ascending.
        """
        if current is not None and current.key == key and current.direction == "ascending":
            return cls(key=key, direction="descending")
        return cls(key=key, direction="ascending")


def sort_key(value: Any) -> tuple:
    """
    Total-order key across the value types found in records.

    Missing/None sort first, then booleans and numbers, then dates and
    times, then everything else by its string rendering.
    """
    if value is _MISSING or value is None:
        return (0, 0)
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (bool, int, float)):
        return (1, float(value))
    if isinstance(value, datetime):
        return (2, value.isoformat())
    if isinstance(value, date):
        return (2, datetime.combine(value, time()).isoformat())
    return (3, str(value))


def sort_records(records: Sequence[R], sort: SortConfig | None) -> list[R]:
    """
    Stable sort on ``sort.key``; records with equal keys keep their input order.

    ``None`` leaves the order unchanged.
    """
    if sort is None:
        return list(records)
    return sorted(
        records,
        key=lambda record: sort_key(field_value(record, sort.key)),
        reverse=sort.direction == "descending",
    )


class Page(BaseModel, Generic[R]):
    """One page of a list view."""

    items: list[R]
    page: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


def total_pages(length: int, page_size: int) -> int:
    """Number of pages for ``length`` records; never less than 1."""
    return max(1, math.ceil(length / page_size))


def paginate(records: Sequence[R], page: int, page_size: int) -> Page[R]:
    """
    Slice out a 1-based page.

    Pages past the end are empty rather than an error.

    Raises:
        ValueError: if ``page`` or ``page_size`` is below 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")

    start = (page - 1) * page_size
    return Page[Any](
        items=list(records[start : start + page_size]),
        page=page,
        page_size=page_size,
        total_items=len(records),
        total_pages=total_pages(len(records), page_size),
    )


class ViewQuery(BaseModel):
    """Everything a list view asks for."""

    search: str | None = Field(default=None, description="Free-text search term")
    status: str | None = Field(default=None, description="Status equality filter")
    sort: SortConfig | None = Field(default=None, description="Sort key and direction")
    page: int = Field(default=1, ge=1, description="1-based page number")
    page_size: int | None = Field(default=None, ge=1, description="Override of the default page size")


class QueryEngine:
    """Apply filter, then sort, then paginate."""

    def __init__(self, page_size: int = 10):
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        self.page_size = page_size

    def run(self, records: Sequence[R], query: ViewQuery | None = None) -> Page[R]:
        """
        Derive a page view over ``records``.

        Args:
            records: Collection of one entity kind
            query: Filters, sort and page; defaults to the first unsorted page

        Returns:
            The requested page
        """
        query = query or ViewQuery()
        filtered = filter_by_status(records, query.status)
        filtered = filter_by_text(filtered, query.search)
        ordered = sort_records(filtered, query.sort)
        page = paginate(ordered, query.page, query.page_size or self.page_size)
        logger.debug(
            "Query evaluated",
            total=len(records),
            matched=len(filtered),
            page=page.page,
            total_pages=page.total_pages,
        )
        return page
