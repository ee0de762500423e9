"""List view queries: filter, sort, paginate."""

from tms.query.engine import (
    Page,
    QueryEngine,
    SortConfig,
    ViewQuery,
    filter_by_status,
    filter_by_text,
    paginate,
    sort_records,
)

__all__ = [
    "Page",
    "QueryEngine",
    "SortConfig",
    "ViewQuery",
    "filter_by_status",
    "filter_by_text",
    "paginate",
    "sort_records",
]
