"""
Unit tests for filtering, sorting and pagination.
"""

from datetime import date

import pytest

from tms.models.entities.shipment import ShipmentStatus
from tms.query.engine import (
    QueryEngine,
    SortConfig,
    ViewQuery,
    filter_by_status,
    filter_by_text,
    paginate,
    sort_records,
)


def names(records) -> list[str]:
    return [r["name"] for r in records]


class TestFilterByText:
    """Tests for free-text search."""

    def test_case_insensitive_substring(self):
        """Test matching ignores case and looks inside values."""
        records = [{"name": "Global Exports"}, {"name": "Local Imports"}]

        assert names(filter_by_text(records, "EXPORT")) == ["Global Exports"]

    def test_any_field(self):
        """Test every field is searched, including numbers."""
        records = [{"name": "A", "phone": "555-0101"}, {"name": "B", "years": 12}]

        assert names(filter_by_text(records, "0101")) == ["A"]
        assert names(filter_by_text(records, "12")) == ["B"]

    def test_nested_values(self):
        """Test nested lists and mappings are searched."""
        records = [
            {"name": "A", "items": [{"name": "Electronics"}]},
            {"name": "B", "items": [{"name": "Apparel"}]},
        ]

        assert names(filter_by_text(records, "electro")) == ["A"]

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_empty_term_keeps_all(self, term):
        """Test an empty term does not filter."""
        records = [{"name": "A"}, {"name": "B"}]

        assert filter_by_text(records, term) == records

    def test_models(self, seeded_engine):
        """Test search works on entity models."""
        found = filter_by_text(seeded_engine.customers.list(), "alice")

        assert [c.id for c in found] == ["cust1"]

    def test_does_not_mutate_input(self):
        """Test the input sequence is left as is."""
        records = [{"name": "A"}, {"name": "B"}]

        filter_by_text(records, "A")

        assert records == [{"name": "A"}, {"name": "B"}]


class TestFilterByStatus:
    """Tests for status equality filtering."""

    def test_exact_status(self):
        """Test only equal statuses are kept, ignoring case."""
        records = [
            {"name": "A", "status": "Pending"},
            {"name": "B", "status": "In Transit"},
        ]

        assert names(filter_by_status(records, "pending")) == ["A"]

    def test_enum_values(self, seeded_engine):
        """Test enum-typed statuses compare by value."""
        found = filter_by_status(seeded_engine.shipments.list(), ShipmentStatus.IN_TRANSIT)

        assert [s.id for s in found] == ["ship1"]

    def test_no_status_field_kept(self):
        """Test records without a status field are not filtered out."""
        records = [{"name": "Acme"}]

        assert filter_by_status(records, "Active") == records

    @pytest.mark.parametrize("status", [None, ""])
    def test_empty_filter_keeps_all(self, status):
        """Test an empty status does not filter."""
        records = [{"name": "A", "status": "Pending"}, {"name": "B", "status": "Delivered"}]

        assert filter_by_status(records, status) == records


class TestSortConfig:
    """Tests for the sort toggle."""

    def test_toggle_sequence(self):
        """Test ascending, then descending, then ascending again."""
        first = SortConfig.toggle(None, "name")
        second = SortConfig.toggle(first, "name")
        third = SortConfig.toggle(second, "name")

        assert [c.direction for c in (first, second, third)] == ["ascending", "descending", "ascending"]

    def test_new_key_starts_ascending(self):
        """Test switching keys resets the direction."""
        current = SortConfig(key="name", direction="descending")

        assert SortConfig.toggle(current, "phone") == SortConfig(key="phone", direction="ascending")

    def test_toggled_views(self):
        """Test [B, A, C] sorts to [A, B, C] and toggles to [C, B, A]."""
        records = [{"name": "B"}, {"name": "A"}, {"name": "C"}]
        sort = SortConfig.toggle(None, "name")

        assert names(sort_records(records, sort)) == ["A", "B", "C"]
        sort = SortConfig.toggle(sort, "name")
        assert names(sort_records(records, sort)) == ["C", "B", "A"]
        sort = SortConfig.toggle(sort, "name")
        assert names(sort_records(records, sort)) == ["A", "B", "C"]

    def test_frozen(self):
        """Test sort configs are immutable."""
        with pytest.raises(Exception):
            SortConfig(key="name").key = "other"


class TestSortRecords:
    """Tests for stable, total-order sorting."""

    def test_none_keeps_order(self):
        """Test no sort config leaves input order."""
        records = [{"name": "B"}, {"name": "A"}]

        assert sort_records(records, None) == records

    def test_stable(self):
        """Test equal keys keep their input order."""
        records = [
            {"name": "first", "priority": "High"},
            {"name": "second", "priority": "Low"},
            {"name": "third", "priority": "High"},
        ]

        result = sort_records(records, SortConfig(key="priority"))

        assert names(result) == ["first", "third", "second"]

    def test_numbers_sort_numerically(self):
        """Test numbers are not compared as strings."""
        records = [{"name": "a", "years": 10}, {"name": "b", "years": 9}]

        assert names(sort_records(records, SortConfig(key="years"))) == ["b", "a"]

    def test_strings_compare_case_sensitively(self):
        """Test strings compare by code point, so capitals come first."""
        records = [{"name": "apple"}, {"name": "Banana"}, {"name": "cherry"}]

        assert names(sort_records(records, SortConfig(key="name"))) == ["Banana", "apple", "cherry"]

    def test_missing_values_first(self):
        """Test None and missing fields sort before values."""
        records = [{"name": "x", "email": "z@x"}, {"name": "y", "email": None}, {"name": "z"}]

        assert names(sort_records(records, SortConfig(key="email"))) == ["y", "z", "x"]

    def test_dates(self):
        """Test dates sort chronologically."""
        records = [
            {"name": "late", "due": date(2025, 7, 1)},
            {"name": "early", "due": date(2025, 6, 1)},
        ]

        assert names(sort_records(records, SortConfig(key="due"))) == ["early", "late"]

    def test_mixed_types_do_not_raise(self):
        """Test values of different types still have a total order."""
        records = [{"name": "s", "v": "text"}, {"name": "n", "v": 3}, {"name": "d", "v": date(2025, 1, 1)}]

        assert names(sort_records(records, SortConfig(key="v"))) == ["n", "d", "s"]

    def test_models_by_alias(self, seeded_engine):
        """Test models sort by attribute or camelCase key."""
        vehicles = seeded_engine.vehicles.list()

        by_name = sort_records(vehicles, SortConfig(key="registrationNumber"))

        assert [v.registration_number for v in by_name] == ["RIG007", "TRK101", "VAN202"]


class TestPaginate:
    """Tests for pagination."""

    @pytest.fixture
    def records(self) -> list[dict]:
        return [{"name": f"r{i:02d}"} for i in range(23)]

    def test_page_counts(self, records):
        """Test 23 records at 10 per page make 3 pages."""
        page = paginate(records, 1, 10)

        assert page.total_pages == 3
        assert page.total_items == 23
        assert len(page.items) == 10
        assert page.has_next and not page.has_previous

    def test_last_page(self, records):
        """Test the last page holds the remainder."""
        page = paginate(records, 3, 10)

        assert names(page.items) == ["r20", "r21", "r22"]
        assert not page.has_next

    def test_page_past_end_is_empty(self, records):
        """Test out-of-range pages are empty, not an error."""
        assert paginate(records, 4, 10).items == []

    def test_empty_collection_has_one_page(self):
        """Test total pages never drops below one."""
        page = paginate([], 1, 10)

        assert page.total_pages == 1
        assert page.items == []

    @pytest.mark.parametrize("page,size", [(0, 10), (1, 0), (-1, 5)])
    def test_invalid_arguments(self, page, size):
        """Test page and page size must be positive."""
        with pytest.raises(ValueError):
            paginate([], page, size)


class TestQueryEngine:
    """Tests for the combined view query."""

    def test_filter_conjunction(self):
        """Test status and text filters both apply."""
        records = [
            {"name": "Alpha", "status": "Pending"},
            {"name": "Beta", "status": "Pending"},
            {"name": "Alpha Two", "status": "Delivered"},
        ]

        page = QueryEngine(page_size=10).run(records, ViewQuery(status="Pending", search="alpha"))

        assert names(page.items) == ["Alpha"]

    def test_filter_then_sort_then_page(self):
        """Test pagination counts only filtered records, in sorted order."""
        records = [{"name": f"n{i}", "status": "Pending" if i % 2 else "Delivered"} for i in range(10)]

        page = QueryEngine(page_size=2).run(
            records,
            ViewQuery(status="Pending", sort=SortConfig(key="name", direction="descending"), page=2),
        )

        assert page.total_items == 5
        assert page.total_pages == 3
        assert names(page.items) == ["n5", "n3"]

    def test_default_query(self):
        """Test no query returns the first page in input order."""
        records = [{"name": "b"}, {"name": "a"}]

        assert names(QueryEngine().run(records).items) == ["b", "a"]

    def test_page_size_override(self):
        """Test the query may override the configured page size."""
        records = [{"name": str(i)} for i in range(5)]

        assert len(QueryEngine(page_size=2).run(records, ViewQuery(page_size=4)).items) == 4

    def test_invalid_default_page_size(self):
        """Test the engine rejects a non-positive page size."""
        with pytest.raises(ValueError):
            QueryEngine(page_size=0)
