"""
Unit tests for the generic table core: search, filters, sort, paging.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.core.table import (
    ALL,
    ALL_LABEL,
    Column,
    FilterSpec,
    TableState,
    apply_filters,
    apply_search,
    build_filter_options,
    compute_view,
    normalize_selection,
    sort_rows,
    to_js_string,
)


@pytest.fixture
def rows():
    return [
        {"id": 1, "name": "Andi", "gender": "M", "branch_id": 1, "age": 7},
        {"id": 2, "name": "Budi", "gender": "M", "branch_id": 2, "age": None},
        {"id": 3, "name": "citra", "gender": "F", "branch_id": 1, "age": 5},
        {"id": 4, "name": "Dewi", "gender": "F", "branch_id": 2, "age": 9},
        {"id": 5, "name": "Eka", "gender": None, "branch_id": 1, "age": 6},
    ]


class TestSearch:
    """Search over the serialized row"""

    def test_empty_query_keeps_everything(self, rows):
        assert apply_search(rows, "") == rows

    def test_case_insensitive_substring(self, rows):
        names = [r["name"] for r in apply_search(rows, "CITRA")]
        assert names == ["citra"]

    def test_matches_any_field(self, rows):
        # "\"gender\":\"F\"" appears in the compact JSON of the two girls
        result = apply_search(rows, '"gender":"f"')
        assert [r["id"] for r in result] == [3, 4]

    def test_longer_query_never_matches_more(self, rows):
        assert len(apply_search(rows, "d")) >= len(apply_search(rows, "di"))
        assert len(apply_search(rows, "di")) >= len(apply_search(rows, "dew"))


class TestFilters:
    """Equality filters with the "all" sentinel"""

    def test_all_is_ignored(self, rows):
        assert apply_filters(rows, {"gender": ALL}) == rows

    def test_equality_on_string_form(self, rows):
        result = apply_filters(rows, {"branch_id": "2"})
        assert [r["id"] for r in result] == [2, 4]

    def test_null_value_matches_null_string(self, rows):
        result = apply_filters(rows, {"gender": "null"})
        assert [r["id"] for r in result] == [5]

    def test_adding_filters_is_monotonic(self, rows):
        one = apply_filters(rows, {"gender": "M"})
        two = apply_filters(rows, {"gender": "M", "branch_id": "1"})
        assert len(two) <= len(one) <= len(rows)
        assert [r["id"] for r in two] == [1]

    def test_spec_accessor_is_used(self, rows):
        spec = FilterSpec("even", "Even", accessor=lambda r: r["id"] % 2 == 0)
        result = apply_filters(rows, {"even": "true"}, [spec])
        assert [r["id"] for r in result] == [2, 4]

    def test_to_js_string(self):
        assert to_js_string(None) == "null"
        assert to_js_string(True) == "true"
        assert to_js_string(3.0) == "3"
        assert to_js_string(2.5) == "2.5"
        assert to_js_string([1, None, "a"]) == "1,,a"
        assert to_js_string({"a": 1}) == "[object Object]"


class TestFilterOptions:
    """Distinct values for the filter dropdowns"""

    def test_all_first_then_first_seen_order(self, rows):
        options = build_filter_options(rows, "gender")
        assert options[0] == (ALL, ALL_LABEL)
        assert [v for v, _ in options[1:]] == ["M", "F"]

    def test_label_function(self, rows):
        options = build_filter_options(rows, "branch_id", label=lambda v: f"Branch {v}")
        assert ("1", "Branch 1") in options

    def test_normalize_selection(self):
        options = ((ALL, ALL_LABEL), ("M", "M"))
        assert normalize_selection("M", options) == "M"
        assert normalize_selection("X", options) == ALL
        assert normalize_selection(None, options) == ALL


class TestSort:
    """Stable single-column sort"""

    def test_ascending_with_missing_last(self, rows):
        result = sort_rows(rows, "age", "asc")
        assert [r["id"] for r in result] == [3, 5, 1, 4, 2]

    def test_descending_keeps_missing_last(self, rows):
        result = sort_rows(rows, "age", "desc")
        assert [r["id"] for r in result] == [4, 1, 5, 3, 2]

    def test_strings_sort_case_insensitively(self, rows):
        result = sort_rows(rows, "name", "asc")
        assert [r["name"] for r in result] == ["Andi", "Budi", "citra", "Dewi", "Eka"]

    def test_no_direction_keeps_input_order(self, rows):
        assert sort_rows(rows, "age", None) == rows

    def test_stable_for_equal_keys(self, rows):
        result = sort_rows(rows, "branch_id", "asc")
        assert [r["id"] for r in result] == [1, 3, 5, 2, 4]

    def test_toggle_cycle(self):
        state = TableState()
        state.toggle_sort("name")
        assert (state.sort_key, state.sort_dir) == ("name", "asc")
        state.toggle_sort("name")
        assert (state.sort_key, state.sort_dir) == ("name", "desc")
        state.toggle_sort("name")
        assert (state.sort_key, state.sort_dir) == (None, None)

    def test_toggle_other_column_restarts_ascending(self):
        state = TableState(sort_key="name", sort_dir="desc")
        state.toggle_sort("age")
        assert (state.sort_key, state.sort_dir) == ("age", "asc")


class TestTableState:
    """Interaction state transitions"""

    def test_search_resets_page(self):
        state = TableState(page=3)
        state.set_search("abc")
        assert state.page == 0

    def test_same_search_keeps_page(self):
        state = TableState(search="abc", page=3)
        state.set_search("abc")
        assert state.page == 3

    def test_filter_resets_page(self):
        state = TableState(page=2)
        state.set_filter("gender", "M")
        assert state.page == 0
        assert state.filters == {"gender": "M"}

    def test_empty_filter_means_all(self):
        state = TableState()
        state.set_filter("gender", None)
        assert state.filters["gender"] == ALL

    def test_paging_bounds(self):
        state = TableState()
        state.prev()
        assert state.page == 0
        state.next(3)
        state.next(3)
        state.next(3)
        assert state.page == 2
        state.first()
        assert state.page == 0
        state.last(3)
        assert state.page == 2
        state.goto(10, 3)
        assert state.page == 2
        state.goto(1, 3)
        assert state.page == 0


class TestComputeView:
    """Full pipeline"""

    def make_rows(self, n):
        return [{"id": i, "name": f"kid {i:02d}"} for i in range(1, n + 1)]

    def test_pages_and_window(self):
        state = TableState(page_size=10)
        view = compute_view(self.make_rows(95), state)
        assert view.page_count == 10
        assert len(view.rows) == 10
        assert view.window == [1, 2, 3, "...", 10]
        assert view.page_label == "Page 1 of 10"
        assert not view.can_prev and view.can_next

    def test_last_page_partial(self):
        state = TableState(page_size=10, page=9)
        view = compute_view(self.make_rows(95), state)
        assert [r["id"] for r in view.rows] == [91, 92, 93, 94, 95]
        assert view.can_prev and not view.can_next

    def test_page_is_clamped_after_rows_disappear(self):
        state = TableState(page_size=10, page=5)
        view = compute_view(self.make_rows(12), state)
        assert view.page_index == 1
        assert state.page == 1

    def test_empty_table_has_one_page(self):
        view = compute_view([], TableState())
        assert view.rows == []
        assert view.page_count == 1
        assert view.page_label == "Page 1 of 1"

    def test_sort_uses_column_accessor(self):
        rows = [{"id": 1, "kid": {"name": "b"}}, {"id": 2, "kid": {"name": "a"}}]
        columns = [Column("kid_name", "Kid", accessor=lambda r: r["kid"]["name"])]
        state = TableState(sort_key="kid_name", sort_dir="asc")
        view = compute_view(rows, state, columns)
        assert [r["id"] for r in view.rows] == [2, 1]

    def test_counts(self):
        state = TableState(search="kid 1")
        view = compute_view(self.make_rows(25), state)
        # kid 10..19
        assert view.filtered_count == 10
        assert view.total_count == 25

    def test_stale_filter_value_falls_back_to_all(self):
        rows = [{"id": 1, "role": "admin"}, {"id": 2, "role": "parent"}]
        state = TableState()
        state.set_filter("role", "coach")
        spec = FilterSpec("role", "Role", build_filter_options(rows, "role"))
        view = compute_view(rows, state, filters=[spec])
        assert view.filtered_count == 2
        assert state.filters["role"] == ALL

    def test_known_filter_value_is_kept(self):
        rows = [{"id": 1, "role": "admin"}, {"id": 2, "role": "parent"}]
        state = TableState()
        state.set_filter("role", "parent")
        spec = FilterSpec("role", "Role", build_filter_options(rows, "role"))
        view = compute_view(rows, state, filters=[spec])
        assert [r["id"] for r in view.rows] == [2]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
