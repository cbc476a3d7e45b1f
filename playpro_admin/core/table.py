"""
Generic list/table core.

Pure functions over a list of row dicts plus a small mutable ``TableState``
holding the UI interaction state (search text, filter selections, sort,
current page). The Streamlit renderer in ``web.components.data_table`` only
reads and mutates this state; everything here is testable without a UI.

Pipeline applied by ``compute_view``: search -> filters -> sort -> page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..infra.serialization import Serializer
from .pagination import PageMarker, page_count, pagination_range

ALL = "all"
ALL_LABEL = "Semua"
DEFAULT_PAGE_SIZE = 10

Row = Mapping[str, Any]
Accessor = Callable[[Row], Any]


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    accessor: Optional[Accessor] = None
    formatter: Optional[Callable[[Any], Any]] = None
    sortable: bool = True

    def value(self, row: Row) -> Any:
        if self.accessor is not None:
            return self.accessor(row)
        return row.get(self.key)

    def display(self, row: Row) -> Any:
        v = self.value(row)
        return self.formatter(v) if self.formatter is not None else v


@dataclass(frozen=True)
class FilterSpec:
    key: str
    label: str
    options: Tuple[Tuple[str, str], ...] = ()
    accessor: Optional[Accessor] = None

    def value(self, row: Row) -> Any:
        if self.accessor is not None:
            return self.accessor(row)
        return row.get(self.key)


@dataclass
class TableState:
    search: str = ""
    filters: Dict[str, str] = field(default_factory=dict)
    sort_key: Optional[str] = None
    sort_dir: Optional[str] = None  # "asc" | "desc" | None
    page: int = 0  # 0-based
    page_size: int = DEFAULT_PAGE_SIZE

    def set_search(self, text: str) -> None:
        text = text or ""
        if text != self.search:
            self.search = text
            self.page = 0

    def set_filter(self, key: str, value: Optional[str]) -> None:
        value = ALL if value in (None, "") else str(value)
        if self.filters.get(key, ALL) != value:
            self.filters[key] = value
            self.page = 0

    def toggle_sort(self, key: str) -> None:
        """Cycle one column through asc -> desc -> unsorted."""
        if self.sort_key != key or self.sort_dir is None:
            self.sort_key, self.sort_dir = key, "asc"
        elif self.sort_dir == "asc":
            self.sort_dir = "desc"
        else:
            self.sort_key, self.sort_dir = None, None

    # paging; ``pages`` is the current page count from ``compute_view``
    def first(self) -> None:
        self.page = 0

    def prev(self) -> None:
        self.page = max(0, self.page - 1)

    def next(self, pages: int) -> None:
        self.page = min(max(0, pages - 1), self.page + 1)

    def last(self, pages: int) -> None:
        self.page = max(0, pages - 1)

    def goto(self, page_number: int, pages: int) -> None:
        """Jump to a 1-based page number."""
        self.page = min(max(0, int(page_number) - 1), max(0, pages - 1))


@dataclass(frozen=True)
class TableView:
    rows: List[Row]
    filtered_count: int
    total_count: int
    page_index: int
    page_count: int
    window: List[PageMarker]

    @property
    def page_label(self) -> str:
        return f"Page {self.page_index + 1} of {self.page_count}"

    @property
    def can_prev(self) -> bool:
        return self.page_index > 0

    @property
    def can_next(self) -> bool:
        return self.page_index < self.page_count - 1


def to_js_string(value: Any) -> str:
    """String form used by equality filters, matching how the browser stringifies JSON values."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else to_js_string(v) for v in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def apply_search(rows: Iterable[Row], query: str) -> List[Row]:
    """Keep rows whose serialized JSON contains ``query`` (case-insensitive)."""
    rows = list(rows)
    needle = (query or "").lower()
    if not needle:
        return rows
    return [r for r in rows if needle in Serializer.compact(r).lower()]


def apply_filters(
    rows: Iterable[Row],
    selections: Mapping[str, str],
    specs: Sequence[FilterSpec] = (),
) -> List[Row]:
    """Apply every non-"all" selection as an equality filter."""
    by_key = {s.key: s for s in specs}
    out = list(rows)
    for key, selected in selections.items():
        if selected in (None, "", ALL):
            continue
        spec = by_key.get(key)
        getter: Accessor = spec.value if spec is not None else (lambda r, k=key: r.get(k))
        out = [r for r in out if to_js_string(getter(r)) == str(selected)]
    return out


def _sort_key(value: Any) -> Tuple[int, Any]:
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, (value.casefold(), value))
    return (2, Serializer.compact(value))


def sort_rows(
    rows: Iterable[Row],
    key: Optional[str],
    direction: Optional[str],
    accessor: Optional[Accessor] = None,
) -> List[Row]:
    """Stable single-column sort; missing/None values always go last."""
    rows = list(rows)
    if not key or direction not in ("asc", "desc"):
        return rows
    getter: Accessor = accessor or (lambda r: r.get(key))
    present = [r for r in rows if getter(r) is not None]
    missing = [r for r in rows if getter(r) is None]
    present.sort(key=lambda r: _sort_key(getter(r)), reverse=(direction == "desc"))
    return present + missing


def build_filter_options(
    rows: Iterable[Row],
    key: str,
    label: Optional[Callable[[Any], str]] = None,
    accessor: Optional[Accessor] = None,
) -> Tuple[Tuple[str, str], ...]:
    """Distinct non-null values of a column as ``(value, label)`` pairs, "all" first."""
    seen: Dict[str, str] = {}
    for r in rows:
        v = accessor(r) if accessor is not None else r.get(key)
        if v is None:
            continue
        s = to_js_string(v)
        if s not in seen:
            seen[s] = label(v) if label is not None else s
    return ((ALL, ALL_LABEL), *seen.items())


def normalize_selection(value: Optional[str], options: Sequence[Tuple[str, str]]) -> str:
    """Return ``value`` when it is one of ``options``, otherwise "all"."""
    if value is None:
        return ALL
    return value if any(v == value for v, _ in options) else ALL


def compute_view(
    rows: Iterable[Row],
    state: TableState,
    columns: Sequence[Column] = (),
    filters: Sequence[FilterSpec] = (),
    delta: int = 2,
) -> TableView:
    """Run search, filters, sort and paging for the current ``state``.

    ``state.page`` is clamped into range, so a page that disappeared after a
    refetch falls back to the last existing one.

    A filter selection missing from its options is reset to "all".
    """
    all_rows = list(rows)
    for spec in filters:
        if spec.options and spec.key in state.filters:
            state.filters[spec.key] = normalize_selection(state.filters[spec.key], spec.options)
    matched = apply_search(all_rows, state.search)
    matched = apply_filters(matched, state.filters, filters)

    accessor = None
    for c in columns:
        if c.key == state.sort_key:
            accessor = c.value
            break
    matched = sort_rows(matched, state.sort_key, state.sort_dir, accessor)

    pages = page_count(len(matched), state.page_size)
    state.page = min(max(0, state.page), pages - 1)
    start = state.page * state.page_size
    return TableView(
        rows=matched[start:start + state.page_size],
        filtered_count=len(matched),
        total_count=len(all_rows),
        page_index=state.page,
        page_count=pages,
        window=pagination_range(state.page + 1, pages, delta),
    )
