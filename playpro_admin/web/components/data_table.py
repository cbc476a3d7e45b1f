"""
Streamlit renderer for the generic table core.

Search box, per-column filters, sort control, a pandas DataFrame with
single-row selection, and First/Prev/page window/Next/Last controls.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd
import streamlit as st

from playpro_admin.core import get_config_manager
from playpro_admin.core.pagination import ELLIPSIS
from playpro_admin.core.table import (
    ALL,
    Column,
    FilterSpec,
    TableState,
    TableView,
    build_filter_options,
    compute_view,
    normalize_selection,
)
from playpro_admin.web.framework.state import table_state

NO_RESULTS = "No results."
_SORT_ARROWS = {"asc": "↑", "desc": "↓", None: "↕"}


def to_frame(rows: Sequence[Mapping[str, Any]], columns: Sequence[Column]) -> pd.DataFrame:
    return pd.DataFrame(
        [{c.label: c.display(r) for c in columns} for r in rows],
        columns=[c.label for c in columns],
    )


def _controls(key: str, rows: List[Mapping[str, Any]], state: TableState, filters: Sequence[FilterSpec]) -> List[FilterSpec]:
    resolved: List[FilterSpec] = []
    cols = st.columns([2] + [1] * len(filters)) if filters else [st.container()]

    def _on_search():
        state.set_search(st.session_state[f"{key}_search"])

    with cols[0]:
        st.text_input("Search", key=f"{key}_search", on_change=_on_search,
                      placeholder="Search...", label_visibility="collapsed")

    for i, spec in enumerate(filters):
        options = spec.options or build_filter_options(rows, spec.key, accessor=spec.accessor)
        spec = FilterSpec(spec.key, spec.label, tuple(options), spec.accessor)
        resolved.append(spec)
        current = normalize_selection(state.filters.get(spec.key, ALL), spec.options)
        values = [v for v, _ in spec.options]
        labels = dict(spec.options)
        widget_key = f"{key}_filter_{spec.key}"

        def _on_filter(k=spec.key, wk=widget_key):
            state.set_filter(k, st.session_state[wk])

        with cols[i + 1]:
            st.selectbox(spec.label, values, index=values.index(current), key=widget_key,
                         format_func=lambda v, labels=labels: labels.get(v, v), on_change=_on_filter)
    return resolved


def _sort_bar(key: str, state: TableState, columns: Sequence[Column]) -> None:
    sortable = [c for c in columns if c.sortable]
    if not sortable:
        return
    with st.expander("Sort", expanded=False):
        bcols = st.columns(min(len(sortable), 6))
        for i, c in enumerate(sortable):
            arrow = _SORT_ARROWS[state.sort_dir if state.sort_key == c.key else None]
            with bcols[i % len(bcols)]:
                st.button(f"{c.label} {arrow}", key=f"{key}_sort_{c.key}",
                          on_click=state.toggle_sort, args=(c.key,), use_container_width=True)


def _pager(key: str, state: TableState, view: TableView) -> None:
    left, right = st.columns([1, 3])
    with left:
        st.caption(f"{view.page_label} · {view.filtered_count} rows")
    with right:
        slots = st.columns(len(view.window) + 4)
        slots[0].button("First", key=f"{key}_first", on_click=state.first, disabled=not view.can_prev)
        slots[1].button("Prev", key=f"{key}_prev", on_click=state.prev, disabled=not view.can_prev)
        for i, marker in enumerate(view.window):
            slot = slots[i + 2]
            if marker == ELLIPSIS:
                slot.markdown("…")
                continue
            slot.button(str(marker), key=f"{key}_page_{marker}", on_click=state.goto,
                        args=(marker, view.page_count),
                        type="primary" if marker == view.page_index + 1 else "secondary")
        slots[-2].button("Next", key=f"{key}_next", on_click=state.next, args=(view.page_count,),
                         disabled=not view.can_next)
        slots[-1].button("Last", key=f"{key}_last", on_click=state.last, args=(view.page_count,),
                         disabled=not view.can_next)


def render_data_table(
    key: str,
    rows: Sequence[Mapping[str, Any]],
    columns: Sequence[Column],
    filters: Sequence[FilterSpec] = (),
    *,
    selectable: bool = True,
    column_config: Optional[Dict[str, Any]] = None,
) -> Optional[Mapping[str, Any]]:
    """
    Render one table and return the selected row (or None).

    Args:
        key: unique widget/state prefix
        rows: backend records
        columns: displayed columns
        filters: equality filters; options are derived from ``rows`` when empty
        selectable: allow single-row selection
        column_config: passed through to ``st.dataframe``
    """
    cfg = get_config_manager()
    state = table_state(key, int(cfg.get_config_value("page_size", 10, "table")))
    rows = list(rows)

    resolved = _controls(key, rows, state, filters)
    _sort_bar(key, state, columns)
    view = compute_view(rows, state, columns, resolved, int(cfg.get_config_value("pagination_delta", 2, "table")))

    if not view.rows:
        st.info(NO_RESULTS)
        _pager(key, state, view)
        return None

    event = st.dataframe(
        to_frame(view.rows, columns),
        use_container_width=True,
        hide_index=True,
        column_config=column_config,
        on_select="rerun" if selectable else "ignore",
        selection_mode="single-row",
        key=f"{key}_grid_{view.page_index}",
    )
    _pager(key, state, view)

    if not selectable:
        return None
    selected = list(event.selection.rows)
    if not selected or selected[0] >= len(view.rows):
        return None
    return view.rows[selected[0]]
