"""
Shared list + dialog CRUD building blocks.

Flow for every resource page: list (cached) -> table -> select a row ->
Edit/Delete buttons, or "Add" -> modal form -> POST/PUT -> refetch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import streamlit as st

from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.infra.logging import get_logger
from playpro_admin.web.components.data_table import render_data_table
from playpro_admin.web.components.form_fields import FieldSpec, render_fields
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.framework.state import flash
from playpro_admin.web.utils import invalidate_lists, load_list, service

logger = get_logger(__name__)

Lookups = Dict[str, List[Dict[str, Any]]]


def run_mutation(action: Callable[[], Any], success: str, fallback: str, context: Optional[Dict[str, Any]] = None) -> bool:
    """Run one backend write; toast the outcome and drop cached lists on success."""
    try:
        with st.spinner("Saving..."):
            action()
    except PlayproError as e:
        notify_error(e, fallback, context)
        return False
    invalidate_lists()
    flash(success, "success")
    logger.info(success)
    return True


def confirm_delete(label: str, on_confirm: Callable[[], bool]) -> None:
    """Shared confirmation dialog in front of every DELETE."""
    @st.dialog("Are you sure?")
    def _dialog():
        st.write(f"This will permanently delete **{label}**. This action cannot be undone.")
        c1, c2 = st.columns(2)
        if c1.button("Cancel", use_container_width=True):
            st.rerun()
        if c2.button("Delete", type="primary", use_container_width=True):
            if on_confirm():
                st.rerun()

    _dialog()


def form_dialog(title: str, key: str, fields: Sequence[FieldSpec], record: Optional[Mapping[str, Any]],
                on_submit: Callable[[Dict[str, Any]], bool]) -> None:
    """Modal form; closes (full rerun) only when ``on_submit`` succeeds."""
    @st.dialog(title)
    def _dialog():
        with st.form(f"{key}_form"):
            values = render_fields(fields, record, key)
            submitted = st.form_submit_button("Save", type="primary", use_container_width=True)
        if submitted and on_submit(values):
            st.rerun()

    _dialog()


def row_actions(key: str, selected: Optional[Mapping[str, Any]], *, can_edit: bool = True,
                can_delete: bool = True) -> Optional[str]:
    """Edit / Delete buttons for the selected row; returns the clicked action."""
    if selected is None:
        st.caption("Select a row to edit or delete it.")
        return None
    c1, c2, _ = st.columns([1, 1, 6])
    edit = can_edit and c1.button("Edit", icon="✏️", key=f"{key}_edit", use_container_width=True)
    delete = can_delete and c2.button("Delete", icon="🗑️", key=f"{key}_delete", use_container_width=True)
    if edit:
        return "edit"
    if delete:
        return "delete"
    return None


@dataclass
class ResourcePage:
    key: str
    title: str
    entity: str
    endpoint: str
    columns: Callable[[Lookups], Sequence[Column]]
    fields: Callable[[Lookups, bool], Sequence[FieldSpec]]
    build_payload: Callable[[Dict[str, Any], bool, Lookups], Dict[str, Any]]
    lookups: Dict[str, str] = field(default_factory=dict)  # name -> endpoint
    filters: Callable[[Lookups], Sequence[FilterSpec]] = lambda lookups: ()
    caption: str = ""
    creatable: bool = True
    label_key: str = "name"

    def load_lookups(self) -> Lookups:
        return {name: load_list(ep, f"Failed to fetch {name} data") for name, ep in self.lookups.items()}


def render_resource_page(page: ResourcePage) -> None:
    """Standard list page with create/edit dialogs and delete confirmation."""
    head, action = st.columns([5, 1])
    with head:
        st.title(page.title)
        if page.caption:
            st.caption(page.caption)

    lookups = page.load_lookups()
    rows = load_list(page.endpoint, f"Failed to fetch {page.entity.lower()} data")
    svc = service(page.endpoint)

    def _save(record_id: Any):
        editing = record_id is not None

        def _submit(values: Dict[str, Any]) -> bool:
            try:
                payload = page.build_payload(values, editing, lookups)
            except PlayproError as e:
                notify_error(e, "Invalid input")
                return False
            verb = "updated" if editing else "created"
            return run_mutation(
                (lambda: svc.update(record_id, payload)) if editing else (lambda: svc.create(payload)),
                f"{page.entity} {verb} successfully!",
                f"Failed to save {page.entity.lower()}",
                {"endpoint": page.endpoint, "id": record_id},
            )
        return _submit

    with action:
        st.write("")
        if page.creatable and st.button(f"Add {page.entity}", icon="➕", type="primary", use_container_width=True):
            form_dialog(f"Add {page.entity}", f"{page.key}_new", page.fields(lookups, False), None, _save(None))

    selected = render_data_table(page.key, rows, page.columns(lookups), page.filters(lookups))
    clicked = row_actions(page.key, selected)
    if selected is None or clicked is None:
        return

    record_id = selected.get("id")
    if clicked == "edit":
        form_dialog(f"Edit {page.entity}", f"{page.key}_{record_id}", page.fields(lookups, True), selected,
                    _save(record_id))
    elif clicked == "delete":
        confirm_delete(
            str(selected.get(page.label_key) or f"#{record_id}"),
            lambda: run_mutation(lambda: svc.delete(record_id), f"{page.entity} deleted successfully!",
                                 f"Failed to delete {page.entity.lower()}", {"id": record_id}),
        )
