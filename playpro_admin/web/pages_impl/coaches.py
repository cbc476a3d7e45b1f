from __future__ import annotations

from typing import Any, Dict, Mapping

import streamlit as st

from playpro_admin.api.resources import COACHES
from playpro_admin.core.forms import build_coach_form
from playpro_admin.core.lookups import parse_date, storage_url
from playpro_admin.core.table import Column
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.web.components.crud import confirm_delete, row_actions, run_mutation
from playpro_admin.web.components.data_table import render_data_table
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.framework.session import storage_base_url
from playpro_admin.web.utils import load_list, service


def _edit_dialog(coach: Mapping[str, Any]) -> None:
    svc = service(COACHES)

    @st.dialog("Edit Coach")
    def _dialog():
        st.markdown(f"**{coach.get('name', '-')}**")
        with st.form(f"coach_{coach.get('id')}_form"):
            birth = st.date_input("Birth Date", value=parse_date(coach.get("birth_date")))
            description = st.text_area("Description", value=str(coach.get("description") or ""))
            photo = st.file_uploader("Photo", type=["png", "jpg", "jpeg", "webp"])
            submitted = st.form_submit_button("Save", type="primary", use_container_width=True)
        if not submitted:
            return
        try:
            fields = build_coach_form({"birth_date": birth, "description": description})
        except PlayproError as e:
            notify_error(e, "Invalid input")
            return
        files: Dict[str, Any] = {}
        if photo is not None:
            files["photo"] = (photo.name, photo.getvalue(), photo.type or "application/octet-stream")
        if run_mutation(lambda: svc.save_multipart(coach.get("id"), fields, files),
                        "Coach updated successfully!", "Failed to update coach", {"id": coach.get("id")}):
            st.rerun()

    _dialog()


def render() -> None:
    st.title("🧑‍🏫 Coaches")
    st.caption("Coaches are created from user accounts with the coach role; here you can complete their profile.")

    base = storage_base_url()
    rows = load_list(COACHES, "Failed to fetch coach data")
    columns = [
        Column("photo", "Photo", accessor=lambda r: storage_url(r.get("photo"), base), sortable=False),
        Column("name", "Name"),
        Column("birth_date", "Birth Date"),
        Column("description", "Description"),
    ]
    selected = render_data_table(
        "coaches", rows, columns,
        column_config={"Photo": st.column_config.ImageColumn("Photo", width="small")},
    )
    clicked = row_actions("coaches", selected)
    if selected is None:
        return
    if clicked == "edit":
        _edit_dialog(selected)
    elif clicked == "delete":
        coach_id = selected.get("id")
        confirm_delete(
            str(selected.get("name") or f"#{coach_id}"),
            lambda: run_mutation(lambda: service(COACHES).delete(coach_id), "Coach deleted successfully!",
                                 "Failed to delete coach", {"id": coach_id}),
        )
