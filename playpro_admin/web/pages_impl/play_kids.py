from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
import streamlit as st

from playpro_admin.api.resources import (
    ADMIN_BRANCHES,
    MEMBERSHIPS,
    PLAY_KID_IMPORT,
    PLAY_KID_TEMPLATE,
    PLAY_KIDS,
    SESSIONS,
    USERS,
)
from playpro_admin.core.forms import (
    GENDERS,
    MEMBERSHIP_STATUSES,
    build_membership_payload,
    build_play_kid_form,
    build_session_payload,
    months_between,
    parents_only,
)
from playpro_admin.core.lookups import gender_label, get_name_by_id, parse_date, storage_url
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.web.components.crud import confirm_delete, row_actions, run_mutation
from playpro_admin.web.components.data_table import render_data_table
from playpro_admin.web.components.import_panel import render_import_panel
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.config import PLAY_KID_TEMPLATE_NAME
from playpro_admin.web.framework.session import storage_base_url
from playpro_admin.web.utils import load_list, service


def _kid_dialog(kid: Optional[Mapping[str, Any]], parents: List[Dict[str, Any]]) -> None:
    editing = kid is not None
    kid = kid or {}
    svc = service(PLAY_KIDS)
    parent_ids = [p.get("id") for p in parents]
    parent_names = {p.get("id"): p.get("name") for p in parents}

    @st.dialog("Edit Play Kid" if editing else "Add Play Kid", width="large")
    def _dialog():
        with st.form(f"play_kid_{kid.get('id', 'new')}_form"):
            c1, c2 = st.columns(2)
            with c1:
                idx = next((i for i, pid in enumerate(parent_ids) if str(pid) == str(kid.get("parent_id"))), None)
                parent_id = st.selectbox("Parent", parent_ids, index=idx, placeholder="Pilih parent",
                                         format_func=lambda v: parent_names.get(v, str(v)))
                name = st.text_input("Name", value=str(kid.get("name") or ""))
                nick_name = st.text_input("Nick Name", value=str(kid.get("nick_name") or ""))
                birth = st.date_input("Birth Date", value=parse_date(kid.get("birth_date")), min_value=date(2000, 1, 1))
            with c2:
                g_idx = GENDERS.index(kid["gender"]) if kid.get("gender") in GENDERS else None
                gender = st.radio("Gender", GENDERS, index=g_idx, format_func=gender_label, horizontal=True)
                school = st.text_input("School Origin", value=str(kid.get("school_origin") or ""))
                medical = st.text_area("Medical History", value=str(kid.get("medical_history") or ""))
                photo = st.file_uploader("Photo", type=["png", "jpg", "jpeg", "webp"])
            submitted = st.form_submit_button("Save", type="primary", use_container_width=True)
        if not submitted:
            return
        form = {
            "parent_id": parent_id, "name": name, "nick_name": nick_name, "birth_date": birth,
            "gender": gender, "school_origin": school, "medical_history": medical, "photo": kid.get("photo"),
        }
        try:
            fields = build_play_kid_form(form, editing, has_new_photo=photo is not None)
        except PlayproError as e:
            notify_error(e, "Invalid input")
            return
        files = {"photo": (photo.name, photo.getvalue(), photo.type or "application/octet-stream")} if photo else None
        ok = run_mutation(
            lambda: svc.save_multipart(kid.get("id") if editing else None, fields, files),
            "Play Kid updated successfully!" if editing else "Play Kid created successfully!",
            "Failed to save play kid",
            {"id": kid.get("id")},
        )
        if ok:
            st.rerun()

    _dialog()


def _memberships_tab(kid: Mapping[str, Any], branches: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    kid_id = kid.get("id")
    try:
        memberships = service(PLAY_KIDS).nested(kid_id, "memberships").list()
    except PlayproError as e:
        notify_error(e, "Failed to fetch membership data")
        memberships = []

    if memberships:
        st.dataframe(pd.DataFrame([{
            "ID": m.get("id"),
            "Registered Date": str(m.get("registered_date") or "N/A")[:10],
            "Valid Until": str(m.get("valid_until") or "N/A")[:10],
            "Status": m.get("status"),
            "Branch": get_name_by_id(m.get("branch_id"), branches) or "N/A",
        } for m in memberships]), hide_index=True, use_container_width=True)
    else:
        st.info("Belum ada membership.")

    by_id = {str(m.get("id")): m for m in memberships}
    choice = st.selectbox("Membership", ["new"] + list(by_id), key=f"ms_pick_{kid_id}",
                          format_func=lambda v: "➕ New membership" if v == "new" else f"Edit #{v}")
    current = by_id.get(choice, {})
    editing = bool(current)
    branch_ids = [b.get("id") for b in branches]
    branch_names = {b.get("id"): b.get("name") for b in branches}

    with st.form(f"membership_form_{kid_id}_{choice}"):
        c1, c2 = st.columns(2)
        registered = c1.date_input("Registered Date", value=parse_date(current.get("registered_date")) or date.today())
        valid_months = c2.number_input(
            "Valid Until (months)", min_value=1, step=1,
            value=max(1, months_between(current.get("registered_date"), current.get("valid_until"))) if editing else 1,
        )
        b_idx = next((i for i, b in enumerate(branch_ids) if str(b) == str(current.get("branch_id"))), None)
        branch_id = c1.selectbox("Branch", branch_ids, index=b_idx, format_func=lambda v: branch_names.get(v, str(v)))
        status = c2.selectbox("Status", MEMBERSHIP_STATUSES,
                              index=MEMBERSHIP_STATUSES.index(current.get("status", "active"))
                              if current.get("status") in MEMBERSHIP_STATUSES else 0)
        cols = st.columns(2)
        save = cols[0].form_submit_button("Save membership", type="primary", use_container_width=True)
        delete = cols[1].form_submit_button("Delete membership", disabled=not editing, use_container_width=True)

    svc = service(MEMBERSHIPS)
    if save:
        try:
            payload = build_membership_payload(
                {"registered_date": registered, "valid_until": valid_months, "branch_id": branch_id, "status": status},
                kid_id, editing,
            )
        except PlayproError as e:
            notify_error(e, "Invalid input")
        else:
            verb = "update" if editing else "create"
            if run_mutation(
                (lambda: svc.update(current["id"], payload)) if editing else (lambda: svc.create(payload)),
                f"Membership {verb}d successfully!", f"Failed to {verb} membership",
            ):
                st.rerun()
    if delete and editing:
        if run_mutation(lambda: svc.delete(current["id"]), "Membership deleted successfully!",
                        "Failed to delete membership"):
            st.rerun()
    return memberships


def _sessions_tab(kid_id: Any, memberships: List[Dict[str, Any]], branches: List[Dict[str, Any]]) -> None:
    if not memberships:
        st.info("Buat membership terlebih dahulu.")
        return

    def _membership_label(mid: Any) -> str:
        m = next((x for x in memberships if str(x.get("id")) == str(mid)), None)
        if not m:
            return "N/A"
        return f"{get_name_by_id(m.get('branch_id'), branches)} - {m.get('status')}"

    sessions: List[Dict[str, Any]] = []
    for m in memberships:
        try:
            sessions.extend(service(MEMBERSHIPS).nested(m.get("id"), "sessions").list())
        except PlayproError as e:
            notify_error(e, "Failed to fetch session data", {"membership_id": m.get("id")})

    if sessions:
        st.dataframe(pd.DataFrame([{
            "ID": s.get("id"),
            "Membership": _membership_label(s.get("membership_id")),
            "Session Count": s.get("count"),
            "Expiry Date": str(s.get("expiry_date") or "N/A")[:10],
        } for s in sessions]), hide_index=True, use_container_width=True)
    else:
        st.info("Belum ada session.")

    by_id = {str(s.get("id")): s for s in sessions}
    choice = st.selectbox("Session", ["new"] + list(by_id), key=f"ss_pick_{kid_id}",
                          format_func=lambda v: "➕ New session" if v == "new" else f"Edit #{v}")
    current = by_id.get(choice, {})
    editing = bool(current)
    m_ids = [m.get("id") for m in memberships]

    with st.form(f"session_form_{kid_id}_{choice}"):
        c1, c2 = st.columns(2)
        m_idx = next((i for i, m in enumerate(m_ids) if str(m) == str(current.get("membership_id"))), 0)
        membership_id = c1.selectbox("Membership", m_ids, index=m_idx, format_func=_membership_label)
        purchase = c2.date_input("Purchase Date", value=parse_date(current.get("purchase_date")) or date.today())
        count = c1.number_input("Session Count", min_value=0, step=1, value=int(current.get("count") or 0))
        expiry = c2.number_input(
            "Expiry (months)", min_value=0, step=1,
            value=months_between(current.get("purchase_date") or date.today(), current.get("expiry_date")) if editing else 0,
        )
        cols = st.columns(2)
        save = cols[0].form_submit_button("Save session", type="primary", use_container_width=True)
        delete = cols[1].form_submit_button("Delete session", disabled=not editing, use_container_width=True)

    svc = service(SESSIONS)
    if save:
        try:
            payload = build_session_payload(
                {"membership_id": membership_id, "purchase_date": purchase, "count": count, "expiry_date": expiry},
                editing,
            )
        except PlayproError as e:
            notify_error(e, "Invalid input")
        else:
            verb = "update" if editing else "create"
            if run_mutation(
                (lambda: svc.update(current["id"], payload)) if editing else (lambda: svc.create(payload)),
                f"Session {verb}d successfully!", f"Failed to {verb} session",
            ):
                st.rerun()
    if delete and editing:
        if run_mutation(lambda: svc.delete(current["id"]), "Session deleted successfully!", "Failed to delete session"):
            st.rerun()


def render() -> None:
    head, action = st.columns([5, 1])
    head.title("🧒 Play Kids")

    users = load_list(USERS, "Failed to fetch parents data")
    parents = parents_only(users)
    branches = load_list(ADMIN_BRANCHES, "Failed to fetch branches data")
    rows = load_list(PLAY_KIDS, "Failed to fetch play kid data")

    with action:
        st.write("")
        if st.button("Add Play Kid", icon="➕", type="primary", use_container_width=True):
            _kid_dialog(None, parents)

    render_import_panel("play_kids_import", PLAY_KID_TEMPLATE, PLAY_KID_TEMPLATE_NAME, PLAY_KID_IMPORT)

    base = storage_base_url()
    columns = [
        Column("photo", "Photo", accessor=lambda r: storage_url(r.get("photo"), base), sortable=False),
        Column("name", "Name"),
        Column("nick_name", "Nick Name"),
        Column("parent_id", "Parent", accessor=lambda r: get_name_by_id(r.get("parent_id"), users)),
        Column("birth_date", "Birth Date"),
        Column("gender", "Gender", formatter=gender_label),
        Column("school_origin", "School Origin"),
    ]
    filters = [FilterSpec("gender", "Gender", options=(("all", "Semua"), ("M", "Male"), ("F", "Female")))]
    selected = render_data_table(
        "play_kids", rows, columns, filters,
        column_config={"Photo": st.column_config.ImageColumn("Photo", width="small")},
    )
    clicked = row_actions("play_kids", selected)
    if selected is None:
        return

    kid_id = selected.get("id")
    if clicked == "edit":
        _kid_dialog(selected, parents)
    elif clicked == "delete":
        confirm_delete(
            str(selected.get("name") or f"#{kid_id}"),
            lambda: run_mutation(lambda: service(PLAY_KIDS).delete(kid_id), "Play Kid deleted successfully!",
                                 "Failed to delete play kid", {"id": kid_id}),
        )

    st.divider()
    st.subheader(f"🎫 {selected.get('name')}: memberships & sessions")
    tab_m, tab_s = st.tabs(["Memberships", "Sessions"])
    with tab_m:
        memberships = _memberships_tab(selected, branches)
    with tab_s:
        _sessions_tab(kid_id, memberships, branches)
