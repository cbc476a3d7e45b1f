from __future__ import annotations

from datetime import time
from typing import Any, Callable, Dict, List, Mapping, Optional

import pandas as pd
import streamlit as st

from playpro_admin.api.resources import CLASSES, COACHES, SCHEDULES, VENUES
from playpro_admin.core.forms import (
    build_attendance_payload,
    build_schedule_coach_payload,
    build_schedule_payload,
    venues_for_class,
)
from playpro_admin.core.lookups import format_time, gender_label, get_name_by_id, parse_date
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.web.components.crud import confirm_delete, row_actions, run_mutation
from playpro_admin.web.components.data_table import render_data_table
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.utils import load_list, service

Rows = List[Dict[str, Any]]


def _nested_name(row: Mapping[str, Any], key: str, id_key: str, items: Rows) -> Any:
    nested = row.get(key)
    if isinstance(nested, Mapping) and nested.get("name"):
        return nested["name"]
    return get_name_by_id(row.get(id_key), items) or row.get(id_key)


def _parse_time(value: Any) -> Optional[time]:
    text = format_time(value)
    try:
        hours, minutes = text.split(":")
        return time(int(hours), int(minutes))
    except ValueError:
        return None


def _index_of(ids: List[Any], value: Any) -> Optional[int]:
    return next((i for i, v in enumerate(ids) if str(v) == str(value)), None)


def _schedule_dialog(schedule: Optional[Mapping[str, Any]], classes: Rows, venues: Rows) -> None:
    editing = schedule is not None
    schedule = schedule or {}
    key = f"schedule_{schedule.get('id', 'new')}"
    class_ids = [c.get("id") for c in classes]
    class_names = {c.get("id"): c.get("name") for c in classes}

    def _reset_venue():
        st.session_state.pop(f"{key}_venue", None)

    @st.dialog("Edit Schedule" if editing else "Add Schedule")
    def _dialog():
        # No st.form here: the venue list depends on the class picked.
        class_id = st.selectbox("Class", class_ids, index=_index_of(class_ids, schedule.get("class_id")),
                                format_func=lambda v: class_names.get(v, str(v)), placeholder="Select class",
                                key=f"{key}_class", on_change=_reset_venue)
        allowed = venues_for_class(class_id, classes, venues)
        venue_ids = [v.get("id") for v in allowed]
        venue_names = {v.get("id"): v.get("name") for v in allowed}
        venue_id = st.selectbox("Venue", venue_ids, index=_index_of(venue_ids, schedule.get("venue_id")),
                                format_func=lambda v: venue_names.get(v, str(v)),
                                placeholder="Select venue" if class_id is not None else "Select a class first",
                                disabled=class_id is None, key=f"{key}_venue")
        day = st.date_input("Date", value=parse_date(schedule.get("date")), key=f"{key}_date")
        c1, c2 = st.columns(2)
        start = c1.time_input("Start Time", value=_parse_time(schedule.get("start_time")), key=f"{key}_start")
        end = c2.time_input("End Time", value=_parse_time(schedule.get("end_time")), key=f"{key}_end")
        quota = st.number_input("Quota", min_value=0, step=1, value=int(schedule.get("quota") or 0),
                                key=f"{key}_quota")
        if not st.button("Save", type="primary", use_container_width=True, key=f"{key}_save"):
            return
        form = {
            "class_id": class_id, "venue_id": venue_id, "date": day,
            "start_time": start.strftime("%H:%M") if start else None,
            "end_time": end.strftime("%H:%M") if end else None,
            "quota": quota,
        }
        try:
            payload = build_schedule_payload(form, classes, venues, editing)
        except PlayproError as e:
            notify_error(e, "Invalid input")
            return
        svc = service(SCHEDULES)
        if run_mutation(
            (lambda: svc.update(schedule["id"], payload)) if editing else (lambda: svc.create(payload)),
            "Schedule updated successfully!" if editing else "Schedule created successfully!",
            "Failed to save schedule",
            {"id": schedule.get("id")},
        ):
            st.rerun()

    _dialog()


def _record_picker(label: str, key: str, records: Rows, describe: Callable[[Mapping[str, Any]], str]) -> Dict[str, Any]:
    by_id = {str(r.get("id")): r for r in records}
    choice = st.selectbox(label, ["new"] + list(by_id), key=key,
                          format_func=lambda v: "➕ New" if v == "new" else describe(by_id[v]))
    return by_id.get(choice, {})


def _coaches_tab(schedule_id: Any, coaches: Rows) -> None:
    svc = service(SCHEDULES).nested(schedule_id, "coaches")
    try:
        assigned = svc.list()
    except PlayproError as e:
        notify_error(e, "Failed to fetch coach schedule data")
        assigned = []

    if assigned:
        st.dataframe(pd.DataFrame([{
            "Coach": _nested_name(a, "coach", "coach_id", coaches) or "Unknown",
            "Head Coach": "Yes" if a.get("is_head_coach") else "No",
            "Attendance": "Present" if a.get("attendance") else "Absent",
        } for a in assigned]), hide_index=True, use_container_width=True)
    else:
        st.info("No coaches assigned yet.")

    current = _record_picker("Coach assignment", f"sc_pick_{schedule_id}", assigned,
                             lambda a: f"Edit {_nested_name(a, 'coach', 'coach_id', coaches)}")
    editing = bool(current)
    coach_ids = [c.get("id") for c in coaches]
    coach_names = {c.get("id"): c.get("name") for c in coaches}
    with st.form(f"sc_form_{schedule_id}_{current.get('id', 'new')}"):
        coach_id = st.selectbox("Coach", coach_ids, index=_index_of(coach_ids, current.get("coach_id")),
                                format_func=lambda v: coach_names.get(v, str(v)))
        c1, c2 = st.columns(2)
        head = c1.checkbox("Head Coach", value=bool(current.get("is_head_coach")))
        present = c2.checkbox("Attendance", value=bool(current.get("attendance")))
        cols = st.columns(2)
        save = cols[0].form_submit_button("Save", type="primary", use_container_width=True)
        delete = cols[1].form_submit_button("Remove", disabled=not editing, use_container_width=True)

    if save:
        try:
            payload = build_schedule_coach_payload({"coach_id": coach_id, "is_head_coach": head, "attendance": present})
        except PlayproError as e:
            notify_error(e, "Invalid input")
        else:
            if run_mutation(
                (lambda: svc.update(current["id"], payload)) if editing else (lambda: svc.create(payload)),
                "Coach schedule saved successfully!", "Failed to save coach schedule",
            ):
                st.rerun()
    if delete and editing:
        if run_mutation(lambda: svc.delete(current["id"]), "Coach schedule deleted successfully!",
                        "Failed to delete coach schedule"):
            st.rerun()


def _attendance_tab(schedule_id: Any, coaches: Rows) -> None:
    svc = service(SCHEDULES).nested(schedule_id, "attendance")
    try:
        reports = svc.list()
        eligible = service(SCHEDULES).nested(schedule_id, "eligible-playkids").list()
    except PlayproError as e:
        notify_error(e, "Failed to fetch attendance data")
        return

    if reports:
        st.dataframe(pd.DataFrame([{
            "Play Kid": (r.get("play_kid") or {}).get("name") or "Unknown",
            "Gender": gender_label((r.get("play_kid") or {}).get("gender")),
            "Coach": (r.get("coach") or {}).get("name") or "Not assigned",
            "Attendance": "Present" if r.get("attendance") else "Absent",
            "Overall": r.get("overall") if r.get("overall") is not None else "-",
        } for r in reports]), hide_index=True, use_container_width=True)
    else:
        st.info("No attendance recorded yet.")

    current = _record_picker("Attendance", f"att_pick_{schedule_id}", reports,
                             lambda r: f"Edit {(r.get('play_kid') or {}).get('name') or r.get('id')}")
    editing = bool(current)
    kids = list(eligible)
    if editing and isinstance(current.get("play_kid"), Mapping):
        if _index_of([k.get("id") for k in kids], current.get("play_kid_id")) is None:
            kids.append(current["play_kid"])
    kid_ids = [k.get("id") for k in kids]
    kid_names = {k.get("id"): k.get("name") for k in kids}
    coach_ids = [c.get("id") for c in coaches]
    coach_names = {c.get("id"): c.get("name") for c in coaches}

    with st.form(f"att_form_{schedule_id}_{current.get('id', 'new')}"):
        if editing:
            picked = st.selectbox("Play Kid", kid_ids, index=_index_of(kid_ids, current.get("play_kid_id")),
                                  format_func=lambda v: kid_names.get(v, str(v)))
        else:
            picked = st.multiselect("Play Kids", kid_ids, format_func=lambda v: kid_names.get(v, str(v)))
        coach_id = st.selectbox("Coach", coach_ids, index=_index_of(coach_ids, current.get("coach_id")),
                                format_func=lambda v: coach_names.get(v, str(v)), placeholder="Not assigned")
        present = st.checkbox("Attendance", value=bool(current.get("attendance")))
        motorik = st.text_area("Motoric", value=str(current.get("motorik") or ""))
        locomotor = st.text_area("Locomotor", value=str(current.get("locomotor") or ""))
        body_control = st.text_area("Body Control", value=str(current.get("body_control") or ""))
        overall = st.selectbox("Overall", [1, 2, 3, 4, 5], placeholder="-",
                               index=_index_of([1, 2, 3, 4, 5], current.get("overall")))
        cols = st.columns(2)
        save = cols[0].form_submit_button("Save", type="primary", use_container_width=True)
        delete = cols[1].form_submit_button("Delete", disabled=not editing, use_container_width=True)

    if save:
        try:
            payload = build_attendance_payload({
                "play_kid_id": picked, "coach_id": coach_id, "attendance": present, "motorik": motorik,
                "locomotor": locomotor, "body_control": body_control, "overall": overall,
            }, editing)
        except PlayproError as e:
            notify_error(e, "Invalid input")
        else:
            if run_mutation(
                (lambda: svc.update(current["id"], payload)) if editing else (lambda: svc.create(payload)),
                "Attendance saved successfully!", "Failed to save attendance",
            ):
                st.rerun()
    if delete and editing:
        if run_mutation(lambda: svc.delete(current["id"]), "Attendance deleted successfully!",
                        "Failed to delete attendance"):
            st.rerun()


def render() -> None:
    head, action = st.columns([5, 1])
    head.title("📅 Schedules")

    classes = load_list(CLASSES, "Failed to fetch classes data")
    venues = load_list(VENUES, "Failed to fetch venues data")
    coaches = load_list(COACHES, "Failed to fetch coaches data")
    rows = load_list(SCHEDULES, "Failed to fetch schedule data")

    with action:
        st.write("")
        if st.button("Add Schedule", icon="➕", type="primary", use_container_width=True):
            _schedule_dialog(None, classes, venues)

    class_of = lambda r: _nested_name(r, "class_model", "class_id", classes)  # noqa: E731
    columns = [
        Column("class", "Class", accessor=class_of),
        Column("venue", "Venue", accessor=lambda r: _nested_name(r, "venue", "venue_id", venues)),
        Column("date", "Date"),
        Column("start_time", "Start", formatter=format_time),
        Column("end_time", "End", formatter=format_time),
        Column("quota", "Quota"),
    ]
    filters = [FilterSpec("class", "Class", accessor=class_of)]
    selected = render_data_table("schedules", rows, columns, filters)
    clicked = row_actions("schedules", selected)
    if selected is None:
        return

    schedule_id = selected.get("id")
    if clicked == "edit":
        _schedule_dialog(selected, classes, venues)
    elif clicked == "delete":
        confirm_delete(
            str(selected.get("name") or f"#{schedule_id}"),
            lambda: run_mutation(lambda: service(SCHEDULES).delete(schedule_id), "Schedule deleted successfully!",
                                 "Failed to delete schedule", {"id": schedule_id}),
        )

    st.divider()
    st.subheader(f"🗂️ {selected.get('name') or class_of(selected)}")
    tab_c, tab_a = st.tabs(["Coaches", "Attendance"])
    with tab_c:
        _coaches_tab(schedule_id, coaches)
    with tab_a:
        _attendance_tab(schedule_id, coaches)
