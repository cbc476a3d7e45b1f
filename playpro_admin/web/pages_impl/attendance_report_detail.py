from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import streamlit as st

from playpro_admin.api.resources import ATTENDANCE_REPORTS, COACHES
from playpro_admin.core.forms import build_report_update
from playpro_admin.core.lookups import format_time, gender_label, storage_url
from playpro_admin.core.report import age_label, play_kid_label
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.web.components.crud import run_mutation
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.framework.session import get_session, is_admin, storage_base_url
from playpro_admin.web.pages_impl.attendance_reports import DETAIL_ID_KEY
from playpro_admin.web.utils import load_list, load_record, service

_LOADED_KEY = "attendance_report_loaded"
_FIELDS = ("coach_id", "attendance", "motorik", "locomotor", "body_control", "overall")
_OVERALL = [1, 2, 3, 4, 5]


def _widget_key(report_id: Any, name: str) -> str:
    return f"ard_{report_id}_{name}"


def _fetch(report_id: Any) -> Optional[Dict[str, Any]]:
    report = load_record(ATTENDANCE_REPORTS, report_id, "Error fetching report")
    if report is not None:
        st.session_state[_LOADED_KEY] = report
    return report


def _reset(report_id: Any) -> None:
    """Drop edited widget values so the form shows the last fetched report again."""
    for name in _FIELDS:
        st.session_state.pop(_widget_key(report_id, name), None)


def _profile(report: Mapping[str, Any]) -> None:
    kid = report.get("play_kid") or {}
    schedule = report.get("schedule") or {}
    photo = storage_url(kid.get("photo"), storage_base_url())
    with st.container(border=True):
        c1, c2 = st.columns([1, 3])
        if photo:
            c1.image(photo, use_container_width=True)
        with c2:
            st.subheader(play_kid_label(kid))
            st.caption(kid.get("nick_name") or "")
            st.markdown(
                f"**Age:** {age_label(kid.get('birth_date'))} · **Gender:** {gender_label(kid.get('gender'))} · "
                f"**School:** {kid.get('school_origin') or '-'}"
            )
            cls = schedule.get("class_model") or {}
            st.markdown(
                f"**Class:** {cls.get('name') or '-'} · **Date:** {schedule.get('date') or '-'} · "
                f"**Time:** {format_time(schedule.get('start_time')) or '-'} - {format_time(schedule.get('end_time')) or '-'}"
            )
            if kid.get("medical_history"):
                st.warning(f"Medical history: {kid['medical_history']}")


def render() -> None:
    report_id = st.session_state.get(DETAIL_ID_KEY)
    st.title("📝 Attendance Report Detail")
    if report_id is None:
        st.info("No report found")
        return

    loaded = st.session_state.get(_LOADED_KEY)
    report = loaded if loaded and str(loaded.get("id")) == str(report_id) else _fetch(report_id)
    if report is None:
        st.info("No report found")
        return

    _profile(report)
    admin = is_admin()
    coaches = load_list(COACHES, "Error fetching coaches") if admin else []
    key = lambda name: _widget_key(report_id, name)  # noqa: E731

    with st.form(f"attendance_report_{report_id}"):
        if admin:
            coach_ids = [c.get("id") for c in coaches]
            names = {c.get("id"): c.get("name") for c in coaches}
            idx = next((i for i, c in enumerate(coach_ids) if str(c) == str(report.get("coach_id"))), None)
            coach_id = st.selectbox("Coach", coach_ids, index=idx, format_func=lambda v: names.get(v, str(v)),
                                    placeholder="Select coach", key=key("coach_id"))
        else:
            coach_id = report.get("coach_id")
            st.caption(f"Coach: {(report.get('coach') or {}).get('name') or '-'}")
        attendance = st.toggle("Present", value=bool(report.get("attendance")), key=key("attendance"))
        motorik = st.text_area("Motoric", value=str(report.get("motorik") or ""), key=key("motorik"))
        locomotor = st.text_area("Locomotor", value=str(report.get("locomotor") or ""), key=key("locomotor"))
        body_control = st.text_area("Body Control", value=str(report.get("body_control") or ""),
                                    key=key("body_control"))
        overall_idx = next((i for i, v in enumerate(_OVERALL) if str(v) == str(report.get("overall"))), None)
        overall = st.selectbox("Overall", _OVERALL, index=overall_idx, placeholder="-", key=key("overall"))
        c1, c2 = st.columns(2)
        submitted = c1.form_submit_button("Save", type="primary", use_container_width=True)
        reset = c2.form_submit_button("Reset", use_container_width=True)

    if reset:
        _reset(report_id)
        st.toast("Changes reverted to last saved state", icon="↩️")
        st.rerun()

    if submitted:
        edited = {
            "coach_id": coach_id, "attendance": attendance, "motorik": motorik,
            "locomotor": locomotor, "body_control": body_control, "overall": overall,
        }
        try:
            payload = build_report_update(edited, get_session())
        except PlayproError as e:
            notify_error(e, "Error updating report")
            return
        if run_mutation(lambda: service(ATTENDANCE_REPORTS).update(report_id, payload),
                        "Report updated successfully", "Error updating report", {"id": report_id}):
            _reset(report_id)
            _fetch(report_id)
            st.rerun()
