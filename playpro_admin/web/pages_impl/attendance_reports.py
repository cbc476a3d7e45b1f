from __future__ import annotations

import streamlit as st

from playpro_admin.api.resources import ATTENDANCE_REPORTS, REPORT_IMPORT, REPORT_TEMPLATE
from playpro_admin.core.report import attendance_row
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.web.components.data_table import render_data_table
from playpro_admin.web.components.import_panel import render_import_panel
from playpro_admin.web.config import ATTENDANCE_DETAIL_PAGE, REPORT_TEMPLATE_NAME
from playpro_admin.web.framework.session import is_admin
from playpro_admin.web.utils import load_list

DETAIL_ID_KEY = "attendance_report_id"

COLUMNS = [
    Column("play_kid", "Play Kid"),
    Column("class", "Class"),
    Column("start_time", "Start"),
    Column("end_time", "End"),
    Column("date", "Date"),
    Column("attendance", "Attendance"),
    Column("status", "Status"),
    Column("overall", "Overall"),
]

FILTERS = [
    FilterSpec("attendance", "Attendance", options=(("all", "Semua"), ("Present", "Present"), ("Absent", "Absent"))),
    FilterSpec("status", "Status",
               options=(("all", "Semua"), ("Submitted", "Submitted"), ("Not Submitted", "Not Submitted"))),
]


def render() -> None:
    st.title("📝 Attendance Report")

    if is_admin():
        render_import_panel("report_import", REPORT_TEMPLATE, REPORT_TEMPLATE_NAME, REPORT_IMPORT)

    reports = load_list(ATTENDANCE_REPORTS, "Failed to fetch attendance report data")
    rows = [attendance_row(r) for r in reports]
    selected = render_data_table("attendance_reports", rows, COLUMNS, FILTERS)
    if selected is None:
        st.caption("Select a row to open the report.")
        return
    if st.button("Open report", icon="🔎", type="primary"):
        st.session_state[DETAIL_ID_KEY] = selected.get("id")
        st.switch_page(ATTENDANCE_DETAIL_PAGE)
