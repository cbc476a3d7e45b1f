from __future__ import annotations

from typing import Any, Mapping

import streamlit as st
import streamlit.components.v1 as components

from playpro_admin.api.resources import MONTHLY_REPORTS
from playpro_admin.core.report import build_report_view, monthly_report_row, render_report_html, report_filename
from playpro_admin.core.table import Column
from playpro_admin.infra.logging import get_logger
from playpro_admin.web.components.data_table import render_data_table
from playpro_admin.web.framework.session import storage_base_url
from playpro_admin.web.utils import load_list

logger = get_logger(__name__)

COLUMNS = [
    Column("play_kid", "Play Kid"),
    Column("class_branch", "Class / Branch"),
    Column("month", "Month"),
    Column("attendance_count", "Attendance"),
]


def _export_dialog(report: Mapping[str, Any]) -> None:
    @st.dialog("Preview Report", width="large")
    def _dialog():
        view = build_report_view(report, storage_base_url())
        document = render_report_html(view)
        components.html(document, height=720, scrolling=True)
        if st.download_button("Download", data=document.encode("utf-8"), file_name=report_filename(),
                              mime="text/html", type="primary", use_container_width=True):
            logger.info(f"Exported report for {view.kid_name}")
        st.caption("Open the downloaded file and print it to save as PDF.")

    _dialog()


def render() -> None:
    st.title("📊 Monthly Report")
    reports = load_list(MONTHLY_REPORTS, "Failed to fetch report data")
    # keep the raw payload next to the display columns for the export preview
    rows = [{**monthly_report_row(r), "_raw": r} for r in reports]
    selected = render_data_table("monthly_reports", rows, COLUMNS)
    if selected is None:
        st.caption("Select a row to export its report.")
        return
    if st.button("Export", icon="📄", type="primary"):
        _export_dialog(selected["_raw"])
