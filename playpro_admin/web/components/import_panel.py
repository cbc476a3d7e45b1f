"""Spreadsheet template download + import upload panel."""

from __future__ import annotations

import streamlit as st

from playpro_admin.api.resources import download_file, upload_file
from playpro_admin.core import get_config_manager
from playpro_admin.core.forms import import_summary, validate_import_file
from playpro_admin.infra.exceptions import PlayproError, extract_error_message
from playpro_admin.infra.logging import get_logger
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.config import XLSX_MIME
from playpro_admin.web.framework.session import api_settings
from playpro_admin.web.framework.state import flash
from playpro_admin.web.utils import invalidate_lists

logger = get_logger(__name__)


def render_import_panel(key: str, template_path: str, template_name: str, import_path: str) -> None:
    cfg = get_config_manager().get_section("import")
    allowed = tuple(cfg.get("allowed_extensions") or (".xlsx", ".xls", ".csv"))
    max_mb = float(cfg.get("max_upload_mb") or 10)

    with st.expander("📥 Import dari Excel", expanded=False):
        c1, c2 = st.columns([1, 2])
        with c1:
            if st.button("Siapkan template", key=f"{key}_tpl"):
                try:
                    st.session_state[f"{key}_tpl_bytes"] = download_file(api_settings(), template_path)
                    st.toast("Template berhasil didownload", icon="✅")
                except PlayproError as e:
                    notify_error(e, "Gagal download template")
            data = st.session_state.get(f"{key}_tpl_bytes")
            if data:
                st.download_button("Download template", data=data, file_name=template_name,
                                   mime=XLSX_MIME, key=f"{key}_tpl_dl")
        with c2:
            upload = st.file_uploader(f"File ({', '.join(allowed)}, max {max_mb:g}MB)",
                                      type=[e.lstrip(".") for e in allowed], key=f"{key}_file")
            if st.button("Import", type="primary", key=f"{key}_import"):
                _run_import(key, upload, import_path, allowed, max_mb)

        result = st.session_state.get(f"{key}_result")
        if result:
            st.success(result["message"])
            st.caption(f"Skipped: {result['skipped_count']}")
            for msg in result["errors"]:
                st.error(str(msg))
            for msg in result["warnings"]:
                st.warning(str(msg))


def _run_import(key: str, upload, import_path: str, allowed, max_mb: float) -> None:
    try:
        validate_import_file(upload.name if upload else "", upload.size if upload else 0, allowed, max_mb)
        response = upload_file(api_settings(), import_path, upload.name, upload.getvalue(),
                               upload.type or "application/octet-stream")
    except PlayproError as e:
        notify_error(e, "Error saat import file")
        return

    if response.get("success") is False:
        st.toast(extract_error_message(response, "Import gagal"), icon="⚠️")
        return
    summary = import_summary(response)
    logger.info(f"Import {import_path}: {summary['imported_count']} new, {summary['updated_count']} updated")
    st.session_state[f"{key}_result"] = summary
    invalidate_lists()
    flash(summary["message"], "success")
    st.rerun()
