from __future__ import annotations

from dataclasses import asdict
from typing import Dict, Optional

import streamlit as st

from playpro_admin.api.client import ApiSettings
from playpro_admin.api.dashboard import load_dashboard_counts
from playpro_admin.core.lookups import number_with_commas
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.framework.session import api_settings, get_user_context

CARDS = (
    ("play_kids", "PlayKids", "Total registered PlayKids"),
    ("coaches", "Coaches", "Active coaches"),
    ("sports", "Sports", "Sports offered"),
    ("branches", "Branches", "Academy branches"),
)


@st.cache_data(ttl=60, show_spinner=False)
def _counts(base_url: str, token: Optional[str], timeout: float) -> Dict[str, int]:
    return asdict(load_dashboard_counts(ApiSettings(base_url, token, timeout), timeout=timeout))


def render() -> None:
    user = get_user_context()
    st.title("🏠 Dashboard")
    st.caption(f"Welcome back, {user.name}")

    s = api_settings()
    with st.spinner("Loading..."):
        try:
            counts = _counts(s.base_url, s.token, s.timeout)
        except PlayproError as e:
            notify_error(e, "Failed to load dashboard data")
            counts = {}

    for col, (field, label, hint) in zip(st.columns(len(CARDS)), CARDS):
        with col.container(border=True):
            st.metric(label, number_with_commas(counts.get(field, 0)))
            st.caption(hint)
