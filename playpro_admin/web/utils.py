from __future__ import annotations

from typing import Any, Dict, List, Optional

import streamlit as st

from playpro_admin.api.client import ApiSettings
from playpro_admin.api.resources import ResourceService
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.web.components.notify import notify_error
from playpro_admin.web.framework.session import api_settings


@st.cache_data(ttl=60, show_spinner=False)
def _cached_list(endpoint: str, base_url: str, token: Optional[str], timeout: float) -> List[Dict[str, Any]]:
    """
    List a collection, cached for 60 seconds per endpoint and token.
    """
    return ResourceService(ApiSettings(base_url, token, timeout), endpoint).list()


def load_list(endpoint: str, fallback: str) -> List[Dict[str, Any]]:
    """Cached list for ``endpoint``; on failure toast ``fallback`` and return []."""
    try:
        s = api_settings()
        return _cached_list(endpoint, s.base_url, s.token, s.timeout)
    except PlayproError as e:
        notify_error(e, fallback, context={"endpoint": endpoint})
        return []


def load_record(endpoint: str, item_id: Any, fallback: str) -> Optional[Dict[str, Any]]:
    try:
        return ResourceService(api_settings(), endpoint).get(item_id)
    except PlayproError as e:
        notify_error(e, fallback, context={"endpoint": endpoint, "id": item_id})
        return None


def invalidate_lists() -> None:
    """Drop cached lists so the next render refetches after a mutation."""
    _cached_list.clear()


def service(endpoint: str) -> ResourceService:
    return ResourceService(api_settings(), endpoint)
