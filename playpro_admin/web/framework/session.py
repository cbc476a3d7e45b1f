"""
Login session kept in ``st.session_state``.

Two entries mirror what the browser version kept in cookies:

- ``token``: bearer token, expires after ``session.token_ttl_hours``
- ``session_key``: JSON blob with the user's name, email and role
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import streamlit as st

from playpro_admin.api.client import ApiSettings
from playpro_admin.core import get_config_manager
from playpro_admin.core.auth_rules import is_admin_session, parse_session, session_role, user_display
from playpro_admin.infra.serialization import Serializer

TOKEN_KEY = "token"
TOKEN_EXPIRES_KEY = "token_expires_at"
SESSION_KEY = "session_key"


@dataclass(frozen=True)
class UserContext:
    name: str
    email: str
    role: Optional[str]  # "admin" | "coach" | "parent" | None

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() == "admin"


def store_login(token: str, user: Mapping[str, Any]) -> None:
    ttl_hours = float(get_config_manager().get_config_value("token_ttl_hours", 24, "session"))
    st.session_state[TOKEN_KEY] = token
    st.session_state[TOKEN_EXPIRES_KEY] = time.time() + ttl_hours * 3600
    st.session_state[SESSION_KEY] = Serializer.compact(dict(user))


def clear_session() -> None:
    for k in (TOKEN_KEY, TOKEN_EXPIRES_KEY, SESSION_KEY):
        st.session_state.pop(k, None)


def get_token() -> Optional[str]:
    token = st.session_state.get(TOKEN_KEY)
    if not token:
        return None
    expires = st.session_state.get(TOKEN_EXPIRES_KEY)
    if expires is not None and time.time() >= float(expires):
        clear_session()
        return None
    return str(token)


def get_session() -> Optional[Dict[str, Any]]:
    return parse_session(st.session_state.get(SESSION_KEY))


def get_user_context() -> UserContext:
    session = get_session()
    name, email = user_display(session)
    return UserContext(name=name, email=email, role=session_role(session))


def is_admin() -> bool:
    return is_admin_session(get_session())


def api_settings() -> ApiSettings:
    return ApiSettings.from_config(get_config_manager(), token=get_token())


def storage_base_url() -> str:
    return str(get_config_manager().get_config_value("storage_url", "", "api"))
