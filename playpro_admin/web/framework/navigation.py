"""Role-filtered sidebar and route protection."""

from __future__ import annotations

from typing import Optional

import streamlit as st

from playpro_admin.api import auth as auth_api
from playpro_admin.core.auth_rules import (
    ACCESS_DENIED,
    DASHBOARD_PATH,
    LOGIN_PATH,
    NAV_BY_PATH,
    REGISTER_PATH,
    admin_redirect,
    guard_route,
    visible_nav,
)
from playpro_admin.infra.exceptions import PlayproError
from playpro_admin.infra.logging import get_logger
from playpro_admin.web.config import DASHBOARD_PAGE, LOGIN_PAGE, REGISTER_PAGE
from playpro_admin.web.framework.session import api_settings, clear_session, get_session, get_token, get_user_context
from playpro_admin.web.framework.state import flash

logger = get_logger(__name__)

_PAGES = {LOGIN_PATH: LOGIN_PAGE, REGISTER_PATH: REGISTER_PAGE, DASHBOARD_PATH: DASHBOARD_PAGE}
_PAGES.update({path: item.page for path, item in NAV_BY_PATH.items()})


def page_for(path: str) -> str:
    return _PAGES.get(path, DASHBOARD_PAGE)


def protect(path: str) -> None:
    """Redirect away from ``path`` when the session does not allow it."""
    target: Optional[str] = guard_route(path, get_token() is not None)
    if target is None:
        target = admin_redirect(path, get_session())
        if target is not None:
            flash(ACCESS_DENIED, "error")
    if target is not None and target != path:
        logger.info(f"Redirect {path} -> {target}")
        st.switch_page(page_for(target))


def logout() -> None:
    """Tell the backend, then drop the local session whatever the answer."""
    try:
        auth_api.logout(api_settings())
    except PlayproError as e:
        logger.warning(f"Logout call failed: {e.message}")
    finally:
        clear_session()
    st.switch_page(LOGIN_PAGE)


def render_sidebar() -> None:
    session = get_session()
    items = visible_nav(session)
    with st.sidebar:
        for n in items:
            if n.group == "main":
                st.page_link(n.page, label=n.title, icon=n.icon)
        documents = [n for n in items if n.group == "documents"]
        if documents:
            st.caption("Documents")
            for n in documents:
                st.page_link(n.page, label=n.title, icon=n.icon)

        st.divider()
        user = get_user_context()
        with st.container(border=True):
            st.markdown(f"**{user.name}**")
            st.caption(user.email)
            if st.button("Log out", icon="🚪", use_container_width=True):
                logout()
