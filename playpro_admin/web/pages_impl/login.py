from __future__ import annotations

import streamlit as st

from playpro_admin.api import auth as auth_api
from playpro_admin.infra.exceptions import APIError, ErrorHandler, PlayproError, extract_error_message
from playpro_admin.infra.logging import get_logger
from playpro_admin.web.config import DASHBOARD_PAGE, REGISTER_PAGE
from playpro_admin.web.framework.session import api_settings, store_login
from playpro_admin.web.framework.state import flash

logger = get_logger(__name__)


def render() -> None:
    _, center, _ = st.columns([1, 1.2, 1])
    with center:
        st.markdown("<h1 style='text-align:center'>Playpro Academy</h1>", unsafe_allow_html=True)
        st.caption("Login to your account")
        with st.form("login_form"):
            email = st.text_input("Email", placeholder="m@example.com")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Login", type="primary", use_container_width=True)
        st.page_link(REGISTER_PAGE, label="Don't have an account? Sign up")

        if not submitted:
            return
        if not email or not password:
            st.error("Email dan password wajib diisi.")
            return
        try:
            with st.spinner("Logging in..."):
                token, user = auth_api.login(api_settings(), email.strip(), password)
        except APIError as e:
            st.error(extract_error_message(e.response, "Login gagal"))
            return
        except PlayproError as e:
            ErrorHandler(logger).handle_and_log(e, {"email": email})
            st.error("Terjadi kesalahan saat login.")
            return

        store_login(token, user)
        flash("Login berhasil!", "success")
        st.switch_page(DASHBOARD_PAGE)
