from __future__ import annotations

import streamlit as st

from playpro_admin.api import auth as auth_api
from playpro_admin.core.forms import build_register_payload
from playpro_admin.infra.exceptions import (
    APIError,
    ErrorHandler,
    PlayproError,
    UnprocessableEntityError,
    ValidationError,
    extract_error_message,
)
from playpro_admin.infra.logging import get_logger
from playpro_admin.web.config import LOGIN_PAGE
from playpro_admin.web.framework.session import api_settings
from playpro_admin.web.framework.state import flash

logger = get_logger(__name__)


def render() -> None:
    _, center, _ = st.columns([1, 1.2, 1])
    with center:
        st.markdown("<h1 style='text-align:center'>Create an account</h1>", unsafe_allow_html=True)
        with st.form("register_form"):
            name = st.text_input("Name", placeholder="Your full name")
            email = st.text_input("Email", placeholder="m@example.com")
            password = st.text_input("Password", type="password", placeholder="********")
            confirmation = st.text_input("Confirm Password", type="password", placeholder="********")
            phone = st.text_input("Phone", placeholder="+62 812 3456 7890")
            address = st.text_area("Address", placeholder="Your address")
            submitted = st.form_submit_button("Register", type="primary", use_container_width=True)
        st.page_link(LOGIN_PAGE, label="Already have an account? Login")

        if not submitted:
            return
        form = {
            "name": name, "email": email, "password": password, "password_confirmation": confirmation,
            "phone": phone, "address": address,
        }
        try:
            payload = build_register_payload(form)
            with st.spinner("Registering..."):
                auth_api.register(api_settings(), payload)
        except (ValidationError, UnprocessableEntityError) as e:
            # 422 bodies come back flattened, one message per line
            messages = getattr(e, "messages", None) or [e.message]
            st.error("\n\n".join(messages))
            return
        except APIError as e:
            st.error(extract_error_message(e.response, "Registrasi gagal."))
            return
        except PlayproError as e:
            ErrorHandler(logger).handle_and_log(e, {"email": email})
            st.error("Terjadi kesalahan saat registrasi.")
            return

        flash("Registrasi berhasil!", "success")
        st.switch_page(LOGIN_PAGE)
