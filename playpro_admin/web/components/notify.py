"""Toast notifications for backend and validation errors."""

from __future__ import annotations

from typing import Any, Dict, Optional

import streamlit as st

from playpro_admin.infra.exceptions import AuthenticationError, ErrorHandler
from playpro_admin.infra.logging import get_logger

_handler = ErrorHandler(get_logger(__name__))


def notify_error(error: Exception, fallback: str, context: Optional[Dict[str, Any]] = None) -> str:
    """Log ``error`` and show one toast; returns the message shown."""
    _handler.handle_and_log(error, context)
    message = _handler.user_message(error, fallback)
    if isinstance(error, AuthenticationError):
        message = "Sesi berakhir, silakan login kembali."
    st.toast(message, icon="⚠️")
    return message
