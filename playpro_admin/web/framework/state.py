from __future__ import annotations

from typing import List, Tuple

import streamlit as st

from playpro_admin.core.table import TableState

_FLASH_KEY = "_flash_messages"


def table_state(key: str, page_size: int) -> TableState:
    """Per-table interaction state, kept across reruns."""
    state_key = f"_table_{key}"
    state = st.session_state.get(state_key)
    if not isinstance(state, TableState):
        state = TableState(page_size=page_size)
        st.session_state[state_key] = state
    return state


def flash(message: str, kind: str = "info") -> None:
    """Queue a toast for the next page render (survives st.switch_page)."""
    st.session_state.setdefault(_FLASH_KEY, []).append((kind, message))


def pop_flashes() -> List[Tuple[str, str]]:
    return st.session_state.pop(_FLASH_KEY, None) or []
