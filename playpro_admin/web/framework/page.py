from __future__ import annotations

from dataclasses import dataclass
import streamlit as st

from playpro_admin.web.config import PAGE_TITLE_PREFIX


@dataclass(frozen=True)
class PageSpec:
    title: str
    icon: str
    path: str
    public: bool = False
    layout: str = "wide"
    sidebar_state: str = "expanded"


def init_page(spec: PageSpec, *, apply_style: bool = True, show_sidebar_header: bool = True) -> None:
    """Initialize a Streamlit page in a consistent way.

    NOTE: This must be called before any other Streamlit command on a page.
    Protected pages redirect to login (or the dashboard) before rendering.
    """
    st.set_page_config(
        page_title=PAGE_TITLE_PREFIX + spec.title,
        page_icon=spec.icon,
        layout=spec.layout,
        initial_sidebar_state="collapsed" if spec.public else spec.sidebar_state,
    )

    from playpro_admin.web.framework.navigation import protect, render_sidebar
    from playpro_admin.web.framework.state import pop_flashes

    protect(spec.path)

    if apply_style:
        from playpro_admin.web.styles import load_academy_style

        load_academy_style()

    if not spec.public:
        if show_sidebar_header:
            from playpro_admin.web.styles import render_sidebar_header

            render_sidebar_header()
        render_sidebar()

    for kind, message in pop_flashes():
        st.toast(message, icon="⚠️" if kind == "error" else "✅" if kind == "success" else "ℹ️")


__all__ = ["PageSpec", "init_page"]
