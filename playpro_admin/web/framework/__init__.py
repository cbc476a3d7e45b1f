"""Frontend framework layer for the Streamlit UI.

This package centralizes:
- page initialization (set_page_config + CSS + route protection)
- role-filtered sidebar navigation
- login session and session-state helpers
"""
