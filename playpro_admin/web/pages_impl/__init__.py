"""Streamlit page renderers, one module per page."""
