import streamlit as st

from playpro_admin.web.framework.page import init_page, PageSpec

# MUST be the first Streamlit command on this page.
# "/" has no content of its own: the guard sends it to the dashboard or to login.
init_page(PageSpec(title="Admin", icon="⚽", path="/", public=True))

st.stop()
