from playpro_admin.web.framework.page import init_page, PageSpec
from playpro_admin.web.pages_impl.rosters import render

# MUST be the first Streamlit command on this page
init_page(PageSpec(title="Rosters", icon="📋", path="/rosters"))

render()
