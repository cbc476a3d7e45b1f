from playpro_admin.web.framework.page import init_page, PageSpec
from playpro_admin.web.pages_impl.register import render

# MUST be the first Streamlit command on this page
init_page(PageSpec(title="Register", icon="📝", path="/register", public=True, layout="centered"))

render()
