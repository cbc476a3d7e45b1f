from playpro_admin.web.framework.page import init_page, PageSpec
from playpro_admin.web.pages_impl.play_kids import render

# MUST be the first Streamlit command on this page
init_page(PageSpec(title="Play Kids", icon="🧒", path="/play-kids"))

render()
