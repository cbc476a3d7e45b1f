from playpro_admin.web.framework.page import init_page, PageSpec
from playpro_admin.web.pages_impl.attendance_report_detail import render

# MUST be the first Streamlit command on this page
init_page(PageSpec(title="Attendance Report Detail", icon="📝", path="/attendance-reports/detail"))

render()
