# UI
PAGE_TITLE_PREFIX = "Playpro Academy - "

PLAY_KID_TEMPLATE_NAME = "playkid_import_template.xlsx"
REPORT_TEMPLATE_NAME = "playkid_report_template.xlsx"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# script paths for st.switch_page, relative to app.py
LOGIN_PAGE = "pages/Login.py"
REGISTER_PAGE = "pages/Register.py"
DASHBOARD_PAGE = "pages/1_Dashboard.py"
ATTENDANCE_DETAIL_PAGE = "pages/Attendance_Report_Detail.py"
