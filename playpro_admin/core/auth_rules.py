"""
Session parsing, role checks, navigation filtering and the route guard.

The session blob is UI gating only; the backend enforces real permissions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..infra.serialization import safe_json_loads

LOGIN_PATH = "/login"
REGISTER_PATH = "/register"
DASHBOARD_PATH = "/dashboard"
PUBLIC_PATHS = (LOGIN_PATH, REGISTER_PATH)

ACCESS_DENIED = "Akses ditolak — hanya untuk admin."
GUEST_NAME = "Guest User"
GUEST_EMAIL = "guest@gmail.com"


@dataclass(frozen=True)
class NavItem:
    title: str
    path: str
    page: str  # streamlit script path
    icon: str
    admin_only: bool = False
    group: str = "main"  # "main" | "documents"


NAV_ITEMS: Tuple[NavItem, ...] = (
    NavItem("Dashboard", "/dashboard", "pages/1_Dashboard.py", "📊"),
    NavItem("PlayKids", "/play-kids", "pages/2_PlayKids.py", "🧒", admin_only=True),
    NavItem("Schedules", "/schedules", "pages/3_Schedules.py", "📅", admin_only=True),
    NavItem("Attendance Report", "/attendance-reports", "pages/4_Attendance_Reports.py", "📝"),
    NavItem("Monthly Report", "/monthly-reports", "pages/5_Monthly_Reports.py", "🗓️", admin_only=True),
    NavItem("Categories", "/categories", "pages/6_Categories.py", "🏷️", admin_only=True, group="documents"),
    NavItem("Sports", "/sports", "pages/7_Sports.py", "⚽", admin_only=True, group="documents"),
    NavItem("Branches", "/branches", "pages/8_Branches.py", "🏢", admin_only=True, group="documents"),
    NavItem("Classes", "/classes", "pages/9_Classes.py", "🎓", admin_only=True, group="documents"),
    NavItem("Venues", "/venues", "pages/10_Venues.py", "📍", admin_only=True, group="documents"),
    NavItem("Coaches", "/coaches", "pages/11_Coaches.py", "🧑‍🏫", admin_only=True, group="documents"),
    NavItem("Users", "/users", "pages/12_Users.py", "👥", admin_only=True, group="documents"),
    NavItem("Products", "/products", "pages/13_Products.py", "📦", admin_only=True, group="documents"),
    NavItem("Rosters", "/rosters", "pages/14_Rosters.py", "📋", admin_only=True, group="documents"),
)

NAV_BY_PATH: Dict[str, NavItem] = {n.path: n for n in NAV_ITEMS}


def parse_session(raw: Any) -> Optional[Dict[str, Any]]:
    """Decode the stored session JSON; ``None`` when missing or malformed."""
    if isinstance(raw, Mapping):
        return dict(raw)
    if not raw:
        return None
    data = safe_json_loads(raw)
    return data if isinstance(data, dict) else None


def session_role(session: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not session:
        return None
    role = session.get("role")
    if role is None and isinstance(session.get("user"), Mapping):
        role = session["user"].get("role")
    return str(role) if role is not None else None


def is_admin_session(session: Optional[Mapping[str, Any]]) -> bool:
    role = session_role(session)
    return bool(role) and role.strip().lower() == "admin"


def visible_nav(session: Optional[Mapping[str, Any]]) -> List[NavItem]:
    """Admins see everything; everyone else only the non-admin pages."""
    if is_admin_session(session):
        return list(NAV_ITEMS)
    return [n for n in NAV_ITEMS if not n.admin_only]


def user_display(session: Optional[Mapping[str, Any]]) -> Tuple[str, str]:
    if not session:
        return GUEST_NAME, GUEST_EMAIL
    return str(session.get("name") or GUEST_NAME), str(session.get("email") or GUEST_EMAIL)


def guard_route(path: str, has_token: bool) -> Optional[str]:
    """Where to redirect a request for ``path``, or ``None`` to let it through.

    >>> guard_route("/", False)
    '/login'
    >>> guard_route("/login", True)
    '/dashboard'
    """
    path = path or "/"
    if path == "/":
        return DASHBOARD_PATH if has_token else LOGIN_PATH
    if has_token and path.startswith(LOGIN_PATH):
        return DASHBOARD_PATH
    is_public = any(path == p or path.startswith(p + "/") for p in PUBLIC_PATHS)
    if not has_token and not is_public:
        return LOGIN_PATH
    return None


def admin_redirect(path: str, session: Optional[Mapping[str, Any]]) -> Optional[str]:
    """Dashboard redirect for non-admins opening an admin-only page."""
    item = NAV_BY_PATH.get(path)
    if item is not None and item.admin_only and not is_admin_session(session):
        return DASHBOARD_PATH
    return None
