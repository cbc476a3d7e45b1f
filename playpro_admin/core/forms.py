"""
Per-entity form validation and request payload builders.

Each ``build_*`` function takes the raw form values (a dict as collected by
the Streamlit dialog) and returns the body to send, or raises
``ValidationError`` with the message to toast.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..infra.exceptions import FileOperationError, ValidationError
from .lookups import format_time, get_name_by_id, parse_date

USER_ROLES = ("admin", "parent", "coach")
MEMBERSHIP_STATUSES = ("active", "inactive")
GENDERS = ("M", "F")
ALL_FIELDS_REQUIRED = "All fields are required"

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")
_PHONE_STRIP_RE = re.compile(r"[^0-9+\-\s]")

Form = Mapping[str, Any]


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def _text(form: Form, key: str) -> str:
    value = form.get(key)
    return "" if value is None else str(value).strip()


def _optional_text(form: Form, key: str) -> Optional[str]:
    value = _text(form, key)
    return value or None


def require(form: Form, fields: Iterable[str], message: str = ALL_FIELDS_REQUIRED) -> None:
    for f in fields:
        if _blank(form.get(f)):
            raise ValidationError(message, field=f, value=form.get(f))


def _as_int(value: Any, field_name: str, message: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(message, field=field_name, value=value) from e


def _iso(value: Any) -> Optional[str]:
    d = parse_date(value)
    return d.isoformat() if d else None


# ---------------------------------------------------------------------------
# simple named resources
# ---------------------------------------------------------------------------

def build_named_payload(form: Form, entity: str, extra_fields: Sequence[str] = ("description",)) -> Dict[str, Any]:
    """Payload for Branch/Category/Sport: ``name`` required, other text fields optional."""
    name = _text(form, "name")
    if not name:
        raise ValidationError(f"{entity} name is required", field="name", value=form.get("name"))
    payload: Dict[str, Any] = {"name": name}
    for f in extra_fields:
        payload[f] = _text(form, f)
    return payload


def build_product_payload(form: Form) -> Dict[str, Any]:
    payload = build_named_payload(form, "Product", extra_fields=())
    count = _as_int(form.get("session_count") or 0, "session_count", "Session count must be a number")
    if count < 0:
        raise ValidationError("Session count cannot be negative", field="session_count", value=count)
    payload["session_count"] = count
    payload["is_membership"] = bool(form.get("is_membership"))
    return payload


def build_venue_payload(form: Form) -> Dict[str, Any]:
    require(form, ("name", "address", "branch_id", "capacity"))
    return {
        "name": _text(form, "name"),
        "address": _text(form, "address"),
        "branch_id": _as_int(form.get("branch_id"), "branch_id", ALL_FIELDS_REQUIRED),
        "capacity": _as_int(form.get("capacity"), "capacity", "Capacity must be a number"),
    }


def class_name(sport_id: Any, category_id: Any, branch_id: Any,
               sports: Sequence[Form], categories: Sequence[Form], branches: Sequence[Form]) -> str:
    return " - ".join(
        str(get_name_by_id(i, items))
        for i, items in ((sport_id, sports), (category_id, categories), (branch_id, branches))
    )


def build_class_payload(form: Form, sports: Sequence[Form], categories: Sequence[Form],
                        branches: Sequence[Form]) -> Dict[str, Any]:
    """Class payload; the class name is derived from the selected sport, category and branch."""
    require(form, ("sport_id", "category_id", "branch_id"))
    sport_id = _as_int(form["sport_id"], "sport_id", ALL_FIELDS_REQUIRED)
    category_id = _as_int(form["category_id"], "category_id", ALL_FIELDS_REQUIRED)
    branch_id = _as_int(form["branch_id"], "branch_id", ALL_FIELDS_REQUIRED)
    return {
        "name": class_name(sport_id, category_id, branch_id, sports, categories, branches),
        "sport_id": sport_id,
        "category_id": category_id,
        "branch_id": branch_id,
    }


# ---------------------------------------------------------------------------
# coaches / users
# ---------------------------------------------------------------------------

def build_coach_form(form: Form) -> Dict[str, Any]:
    """Multipart fields for a coach update (coaches are created from user accounts)."""
    require(form, ("birth_date", "description"))
    return {
        "_method": "PUT",
        "birth_date": _iso(form.get("birth_date")) or _text(form, "birth_date"),
        "description": _text(form, "description"),
    }


def clean_phone(value: Any) -> str:
    """Drop everything but digits, ``+``, ``-`` and whitespace."""
    return _PHONE_STRIP_RE.sub("", str(value or ""))


def build_user_payload(form: Form, editing: bool) -> Dict[str, Any]:
    """User payload; the password is only mandatory on create and omitted when left blank on edit."""
    require(form, ("name", "email", "role"))
    role = _text(form, "role")
    if role not in USER_ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(USER_ROLES)}", field="role", value=role)
    password = form.get("password") or ""
    if not editing and not password:
        raise ValidationError("Password is required", field="password")
    payload: Dict[str, Any] = {
        "name": _text(form, "name"),
        "email": _text(form, "email"),
        "role": role,
        "phone": clean_phone(form.get("phone")),
        "address": _text(form, "address"),
    }
    if password:
        payload["password"] = password
    return payload


def build_register_payload(form: Form) -> Dict[str, Any]:
    """Self-registration always creates a parent account."""
    require(form, ("name", "email", "password", "password_confirmation"))
    if form.get("password") != form.get("password_confirmation"):
        raise ValidationError("Password confirmation does not match", field="password_confirmation")
    return {
        "name": _text(form, "name"),
        "email": _text(form, "email"),
        "password": form.get("password"),
        "password_confirmation": form.get("password_confirmation"),
        "role": "parent",
        "phone": clean_phone(form.get("phone")),
        "address": _text(form, "address"),
    }


# ---------------------------------------------------------------------------
# rosters / schedules
# ---------------------------------------------------------------------------

def build_roster_payload(form: Form) -> Dict[str, Any]:
    require(form, ("coach_id", "schedule_id"), "Coach ID and Schedule ID are required")
    return {
        "coach_id": _as_int(form["coach_id"], "coach_id", "Coach ID and Schedule ID are required"),
        "schedule_id": _as_int(form["schedule_id"], "schedule_id", "Coach ID and Schedule ID are required"),
        "is_head_coach": bool(form.get("is_head_coach")),
        "attendance": bool(form.get("attendance")),
    }


def venues_for_class(class_id: Any, classes: Sequence[Form], venues: Sequence[Form]) -> List[Form]:
    """Venues in the same branch as the selected class; nothing until a class is chosen."""
    if _blank(class_id):
        return []
    selected = next((c for c in classes if str(c.get("id")) == str(class_id)), None)
    if selected is None:
        return []
    branch_id = selected.get("branch_id")
    out = []
    for v in venues:
        branch = v.get("branch") if isinstance(v.get("branch"), Mapping) else None
        venue_branch = branch.get("id") if branch else v.get("branch_id")
        if str(venue_branch) == str(branch_id):
            out.append(v)
    return out


def schedule_name(class_label: str, venue_label: str, day: str, start: str, end: str) -> str:
    return f"{class_label}, {venue_label}, {day}, {start}-{end}"


def build_schedule_payload(form: Form, classes: Sequence[Form], venues: Sequence[Form],
                           editing: bool) -> Dict[str, Any]:
    """Schedule payload with HH:MM times; a generated name is added on create."""
    require(form, ("class_id", "venue_id", "date", "start_time", "end_time", "quota"))
    start = format_time(_text(form, "start_time"))
    end = format_time(_text(form, "end_time"))
    if not _TIME_RE.match(start) or not _TIME_RE.match(end):
        raise ValidationError("Please enter valid time format (HH:MM)", field="start_time", value=form.get("start_time"))
    if start >= end:
        raise ValidationError("End time must be after start time", field="end_time", value=end)

    day = _iso(form.get("date")) or _text(form, "date")
    payload: Dict[str, Any] = {
        "class_id": _as_int(form["class_id"], "class_id", ALL_FIELDS_REQUIRED),
        "venue_id": _as_int(form["venue_id"], "venue_id", ALL_FIELDS_REQUIRED),
        "date": day,
        "start_time": start,
        "end_time": end,
        "quota": _as_int(form["quota"], "quota", "Quota must be a number"),
    }
    if not editing:
        cls = next((c for c in classes if str(c.get("id")) == str(form["class_id"])), None)
        venue = next((v for v in venues if str(v.get("id")) == str(form["venue_id"])), None)
        if cls is not None and venue is not None:
            payload["name"] = schedule_name(str(cls.get("name")), str(venue.get("name")), day, start, end)
    return payload


def build_schedule_coach_payload(form: Form) -> Dict[str, Any]:
    require(form, ("coach_id",), "Please fill in all required fields")
    return {
        "coach_id": _as_int(form["coach_id"], "coach_id", "Please fill in all required fields"),
        "is_head_coach": bool(form.get("is_head_coach")),
        "attendance": bool(form.get("attendance")),
    }


def _overall(value: Any) -> Optional[int]:
    if _blank(value):
        return None
    score = _as_int(value, "overall", "Overall must be between 1 and 5")
    if not 1 <= score <= 5:
        raise ValidationError("Overall must be between 1 and 5", field="overall", value=score)
    return score


def build_attendance_payload(form: Form, editing: bool) -> Dict[str, Any]:
    """Attendance for a schedule: several kids at once on create, exactly one on update."""
    kids = form.get("play_kid_id")
    if not isinstance(kids, (list, tuple)):
        kids = [] if _blank(kids) else [kids]
    if not kids:
        raise ValidationError("Play Kids are required", field="play_kid_id")
    kid_ids = [_as_int(k, "play_kid_id", "Play Kids are required") for k in kids]
    coach = form.get("coach_id")
    return {
        "coach_id": None if _blank(coach) else _as_int(coach, "coach_id", "Invalid coach"),
        "play_kid_id": kid_ids[0] if editing else kid_ids,
        "attendance": bool(form.get("attendance")),
        "motorik": _optional_text(form, "motorik"),
        "locomotor": _optional_text(form, "locomotor"),
        "body_control": _optional_text(form, "body_control"),
        "overall": _overall(form.get("overall")),
    }


def build_report_update(report: Form, session: Optional[Form]) -> Dict[str, Any]:
    """PUT body for an attendance report; a coach always submits as themself."""
    coach_id = report.get("coach_id")
    if session and str(session.get("role", "")).lower() == "coach":
        coach = session.get("coach") if isinstance(session.get("coach"), Mapping) else {}
        coach_id = coach.get("id", coach_id)
    return {
        "coach_id": coach_id,
        "motorik": report.get("motorik"),
        "locomotor": report.get("locomotor"),
        "body_control": report.get("body_control"),
        "attendance": 1 if report.get("attendance") else 0,
        "overall": _overall(report.get("overall")),
    }


# ---------------------------------------------------------------------------
# play kids, memberships, sessions
# ---------------------------------------------------------------------------

def build_play_kid_form(form: Form, editing: bool, has_new_photo: bool) -> Dict[str, Any]:
    """Multipart text fields for a play kid; the photo file itself is attached by the caller."""
    require(form, ("parent_id", "name", "birth_date", "gender"))
    gender = _text(form, "gender")
    if gender not in GENDERS:
        raise ValidationError("Gender must be M or F", field="gender", value=gender)
    fields: Dict[str, Any] = {
        "_method": "PUT" if editing else "POST",
        "parent_id": str(form.get("parent_id")),
        "name": _text(form, "name"),
        "nick_name": _text(form, "nick_name"),
        "birth_date": _iso(form.get("birth_date")) or _text(form, "birth_date"),
        "gender": gender,
        "medical_history": _text(form, "medical_history"),
        "school_origin": _text(form, "school_origin"),
    }
    if editing and not has_new_photo and form.get("photo"):
        fields["existing_photo"] = str(form["photo"])
    return fields


def parents_only(users: Iterable[Form]) -> List[Form]:
    return [u for u in users if str(u.get("role", "")).lower() == "parent"]


def months_between(start: Any, end: Any) -> int:
    """Whole months between two dates, counted as 30-day blocks and rounded."""
    a, b = parse_date(start), parse_date(end)
    if a is None or b is None:
        return 0
    return round((b - a).days / 30)


def build_membership_payload(form: Form, play_kid_id: Any, editing: bool,
                             today: Optional[date] = None) -> Dict[str, Any]:
    registered = _iso(form.get("registered_date"))
    if not registered and not editing:
        registered = (today or date.today()).isoformat()
    require({**form, "registered_date": registered}, ("branch_id", "registered_date", "valid_until"))
    valid_until = _as_int(form["valid_until"], "valid_until", "Valid until must be a number of months")
    if valid_until <= 0:
        raise ValidationError("Valid until must be at least 1 month", field="valid_until", value=valid_until)
    status = _text(form, "status") or "active"
    if status not in MEMBERSHIP_STATUSES:
        raise ValidationError("Status must be active or inactive", field="status", value=status)
    return {
        "play_kid_id": _as_int(play_kid_id, "play_kid_id", "No play kid selected"),
        "branch_id": _as_int(form["branch_id"], "branch_id", ALL_FIELDS_REQUIRED),
        "registered_date": registered,
        "valid_until": valid_until,
        "status": status,
    }


def build_session_payload(form: Form, editing: bool, today: Optional[date] = None) -> Dict[str, Any]:
    message = "Please fill in all required fields correctly"
    purchase = _iso(form.get("purchase_date"))
    if not purchase and not editing:
        purchase = (today or date.today()).isoformat()
    membership_id = form.get("membership_id")
    count = _as_int(form.get("count") or 0, "count", message)
    expiry = _as_int(form.get("expiry_date") or 0, "expiry_date", message)
    if _blank(membership_id) or count <= 0 or not purchase or expiry <= 0:
        raise ValidationError(message, field="membership_id", value=membership_id)
    return {
        "membership_id": _as_int(membership_id, "membership_id", message),
        "count": count,
        "expiry_date": expiry,
        "purchase_date": purchase,
    }


# ---------------------------------------------------------------------------
# spreadsheet import
# ---------------------------------------------------------------------------

def validate_import_file(filename: str, size: int, allowed: Sequence[str] = (".xlsx", ".xls", ".csv"),
                         max_mb: float = 10) -> None:
    name = (filename or "").lower()
    if not name:
        raise FileOperationError("Pilih file terlebih dahulu", operation="import")
    if not any(name.endswith(ext) for ext in allowed):
        raise FileOperationError("File harus dalam format Excel (.xlsx, .xls) atau CSV", file_path=filename, operation="import")
    if size > max_mb * 1024 * 1024:
        raise FileOperationError(f"File terlalu besar. Maksimal {max_mb:g}MB", file_path=filename, operation="import")


def import_summary(result: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalise an import response into counts, errors, warnings and a headline."""
    data = result.get("data") if isinstance(result.get("data"), Mapping) else result
    imported = int(data.get("imported_count") or 0)
    updated = int(data.get("updated_count") or 0)
    skipped = int(data.get("skipped_count") or 0)
    return {
        "imported_count": imported,
        "updated_count": updated,
        "skipped_count": skipped,
        "errors": list(data.get("errors") or []),
        "warnings": list(data.get("warnings") or []),
        "message": f"Import berhasil: {imported} data baru, {updated} data diperbarui",
    }
