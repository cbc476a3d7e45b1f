"""Display helpers shared by the list pages."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

INDONESIAN_MONTHS = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


def get_name_by_id(item_id: Any, items: Iterable[Mapping[str, Any]]) -> Any:
    """Name of the item whose ``id`` equals ``item_id``; the id itself when not found."""
    for item in items or ():
        if str(item.get("id")) == str(item_id):
            return item.get("name")
    return item_id


def number_with_commas(value: Any) -> str:
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


def storage_url(path: Optional[str], base_url: str) -> Optional[str]:
    """Public URL of a stored file; the backend returns paths prefixed with ``storage/``."""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.replace('storage/', '', 1).lstrip('/')}"


def gender_label(value: Any) -> str:
    return {"M": "Male", "F": "Female"}.get(str(value or ""), str(value or "-"))


def format_time(value: Any) -> str:
    """``"08:30:00"`` -> ``"08:30"``."""
    if not value:
        return ""
    return str(value)[:5]


def format_date_dmy(value: Optional[str]) -> str:
    """``"2025-08-01"`` -> ``"01-08-2025"``; other strings are returned unchanged."""
    if not value:
        return "-"
    parts = str(value)[:10].split("-")
    if len(parts) != 3 or not all(parts):
        return str(value)
    year, month, day = parts
    return f"{day}-{month}-{year}"


def parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def age_in_years(birth_date: Any, today: Optional[date] = None) -> Optional[int]:
    """Completed years since ``birth_date``."""
    born = parse_date(birth_date)
    if born is None:
        return None
    today = today or date.today()
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def indonesian_month(value: Any) -> str:
    """``"2025-08-14"`` -> ``"Agustus 2025"``; unparsable input is returned raw."""
    if not value:
        return "-"
    d = parse_date(value)
    if d is None:
        return str(value)
    return f"{INDONESIAN_MONTHS[d.month - 1]} {d.year}"
