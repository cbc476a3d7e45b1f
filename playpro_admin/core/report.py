"""
Report shaping and rendering.

- ``attendance_row`` / ``monthly_report_row`` flatten list payloads for the
  report tables
- ``build_report_view`` + ``render_report_html`` turn one monthly report
  payload into a printable HTML document
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from .lookups import age_in_years, format_date_dmy, format_time, indonesian_month, parse_date, storage_url

NO_ATTENDANCE = "Belum ada data kehadiran."
DASH = "-"
_INDEX_RE = re.compile(r"^(0|[1-9]\d*)$")


def _get(obj: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(obj, Mapping):
            return None
        obj = obj.get(key)
    return obj


def _or_dash(value: Any) -> str:
    return DASH if value is None or value == "" else str(value)


def play_kid_label(kid: Optional[Mapping[str, Any]]) -> str:
    if not kid:
        return DASH
    return kid.get("name") or kid.get("nick_name") or f"#{kid.get('id')}"


def is_submitted(report: Mapping[str, Any]) -> bool:
    """An attendance report counts as submitted once any assessment field is filled."""
    return any(report.get(k) for k in ("motorik", "locomotor", "body_control"))


def attendance_row(report: Mapping[str, Any]) -> Dict[str, Any]:
    schedule = report.get("schedule") or {}
    return {
        "id": report.get("id"),
        "play_kid": play_kid_label(report.get("play_kid")),
        "class": _or_dash(_get(schedule, "class_model", "name")),
        "start_time": format_time(schedule.get("start_time")) or DASH,
        "end_time": format_time(schedule.get("end_time")) or DASH,
        "date": _or_dash(schedule.get("date")),
        "attendance": "Present" if report.get("attendance") else "Absent",
        "status": "Submitted" if is_submitted(report) else "Not Submitted",
        "overall": _or_dash(report.get("overall")),
    }


def monthly_report_row(report: Mapping[str, Any]) -> Dict[str, Any]:
    cls = report.get("class") or {}
    branch = cls.get("branch") if isinstance(cls, Mapping) else None
    class_label = cls.get("name") or f"#{cls.get('id', DASH)}"
    entries = report.get("attendance_reports") or []
    first_date = entries[0].get("date") if entries else None
    return {
        "play_kid": play_kid_label(report.get("play_kid")),
        "class_branch": f"{class_label} — {branch['name']}" if branch and branch.get("name") else class_label,
        "month": indonesian_month(first_date),
        "attendance_count": len(entries),
    }


def age_years_months(birth_date: Any, today: Optional[date] = None) -> str:
    """``"{y} tahun {m} bulan"`` from calendar year and month differences."""
    born = parse_date(birth_date)
    if born is None:
        return DASH
    today = today or date.today()
    years = today.year - born.year
    months = today.month - born.month
    if months < 0:
        years -= 1
        months += 12
    return f"{years} tahun {months} bulan"


def age_label(birth_date: Any, today: Optional[date] = None) -> str:
    """``"N yrs"`` for the attendance report detail profile."""
    years = age_in_years(birth_date, today)
    return DASH if years is None else f"{years} yrs"


@dataclass
class ReportEntry:
    report_id: Any
    coach_name: str
    coach_photo: Optional[str]
    subtitle: str
    date: str
    motorik: str
    locomotor: str
    body_control: str


@dataclass
class ClassGroup:
    class_id: Any
    class_name: str
    entries: List[ReportEntry] = field(default_factory=list)


@dataclass
class ReportView:
    period: str
    kid_name: str
    age: str
    branch: str
    kid_photo: Optional[str]
    groups: List[ClassGroup]
    attendance_count: int

    @property
    def is_empty(self) -> bool:
        return not any(g.entries for g in self.groups)


def _class_subtitle(info: Optional[Mapping[str, Any]]) -> str:
    if not info:
        return ""
    sport = _get(info, "sport", "name") or ""
    category = _get(info, "category", "name")
    return f"{sport} — {category}" if category else str(sport)


def _class_key_order(keys: List[str]) -> List[str]:
    """Integer-like ids ascending, then the rest in insertion order (JS object key order)."""
    numeric = [k for k in keys if _INDEX_RE.match(k) and int(k) < 2 ** 32 - 1]
    rest = [k for k in keys if k not in numeric]
    return sorted(numeric, key=int) + rest


def build_report_view(payload: Mapping[str, Any], storage_base: str = "",
                      today: Optional[date] = None) -> ReportView:
    """Group attendance entries by class; groups ordered by numeric class id."""
    kid = payload.get("play_kid") or {}
    classes = {str(c.get("id")): c for c in payload.get("classes") or []}
    groups: Dict[str, ClassGroup] = {}
    for item in payload.get("attendance_reports") or []:
        cid = str(item.get("class_id"))
        if cid not in groups:
            groups[cid] = ClassGroup(class_id=item.get("class_id"), class_name=str(item.get("class_name") or ""))
        coach = item.get("coach") or {}
        groups[cid].entries.append(ReportEntry(
            report_id=item.get("id"),
            coach_name=_or_dash(coach.get("name")),
            coach_photo=storage_url(coach.get("photo"), storage_base) if storage_base else None,
            subtitle=_class_subtitle(classes.get(cid)),
            date=format_date_dmy(item.get("date")),
            motorik=_or_dash(item.get("motorik")),
            locomotor=_or_dash(item.get("locomotor")),
            body_control=_or_dash(item.get("body_control")),
        ))

    entries = payload.get("attendance_reports") or []
    return ReportView(
        period=str(payload.get("months_display") or ""),
        kid_name=str(kid.get("name") or DASH),
        age=age_years_months(kid.get("birth_date"), today),
        branch=_or_dash(_get(payload, "branch", "name")),
        kid_photo=storage_url(kid.get("photo"), storage_base) if storage_base else None,
        groups=[groups[k] for k in _class_key_order(list(groups))],
        attendance_count=int(payload.get("attendance_count") or len(entries)),
    )


_CSS = """
body { font-family: system-ui, sans-serif; margin: 0; }
.header { background: #1f3d56; color: #fff; padding: 24px 40px 40px; }
.header h1 { font-size: 40px; margin: 0; }
.period { color: rgba(255,255,255,.8); margin-top: 8px; }
.profile { display: flex; gap: 32px; align-items: center; margin-top: 24px; font-size: 20px; }
.profile img { width: 160px; height: 160px; border-radius: 50%; object-fit: cover; }
.profile .k { color: rgba(255,255,255,.7); }
.body { background: #f3f4f6; padding: 32px 40px 8px; }
.card { background: #1f3d56; color: #fff; border-radius: 12px; padding: 16px; margin-bottom: 24px; display: flex; gap: 16px; }
.card img { width: 25%; border-radius: 8px; object-fit: cover; }
.card .main { flex: 1; }
.card .top { display: flex; justify-content: space-between; }
.small { font-size: 12px; color: rgba(255,255,255,.7); }
.scores { display: grid; grid-template-columns: repeat(3, 1fr); gap: 16px; margin-top: 16px; }
.score { background: #fff; color: #111; border-radius: 8px; padding: 12px; min-height: 100px; text-align: center; }
.score p { font-weight: 600; }
.empty { color: #6b7280; padding: 16px 0; }
@media print { .card { break-inside: avoid; } }
"""


def _e(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _render_entry(entry: ReportEntry) -> str:
    photo = f'<img src="{_e(entry.coach_photo)}" alt="{_e(entry.coach_name)}">' if entry.coach_photo else ""
    scores = "".join(
        f'<div class="score"><p>{label}</p><span>{_e(value)}</span></div>'
        for label, value in (("Motoric", entry.motorik), ("Locomotor", entry.locomotor),
                             ("Body Control", entry.body_control))
    )
    return (
        f'<div class="card">{photo}<div class="main"><div class="top">'
        f'<div><div class="small">COACH</div><strong>{_e(entry.coach_name)}</strong>'
        f'<div class="small">{_e(entry.subtitle)}</div></div>'
        f'<div><div class="small">Tanggal</div><strong>{_e(entry.date)}</strong></div>'
        f'</div><div class="scores">{scores}</div></div></div>'
    )


def render_report_html(view: ReportView) -> str:
    """Standalone HTML document for one monthly report."""
    photo = f'<img src="{_e(view.kid_photo)}" alt="{_e(view.kid_name)}">' if view.kid_photo else ""
    if view.is_empty:
        body = f'<p class="empty">{NO_ATTENDANCE}</p>'
    else:
        body = "".join(
            f'<section data-class-id="{_e(g.class_id)}">' + "".join(_render_entry(e) for e in g.entries) + "</section>"
            for g in view.groups
        )
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\">"
        f"<title>Rapor Bulanan - {_e(view.kid_name)}</title><style>{_CSS}</style></head><body>"
        f'<div class="header"><h1>Rapor Bulanan</h1><p class="period">Periode : {_e(view.period)}</p>'
        f'<div class="profile">{photo}<div>'
        f'<p><span class="k">Nama</span> : <strong>{_e(view.kid_name)}</strong></p>'
        f'<p><span class="k">Umur</span> : <strong>{_e(view.age)}</strong></p>'
        f'<p><span class="k">Cabang</span> : <strong>{_e(view.branch)}</strong></p>'
        f"</div></div></div><div class=\"body\">{body}</div></body></html>"
    )


def report_filename(today: Optional[date] = None) -> str:
    return f"report-{(today or date.today()).isoformat()}.html"
