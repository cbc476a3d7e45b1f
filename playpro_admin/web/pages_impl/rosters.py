from __future__ import annotations

from playpro_admin.api.resources import COACHES, ROSTERS, SCHEDULES
from playpro_admin.core.forms import build_roster_payload
from playpro_admin.core.lookups import get_name_by_id
from playpro_admin.core.table import Column
from playpro_admin.web.components.crud import ResourcePage, render_resource_page
from playpro_admin.web.components.form_fields import FieldSpec, options_from

_yes_no = lambda v: "Yes" if v else "No"  # noqa: E731

PAGE = ResourcePage(
    key="rosters",
    title="📋 Rosters",
    entity="Roster",
    endpoint=ROSTERS,
    label_key="id",
    lookups={"coaches": COACHES, "schedules": SCHEDULES},
    columns=lambda lookups: [
        Column("coach_id", "Coach", accessor=lambda r: get_name_by_id(r.get("coach_id"), lookups["coaches"])),
        Column("schedule_id", "Schedule", accessor=lambda r: get_name_by_id(r.get("schedule_id"), lookups["schedules"])),
        Column("is_head_coach", "Is Head Coach", formatter=_yes_no),
        Column("attendance", "Attendance", formatter=_yes_no),
    ],
    fields=lambda lookups, editing: [
        FieldSpec("coach_id", "Coach", "select", options=options_from(lookups["coaches"])),
        FieldSpec("schedule_id", "Schedule", "select", options=options_from(lookups["schedules"])),
        FieldSpec("is_head_coach", "Head coach", "checkbox"),
        FieldSpec("attendance", "Attended", "checkbox"),
    ],
    build_payload=lambda form, editing, lookups: build_roster_payload(form),
)


def render() -> None:
    render_resource_page(PAGE)
