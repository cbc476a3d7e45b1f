from __future__ import annotations

from playpro_admin.api.resources import BRANCHES, VENUES
from playpro_admin.core.forms import build_venue_payload
from playpro_admin.core.lookups import get_name_by_id
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.web.components.crud import ResourcePage, render_resource_page
from playpro_admin.web.components.form_fields import FieldSpec, options_from

PAGE = ResourcePage(
    key="venues",
    title="📍 Venues",
    entity="Venue",
    endpoint=VENUES,
    lookups={"branches": BRANCHES},
    columns=lambda lookups: [
        Column("name", "Name"),
        Column("address", "Address"),
        Column("branch_id", "Branch", accessor=lambda r: get_name_by_id(r.get("branch_id"), lookups["branches"])),
        Column("capacity", "Capacity"),
    ],
    filters=lambda lookups: [
        FilterSpec("branch_id", "Branch", accessor=lambda r: get_name_by_id(r.get("branch_id"), lookups["branches"])),
    ],
    fields=lambda lookups, editing: [
        FieldSpec("name", "Name"),
        FieldSpec("address", "Address", "textarea"),
        FieldSpec("branch_id", "Branch", "select", options=options_from(lookups["branches"])),
        FieldSpec("capacity", "Capacity", "number", min_value=0),
    ],
    build_payload=lambda form, editing, lookups: build_venue_payload(form),
)


def render() -> None:
    render_resource_page(PAGE)
