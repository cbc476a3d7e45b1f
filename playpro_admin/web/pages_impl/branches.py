from __future__ import annotations

from playpro_admin.api.resources import BRANCHES
from playpro_admin.core.forms import build_named_payload
from playpro_admin.core.table import Column
from playpro_admin.web.components.crud import ResourcePage, render_resource_page
from playpro_admin.web.components.form_fields import FieldSpec

PAGE = ResourcePage(
    key="branches",
    title="🏢 Branches",
    entity="Branch",
    endpoint=BRANCHES,
    columns=lambda lookups: [
        Column("name", "Name"),
        Column("description", "Description"),
        Column("address", "Address"),
    ],
    fields=lambda lookups, editing: [
        FieldSpec("name", "Name"),
        FieldSpec("description", "Description", "textarea"),
        FieldSpec("address", "Address", "textarea"),
    ],
    build_payload=lambda form, editing, lookups: build_named_payload(form, "Branch", ("description", "address")),
)


def render() -> None:
    render_resource_page(PAGE)
