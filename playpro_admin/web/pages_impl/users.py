from __future__ import annotations

from playpro_admin.api.resources import USERS
from playpro_admin.core.forms import USER_ROLES, build_user_payload
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.web.components.crud import ResourcePage, render_resource_page
from playpro_admin.web.components.form_fields import FieldSpec


def _fields(lookups, editing):
    return [
        FieldSpec("name", "Name"),
        FieldSpec("email", "Email"),
        FieldSpec("password", "Password", "password",
                  help="Leave empty to keep the current password." if editing else None),
        FieldSpec("role", "Role", "select", options=[(r, r.title()) for r in USER_ROLES]),
        FieldSpec("phone", "Phone"),
        FieldSpec("address", "Address", "textarea"),
    ]


PAGE = ResourcePage(
    key="users",
    title="👥 Users",
    entity="User",
    endpoint=USERS,
    columns=lambda lookups: [
        Column("name", "Name"),
        Column("email", "Email"),
        Column("role", "Role"),
        Column("phone", "Phone"),
        Column("address", "Address"),
    ],
    filters=lambda lookups: [FilterSpec("role", "Role")],
    fields=_fields,
    build_payload=lambda form, editing, lookups: build_user_payload(form, editing),
)


def render() -> None:
    render_resource_page(PAGE)
