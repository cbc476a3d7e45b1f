from __future__ import annotations

from playpro_admin.api.resources import PRODUCTS
from playpro_admin.core.forms import build_product_payload
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.web.components.crud import ResourcePage, render_resource_page
from playpro_admin.web.components.form_fields import FieldSpec

PAGE = ResourcePage(
    key="products",
    title="📦 Products",
    entity="Product",
    endpoint=PRODUCTS,
    columns=lambda lookups: [
        Column("name", "Name"),
        Column("session_count", "Session Count"),
        Column("is_membership", "Membership", formatter=lambda v: "Yes" if v else "No"),
    ],
    filters=lambda lookups: [
        FilterSpec("is_membership", "Membership", accessor=lambda r: bool(r.get("is_membership"))),
    ],
    fields=lambda lookups, editing: [
        FieldSpec("name", "Name"),
        FieldSpec("session_count", "Session Count", "number", min_value=0),
        FieldSpec("is_membership", "Membership product", "checkbox"),
    ],
    build_payload=lambda form, editing, lookups: build_product_payload(form),
)


def render() -> None:
    render_resource_page(PAGE)
