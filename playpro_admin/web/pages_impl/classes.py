from __future__ import annotations

from playpro_admin.api.resources import BRANCHES, CATEGORIES, CLASSES, SPORTS
from playpro_admin.core.forms import build_class_payload
from playpro_admin.core.lookups import get_name_by_id
from playpro_admin.core.table import Column, FilterSpec
from playpro_admin.web.components.crud import ResourcePage, render_resource_page
from playpro_admin.web.components.form_fields import FieldSpec, options_from


def _name_of(lookup: str, key: str, lookups):
    return lambda r: get_name_by_id(r.get(key), lookups[lookup])


PAGE = ResourcePage(
    key="classes",
    title="🎓 Classes",
    entity="Class",
    endpoint=CLASSES,
    caption="Class names are generated as “Sport - Category - Branch”.",
    lookups={"sports": SPORTS, "categories": CATEGORIES, "branches": BRANCHES},
    columns=lambda lookups: [
        Column("name", "Name"),
        Column("sport_id", "Sport", accessor=_name_of("sports", "sport_id", lookups)),
        Column("category_id", "Category", accessor=_name_of("categories", "category_id", lookups)),
        Column("branch_id", "Branch", accessor=_name_of("branches", "branch_id", lookups)),
    ],
    filters=lambda lookups: [
        FilterSpec("sport_id", "Sport", accessor=_name_of("sports", "sport_id", lookups)),
        FilterSpec("branch_id", "Branch", accessor=_name_of("branches", "branch_id", lookups)),
    ],
    fields=lambda lookups, editing: [
        FieldSpec("sport_id", "Sport", "select", options=options_from(lookups["sports"])),
        FieldSpec("category_id", "Category", "select", options=options_from(lookups["categories"])),
        FieldSpec("branch_id", "Branch", "select", options=options_from(lookups["branches"])),
    ],
    build_payload=lambda form, editing, lookups: build_class_payload(
        form, lookups["sports"], lookups["categories"], lookups["branches"]
    ),
)


def render() -> None:
    render_resource_page(PAGE)
