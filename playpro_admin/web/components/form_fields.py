"""Declarative form fields rendered inside ``st.form``."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import streamlit as st

from playpro_admin.core.lookups import parse_date

Options = Sequence[Tuple[Any, str]]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: str = "text"  # text | textarea | password | number | checkbox | select | date | time
    options: Options = ()
    help: Optional[str] = None
    min_value: Optional[int] = None


def _parse_time(value: Any) -> Optional[time]:
    if not value:
        return None
    try:
        return time.fromisoformat(str(value)[:5])
    except ValueError:
        return None


def render_fields(fields: Sequence[FieldSpec], record: Optional[Mapping[str, Any]], key: str) -> Dict[str, Any]:
    """Render ``fields`` prefilled from ``record`` and return the raw values."""
    record = record or {}
    values: Dict[str, Any] = {}
    for f in fields:
        current = record.get(f.name)
        wkey = f"{key}_{f.name}"
        if f.kind == "textarea":
            values[f.name] = st.text_area(f.label, value=str(current or ""), key=wkey, help=f.help)
        elif f.kind == "password":
            values[f.name] = st.text_input(f.label, type="password", key=wkey, help=f.help)
        elif f.kind == "number":
            values[f.name] = st.number_input(f.label, min_value=f.min_value, value=int(current or 0), step=1,
                                             key=wkey, help=f.help)
        elif f.kind == "checkbox":
            values[f.name] = st.checkbox(f.label, value=bool(current), key=wkey, help=f.help)
        elif f.kind == "select":
            ids = [None] + [v for v, _ in f.options]
            labels = {v: lbl for v, lbl in f.options}
            index = next((i for i, v in enumerate(ids) if v is not None and str(v) == str(current)), 0)
            values[f.name] = st.selectbox(f.label, ids, index=index, key=wkey, help=f.help,
                                          format_func=lambda v, labels=labels: "- pilih -" if v is None else labels.get(v, str(v)))
        elif f.kind == "date":
            picked = st.date_input(f.label, value=parse_date(current), key=wkey, help=f.help,
                                   min_value=date(1990, 1, 1))
            values[f.name] = picked.isoformat() if isinstance(picked, date) else None
        elif f.kind == "time":
            picked = st.time_input(f.label, value=_parse_time(current), key=wkey, help=f.help, step=300)
            values[f.name] = picked.strftime("%H:%M") if picked else None
        else:
            values[f.name] = st.text_input(f.label, value=str(current or ""), key=wkey, help=f.help)
    return values


def options_from(items: Sequence[Mapping[str, Any]], label_key: str = "name") -> Options:
    return [(i.get("id"), str(i.get(label_key) or f"#{i.get('id')}")) for i in items]
