"""Autocomplete option lists for the condition editor (columns, operators)."""
from typing import Any, Iterable


def field_options(fields: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Searchable fields from the backend -> [{"label": display_name, "value": name}]"""
    return [
        {"label": f.get("display_name") or f.get("name") or "", "value": f.get("name") or ""}
        for f in fields
    ]


def operator_options(operators: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{"label": op.get("label") or "", "value": op.get("value") or ""} for op in operators]


def filter_options(options: Iterable[dict[str, Any]], query: str) -> list[dict[str, Any]]:
    q = (query or "").lower()
    return [o for o in options if q in str(o.get("label", "")).lower()]
