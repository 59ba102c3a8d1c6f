from __future__ import annotations

from types import SimpleNamespace
from typing import Any


def to_jsonable(value: Any) -> Any:
    if isinstance(value, SimpleNamespace):
        return {k: to_jsonable(v) for k, v in vars(value).items()}
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    return value


def extract_items(data: Any) -> list[Any]:
    """Rows of a list response, whether bare or wrapped in a paging envelope."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("data", "items", "subscribers", "campaigns"):
            rows = data.get(key)
            if isinstance(rows, list):
                return rows
    return []


def cell(row: Any, *keys: str) -> str:
    if not isinstance(row, dict):
        return "-"
    for key in keys:
        value = row.get(key)
        if value not in (None, ""):
            return str(value)
    return "-"


def parse_pairs(values: list[str] | None, *, option: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for raw in values or []:
        if "=" not in raw:
            raise ValueError(f"Invalid {option} '{raw}'. Expected '<name>=<value>'.")
        key, value = raw.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid {option} '{raw}'. Name cannot be empty.")
        out[key] = value
    return out
