from __future__ import annotations

from typing import Any

from pydantic_core import to_json


def _json_fallback(obj: Any) -> Any:
    """Serialize objects pydantic does not know by their public attributes, else as text."""
    try:
        attrs = vars(obj)
    except TypeError:
        return str(obj)
    return {k: v for k, v in attrs.items() if not k.startswith("_")}


def stringify(value: Any) -> str:
    """Coerce an evaluated value to text: None -> '', str unchanged, others as compact JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return to_json(value, fallback=_json_fallback).decode("utf-8")
