"""
Conversion between Notion page property objects and plain Python values.

Reading reduces each property object to a value (text, number, option name, ...).
Writing builds the property payload for a create-page request.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from loguru import logger

# Notion rejects text content longer than this in a single rich text object
MAX_TEXT_LENGTH = 2000


# ============================================================================
# READ
# ============================================================================


def plain_text(fragments: list[dict[str, Any]] | None) -> str:
    """Concatenate the plain text of a rich text array ("" when empty)."""
    if not fragments:
        return ""
    return "".join(
        fragment.get("plain_text") or fragment.get("text", {}).get("content", "")
        for fragment in fragments
    )


def _option_name(value: dict[str, Any] | None) -> str | None:
    return value.get("name") if value else None


def _date_start(value: dict[str, Any] | None) -> str | None:
    return value.get("start") if value else None


def _formula(value: dict[str, Any] | None) -> Any:
    if not value:
        return None
    inner = value.get(value.get("type", ""))
    if isinstance(inner, dict) and "start" in inner:
        return inner.get("start")
    return inner


def _unique_id(value: dict[str, Any] | None) -> Any:
    if not value:
        return None
    prefix, number = value.get("prefix"), value.get("number")
    return f"{prefix}-{number}" if prefix else number


def _raw(value: Any) -> Any:
    return value


_EXTRACTORS: dict[str, Callable[[Any], Any]] = {
    "title": plain_text,
    "rich_text": plain_text,
    "number": _raw,
    "checkbox": _raw,
    "url": _raw,
    "email": _raw,
    "phone_number": _raw,
    "created_time": _raw,
    "last_edited_time": _raw,
    "select": _option_name,
    "status": _option_name,
    "multi_select": lambda options: [o.get("name") for o in options or []],
    "date": _date_start,
    "formula": _formula,
    "unique_id": _unique_id,
    "relation": lambda refs: [r.get("id") for r in refs or []],
    "people": lambda people: [p.get("id") for p in people or []],
}


def property_value(prop: dict[str, Any] | None) -> Any:
    """
    Reduce a page property object to a plain value.

    Title and rich text become their plain text, selects their option name,
    dates their start, and so on. Unsupported types map to None.
    """
    if not prop:
        return None

    prop_type = prop.get("type")
    if prop_type is None:
        prop_type = "title" if "title" in prop else "rich_text"

    extractor = _EXTRACTORS.get(prop_type)
    if extractor is None:
        logger.debug(f"Unsupported Notion property type '{prop_type}'; mapping to None")
        return None
    return extractor(prop.get(prop_type))


def page_properties(page: dict[str, Any]) -> dict[str, Any]:
    """Return ``{property name: plain value}`` for a page object."""
    properties = page.get("properties") or {}
    return {name: property_value(prop) for name, prop in properties.items()}


# ============================================================================
# WRITE
# ============================================================================


def text_fragments(text: str) -> list[dict[str, Any]]:
    """Build a rich text array, split to respect the per-object length limit."""
    return [
        {"type": "text", "text": {"content": text[i : i + MAX_TEXT_LENGTH]}}
        for i in range(0, len(text), MAX_TEXT_LENGTH)
    ]


def to_property_payload(value: Any, title: bool = False) -> dict[str, Any]:
    """
    Build the property payload for a create-page request from a Python value.

    Args:
        value: Value to write
        title: Render as the database title property

    Returns:
        Property payload, e.g. ``{"number": 42}``
    """
    if title:
        return {"title": text_fragments("" if value is None else str(value))}
    if value is None:
        return {"rich_text": []}
    if isinstance(value, bool):
        return {"checkbox": value}
    if isinstance(value, (int, float)):
        return {"number": value}
    if isinstance(value, Decimal):
        return {"number": float(value)}
    if isinstance(value, (datetime, date)):
        return {"date": {"start": value.isoformat()}}
    if isinstance(value, Enum):
        return {"select": {"name": str(value.value)}}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {"multi_select": [{"name": str(v)} for v in value]}
    return {"rich_text": text_fragments(str(value))}
