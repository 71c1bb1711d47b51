"""Helpers shared by writers."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel


def item_to_dict(item: Any) -> dict[str, Any]:
    """
    Turn an item into a field-name -> value dict.

    Supports dataclasses, pydantic models, mappings, and plain objects (their
    public instance attributes).
    """
    if isinstance(item, Mapping):
        return dict(item)
    if dataclasses.is_dataclass(item) and not isinstance(item, type):
        return {f.name: getattr(item, f.name) for f in dataclasses.fields(item)}
    if isinstance(item, BaseModel):
        return item.model_dump()
    if hasattr(item, "__dict__"):
        return {k: v for k, v in vars(item).items() if not k.startswith("_")}
    raise TypeError(f"Cannot convert {type(item).__name__} to a dict of fields")
