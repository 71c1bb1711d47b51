"""
Mapper for pydantic models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError
from requests.structures import CaseInsensitiveDict

from notion_batch.errors import MappingError
from notion_batch.mapping.base import CaseInsensitivePropertyMapper


class ModelPropertyMapper(CaseInsensitivePropertyMapper[BaseModel]):
    """
    Validates item properties into a pydantic model.

    Fields are matched by alias first, then by name, ignoring case. Missing
    properties are left out so field defaults apply.
    """

    def __init__(self, model: type[BaseModel]) -> None:
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise ValueError(f"{model!r} is not a pydantic model")
        self.model = model

    def map_case_insensitive(self, properties: CaseInsensitiveDict) -> BaseModel:
        data: dict[str, Any] = {}
        for name, field in self.model.model_fields.items():
            key = field.alias or name
            for candidate in (field.alias, name):
                if candidate and candidate in properties:
                    data[key] = properties[candidate]
                    break

        try:
            return self.model.model_validate(data)
        except ValidationError as e:
            raise MappingError(f"Cannot create {self.model.__name__} from properties: {e}") from e
