"""
Mapper for plain classes populated through attribute assignment.
"""

from __future__ import annotations

import inspect
from typing import Any

from loguru import logger
from requests.structures import CaseInsensitiveDict

from notion_batch.errors import MappingError
from notion_batch.mapping.base import CaseInsensitivePropertyMapper, T


def _class_attribute_names(target_type: type) -> set[str]:
    names: set[str] = set()
    for klass in reversed(target_type.__mro__[:-1]):
        names.update(getattr(klass, "__annotations__", {}))
        for name, value in vars(klass).items():
            if isinstance(value, property):
                if value.fset is not None:
                    names.add(name)
            elif not callable(value) and not isinstance(value, (classmethod, staticmethod)):
                names.add(name)
    return {n for n in names if not n.startswith("_")}


class AttributePropertyMapper(CaseInsensitivePropertyMapper[T]):
    """
    Mapper for classes that can be created without arguments.

    The instance is created with its default constructor, then every property
    whose name matches a public attribute (case-insensitive) is assigned to it.
    Properties without a matching attribute are ignored.
    """

    def __init__(self, target_type: type[T]) -> None:
        if not isinstance(target_type, type):
            raise ValueError(f"Expected a class, got {target_type!r}")
        self._check_default_constructor(target_type)
        self.target_type = target_type
        self._class_attributes = _class_attribute_names(target_type)

    @staticmethod
    def _check_default_constructor(target_type: type) -> None:
        try:
            parameters = inspect.signature(target_type).parameters.values()
        except (TypeError, ValueError):
            return
        required = [
            p.name
            for p in parameters
            if p.default is inspect.Parameter.empty
            and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        ]
        if required:
            raise ValueError(
                f"{target_type.__name__} must be instantiable without arguments; required: {', '.join(required)}"
            )

    def map_case_insensitive(self, properties: CaseInsensitiveDict) -> T:
        try:
            instance = self.target_type()
        except Exception as e:
            raise MappingError(f"Cannot instantiate {self.target_type.__name__}: {e}") from e

        writable = CaseInsensitiveDict(
            {name: name for name in self._class_attributes | set(self._instance_attributes(instance))}
        )
        for key, value in properties.items():
            attribute = writable.get(key)
            if attribute is None:
                logger.debug(f"No attribute of {self.target_type.__name__} matches property '{key}'")
                continue
            self._assign(instance, attribute, value)
        return instance

    @staticmethod
    def _instance_attributes(instance: Any) -> list[str]:
        return [n for n in getattr(instance, "__dict__", {}) if not n.startswith("_")]

    def _assign(self, instance: Any, attribute: str, value: Any) -> None:
        try:
            setattr(instance, attribute, value)
        except (AttributeError, TypeError, ValueError) as e:
            raise MappingError(f"Cannot set {self.target_type.__name__}.{attribute}: {e}") from e
