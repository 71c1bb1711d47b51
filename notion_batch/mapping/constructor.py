"""
Mappers that build objects by calling their constructor with keyword arguments.
"""

from __future__ import annotations

import dataclasses
import inspect
from abc import abstractmethod
from typing import NamedTuple

from requests.structures import CaseInsensitiveDict

from notion_batch.errors import MappingError
from notion_batch.mapping.base import CaseInsensitivePropertyMapper, T


class _Parameter(NamedTuple):
    name: str
    has_default: bool


class ConstructorBasedPropertyMapper(CaseInsensitivePropertyMapper[T]):
    """
    Passes properties to constructor parameters with the same name (case-insensitive).

    A missing property becomes None, unless the parameter declares a default,
    in which case the default applies.
    """

    def __init__(self, target_type: type[T]) -> None:
        if not isinstance(target_type, type):
            raise ValueError(f"Expected a class, got {target_type!r}")
        self.target_type = target_type
        self._parameters = self._constructor_parameters(target_type)

    @abstractmethod
    def _constructor_parameters(self, target_type: type[T]) -> list[_Parameter]:
        ...

    def map_case_insensitive(self, properties: CaseInsensitiveDict) -> T:
        kwargs = {}
        for parameter in self._parameters:
            if parameter.name in properties:
                kwargs[parameter.name] = properties[parameter.name]
            elif not parameter.has_default:
                kwargs[parameter.name] = None

        try:
            return self.target_type(**kwargs)
        except (TypeError, ValueError) as e:
            raise MappingError(f"Cannot create {self.target_type.__name__} from properties: {e}") from e


class ConstructorPropertyMapper(ConstructorBasedPropertyMapper[T]):
    """
    Mapper for classes whose ``__init__`` takes the item properties.

    Parameter names must match the Notion property names (case-insensitive).
    Variadic positional and positional-only parameters are rejected.
    """

    def _constructor_parameters(self, target_type: type[T]) -> list[_Parameter]:
        try:
            signature = inspect.signature(target_type)
        except (TypeError, ValueError) as e:
            raise ValueError(f"No constructor found for type: {target_type!r}") from e

        parameters = []
        for p in signature.parameters.values():
            if p.kind is inspect.Parameter.VAR_KEYWORD:
                continue
            if p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.POSITIONAL_ONLY):
                raise ValueError(
                    f"Constructor parameter '{p.name}' of {target_type.__name__} cannot be passed by name"
                )
            parameters.append(_Parameter(p.name, p.default is not inspect.Parameter.empty))
        return parameters


class DataclassPropertyMapper(ConstructorBasedPropertyMapper[T]):
    """
    Mapper for dataclasses.

    Uses the generated ``__init__``; field names must match the Notion
    property names (case-insensitive).
    """

    def _constructor_parameters(self, target_type: type[T]) -> list[_Parameter]:
        if not dataclasses.is_dataclass(target_type):
            raise ValueError(f"{target_type.__name__} is not a dataclass")
        return [
            _Parameter(
                f.name,
                f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING,
            )
            for f in dataclasses.fields(target_type)
            if f.init
        ]
