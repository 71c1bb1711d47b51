"""
Strategy interface for mapping Notion item properties into an object.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from requests.structures import CaseInsensitiveDict

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class NotionPropertyMapper(Protocol[T_co]):
    """Maps item properties, keyed by property name, into an object."""

    def map(self, properties: Mapping[str, Any]) -> T_co:
        ...


class CaseInsensitivePropertyMapper(ABC, Generic[T]):
    """Base for mappers that match property names regardless of case."""

    def map(self, properties: Mapping[str, Any]) -> T:
        return self.map_case_insensitive(CaseInsensitiveDict(properties))

    @abstractmethod
    def map_case_insensitive(self, properties: CaseInsensitiveDict) -> T:
        ...


class DictPropertyMapper:
    """Returns the properties as a plain dict."""

    def map(self, properties: Mapping[str, Any]) -> dict[str, Any]:
        return dict(properties)
