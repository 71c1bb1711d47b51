"""
Fluent builder for database query filters.

    where().checkbox("Active").is_equal_to(True)
        .and_().select("Status").is_not_empty()

    where(where().number("Score").is_greater_than(10).or_().number("Score").is_empty())
        .and_(where().multi_select("Tags").contains("batch"))

Chaining the same operator extends one compound filter; switching operator
nests what was built so far as the first operand of a new compound.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

_Finisher = Callable[["Filter"], "Filter"]


class Filter(ABC):
    """A filter condition of a database query."""

    @abstractmethod
    def to_notion(self) -> dict[str, Any]:
        """Render the ``filter`` object of a database query request."""

    def and_(self, other: Filter | None = None) -> Filter | FilterBuilder:
        """Join with ``other``, or return a builder whose condition will be joined."""
        return self._join("and", other)

    def or_(self, other: Filter | None = None) -> Filter | FilterBuilder:
        """Join with ``other``, or return a builder whose condition will be joined."""
        return self._join("or", other)

    def _join(self, operator: str, other: Filter | None) -> Filter | FilterBuilder:
        if other is None:
            return FilterBuilder(lambda f: self._combine(operator, f))
        if not isinstance(other, Filter):
            raise TypeError(f"Expected a Filter, got {other!r}")
        return self._combine(operator, other)

    def _combine(self, operator: str, other: Filter) -> Filter:
        return CompoundFilter(operator, (self, other))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return self.to_notion() == other.to_notion()

    def __hash__(self) -> int:
        return hash(repr(self.to_notion()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_notion()!r})"


class PropertyFilter(Filter):
    """Condition on a single property."""

    def __init__(self, property: str, property_type: str, condition: dict[str, Any]) -> None:
        self.property = property
        self.property_type = property_type
        self.condition = dict(condition)

    def to_notion(self) -> dict[str, Any]:
        return {"property": self.property, self.property_type: dict(self.condition)}


class CompoundFilter(Filter):
    """``and`` / ``or`` of nested filters."""

    OPERATORS = ("and", "or")

    def __init__(self, operator: str, filters: tuple[Filter, ...]) -> None:
        if operator not in self.OPERATORS:
            raise ValueError(f"Unknown compound operator: {operator!r}")
        self.operator = operator
        self.filters = tuple(filters)

    def _combine(self, operator: str, other: Filter) -> Filter:
        if operator == self.operator:
            return CompoundFilter(operator, (*self.filters, other))
        return super()._combine(operator, other)

    def to_notion(self) -> dict[str, Any]:
        return {self.operator: [f.to_notion() for f in self.filters]}


class FilterBuilder:
    """Entry point for a property condition."""

    def __init__(self, finisher: _Finisher | None = None) -> None:
        self._finisher = finisher or (lambda f: f)

    def checkbox(self, property: str) -> CheckboxCondition:
        return CheckboxCondition(property, self._finisher)

    def multi_select(self, property: str) -> MultiSelectCondition:
        return MultiSelectCondition(property, self._finisher)

    def number(self, property: str) -> NumberCondition:
        return NumberCondition(property, self._finisher)

    def select(self, property: str) -> SelectCondition:
        return SelectCondition(property, self._finisher)

    def rich_text(self, property: str) -> TextCondition:
        return TextCondition(property, self._finisher, "rich_text")

    def title(self, property: str) -> TextCondition:
        return TextCondition(property, self._finisher, "title")


def where(filter: Filter | None = None) -> Filter | FilterBuilder:
    """Start a filter, or group an existing one."""
    if filter is None:
        return FilterBuilder()
    if not isinstance(filter, Filter):
        raise TypeError(f"Expected a Filter, got {filter!r}")
    return filter


# ============================================================================
# PROPERTY CONDITIONS
# ============================================================================


class _Condition:
    property_type: str = ""

    def __init__(self, property: str, finisher: _Finisher) -> None:
        if not isinstance(property, str) or not property:
            raise ValueError("property must be a non-empty string")
        self._property = property
        self._finisher = finisher

    def _filter(self, operator: str, value: Any) -> Filter:
        return self._finisher(PropertyFilter(self._property, self.property_type, {operator: value}))


class _EmptinessMixin:
    def is_empty(self) -> Filter:
        return self._filter("is_empty", True)

    def is_not_empty(self) -> Filter:
        return self._filter("is_not_empty", True)


class CheckboxCondition(_Condition):
    property_type = "checkbox"

    def is_equal_to(self, value: bool) -> Filter:
        return self._filter("equals", value)

    def is_not_equal_to(self, value: bool) -> Filter:
        return self._filter("does_not_equal", value)


class MultiSelectCondition(_EmptinessMixin, _Condition):
    property_type = "multi_select"

    def contains(self, value: str) -> Filter:
        return self._filter("contains", value)

    def does_not_contain(self, value: str) -> Filter:
        return self._filter("does_not_contain", value)


class NumberCondition(_EmptinessMixin, _Condition):
    property_type = "number"

    def is_equal_to(self, value: float) -> Filter:
        return self._filter("equals", value)

    def is_not_equal_to(self, value: float) -> Filter:
        return self._filter("does_not_equal", value)

    def is_greater_than(self, value: float) -> Filter:
        return self._filter("greater_than", value)

    def is_greater_than_or_equal_to(self, value: float) -> Filter:
        return self._filter("greater_than_or_equal_to", value)

    def is_less_than(self, value: float) -> Filter:
        return self._filter("less_than", value)

    def is_less_than_or_equal_to(self, value: float) -> Filter:
        return self._filter("less_than_or_equal_to", value)


class SelectCondition(_EmptinessMixin, _Condition):
    property_type = "select"

    def is_equal_to(self, value: str) -> Filter:
        return self._filter("equals", value)

    def is_not_equal_to(self, value: str) -> Filter:
        return self._filter("does_not_equal", value)


class TextCondition(_EmptinessMixin, _Condition):
    def __init__(self, property: str, finisher: _Finisher, property_type: str) -> None:
        super().__init__(property, finisher)
        self.property_type = property_type

    def is_equal_to(self, value: str) -> Filter:
        return self._filter("equals", value)

    def is_not_equal_to(self, value: str) -> Filter:
        return self._filter("does_not_equal", value)

    def contains(self, value: str) -> Filter:
        return self._filter("contains", value)

    def does_not_contain(self, value: str) -> Filter:
        return self._filter("does_not_contain", value)

    def starts_with(self, value: str) -> Filter:
        return self._filter("starts_with", value)

    def ends_with(self, value: str) -> Filter:
        return self._filter("ends_with", value)
