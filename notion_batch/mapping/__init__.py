"""
Mapping of Notion item properties into Python objects.

Components:
- base: NotionPropertyMapper protocol, case-insensitive base, dict mapper
- attribute: plain classes populated by attribute assignment
- constructor: classes and dataclasses built through their constructor
- model: pydantic models
"""

from notion_batch.mapping.attribute import AttributePropertyMapper
from notion_batch.mapping.base import CaseInsensitivePropertyMapper, DictPropertyMapper, NotionPropertyMapper
from notion_batch.mapping.constructor import (
    ConstructorBasedPropertyMapper,
    ConstructorPropertyMapper,
    DataclassPropertyMapper,
)
from notion_batch.mapping.model import ModelPropertyMapper

__all__ = [
    "AttributePropertyMapper",
    "CaseInsensitivePropertyMapper",
    "ConstructorBasedPropertyMapper",
    "ConstructorPropertyMapper",
    "DataclassPropertyMapper",
    "DictPropertyMapper",
    "ModelPropertyMapper",
    "NotionPropertyMapper",
]
