"""
recordtree structure components.

This package provides record reflection, tag queries, the attribute tree
walker and path-based access for recordtree.
"""

from recordtree.structure.access import (
    find_attribute,
    get_value,
    set_value,
    set_values_from_bytes,
    set_values_from_map,
)
from recordtree.structure.attribute import Attribute
from recordtree.structure.reflector import (
    FieldDeclaration,
    FieldKind,
    FieldView,
    classify,
    declarations,
    dereference,
    fields,
    matching_fields,
)
from recordtree.structure.tags import (
    Tags,
    all_values,
    contains_any,
    keyed_values,
    primary_value,
    strip_keys,
)
from recordtree.structure.walker import walk

__all__ = [
    "Attribute",
    "FieldDeclaration",
    "FieldKind",
    "FieldView",
    "Tags",
    "walk",
    "fields",
    "declarations",
    "classify",
    "dereference",
    "matching_fields",
    "primary_value",
    "all_values",
    "keyed_values",
    "contains_any",
    "strip_keys",
    "find_attribute",
    "get_value",
    "set_value",
    "set_values_from_map",
    "set_values_from_bytes",
]
