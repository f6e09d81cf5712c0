"""
recordtree - Flatten pydantic records into addressable attributes and validate them

recordtree walks a record into a depth-first list of attributes with stable
path names (``contact.emails[0]``) and evaluates declarative per-field rules
against them.
"""

from importlib.metadata import version

from recordtree.core import ErrorCode, Record, tagged
from recordtree.exceptions import (
    NilReferenceError,
    PathResolutionError,
    RecordTreeError,
    RuleViolationError,
)
from recordtree.structure import (
    Attribute,
    FieldKind,
    Tags,
    all_values,
    contains_any,
    declarations,
    fields,
    find_attribute,
    get_value,
    keyed_values,
    matching_fields,
    primary_value,
    set_value,
    set_values_from_bytes,
    set_values_from_map,
    strip_keys,
    walk,
)
from recordtree.validation import (
    DecodeResult,
    DecoderOptions,
    DecodingRule,
    ValidationOptions,
    decode,
    validate,
    validate_attribute,
    validate_payload,
)

__version__ = version("recordtree")

__all__ = [
    "__version__",
    # Records
    "Record",
    "tagged",
    "ErrorCode",
    # Structure
    "Attribute",
    "FieldKind",
    "Tags",
    "walk",
    "fields",
    "declarations",
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
    # Validation
    "validate",
    "validate_attribute",
    "validate_payload",
    "decode",
    "DecodeResult",
    "ValidationOptions",
    "DecoderOptions",
    "DecodingRule",
    # Exceptions
    "RecordTreeError",
    "NilReferenceError",
    "PathResolutionError",
    "RuleViolationError",
]
