"""
Core type definitions for recordtree.

This module contains the fundamental constants, type aliases and the error
code vocabulary shared by the structure and validation packages.
"""

from enum import Enum

# Tag whose primary value names a field in paths and payloads.
NAME_TAG = "json"

# Tag carrying the comma-separated validation rules of a field.
VALIDATION_TAG = "validate"

# Validation rules that constrain a list itself. Stripped from the primitive
# elements synthesized from the list.
NON_INHERITABLE_RULES = ("min", "max", "eq")

# Keys used inside a pydantic field's json_schema_extra.
TAGS_KEY = "tags"
EMBEDDED_KEY = "embedded"

# Path name reserved for findings about the payload as a whole.
PAYLOAD_PATH = "_"

Validations = dict[str, list[str]]


class ErrorCode(Enum):
    """Codes reported in validation findings."""

    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_LENGTH = "INVALID_LENGTH"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_VALUE = "INVALID_VALUE"

    # Produced by the payload decoder
    REQUIRED_ATTRIBUTE_MISSING = "REQUIRED_ATTRIBUTE_MISSING"
    ADDITIONAL_PROPERTY = "ADDITIONAL_PROPERTY"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"
