"""
Core recordtree components.

This package provides the fundamental building blocks for recordtree
including the Record base class, field tagging and shared type definitions.
"""

from recordtree.core.record import Record, tagged
from recordtree.core.types import (
    NAME_TAG,
    NON_INHERITABLE_RULES,
    PAYLOAD_PATH,
    VALIDATION_TAG,
    ErrorCode,
    Validations,
)

__all__ = [
    "Record",
    "tagged",
    "ErrorCode",
    "Validations",
    "NAME_TAG",
    "VALIDATION_TAG",
    "NON_INHERITABLE_RULES",
    "PAYLOAD_PATH",
]
