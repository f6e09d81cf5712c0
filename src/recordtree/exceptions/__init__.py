"""
recordtree exception classes.

This package provides all exception types used throughout recordtree for
consistent error handling and reporting.
"""

from recordtree.exceptions.core import (
    FormatViolationError,
    LengthViolationError,
    MalformedRuleValueError,
    MembershipViolationError,
    NilReferenceError,
    PathResolutionError,
    RangeViolationError,
    RecordTreeError,
    RuleViolationError,
    TypeMismatchError,
)

__all__ = [
    "RecordTreeError",
    "NilReferenceError",
    "PathResolutionError",
    "RuleViolationError",
    "MalformedRuleValueError",
    "TypeMismatchError",
    "FormatViolationError",
    "RangeViolationError",
    "LengthViolationError",
    "MembershipViolationError",
]
