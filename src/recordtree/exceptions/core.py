"""
Exception classes for recordtree.

This module defines the exception types raised while reflecting records,
resolving paths and evaluating validation rules. Rule violations carry the
error code they are reported under so the rule engine can translate them
into findings without a lookup table.
"""

from typing import Any

from recordtree.core.types import ErrorCode


class RecordTreeError(Exception):
    """Base exception for all recordtree errors."""

    pass


class NilReferenceError(RecordTreeError):
    """Raised when dereferencing an unset (None) value."""

    def __init__(self, field_name: str | None = None):
        """
        Initialize the exception.

        Params:
            field_name: Native name of the field holding the unset value, if known
        """
        self.field_name = field_name
        if field_name:
            super().__init__(f"Field '{field_name}' is not set")
        else:
            super().__init__("nil reference")


class PathResolutionError(RecordTreeError):
    """Raised when a path name does not address a value in a record."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: The path name that could not be resolved
            reason: Why the path could not be resolved
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot resolve path '{path}': {reason}")


class RuleViolationError(RecordTreeError):
    """Base exception for a validation rule that rejected a value."""

    code: ErrorCode = ErrorCode.INVALID_VALUE

    def __init__(self, rule: str, reason: str, value: Any = None):
        """
        Initialize the exception.

        Params:
            rule: Keyword of the rule that failed (e.g. "min", "email")
            reason: Human readable explanation of the failure
            value: The offending value
        """
        self.rule = rule
        self.reason = reason
        self.value = value
        super().__init__(f"Rule '{rule}' failed: {reason}")


class MalformedRuleValueError(RuleViolationError):
    """Raised when the value of a rule (min=..., regex=...) cannot be parsed."""

    code = ErrorCode.INVALID_VALUE


class TypeMismatchError(RuleViolationError):
    """Raised when a rule is applied to a value of an incompatible kind."""

    code = ErrorCode.INVALID_TYPE


class FormatViolationError(RuleViolationError):
    """Raised when a string does not match the format a rule requires."""

    code = ErrorCode.INVALID_FORMAT


class RangeViolationError(RuleViolationError):
    """Raised when a numeric value falls outside a min/max/eq bound."""

    code = ErrorCode.INVALID_VALUE


class LengthViolationError(RuleViolationError):
    """Raised when the length of a string or collection falls outside a bound."""

    code = ErrorCode.INVALID_LENGTH


class MembershipViolationError(RuleViolationError):
    """Raised when a value is not one of the accepted options."""

    code = ErrorCode.INVALID_VALUE
