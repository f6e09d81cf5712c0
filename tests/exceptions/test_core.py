"""
Tests for recordtree exception types.

This module tests exception messages, stored context and the error code
each rule violation is reported under.
"""

from recordtree.core.types import ErrorCode
from recordtree.exceptions import (
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


class TestNilReferenceError:
    """Tests for NilReferenceError."""

    def test_with_field_name(self):
        """Test the message when the field is known."""
        error = NilReferenceError("contact")
        assert error.field_name == "contact"
        assert str(error) == "Field 'contact' is not set"

    def test_without_field_name(self):
        """Test the message when the field is unknown."""
        assert str(NilReferenceError()) == "nil reference"
        assert isinstance(NilReferenceError(), RecordTreeError)


class TestPathResolutionError:
    """Tests for PathResolutionError."""

    def test_context_is_stored(self):
        """Test that the path and reason are available."""
        error = PathResolutionError("contact.fax", "no such attribute")
        assert error.path == "contact.fax"
        assert error.reason == "no such attribute"
        assert str(error) == "Cannot resolve path 'contact.fax': no such attribute"


class TestRuleViolationErrors:
    """Tests for rule violation exceptions."""

    def test_context_is_stored(self):
        """Test that the rule, reason and value are available."""
        error = LengthViolationError("min", "length 1 violates min=2", "a")
        assert error.rule == "min"
        assert error.value == "a"
        assert str(error) == "Rule 'min' failed: length 1 violates min=2"

    def test_codes(self):
        """Test the error code of each violation."""
        assert MalformedRuleValueError.code is ErrorCode.INVALID_VALUE
        assert TypeMismatchError.code is ErrorCode.INVALID_TYPE
        assert FormatViolationError.code is ErrorCode.INVALID_FORMAT
        assert RangeViolationError.code is ErrorCode.INVALID_VALUE
        assert LengthViolationError.code is ErrorCode.INVALID_LENGTH
        assert MembershipViolationError.code is ErrorCode.INVALID_VALUE

    def test_hierarchy(self):
        """Test that every violation is a RuleViolationError."""
        for error_type in [
            MalformedRuleValueError,
            TypeMismatchError,
            FormatViolationError,
            RangeViolationError,
            LengthViolationError,
            MembershipViolationError,
        ]:
            assert issubclass(error_type, RuleViolationError)
            assert issubclass(error_type, RecordTreeError)

    def test_code_values_are_wire_strings(self):
        """Test the string form of error codes."""
        assert ErrorCode.INVALID_LENGTH.value == "INVALID_LENGTH"
        assert ErrorCode.REQUIRED_ATTRIBUTE_MISSING.value == "REQUIRED_ATTRIBUTE_MISSING"
        assert ErrorCode.INVALID_PAYLOAD.value == "INVALID_PAYLOAD"
