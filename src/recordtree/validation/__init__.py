"""
recordtree validation components.

This package provides the validation rules, the rule evaluation engine,
payload decoding and validation options.
"""

from recordtree.validation.decoder import (
    DECODING_ERRORS,
    DecodeResult,
    DecoderOptions,
    DecodingRule,
    decode,
    path_from_loc,
    validate_payload,
)
from recordtree.validation.engine import validate, validate_attribute
from recordtree.validation.options import ValidationOptions, create_validation_options
from recordtree.validation.rules import (
    RULES,
    is_currency,
    is_email,
    is_in,
    is_rfc3339,
    is_url,
    is_uuid,
    is_valid_length,
    passes_regex,
)

__all__ = [
    "validate",
    "validate_attribute",
    "validate_payload",
    "decode",
    "path_from_loc",
    "DecodeResult",
    "DecoderOptions",
    "DecodingRule",
    "DECODING_ERRORS",
    "ValidationOptions",
    "create_validation_options",
    "RULES",
    "is_currency",
    "is_email",
    "is_in",
    "is_rfc3339",
    "is_url",
    "is_uuid",
    "is_valid_length",
    "passes_regex",
]
