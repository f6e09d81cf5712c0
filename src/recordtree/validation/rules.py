"""
Validation rules for recordtree.

Each rule is a keyword in a field's ``validate`` tag, optionally followed by
``=value``:

    currency        ISO 4217 currency code
    datetime        RFC 3339 timestamp
    email           email address
    url             absolute URL
    uuid            lowercase hyphenated UUID (or a uuid.UUID value)
    regex=<re>      string containing a match for the pattern (no commas)
    in=a|b|c        one of the listed options; numbers compare by value
    min=<n>         length (strings, collections) or value (numbers) >= n
    max=<n>         length or value <= n
    eq=<n>          length or value == n

Rule checks return None when the value passes and raise a
RuleViolationError subclass otherwise. Format rules and ``in`` do nothing
on lists: the elements are validated individually.
"""

import re
import uuid
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import AnyUrl, EmailStr, TypeAdapter, ValidationError
from pydantic_extra_types.currency_code import ISO4217

from recordtree.exceptions import (
    FormatViolationError,
    LengthViolationError,
    MalformedRuleValueError,
    MembershipViolationError,
    NilReferenceError,
    RangeViolationError,
    RuleViolationError,
    TypeMismatchError,
)
from recordtree.structure.reflector import SEQUENCE_TYPES, dereference

CURRENCY = "currency"
DATETIME = "datetime"
EMAIL = "email"
EQUAL = "eq"
IN = "in"
MAX = "max"
MIN = "min"
REGEX = "regex"
URL = "url"
UUID = "uuid"

UUID_PATTERN = re.compile(
    r"^(?:[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})$"
)

RFC3339_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})(\.\d+)?"
    r"(?:[Zz]|[+-](\d{2}):(\d{2}))$"
)

SIZED_TYPES = (str, bytes, bytearray, list, tuple, dict, set, frozenset)
NUMBER_TYPES = (int, float, Decimal)

_email_adapter = TypeAdapter(EmailStr)
_url_adapter = TypeAdapter(AnyUrl)
_currency_adapter = TypeAdapter(ISO4217)

RuleCheck = Callable[[Any, str], None]


# MARK: - Predicates


def is_uuid(value: str) -> bool:
    """
    Check if value is a lowercase, hyphenated UUID string.

    Examples:
        is_uuid("2b852002-f19d-11ec-8ea0-0242ac120002") -> True
        is_uuid("someone-is-cool") -> False
    """
    return bool(UUID_PATTERN.match(value))


def is_rfc3339(value: str) -> bool:
    """Check if value is an RFC 3339 timestamp with a real calendar date and time."""
    match = RFC3339_PATTERN.match(value)
    if not match:
        return False

    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    offset_hours, offset_minutes = match.group(8), match.group(9)
    if offset_hours is not None and (int(offset_hours) > 23 or int(offset_minutes) > 59):
        return False

    try:
        datetime(year, month, day, hour, minute, second)
    except ValueError:
        return False
    return True


def is_email(value: str) -> bool:
    """Check if value is an email address (display-name form accepted)."""
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_url(value: str) -> bool:
    """Check if value is an absolute URL."""
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_currency(value: str) -> bool:
    """Check if value is an ISO 4217 currency code (case-insensitive)."""
    try:
        _currency_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def is_in(value: Any, accepted: list[str]) -> bool:
    """
    Check if value is one of the accepted options.

    Strings compare exactly. Numbers compare by value against every option
    that parses as a number; options that do not parse are skipped.

    Examples:
        is_in("GUEST", ["ADMIN", "GUEST"]) -> True
        is_in(7, ["1", "3", "5", "7"]) -> True
        is_in(2.0, ["2"]) -> True
        is_in(0, ["2a", "B"]) -> False
    """
    if isinstance(value, str):
        return value in accepted

    if not _is_number(value):
        return False

    for option in accepted:
        try:
            if float(option) == float(value):
                return True
        except ValueError:
            continue
    return False


def passes_regex(pattern: str, value: str) -> bool:
    """
    Check if value contains a match for pattern.

    An invalid pattern never passes.

    Examples:
        passes_regex(r"\\d+", "299") -> True
        passes_regex(r"^\\d{2}$", "299") -> False
    """
    try:
        return re.search(pattern, value) is not None
    except re.error:
        return False


def measure(value: Any) -> float | None:
    """
    Get the quantity min/max/eq compare against.

    Returns:
        The length of strings and collections, the value of numbers, or None
        for anything else
    """
    if isinstance(value, SIZED_TYPES):
        return float(len(value))
    if _is_number(value):
        return float(value)
    return None


def is_valid_length(value: Any, bound: float, rule: str) -> bool:
    """
    Check value against a min/max/eq bound.

    Values that cannot be measured never pass.
    """
    measured = measure(value)
    if measured is None:
        return False
    if rule == MIN:
        return measured >= bound
    if rule == MAX:
        return measured <= bound
    return measured == bound


def _is_number(value: Any) -> bool:
    return isinstance(value, NUMBER_TYPES) and not isinstance(value, bool)


# MARK: - Rule checks


def _operand(
    rule: str,
    value: Any,
    nil_violation: type[RuleViolationError],
    accepted: tuple[type, ...] = (str,),
) -> Any:
    """
    Resolve the value a scalar rule applies to.

    Returns:
        The value, or None when it is a list (its elements are checked instead)

    Raises:
        nil_violation: If the value is unset
        TypeMismatchError: If the value is not one of the accepted types
    """
    try:
        value = dereference(value)
    except NilReferenceError as e:
        raise nil_violation(rule, "value is not set") from e

    if isinstance(value, SEQUENCE_TYPES):
        return None

    if not isinstance(value, accepted) or isinstance(value, bool):
        raise TypeMismatchError(rule, f"cannot apply to {type(value).__name__}", value)
    return value


def check_currency(value: Any, argument: str = "") -> None:
    text = _operand(CURRENCY, value, MembershipViolationError)
    if text is not None and not is_currency(text):
        raise MembershipViolationError(CURRENCY, f"unknown currency code {text!r}", text)


def check_datetime(value: Any, argument: str = "") -> None:
    text = _operand(DATETIME, value, FormatViolationError)
    if text is not None and not is_rfc3339(text):
        raise FormatViolationError(DATETIME, f"{text!r} is not an RFC 3339 timestamp", text)


def check_email(value: Any, argument: str = "") -> None:
    text = _operand(EMAIL, value, FormatViolationError)
    if text is not None and not is_email(text):
        raise FormatViolationError(EMAIL, f"{text!r} is not an email address", text)


def check_url(value: Any, argument: str = "") -> None:
    text = _operand(URL, value, FormatViolationError)
    if text is not None and not is_url(text):
        raise FormatViolationError(URL, f"{text!r} is not a URL", text)


def check_uuid(value: Any, argument: str = "") -> None:
    if isinstance(value, uuid.UUID):
        return
    text = _operand(UUID, value, FormatViolationError)
    if text is not None and not is_uuid(text):
        raise FormatViolationError(UUID, f"{text!r} is not a UUID", text)


def check_regex(value: Any, argument: str = "") -> None:
    try:
        pattern = re.compile(argument)
    except re.error as e:
        raise MalformedRuleValueError(REGEX, f"invalid pattern {argument!r}: {e}") from e

    text = _operand(REGEX, value, FormatViolationError)
    if text is not None and pattern.search(text) is None:
        raise FormatViolationError(REGEX, f"{text!r} does not match {argument!r}", text)


def check_in(value: Any, argument: str = "") -> None:
    operand = _operand(IN, value, MembershipViolationError, (str, *NUMBER_TYPES))
    if operand is not None and not is_in(operand, argument.split("|")):
        raise MembershipViolationError(IN, f"{operand!r} is not one of {argument!r}", operand)


def _parse_bound(rule: str, argument: str) -> float:
    if not argument:
        raise MalformedRuleValueError(rule, "a numeric value is required")
    try:
        return float(argument)
    except ValueError as e:
        raise MalformedRuleValueError(rule, f"{argument!r} is not a number") from e


def _check_bound(rule: str, value: Any, argument: str) -> None:
    bound = _parse_bound(rule, argument)

    try:
        value = dereference(value)
    except NilReferenceError as e:
        raise RangeViolationError(rule, "value is not set") from e

    if measure(value) is None:
        raise TypeMismatchError(rule, f"cannot measure {type(value).__name__}", value)

    if is_valid_length(value, bound, rule):
        return

    if _is_number(value):
        raise RangeViolationError(rule, f"{value!r} violates {rule}={argument}", value)
    raise LengthViolationError(rule, f"length {len(value)} violates {rule}={argument}", value)


def check_min(value: Any, argument: str = "") -> None:
    _check_bound(MIN, value, argument)


def check_max(value: Any, argument: str = "") -> None:
    _check_bound(MAX, value, argument)


def check_eq(value: Any, argument: str = "") -> None:
    _check_bound(EQUAL, value, argument)


RULES: dict[str, RuleCheck] = {
    CURRENCY: check_currency,
    DATETIME: check_datetime,
    EMAIL: check_email,
    EQUAL: check_eq,
    IN: check_in,
    MAX: check_max,
    MIN: check_min,
    REGEX: check_regex,
    URL: check_url,
    UUID: check_uuid,
}
