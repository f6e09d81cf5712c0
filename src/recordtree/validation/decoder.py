"""
Payload decoding for recordtree.

Decodes JSON bytes into a record with pydantic and reports decoding
failures (missing, unknown and mistyped attributes) keyed by the same path
names the rule engine uses. Decoding is lenient: when the payload does not
fully validate, the record is still built from the fields and list elements
that do, so rule validation can run on what was received.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import from_json

from recordtree.core.types import PAYLOAD_PATH, ErrorCode, Validations
from recordtree.structure.reflector import (
    SEQUENCE_TYPES,
    declarations,
    element_annotation,
    find_declaration,
    nest_embedded,
    record_type,
    unwrap_optional,
)
from recordtree.validation.engine import validate
from recordtree.validation.options import ValidationOptions

logger = logging.getLogger(__name__)


class DecodingRule(Enum):
    """Classes of decoding failures that can be reported."""

    ADDITIONAL_PROPERTY = "additional_property_not_allowed"
    REQUIRED_ATTRIBUTE = "required"
    INVALID_TYPE = "invalid_type"


DECODING_ERRORS = {
    DecodingRule.ADDITIONAL_PROPERTY: ErrorCode.ADDITIONAL_PROPERTY,
    DecodingRule.REQUIRED_ATTRIBUTE: ErrorCode.REQUIRED_ATTRIBUTE_MISSING,
    DecodingRule.INVALID_TYPE: ErrorCode.INVALID_TYPE,
}

# pydantic error types with a dedicated decoding rule; all others are type errors
_PYDANTIC_ERROR_RULES = {
    "missing": DecodingRule.REQUIRED_ATTRIBUTE,
    "extra_forbidden": DecodingRule.ADDITIONAL_PROPERTY,
}


@dataclass
class DecoderOptions:
    """Configuration for decode().

    Params:
        rules: Decoding failures to report; failures of other classes are
            dropped silently
        before_hook: Called with the raw bytes and the model before decoding;
            returns the bytes to decode
        after_hook: Called with the findings after decoding; returns the
            findings to report
    """

    rules: Sequence[DecodingRule] = field(default_factory=list)
    before_hook: Callable[[bytes, type[BaseModel]], bytes] | None = None
    after_hook: Callable[[Validations], Validations] | None = None


@dataclass
class DecodeResult:
    """Decoded record (None for unparseable payloads) and findings."""

    record: BaseModel | None
    validations: Validations = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.validations


def decode(
    data: bytes | str,
    model: type[BaseModel],
    options: DecoderOptions | None = None,
) -> DecodeResult:
    """
    Decode a JSON payload into a record.

    Params:
        data: JSON document whose top level is an object
        model: Record class to decode into
        options: Reported rules and hooks

    Returns:
        DecodeResult. Unparseable payloads yield no record and the single
        finding {"_": ["INVALID_PAYLOAD"]}.

    Usage:
        class User(Record):
            id: int = tagged(json="id")
            name: str = tagged(json="name")

        decode(b'{"name": 42}', User, DecoderOptions(rules=list(DecodingRule))).validations
        # -> {"id": ["REQUIRED_ATTRIBUTE_MISSING"], "name": ["INVALID_TYPE"]}
    """
    options = options or DecoderOptions()
    after_hook = options.after_hook or (lambda validations: validations)

    if options.before_hook is not None:
        data = options.before_hook(data, model)

    if not data:
        return DecodeResult(_construct(model, {}), after_hook({}))

    try:
        values = from_json(data)
    except ValueError as e:
        logger.debug("Unparseable payload for %s: %s", model.__name__, e)
        values = None

    if not isinstance(values, dict):
        return DecodeResult(None, after_hook({PAYLOAD_PATH: [ErrorCode.INVALID_PAYLOAD.value]}))

    try:
        record = model.model_validate(values)
    except ValidationError as e:
        validations = _collect(e, model, options.rules)
        return DecodeResult(_construct(model, values), after_hook(validations))

    return DecodeResult(record, after_hook({}))


def validate_payload(
    data: bytes | str,
    model: type[BaseModel],
    options: ValidationOptions | dict | None = None,
) -> DecodeResult:
    """
    Decode and validate a payload.

    Decoding findings take precedence over rule findings for the same path.
    An unparseable payload is reported without running any rule.

    Usage:
        class Person(Record):
            id: str = tagged(json="id", validate="uuid")
            name: str = tagged("", json="name", validate="min=2,max=8")

        validate_payload(b'{"name": ""}', Person).validations
        # -> {"id": ["REQUIRED_ATTRIBUTE_MISSING"], "name": ["INVALID_LENGTH"]}
    """
    result = decode(data, model, DecoderOptions(rules=list(DecodingRule)))

    # No need to go any further: the payload is invalid
    if PAYLOAD_PATH in result.validations or result.record is None:
        return result

    validations = validate(result.record, options)
    validations.update(result.validations)
    return DecodeResult(result.record, validations)


def _collect(
    error: ValidationError, model: type[BaseModel], rules: Sequence[DecodingRule]
) -> Validations:
    validations: Validations = {}
    for detail in error.errors():
        rule = _PYDANTIC_ERROR_RULES.get(detail["type"], DecodingRule.INVALID_TYPE)
        if rule not in rules:
            continue
        validations[path_from_loc(model, detail["loc"])] = [DECODING_ERRORS[rule].value]
    return validations


def path_from_loc(model: type[BaseModel], loc: Sequence[str | int]) -> str:
    """
    Translate a pydantic error location into a path name.

    Segments are resolved against the model's fields so that external names
    are used and embedded records contribute no segment. Segments pydantic
    adds below a field that is neither a record nor a list (union members,
    mapping keys) are dropped, as are those below an unknown key.

    Examples:
        ("contact", "emails", 0) -> "contact.emails[0]"
        ("cards", 1, "number") -> "cards[1].number"
        ("level", "int") -> "level"   (level: int | str)
    """
    path = ""
    annotation: Any = model

    for segment in loc:
        if isinstance(segment, int):
            if get_origin(unwrap_optional(annotation)) in SEQUENCE_TYPES:
                path = f"{path}[{segment}]"
                annotation = element_annotation(annotation)
            continue

        model_cls = record_type(annotation)
        if model_cls is None:
            annotation = _union_member(annotation, segment)
            continue

        declaration = find_declaration(model_cls, segment)
        if declaration is None:
            path = f"{path}.{segment}".strip(".")
            annotation = None
            continue

        annotation = declaration.annotation
        if not declaration.embedded:
            path = f"{path}.{declaration.external_name}".strip(".")

    return path


def _union_member(annotation: Any, tag: str) -> Any:
    """Get the union member pydantic tags an error with, or None."""
    for member in get_args(unwrap_optional(annotation)):
        if getattr(member, "__name__", None) == tag:
            return member
    return None


def _construct(model: type[BaseModel], values: dict[str, Any]) -> BaseModel:
    """Build a record from whatever parts of values validate on their own."""
    values = nest_embedded(model, values)
    record = model.model_construct()

    for declaration in declarations(model):
        key = declaration.external_name
        if key not in values:
            key = declaration.name
        if key not in values:
            continue

        accepted, value = _lenient(declaration.annotation, values[key])
        if not accepted:
            logger.debug("Dropping %s from %s", key, model.__name__)
            continue

        setattr(record, declaration.name, value)

    return record


def _lenient(annotation: Any, value: Any) -> tuple[bool, Any]:
    """
    Validate value against annotation, salvaging what can be salvaged.

    Records are rebuilt field by field and lists element by element; an
    element that does not validate is kept as None so indices still match
    the payload.

    Returns:
        (accepted, value); accepted is False when nothing could be salvaged
    """
    try:
        return True, TypeAdapter(annotation).validate_python(value)
    except ValidationError:
        pass

    model_cls = record_type(annotation)
    if model_cls is not None and isinstance(value, dict):
        return True, _construct(model_cls, value)

    container = get_origin(unwrap_optional(annotation))
    if container in SEQUENCE_TYPES and isinstance(value, list):
        element = element_annotation(annotation)
        elements = []
        for item in value:
            accepted, coerced = _lenient(element, item)
            elements.append(coerced if accepted else None)
        return True, container(elements)

    return False, None
