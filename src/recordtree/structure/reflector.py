"""
Record reflection for recordtree.

This module exposes the direct fields of a pydantic record: their static
declaration (native name, external name, tags, embedding) and, for an
instance, their current value and structural kind. It is the only place
that knows records are pydantic models; the walker and the rule engine
work on the views it returns.
"""

import types
import uuid
from collections.abc import Iterable
from enum import Enum
from typing import Any, Union, get_args, get_origin

from attrs import field, frozen
from pydantic import BaseModel
from pydantic.fields import FieldInfo

from recordtree.core.types import EMBEDDED_KEY, NAME_TAG, TAGS_KEY
from recordtree.exceptions import NilReferenceError
from recordtree.structure.tags import Tags, contains_any, primary_value

# Values that are scalar in meaning even though Python can iterate or index
# them. UUIDs are listed explicitly: their 16-byte representation must never
# be mistaken for a list.
SCALAR_TYPES = (str, bytes, bytearray, uuid.UUID)

SEQUENCE_TYPES = (list, tuple)


class FieldKind(Enum):
    """Structural category of a field's value."""

    PRIMITIVE = "primitive"
    RECORD = "record"
    LIST_OF_PRIMITIVE = "list_of_primitive"
    LIST_OF_RECORD = "list_of_record"


@frozen
class FieldDeclaration:
    """Static description of a record field."""

    name: str
    tags: Tags = field(factory=Tags)
    annotation: Any = None
    embedded: bool = False
    name_tag: str = NAME_TAG

    @property
    def external_name(self) -> str:
        """Primary value of the name tag, falling back to the native name."""
        return primary_value(self.tags.lookup(self.name_tag), self.name)

    @property
    def optional(self) -> bool:
        """Whether the annotation admits None (the field is a pointer)."""
        return is_optional(self.annotation)

    def lookup(self, key: str) -> str | None:
        return self.tags.lookup(key)


@frozen
class FieldView:
    """A field declaration together with its current value on one record."""

    declaration: FieldDeclaration
    value: Any
    kind: FieldKind

    @property
    def name(self) -> str:
        return self.declaration.name

    @property
    def external_name(self) -> str:
        return self.declaration.external_name

    def lookup(self, key: str) -> str | None:
        return self.declaration.lookup(key)


def dereference(value: Any, field_name: str | None = None) -> Any:
    """
    Return value, failing if it is unset.

    Params:
        value: Value of an optional field
        field_name: Field name used in the error message

    Raises:
        NilReferenceError: If value is None
    """
    if value is None:
        raise NilReferenceError(field_name)
    return value


def is_optional(annotation: Any) -> bool:
    """Check if an annotation is a union that includes None."""
    if get_origin(annotation) in (Union, types.UnionType):
        return type(None) in get_args(annotation)
    return False


def unwrap_optional(annotation: Any) -> Any:
    """
    Strip None from an optional annotation.

    Examples:
        Optional[Contact] -> Contact
        list[str] | None -> list[str]
        int | str | None -> int | str (left as a union)
    """
    if not is_optional(annotation):
        return annotation
    members = [arg for arg in get_args(annotation) if arg is not type(None)]
    if len(members) == 1:
        return members[0]
    return Union[tuple(members)]


def record_type(annotation: Any) -> type[BaseModel] | None:
    """Get the model class an annotation refers to, if any."""
    annotation = unwrap_optional(annotation)
    try:
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return annotation
    except TypeError:
        return None
    return None


def element_annotation(annotation: Any) -> Any:
    """
    Get the element annotation of a list-like annotation.

    Examples:
        list[Card] -> Card
        tuple[str, ...] -> str
        list -> Any
    """
    annotation = unwrap_optional(annotation)
    if get_origin(annotation) in SEQUENCE_TYPES:
        args = get_args(annotation)
        if args:
            return args[0]
    return Any


def classify(value: Any, annotation: Any = None) -> FieldKind:
    """
    Determine the structural kind of a field value.

    Unset values of record-typed fields count as records that are present but
    empty; unset values of any other type count as primitives. A list is a
    list of records when its element annotation names a record, or when its
    first element that is not None is a record.

    Params:
        value: Current value of the field
        annotation: Declared annotation, used for unset values and empty lists

    Returns:
        The FieldKind of the value
    """
    if value is None:
        return FieldKind.RECORD if record_type(annotation) else FieldKind.PRIMITIVE

    if isinstance(value, SCALAR_TYPES):
        return FieldKind.PRIMITIVE

    if isinstance(value, BaseModel):
        return FieldKind.RECORD

    if isinstance(value, SEQUENCE_TYPES):
        if record_type(element_annotation(annotation)) is not None:
            return FieldKind.LIST_OF_RECORD
        # Unset elements say nothing about the kind of the list
        present = next((item for item in value if item is not None), None)
        if isinstance(present, BaseModel):
            return FieldKind.LIST_OF_RECORD
        return FieldKind.LIST_OF_PRIMITIVE

    return FieldKind.PRIMITIVE


def declare(name: str, info: FieldInfo, name_tag: str = NAME_TAG) -> FieldDeclaration:
    """
    Build the declaration of one pydantic field.

    Tags come from the ``tags`` entry of ``json_schema_extra`` (see
    ``recordtree.tagged``). A pydantic alias stands in for a missing ``json``
    tag.
    """
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    raw_tags = dict(extra.get(TAGS_KEY) or {})
    if NAME_TAG not in raw_tags and info.alias:
        raw_tags[NAME_TAG] = info.alias

    return FieldDeclaration(
        name=name,
        tags=Tags(raw_tags),
        annotation=info.annotation,
        embedded=bool(extra.get(EMBEDDED_KEY, False)),
        name_tag=name_tag,
    )


def declarations(
    model: type[BaseModel] | BaseModel, name_tag: str = NAME_TAG
) -> list[FieldDeclaration]:
    """
    Get the field declarations of a record type, in declaration order.

    Params:
        model: Model class or instance
        name_tag: Tag whose primary value names the fields

    Returns:
        One FieldDeclaration per model field (inherited fields first)
    """
    model_cls = model if isinstance(model, type) else type(model)
    return [
        declare(name, info, name_tag) for name, info in model_cls.model_fields.items()
    ]


def fields(record: BaseModel, name_tag: str = NAME_TAG) -> list[FieldView]:
    """
    Get the direct fields of a record with their current values.

    Fields never set on the instance (e.g. after ``model_construct()``) read
    as None.

    Params:
        record: Record instance
        name_tag: Tag whose primary value names the fields

    Returns:
        One FieldView per field, in declaration order
    """
    views = []
    for declaration in declarations(record, name_tag):
        value = getattr(record, declaration.name, None)
        views.append(
            FieldView(
                declaration=declaration,
                value=value,
                kind=classify(value, declaration.annotation),
            )
        )
    return views


def find_declaration(
    model: type[BaseModel], key: str, name_tag: str = NAME_TAG
) -> FieldDeclaration | None:
    """Find a field of model by external name, falling back to native name."""
    candidates = declarations(model, name_tag)
    for declaration in candidates:
        if declaration.external_name == key:
            return declaration
    for declaration in candidates:
        if declaration.name == key:
            return declaration
    return None


def promoted_keys(model: type[BaseModel], name_tag: str = NAME_TAG) -> set[str]:
    """
    Get the keys an embedded record contributes to its embedding record.

    Both external and native names are included, along with the keys of any
    record embedded in turn.
    """
    keys = set()
    for declaration in declarations(model, name_tag):
        nested = record_type(declaration.annotation)
        if declaration.embedded and nested is not None:
            keys |= promoted_keys(nested, name_tag)
            continue
        keys.update((declaration.external_name, declaration.name))
    return keys


def nest_embedded(
    model: type[BaseModel], values: dict[str, Any], name_tag: str = NAME_TAG
) -> dict[str, Any]:
    """
    Move the flat keys of embedded records under their embedded field.

    Embedded fields are named without a prefix, so a payload may carry them
    at the top level (``{"id": ...}``) instead of nested under the embedded
    field (``{"identity": {"id": ...}}``). Keys naming a field of model itself
    are never moved. Both shapes, and a mix of them, are accepted.

    Params:
        model: Record class the values are meant for
        values: Payload object for model
        name_tag: Tag whose primary value names the fields

    Returns:
        A copy of values in the nested shape pydantic validates

    Examples:
        nest_embedded(Person, {"id": "x", "name": "Leo"})
        # -> {"name": "Leo", "identity": {"id": "x"}}
    """
    nested_values = dict(values)
    own_keys = set()
    for declaration in declarations(model, name_tag):
        if not declaration.embedded:
            own_keys.update((declaration.external_name, declaration.name))

    for declaration in declarations(model, name_tag):
        embedded_cls = record_type(declaration.annotation)
        if not declaration.embedded or embedded_cls is None:
            continue

        keys = promoted_keys(embedded_cls, name_tag) - own_keys
        lifted = {key: nested_values.pop(key) for key in list(nested_values) if key in keys}

        field_key = declaration.external_name
        if field_key not in nested_values and declaration.name in nested_values:
            field_key = declaration.name

        existing = nested_values.get(field_key)
        if existing is None:
            required = model.model_fields[declaration.name].is_required()
            if lifted or (required and field_key not in nested_values):
                nested_values[field_key] = lifted
        elif isinstance(existing, dict):
            nested_values[field_key] = {**existing, **lifted}
        else:
            # Already a record instance: leave the flat keys to be rejected
            nested_values.update(lifted)

    return nested_values


def matching_fields(
    model: type[BaseModel] | BaseModel,
    tag: str,
    values: Iterable[str],
    name_tag: str = NAME_TAG,
) -> list[str]:
    """
    List the fields whose tag contains at least one of the given values.

    Works on types, not values: nested records and list element records are
    inspected through their annotations, and list names carry no index.

    Params:
        model: Model class or instance
        tag: Tag to inspect (e.g. "validate")
        values: Tag values to look for (exact token match)
        name_tag: Tag whose primary value names the fields

    Returns:
        Dotted field names, e.g. ["email1", "contacts.email"]

    Usage:
        matching_fields(Person, "validate", ["email"])
    """
    wanted = list(values)
    model_cls = model if isinstance(model, type) else type(model)
    return _matching_fields(model_cls, "", tag, wanted, name_tag)


def _matching_fields(
    model_cls: type[BaseModel],
    prefix: str,
    tag: str,
    wanted: list[str],
    name_tag: str,
) -> list[str]:
    matches = []
    for declaration in declarations(model_cls, name_tag):
        nested = record_type(declaration.annotation) or record_type(
            element_annotation(declaration.annotation)
        )

        if declaration.embedded:
            if nested:
                matches.extend(_matching_fields(nested, prefix, tag, wanted, name_tag))
            continue

        name = f"{prefix}.{declaration.external_name}".strip(".")
        if contains_any(declaration.lookup(tag), wanted):
            matches.append(name)
        if nested:
            matches.extend(_matching_fields(nested, name, tag, wanted, name_tag))
    return matches
