"""
Path-based access to record values.

Reads and writes go through the same walk and the same path names that
validation findings are keyed by, so a finding's key can always be used to
fetch or replace the offending value.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import from_json

from recordtree.core.types import NAME_TAG
from recordtree.exceptions import PathResolutionError
from recordtree.structure.attribute import Attribute
from recordtree.structure.walker import walk

logger = logging.getLogger(__name__)


def find_attribute(record: BaseModel, path: str, *, name_tag: str = NAME_TAG) -> Attribute:
    """
    Find the attribute addressed by a path name.

    Params:
        record: Record instance
        path: Full path name (e.g. "contact.emails[0]")
        name_tag: Tag whose primary value names the fields

    Returns:
        The attribute whose full_name() equals path

    Raises:
        PathResolutionError: If no attribute of the record has that name
    """
    for attribute in walk(record, name_tag=name_tag):
        if attribute.full_name() == path:
            return attribute
    raise PathResolutionError(path, f"no such attribute in {type(record).__name__}")


def get_value(record: BaseModel, path: str, *, name_tag: str = NAME_TAG) -> Any:
    """Get the current value at a path name."""
    return find_attribute(record, path, name_tag=name_tag).value


def set_value(record: BaseModel, path: str, value: Any, *, name_tag: str = NAME_TAG) -> None:
    """
    Replace the value at a path name.

    The value is stored as given; use set_values_from_map() for coercion.

    Raises:
        PathResolutionError: If the path does not resolve, or addresses an
            element of an immutable sequence
    """
    _write(find_attribute(record, path, name_tag=name_tag), path, value)


def set_values_from_map(
    record: BaseModel, values: Mapping[str, Any], *, name_tag: str = NAME_TAG
) -> list[str]:
    """
    Write values keyed by path name into a record.

    The record is walked once; every attribute whose path name is a key of
    values receives that value after coercion to its declared annotation.
    Keys are applied in walk order, so a container replaced by an earlier
    key is not revisited for its descendants.

    Params:
        record: Record instance to update in place
        values: Mapping of path name to new value
        name_tag: Tag whose primary value names the fields

    Returns:
        Path names whose values failed coercion, or address an element of an
        immutable sequence, and were not written
    """
    rejected = []
    for attribute in walk(record, name_tag=name_tag):
        path = attribute.full_name()
        if path not in values:
            continue

        try:
            coerced = TypeAdapter(attribute.declaration.annotation).validate_python(
                values[path]
            )
        except ValidationError as e:
            logger.debug("Rejected value for %s: %s", path, e)
            rejected.append(path)
            continue

        try:
            _write(attribute, path, coerced)
        except PathResolutionError as e:
            logger.debug("Rejected value for %s: %s", path, e)
            rejected.append(path)
    return rejected


def set_values_from_bytes(
    record: BaseModel, data: bytes | str, *, name_tag: str = NAME_TAG
) -> list[str]:
    """
    Write values keyed by path name, read from a JSON object, into a record.

    Params:
        record: Record instance to update in place
        data: JSON object mapping path name to new value
        name_tag: Tag whose primary value names the fields

    Returns:
        Path names whose values were not written (see set_values_from_map)

    Raises:
        ValueError: If data is not a JSON object

    Usage:
        set_values_from_bytes(person, b'{"name": "Leo", "contact.emails[0]": "leo@mail.com"}')
    """
    values = from_json(data)
    if not isinstance(values, dict):
        raise ValueError(f"Expected a JSON object, got {type(values).__name__}")
    return set_values_from_map(record, values, name_tag=name_tag)


def _write(attribute: Attribute, path: str, value: Any) -> None:
    if attribute.is_synthetic_primitive:
        if not isinstance(attribute.owner, list):
            raise PathResolutionError(path, "element of an immutable sequence")
        attribute.owner[attribute.list_index] = value
        attribute.value = value
        return

    setattr(attribute.owner, attribute.declaration.name, value)
    attribute.value = value
