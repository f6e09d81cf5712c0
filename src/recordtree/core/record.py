"""
Core Record base class and field tagging for recordtree.

Records are pydantic models. Declarative tags (naming, validation rules,
anything else a consumer wants to read back) are attached to fields with
``tagged()``, which stores them in the field's ``json_schema_extra``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_core import PydanticUndefined

from recordtree.core.types import EMBEDDED_KEY, NAME_TAG, TAGS_KEY
from recordtree.structure.reflector import nest_embedded
from recordtree.structure.tags import primary_value


class Record(BaseModel):
    """
    Base class for structured records.

    Unknown payload keys are rejected so the payload decoder can report them,
    and fields can be populated either by native name or by external name.
    Fields of embedded records may be given flat, at the level where their
    path names place them, or nested under the embedded field.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_by_name=True,
        validate_by_alias=True,
    )

    @model_validator(mode="before")
    @classmethod
    def nest_embedded_fields(cls, data: Any) -> Any:
        """Accept the flat keys of embedded records."""
        if not isinstance(data, dict):
            return data
        return nest_embedded(cls, data)


def tagged(
    default: Any = PydanticUndefined,
    *,
    default_factory: Any = None,
    embedded: bool = False,
    **tags: str,
) -> Any:
    """
    Declare a record field carrying tags.

    The primary value of the name tag (``json``) doubles as the pydantic alias
    so that payload keys and path names agree.

    Params:
        default: Default value of the field
        default_factory: Callable producing the default value
        embedded: Promote the fields of this record-valued field into the
            enclosing record when walking (no path segment of its own)
        **tags: Tag key to raw tag string, e.g. validate="min=1,max=3"

    Returns:
        A pydantic FieldInfo

    Usage:
        class Contact(Record):
            emails: list[str] = tagged(default_factory=list, json="emails", validate="email,min=1")
    """
    extra: dict[str, Any] = {TAGS_KEY: dict(tags)}
    if embedded:
        extra[EMBEDDED_KEY] = True

    kwargs: dict[str, Any] = {"json_schema_extra": extra}
    if default_factory is not None:
        kwargs["default_factory"] = default_factory
    else:
        kwargs["default"] = default

    alias = primary_value(tags.get(NAME_TAG))
    if alias:
        kwargs["alias"] = alias

    return Field(**kwargs)
