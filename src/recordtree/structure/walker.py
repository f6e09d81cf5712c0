"""
Attribute tree walker.

Expands a record into a flat, depth-first, pre-order list of Attributes:
every field of the record, followed immediately by everything below it.
Nested records and lists of records recurse with the container appended to
the ancestor chain; lists of primitives produce one synthetic attribute per
element; embedded records are spliced in transparently.
"""

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from recordtree.core.types import NAME_TAG, NON_INHERITABLE_RULES, VALIDATION_TAG
from recordtree.exceptions import NilReferenceError
from recordtree.structure.attribute import Attribute
from recordtree.structure.reflector import (
    FieldDeclaration,
    FieldKind,
    FieldView,
    classify,
    dereference,
    element_annotation,
    fields,
)

logger = logging.getLogger(__name__)


def walk(
    root: BaseModel | None,
    filter_tags: Iterable[str] = (),
    ignored_fields: Iterable[str] = (),
    *,
    name_tag: str = NAME_TAG,
) -> list[Attribute]:
    """
    Flatten a record into the list of all its attributes.

    Params:
        root: Record instance (None yields no attributes)
        filter_tags: When non-empty, only fields carrying at least one of
            these tag keys are included (and descended into)
        ignored_fields: Native field names to exclude, at any depth
        name_tag: Tag whose primary value names the fields

    Returns:
        Attributes in depth-first pre-order

    Usage:
        class Person(Record):
            name: str = tagged("", json="name")
            emails: list[str] = tagged(default_factory=list, json="emails")

        person = Person(name="Leonardo", emails=["leo@mail.com", "lr@mail.org"])
        [a.full_name() for a in walk(person)]
        # -> ["name", "emails", "emails[0]", "emails[1]"]
    """
    walker = _Walker(tuple(filter_tags), frozenset(ignored_fields), name_tag)
    return walker.walk_record(root, (), None)


class _Walker:
    """Recursion state shared by one walk() call."""

    def __init__(self, filter_tags: tuple[str, ...], ignored: frozenset[str], name_tag: str):
        self.filter_tags = filter_tags
        self.ignored = ignored
        self.name_tag = name_tag

    def includes(self, view: FieldView) -> bool:
        if view.name in self.ignored:
            return False
        if not self.filter_tags:
            return True
        return any(view.lookup(tag) is not None for tag in self.filter_tags)

    def walk_record(
        self,
        record: Any,
        ancestors: tuple[Attribute, ...],
        list_index: int | None,
    ) -> list[Attribute]:
        try:
            record = dereference(record)
        except NilReferenceError:
            return []

        if not isinstance(record, BaseModel):
            return []

        attributes: list[Attribute] = []
        for view in fields(record, self.name_tag):
            if view.declaration.embedded:
                # No attribute of its own: its fields join this record's chain
                attributes.extend(self.walk_record(view.value, ancestors, list_index))
                continue

            if not self.includes(view):
                continue

            attribute = Attribute(
                value=view.value,
                declaration=view.declaration,
                kind=view.kind,
                ancestors=ancestors,
                list_index=list_index,
                owner=record,
            )
            _attach(attribute)
            attributes.append(attribute)
            attributes.extend(self.expand(attribute))

        return attributes

    def expand(self, attribute: Attribute) -> list[Attribute]:
        """Produce everything below a container attribute."""
        lineage = attribute.ancestors + (attribute,)

        if attribute.kind is FieldKind.RECORD:
            if attribute.value is None:
                logger.debug("Not descending into unset record %s", attribute.full_name())
                return []
            return self.walk_record(attribute.value, lineage, None)

        if attribute.kind is FieldKind.LIST_OF_RECORD:
            nested = []
            for index, element in enumerate(attribute.value):
                nested.extend(self.walk_record(element, lineage, index))
            return nested

        if attribute.kind is FieldKind.LIST_OF_PRIMITIVE:
            declaration = _element_declaration(attribute.declaration)
            elements = []
            for index, element in enumerate(attribute.value):
                child = Attribute(
                    value=element,
                    declaration=declaration,
                    kind=classify(element, declaration.annotation),
                    ancestors=lineage,
                    list_index=index,
                    is_synthetic_primitive=True,
                    owner=attribute.value,
                )
                _attach(child)
                elements.append(child)
            return elements

        return []


def _attach(attribute: Attribute) -> None:
    if attribute.ancestors:
        attribute.ancestors[-1].children.append(attribute)


def _element_declaration(declaration: FieldDeclaration) -> FieldDeclaration:
    """Declaration shared by the elements of a list of primitives."""
    return FieldDeclaration(
        name=declaration.name,
        tags=declaration.tags.without(VALIDATION_TAG, NON_INHERITABLE_RULES),
        annotation=element_annotation(declaration.annotation),
        embedded=False,
        name_tag=declaration.name_tag,
    )
