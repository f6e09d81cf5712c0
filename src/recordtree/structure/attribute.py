"""
Attribute nodes of a flattened record tree.

An Attribute is one addressable position in a record: a field, or one
element synthesized from a list of primitive values. Attributes know their
ancestor chain, which is all that is needed to derive their path name.
"""

from dataclasses import dataclass, field
from typing import Any

from recordtree.structure.reflector import FieldDeclaration, FieldKind

LIST_KINDS = (FieldKind.LIST_OF_PRIMITIVE, FieldKind.LIST_OF_RECORD)


@dataclass(eq=True)
class Attribute:
    """
    One addressable node in a flattened record tree.

    Params:
        value: Current value at this position (None when unset)
        declaration: Field declaration; borrowed from the list field for
            synthetic primitive elements
        kind: Structural kind of value
        ancestors: Containing attributes, root first, excluding self
        children: Attributes directly under this one
        list_index: Position within the enclosing list, None outside lists
        is_synthetic_primitive: True for elements of a list of primitives
        owner: Record (or list, for synthetic elements) holding value
    """

    value: Any
    declaration: FieldDeclaration
    kind: FieldKind = FieldKind.PRIMITIVE
    ancestors: tuple["Attribute", ...] = field(default=(), compare=False, repr=False)
    children: list["Attribute"] = field(default_factory=list, compare=False, repr=False)
    list_index: int | None = None
    is_synthetic_primitive: bool = False
    owner: Any = field(default=None, compare=False, repr=False)

    @property
    def parent(self) -> "Attribute | None":
        return self.ancestors[-1] if self.ancestors else None

    @property
    def is_list(self) -> bool:
        return self.kind in LIST_KINDS

    def full_name(self) -> str:
        """
        Get the name of the attribute scoped under its ancestors.

        Returns:
            Dotted/bracketed path name

        Examples:
            name                    (top-level field)
            contact.emails          (field of a nested record)
            contact.emails[1]       (element of a list of primitives)
            cards[0].number         (field of a record inside a list)
        """
        if not self.ancestors:
            return self.declaration.external_name

        scope = self.ancestors[-1].full_name()

        if self.list_index is not None:
            scope = f"{scope}[{self.list_index}]"

        if self.is_synthetic_primitive:
            return scope

        # An empty ancestor name must not leave a stray separator behind
        return f"{scope}.{self.declaration.external_name}".strip(".")

    def descendant_count(self) -> int:
        """Number of attributes below this one, at any depth."""
        return sum(1 + child.descendant_count() for child in self.children)
