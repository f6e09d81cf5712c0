"""
Tests for record reflection.

This module tests field declarations read from pydantic models, structural
classification of values, optional unwrapping and the type-level
matching_fields() query.
"""

import uuid
from typing import Any, Optional

import pytest
from pydantic import Field

from recordtree import Record, tagged
from recordtree.exceptions import NilReferenceError
from recordtree.structure.reflector import (
    FieldKind,
    classify,
    declarations,
    dereference,
    element_annotation,
    fields,
    find_declaration,
    matching_fields,
    nest_embedded,
    promoted_keys,
    record_type,
    unwrap_optional,
)


class Address(Record):
    street: str = tagged("", json="street")


class Sample(Record):
    name: str | None = tagged(None, json="name,omitempty", validate="min=3")
    nickname: str = ""
    address: Address | None = None
    addresses: list[Address] = Field(default_factory=list)
    labels: list[str] = Field(default_factory=list, alias="tags")
    key: uuid.UUID = Field(default_factory=uuid.uuid4)


class Located(Record):
    address: Address = tagged(default_factory=Address, embedded=True)
    city: str = tagged("", json="city")


class Required(Record):
    code: str = tagged(json="code")


class TestDeclarations:
    """Tests for declarations() and find_declaration()."""

    def test_order_and_external_names(self):
        """Test that fields are declared in order with their external names."""
        names = [d.external_name for d in declarations(Sample)]
        assert names == ["name", "nickname", "address", "addresses", "tags", "key"]

    def test_native_names(self):
        """Test that native names are the Python attribute names."""
        assert [d.name for d in declarations(Sample)][:2] == ["name", "nickname"]

    def test_instance_and_class_agree(self):
        """Test that an instance declares the same fields as its class."""
        assert declarations(Sample()) == declarations(Sample)

    def test_tags_are_read_back(self):
        """Test that tags passed to tagged() are available on the declaration."""
        name = declarations(Sample)[0]
        assert name.lookup("validate") == "min=3"
        assert name.lookup("json") == "name,omitempty"
        assert name.lookup("db") is None

    def test_alias_stands_in_for_name_tag(self):
        """Test that a plain pydantic alias counts as the json tag."""
        labels = declarations(Sample)[4]
        assert labels.lookup("json") == "tags"
        assert labels.external_name == "tags"

    def test_optional(self):
        """Test that optional annotations mark pointer fields."""
        name, nickname, address = declarations(Sample)[:3]
        assert name.optional
        assert not nickname.optional
        assert address.optional

    def test_embedded_flag(self):
        """Test that embedded=True is reflected on the declaration."""
        address, city = declarations(Located)
        assert address.embedded
        assert not city.embedded

    def test_alternate_name_tag(self):
        """Test naming fields by another tag, falling back to native names."""
        class Row(Record):
            full_name: str = tagged("", json="name", db="full_name_col")

        [declaration] = declarations(Row, name_tag="db")
        assert declaration.external_name == "full_name_col"
        assert declarations(Sample, name_tag="db")[0].external_name == "name"

    def test_find_by_external_then_native_name(self):
        """Test finding a declaration by either of its names."""
        assert find_declaration(Sample, "tags").name == "labels"
        assert find_declaration(Sample, "labels").name == "labels"
        assert find_declaration(Sample, "missing") is None


class TestClassify:
    """Tests for classify()."""

    def test_scalars(self):
        """Test that strings, bytes, numbers and UUIDs are primitives."""
        assert classify("abc") is FieldKind.PRIMITIVE
        assert classify(b"ab") is FieldKind.PRIMITIVE
        assert classify(42) is FieldKind.PRIMITIVE
        assert classify(uuid.uuid4()) is FieldKind.PRIMITIVE
        assert classify({"a": 1}) is FieldKind.PRIMITIVE

    def test_records(self):
        """Test that model instances are records."""
        assert classify(Address()) is FieldKind.RECORD

    def test_unset_values_follow_annotation(self):
        """Test that None is a record only when the annotation is a record."""
        assert classify(None, Optional[Address]) is FieldKind.RECORD
        assert classify(None, str | None) is FieldKind.PRIMITIVE
        assert classify(None) is FieldKind.PRIMITIVE

    def test_lists(self):
        """Test lists classified by their first element."""
        assert classify([Address()]) is FieldKind.LIST_OF_RECORD
        assert classify(["a"]) is FieldKind.LIST_OF_PRIMITIVE
        assert classify((1, 2)) is FieldKind.LIST_OF_PRIMITIVE

    def test_empty_lists_follow_annotation(self):
        """Test that empty lists are classified from their element annotation."""
        assert classify([], list[Address]) is FieldKind.LIST_OF_RECORD
        assert classify([], list[str]) is FieldKind.LIST_OF_PRIMITIVE
        assert classify([]) is FieldKind.LIST_OF_PRIMITIVE

    def test_unset_leading_elements(self):
        """Test that None elements do not decide the kind of a list."""
        assert classify([None, Address()]) is FieldKind.LIST_OF_RECORD
        assert classify([None, "a"]) is FieldKind.LIST_OF_PRIMITIVE
        assert classify([None], list[Address | None]) is FieldKind.LIST_OF_RECORD

    def test_record_annotation_wins(self):
        """Test that a list annotated with records is a list of records."""
        assert classify([None, None], list[Optional[Address]]) is FieldKind.LIST_OF_RECORD


class TestFields:
    """Tests for fields() on record instances."""

    def test_values_and_kinds(self):
        """Test that field views carry current values and kinds."""
        sample = Sample(name="Leo", address=Address(street="Main"), tags=["a"])
        views = fields(sample)

        assert [v.value for v in views[:2]] == ["Leo", ""]
        assert [v.kind for v in views] == [
            FieldKind.PRIMITIVE,
            FieldKind.PRIMITIVE,
            FieldKind.RECORD,
            FieldKind.LIST_OF_RECORD,
            FieldKind.LIST_OF_PRIMITIVE,
            FieldKind.PRIMITIVE,
        ]
        assert views[4].external_name == "tags"
        assert views[4].name == "labels"

    def test_unset_fields_read_as_none(self):
        """Test that fields missing from a constructed record read as None."""
        [view] = fields(Required.model_construct())
        assert view.value is None
        assert view.kind is FieldKind.PRIMITIVE


class TestAnnotations:
    """Tests for annotation helpers."""

    def test_unwrap_optional(self):
        """Test stripping None from optional annotations."""
        assert unwrap_optional(Optional[int]) is int
        assert unwrap_optional(Address | None) is Address
        assert unwrap_optional(str) is str

    def test_record_type(self):
        """Test detecting record annotations."""
        assert record_type(Address) is Address
        assert record_type(Address | None) is Address
        assert record_type(list[Address]) is None
        assert record_type(str) is None

    def test_element_annotation(self):
        """Test reading the element annotation of sequences."""
        assert element_annotation(list[Address]) is Address
        assert element_annotation(tuple[str, ...]) is str
        assert element_annotation(list[str] | None) is str
        assert element_annotation(list) is Any


class TestDereference:
    """Tests for dereference()."""

    def test_set_value_is_returned(self):
        """Test that a set value, even a falsy one, passes through."""
        assert dereference(0) == 0
        assert dereference("") == ""

    def test_none_raises(self):
        """Test that an unset value raises NilReferenceError."""
        with pytest.raises(NilReferenceError) as exc_info:
            dereference(None, "contact")
        assert exc_info.value.field_name == "contact"


class TestMatchingFields:
    """Tests for matching_fields()."""

    def setup_method(self):
        """Create models with email rules at several depths."""

        class Friend(Record):
            email: str = tagged("", json="email", validate="email")

        class Member(Record):
            name: str = tagged("", json="name", validate="uuid")
            email1: str = tagged("", json="email1", validate="email")
            email2: list[str] = tagged(default_factory=list, json="email2", validate="email")
            friends: list[Friend] = tagged(default_factory=list, json="friends")
            best_friend: Friend | None = tagged(None, json="best")

        self.member = Member

    def test_nested_and_list_fields(self):
        """Test that nested fields are dotted and list names carry no index."""
        assert matching_fields(self.member, "validate", ["email"]) == [
            "email1",
            "email2",
            "friends.email",
            "best.email",
        ]

    def test_any_value_matches(self):
        """Test that any one of the values is enough."""
        assert matching_fields(self.member, "validate", ["uuid", "email"])[0] == "name"

    def test_tokens_match_exactly(self):
        """Test that no field matches a value that only appears inside a token."""
        assert matching_fields(self.member, "json", ["mail"]) == []

    def test_embedded_fields_are_transparent(self):
        """Test that embedded records contribute fields without a prefix."""
        assert matching_fields(Located(), "json", ["street", "city"]) == ["street", "city"]


class TestNestEmbedded:
    """Tests for promoted_keys() and nest_embedded()."""

    def setup_method(self):
        """Create a record embedding another record, itself embedding one."""

        class Audit(Record):
            created_by: str = tagged("", json="created_by")

        class Identity(Record):
            audit: Audit = tagged(default_factory=Audit, embedded=True)
            uid: str = tagged(json="id")

        class Holder(Record):
            identity: Identity = tagged(embedded=True)
            name: str = tagged("", json="name")

        self.identity = Identity
        self.holder = Holder

    def test_promoted_keys(self):
        """Test that promoted keys include both names, at any embedding depth."""
        assert promoted_keys(self.identity) == {"created_by", "id", "uid"}

    def test_flat_keys_are_nested(self):
        """Test moving flat keys under the embedded field."""
        assert nest_embedded(self.holder, {"id": "x", "name": "Leo"}) == {
            "name": "Leo",
            "identity": {"id": "x"},
        }

    def test_nested_and_flat_keys_are_merged(self):
        """Test that flat keys join an embedded value given nested."""
        nested = nest_embedded(self.holder, {"identity": {"created_by": "me"}, "id": "x"})
        assert nested == {"identity": {"created_by": "me", "id": "x"}}

    def test_required_embedded_field_is_created(self):
        """Test that a missing required embedded field becomes an empty object."""
        assert nest_embedded(self.holder, {"name": "Leo"}) == {"name": "Leo", "identity": {}}

    def test_own_fields_are_not_moved(self):
        """Test that keys naming a field of the record itself stay in place."""

        class Shadowing(Record):
            identity: Address = tagged(default_factory=Address, embedded=True)
            street: str = tagged("", json="street")

        assert nest_embedded(Shadowing, {"street": "Main"}) == {"street": "Main"}

    def test_input_is_not_modified(self):
        """Test that the given mapping is left unchanged."""
        values = {"id": "x"}
        nest_embedded(self.holder, values)
        assert values == {"id": "x"}
