"""
Shared test fixtures and utilities for the recordtree test suite.
"""

import pytest

from recordtree import Record, tagged

VALID_UUID = "2b852002-f19d-11ec-8ea0-0242ac120002"


class Identifiable(Record):
    uid: str | None = tagged(None, json="id", validate="uuid")


class Card(Record):
    number: str = tagged("", json="number", validate="min=3")
    brand: str | None = tagged(None, json="brand")


class Contact(Record):
    is_active: bool = tagged(False, json="is_active")
    emails: list[str] = tagged(
        default_factory=list, json="emails", db="emails", validate="email,min=1,max=3"
    )
    phones: list[str] = tagged(default_factory=list, json="phones")


class Person(Record):
    identity: Identifiable = tagged(default_factory=Identifiable, embedded=True)
    name: str = tagged("", json="name", db="name", validate="min=2,max=8")
    contact: Contact = tagged(default_factory=Contact, json="contact")
    cards: list[Card] = tagged(default_factory=list, json="cards")


@pytest.fixture
def person_model():
    """Person record class with an embedded identity, a nested contact and cards."""
    return Person


@pytest.fixture
def person():
    """Fully valid Person with two emails, one phone and two cards.

    Walks to:
        id, name, contact, contact.is_active, contact.emails,
        contact.emails[0], contact.emails[1], contact.phones,
        contact.phones[0], cards, cards[0].number, cards[0].brand,
        cards[1].number, cards[1].brand
    """
    return Person(
        identity=Identifiable(uid=VALID_UUID),
        name="Leonardo",
        contact=Contact(
            is_active=True,
            emails=["leo@mail.com", "lr@mail.org"],
            phones=["555-555-5555"],
        ),
        cards=[Card(number="4111", brand="visa"), Card(number="5500")],
    )
