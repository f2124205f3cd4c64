"""
Tests for step input validation and normalization.
"""

import pytest

from farmbot.services import validators


@pytest.mark.parametrize("contact", [
    "+7 999 123-45-67",
    "89991234567",
    "(812) 555-12-34",
    "@john_doe",
    "@abcd",
    "@" + "a" * 32,
])
def test_contact_accepted(contact):
    assert validators.contact(contact) == contact


@pytest.mark.parametrize("contact", [
    "12345",              # 5 digits
    "@a",                 # handle too short
    "@" + "a" * 33,       # handle too long
    "@john-doe",
    "+7 999 123 45 67 890 12",  # 16 digits
    "call me: 89991234567",
    "",
    "   ",
])
def test_contact_rejected(contact):
    assert validators.contact(contact) is None


def test_contact_trimmed():
    assert validators.contact("  @john_doe \n") == "@john_doe"


@pytest.mark.parametrize("label,stored", [
    ("1", "1"),
    ("6", "6"),
    ("6–10", "6-10"),
    ("более 11", "11+"),
])
def test_excursion_people_normalized(label, stored):
    assert validators.excursion_people(label) == stored


@pytest.mark.parametrize("text", ["7", "0", "6-10", "11+", "два", ""])
def test_excursion_people_rejects_free_text(text):
    assert validators.excursion_people(text) is None


@pytest.mark.parametrize("value,count", [
    ("3", 3),
    ("6-10", 6),
    ("11+", 11),
    (None, 0),
    ("много", 0),
])
def test_people_count(value, count):
    assert validators.people_count(value) == count


def test_non_empty_keeps_text_verbatim():
    assert validators.non_empty("  Анна  ") == "  Анна  "
    assert validators.non_empty(" \t") is None
    assert validators.non_empty(None) is None
