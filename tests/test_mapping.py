"""Unit tests for contact_loaders.mapping."""
import pytest

from contact_loaders.errors import MappingError
from contact_loaders.mapping import (
    list_identifier,
    make_contact,
    map_lists,
    map_person,
    normalize_cell,
    person_ids_from_items,
)
from schemas.contact_load import MappedContact, SkippedPerson

PERSON = {
    "given_name": "A",
    "family_name": "B",
    "custom_fields": {"Phone": "2135551212"},
    "postal_addresses": [{"postal_code": "10011"}, {"postal_code": "02139"}],
}


class TestMapLists:
    def test_keeps_lists_with_identifier_and_name(self):
        raw = [
            {"name": "Volunteers", "identifiers": ["action_network:abc-123"]},
            {"title": "Donors", "identifiers": ["other:zzz", "action_network:def-456"]},
        ]
        choices = map_lists(raw)
        assert [(c.name, c.identifier) for c in choices] == [
            ("Volunteers", "abc-123"),
            ("Donors", "def-456"),
        ]

    def test_drops_lists_without_identifier_or_name(self):
        raw = [
            {"name": "No id", "identifiers": ["mobilize:1"]},
            {"name": "Empty", "identifiers": []},
            {"name": "", "identifiers": ["action_network:x"]},
            {"identifiers": ["action_network:y"]},
            {"name": "No identifiers key"},
        ]
        assert map_lists(raw) == []

    def test_first_matching_identifier_wins(self):
        assert list_identifier({"identifiers": ["action_network:first", "action_network:second"]}) == "first"

    def test_name_preferred_over_title(self):
        raw = [{"name": "Name", "title": "Title", "identifiers": ["action_network:1"]}]
        assert map_lists(raw)[0].name == "Name"


class TestMakeContact:
    def test_maps_person(self):
        contact = make_contact(PERSON, campaign_id=7)
        assert contact.to_row() == {
            "first_name": "A",
            "last_name": "B",
            "cell": "+12135551212",
            "zip": "10011",
            "custom_fields": None,
            "timezone_offset": None,
            "message_status": "needsMessage",
            "campaign_id": 7,
        }

    def test_timezone_offset_passed_through(self):
        assert make_contact(PERSON, 7, timezone_offset="-5_1").timezone_offset == "-5_1"

    def test_missing_phone(self):
        person = {**PERSON, "custom_fields": {"Email": "a@b.c"}}
        with pytest.raises(MappingError, match="Phone"):
            make_contact(person, 7)

    def test_missing_custom_fields(self):
        person = {k: v for k, v in PERSON.items() if k != "custom_fields"}
        with pytest.raises(MappingError):
            make_contact(person, 7)

    def test_no_postal_address(self):
        person = {**PERSON, "postal_addresses": []}
        with pytest.raises(MappingError, match="postal address"):
            make_contact(person, 7)


class TestNormalizeCell:
    @pytest.mark.parametrize("raw", ["2135551212", "(213) 555-1212", "1-213-555-1212", "+1 213 555 1212", 2135551212])
    def test_formats(self, raw):
        assert normalize_cell(raw) == "+12135551212"

    @pytest.mark.parametrize("raw", ["", None, "n/a", "555-1212", "44 20 7946 0958 12"])
    def test_unusable_phone(self, raw):
        with pytest.raises(MappingError, match="no usable Phone"):
            normalize_cell(raw)


class TestMapPerson:
    def test_mapped(self):
        result = map_person(PERSON, 7, person_id="p1")
        assert isinstance(result, MappedContact)
        assert result.contact.cell == "+12135551212"

    def test_skipped_with_reason(self):
        result = map_person({**PERSON, "postal_addresses": []}, 7, person_id="p2")
        assert isinstance(result, SkippedPerson)
        assert result.person_id == "p2"
        assert result.reason == "Contact missing postal address"

    @pytest.mark.parametrize(
        "overrides, reason",
        [
            ({"custom_fields": {"Phone": ""}}, "Contact has no usable Phone"),
            ({"custom_fields": {"Phone": None}}, "Contact has no usable Phone"),
            ({"custom_fields": "Phone"}, "Contact missing Phone field"),
            ({"postal_addresses": [None]}, "Contact missing postal address"),
            ({"postal_addresses": {"postal_code": "10011"}}, "Contact missing postal address"),
            ({"postal_addresses": [{"locality": "New York"}]}, "Contact missing postal code"),
            ({"postal_addresses": [{"postal_code": ""}]}, "Contact missing postal code"),
        ],
    )
    def test_malformed_person_is_skipped(self, overrides, reason):
        result = map_person({**PERSON, **overrides}, 7, person_id="p3")
        assert isinstance(result, SkippedPerson)
        assert result.reason == reason

    def test_non_object_person_is_skipped(self):
        result = map_person(None, 7, person_id="p4")
        assert isinstance(result, SkippedPerson)
        assert result.reason == "Person record is not an object"

    def test_numeric_postal_code_is_stringified(self):
        result = map_person({**PERSON, "postal_addresses": [{"postal_code": 10011}]}, 7)
        assert isinstance(result, MappedContact)
        assert result.contact.zip == "10011"


def test_person_ids_from_items():
    items = [
        {"action_network:person_id": "p1"},
        {"_links": {}},
        {"action_network:person_id": "p2"},
    ]
    assert person_ids_from_items(items) == ["p1", "p2"]
