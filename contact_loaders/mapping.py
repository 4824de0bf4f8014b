"""Map raw Action Network records onto list choices and campaign contacts."""
import re
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from contact_loaders.errors import MappingError
from schemas.contact_load import CampaignContactRecord, ListChoice, MappedContact, MappingResult, SkippedPerson

IDENTIFIER_RE = re.compile(r"action_network:(.*)")
PERSON_ID_KEY = "action_network:person_id"


def list_identifier(raw_list: Dict[str, Any]) -> Optional[str]:
    """Return the id from the first identifier shaped like action_network:<id>."""
    for candidate in raw_list.get("identifiers") or []:
        match = IDENTIFIER_RE.search(str(candidate))
        if match:
            return match.group(1)
    return None


def map_lists(raw_lists: Iterable[Dict[str, Any]]) -> List[ListChoice]:
    """Convert raw lists to choices, dropping lists without an id or a name."""
    choices = []
    for raw in raw_lists:
        identifier = list_identifier(raw)
        name = raw.get("name") or raw.get("title")
        if not identifier or not name:
            continue
        choices.append(ListChoice(name=str(name), identifier=str(identifier)))
    return choices


def person_ids_from_items(items: Iterable[Dict[str, Any]]) -> List[str]:
    return [str(item[PERSON_ID_KEY]) for item in items if PERSON_ID_KEY in item]


def normalize_cell(phone: Any) -> str:
    """Return phone as +1 followed by ten digits.

    Raises:
        MappingError: phone does not hold a ten digit US number.
    """
    digits = re.sub(r"\D", "", "" if phone is None else str(phone))
    # Numbers already carrying the US country code keep a single leading 1
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]
    if len(digits) != 10:
        raise MappingError("Contact has no usable Phone")
    return f"+1{digits}"


def make_contact(
    person: Dict[str, Any],
    campaign_id: int,
    timezone_offset: Optional[str] = None,
) -> CampaignContactRecord:
    """Build a campaign contact from a person record.

    Raises:
        MappingError: the person has no usable Phone custom field, or no
            postal address with a postal code.
    """
    if not isinstance(person, dict):
        raise MappingError("Person record is not an object")
    custom_fields = person.get("custom_fields") or {}
    if not isinstance(custom_fields, dict) or "Phone" not in custom_fields:
        raise MappingError("Contact missing Phone field")
    cell = normalize_cell(custom_fields["Phone"])
    # First address, not the primary one; the zip only feeds timezone lookup.
    addresses = person.get("postal_addresses") or []
    if not isinstance(addresses, list) or not addresses or not isinstance(addresses[0], dict):
        raise MappingError("Contact missing postal address")
    postal_code = addresses[0].get("postal_code")
    if postal_code is None or str(postal_code).strip() == "":
        raise MappingError("Contact missing postal code")
    return CampaignContactRecord(
        first_name=str(person.get("given_name") or ""),
        last_name=str(person.get("family_name") or ""),
        cell=cell,
        zip=str(postal_code).strip(),
        timezone_offset=timezone_offset,
        campaign_id=campaign_id,
    )


def map_person(person: Dict[str, Any], campaign_id: int, person_id: Optional[str] = None) -> MappingResult:
    try:
        return MappedContact(contact=make_contact(person, campaign_id))
    except MappingError as exc:
        return SkippedPerson(person_id=person_id, reason=str(exc))
    except ValidationError as exc:
        return SkippedPerson(person_id=person_id, reason=f"Invalid contact: {exc.error_count()} field error(s)")
