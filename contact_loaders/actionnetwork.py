"""Action Network contact loader.

Loads the people on an Action Network list into a campaign's contacts:

  START → CLEARED → LOADING_CONTACTS → INSERTED → COMPLETED
  (LOADING_LISTS serves the admin list picker; FAILED is reachable anywhere)

The host calls the module-level functions below. process_contact_load must
finish with host.complete_contact_load; on failure it raises and the host
runner is expected to call host.failed_contact_load.
"""
import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import db.repositories.campaign_contacts as campaign_contacts_repo
import loader_config
from contact_loaders.errors import ContactLoadError, TransportError
from contact_loaders.host import ContactLoadHost, DatabaseContactLoadHost
from contact_loaders.mapping import map_lists, map_person, person_ids_from_items
from db.connection import get_db
from schemas.contact_load import (
    CampaignContactRecord,
    ClientChoiceItems,
    ContactLoadPayload,
    ContactLoadSummary,
    ListChoice,
    MappedContact,
    MappingResult,
    SkippedPerson,
)
from tools.actionnetwork_tools import ActionNetworkClient, run_rate_limited

logger = logging.getLogger(__name__)

name = "actionnetwork"

CHOICES_ERROR = "Failed to load choices from ActionNetwork"


class LoadState(str, Enum):
    START = "start"
    CLEARED = "cleared"
    LOADING_LISTS = "loading_lists"
    LOADING_CONTACTS = "loading_contacts"
    INSERTED = "inserted"
    COMPLETED = "completed"
    FAILED = "failed"


def _log_state(subject: Any, state: LoadState) -> None:
    logger.info("ActionNetwork load %s -> %s", subject, state.value)


def _client(organization: Any) -> ActionNetworkClient:
    return ActionNetworkClient(organization)


# ---------------------------------------------------------------------------
# Host plugin contract
# ---------------------------------------------------------------------------


def display_name() -> str:
    return "Action Network"


def server_administrator_instructions() -> Dict[str, Any]:
    return {
        "environmentVariables": [
            loader_config.API_KEY,
            loader_config.DOMAIN,
            loader_config.BASE_URL,
            loader_config.CACHE_TTL,
        ],
        "description": "Load campaign contacts from an Action Network list.",
        "setupInstructions": (
            f"Set {loader_config.API_KEY} globally or per organization. "
            "The other variables are optional and default to the public Action Network API."
        ),
    }


async def available(organization: Any, user: Any) -> Dict[str, Any]:
    """Always usable; credentials are checked when lists are fetched."""
    return {"result": True, "expiresSeconds": 0}


def add_server_endpoints(app: Any) -> None:
    """This loader exposes no server-to-server endpoints."""
    return None


def client_choice_data_cache_key(campaign: Any, user: Any) -> str:
    return f"{campaign.id}"


# ---------------------------------------------------------------------------
# Fetch + map
# ---------------------------------------------------------------------------


async def get_contact_lists(organization: Any, client: Optional[ActionNetworkClient] = None) -> List[ListChoice]:
    client = client or _client(organization)
    raw_lists = await client.fetch_all_pages("lists")
    return map_lists(raw_lists)


async def get_person(organization: Any, identifier: str, client: Optional[ActionNetworkClient] = None) -> Dict[str, Any]:
    client = client or _client(organization)
    try:
        return await client.fetch_person(identifier)
    except TransportError:
        logger.error("Error loading person %s from ActionNetwork", identifier)
        raise


async def get_contacts_from_list(
    organization: Any,
    campaign_id: int,
    list_identifier: str,
    host: ContactLoadHost,
    client: Optional[ActionNetworkClient] = None,
) -> Tuple[List[CampaignContactRecord], List[SkippedPerson]]:
    """Fetch a list's people and map them to contacts.

    People that fail mapping, or that no longer exist upstream (404), are
    returned as skipped. Any other transport error aborts the load.
    """
    client = client or _client(organization)
    items = await client.fetch_all_pages(f"lists/{list_identifier}/items")
    person_ids = person_ids_from_items(items)
    logger.info("List %s has %d item(s), %d with a person id", list_identifier, len(items), len(person_ids))

    async def load_person(person_id: str) -> MappingResult:
        try:
            person = await get_person(organization, person_id, client=client)
        except TransportError as exc:
            if exc.status_code == 404:
                return SkippedPerson(person_id=person_id, reason="Person not found")
            raise
        result = map_person(person, campaign_id, person_id=person_id)
        if isinstance(result, MappedContact):
            result.contact.timezone_offset = await host.get_timezone_by_zip(result.contact.zip)
        return result

    if person_ids:
        # The item pages may have used up the current window.
        await client.sleep(client.rate_limit.window_seconds)
    results = await run_rate_limited(
        [(lambda pid=pid: load_person(pid)) for pid in person_ids],
        client.rate_limit,
        client.sleep,
    )

    contacts = [r.contact for r in results if isinstance(r, MappedContact)]
    skipped = [r for r in results if isinstance(r, SkippedPerson)]
    for skip in skipped:
        logger.debug("Skipped person %s: %s", skip.person_id, skip.reason)
    if skipped:
        logger.info("Skipped %d of %d people on list %s", len(skipped), len(person_ids), list_identifier)
    return contacts, skipped


async def get_client_choice_data(organization: Any, campaign: Any, user: Any) -> Dict[str, Any]:
    """Return the list picker data; an error payload instead of raising."""
    _log_state(f"campaign={getattr(campaign, 'id', None)}", LoadState.LOADING_LISTS)
    try:
        choices = await get_contact_lists(organization)
        return {
            "data": ClientChoiceItems(items=choices).model_dump_json(),
            "expiresSeconds": loader_config.cache_ttl(organization),
        }
    except Exception:
        logger.error("Error loading choices from ActionNetwork", exc_info=True)
        return {"data": json.dumps({"error": CHOICES_ERROR})}


# ---------------------------------------------------------------------------
# Contact load
# ---------------------------------------------------------------------------


def parse_payload(payload: Any) -> ContactLoadPayload:
    """Parse the job payload written by the list picker.

    Raises:
        ContactLoadError: payload is not JSON or has no listIdentifier.
    """
    try:
        data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
        return ContactLoadPayload.model_validate(data)
    except ValueError as exc:
        raise ContactLoadError(f"Invalid ActionNetwork job payload: {exc}") from exc


async def process_contact_load(
    job: Any,
    max_contacts: Optional[int],
    organization: Any,
    host: Optional[ContactLoadHost] = None,
) -> ContactLoadSummary:
    """Replace the campaign's contacts with the people on the chosen list."""
    host = host or DatabaseContactLoadHost()
    campaign_id = job.campaign_id
    subject = f"job={job.id} campaign={campaign_id}"
    _log_state(subject, LoadState.START)

    try:
        async with get_db() as session:
            await campaign_contacts_repo.delete_for_campaign(session, campaign_id)
        _log_state(subject, LoadState.CLEARED)

        payload = parse_payload(job.payload)
        if max_contacts:
            logger.debug("max_contacts=%s is not applied to ActionNetwork lists", max_contacts)

        _log_state(subject, LoadState.LOADING_CONTACTS)
        contacts, skipped = await get_contacts_from_list(
            organization, campaign_id, payload.list_identifier, host
        )

        async with get_db() as session:
            await campaign_contacts_repo.bulk_insert(session, [c.to_row() for c in contacts])
        _log_state(subject, LoadState.INSERTED)

        summary = ContactLoadSummary(final_count=len(contacts), skipped_count=len(skipped))
        reference = None if payload.request_contact_count is None else str(payload.request_contact_count)
        await host.complete_contact_load(job, reference, summary.to_json())
    except Exception:
        _log_state(subject, LoadState.FAILED)
        raise

    _log_state(subject, LoadState.COMPLETED)
    return summary
