"""Shared fakes for contact loader tests."""
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import requests

API_ROOT = "https://actionnetwork.org/api/v2"
ORG = {"features": {"ACTION_NETWORK_API_KEY": "org-key"}}


def _make_mock_response(body=None, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=MagicMock(status_code=status_code)
        )
    else:
        resp.raise_for_status.return_value = None
    return resp


def osdi_page(item, records, total_pages):
    return {"total_pages": total_pages, "_embedded": {f"osdi:{item}": records}}


class FakeActionNetwork:
    """Stands in for requests.Session; routes GETs to canned bodies by path."""

    def __init__(self):
        self.pages = {}  # path -> list of page bodies
        self.people = {}  # person id -> body, or an int status code
        self.calls = []

    def add_paginated(self, path, item, pages_of_records):
        total = len(pages_of_records)
        self.pages[path] = [osdi_page(item, records, total) for records in pages_of_records]

    def get(self, url, headers=None, params=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "params": params, "timeout": timeout})
        path = url[len(API_ROOT) + 1:]
        if path.startswith("people/"):
            person = self.people.get(path[len("people/"):], 404)
            if isinstance(person, int):
                return _make_mock_response(None, status_code=person)
            return _make_mock_response(person)
        if path not in self.pages:
            return _make_mock_response(None, status_code=404)
        page = (params or {}).get("page", 1)
        return _make_mock_response(self.pages[path][page - 1])

    def page_calls(self, path):
        return [c["params"]["page"] for c in self.calls if c["url"] == f"{API_ROOT}/{path}"]


class FakeContactStore:
    """Replaces db.repositories.campaign_contacts with an in-memory table."""

    def __init__(self):
        self.rows = {}
        self.insert_chunks = []

    async def delete_for_campaign(self, session, campaign_id):
        return len(self.rows.pop(campaign_id, []))

    async def bulk_insert(self, session, rows, chunk_size=100):
        for start in range(0, len(rows), chunk_size):
            chunk = rows[start:start + chunk_size]
            self.insert_chunks.append(len(chunk))
            for row in chunk:
                self.rows.setdefault(row["campaign_id"], []).append(row)
        return len(rows)


@asynccontextmanager
async def fake_get_db():
    yield MagicMock()


@pytest.fixture
def fake_api():
    return FakeActionNetwork()


@pytest.fixture
def fake_sleep():
    return AsyncMock()


@pytest.fixture
def fake_host():
    host = MagicMock()
    host.complete_contact_load = AsyncMock()
    host.failed_contact_load = AsyncMock()
    host.get_timezone_by_zip = AsyncMock(return_value="-5_1")
    return host


@pytest.fixture(autouse=True)
def _clean_action_network_env(monkeypatch):
    for key in (
        "ACTION_NETWORK_API_KEY",
        "ACTION_NETWORK_API_DOMAIN",
        "ACTION_NETWORK_API_BASE_URL",
        "ACTION_NETWORK_ACTION_HANDLER_CACHE_TTL",
        "ACTION_NETWORK_REQUESTS_PER_WINDOW",
        "ACTION_NETWORK_RATE_WINDOW_SECONDS",
        "ACTION_NETWORK_HTTP_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(key, raising=False)
