"""Action Network OSDI API client.

Calls the Action Network REST API directly (no official Python SDK). Pages
are fetched with `requests` in worker threads so a batch can be issued
concurrently, and batches are spaced out to respect the upstream rate limit
(about 4 requests per second).
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import requests

import loader_config
from contact_loaders.errors import TransportError
from schemas.contact_load import PageResponse

logger = logging.getLogger(__name__)

AUTH_HEADER = "OSDI-API-Token"

Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RateLimit:
    requests_per_window: int = 4
    window_seconds: float = 1.1

    @classmethod
    def for_organization(cls, organization: Any = None) -> "RateLimit":
        return cls(
            requests_per_window=loader_config.requests_per_window(organization),
            window_seconds=loader_config.rate_window_seconds(organization),
        )


async def run_rate_limited(
    calls: Sequence[Callable[[], Awaitable[Any]]],
    rate_limit: RateLimit,
    sleep: Sleep,
    already_issued: int = 0,
) -> List[Any]:
    """Await calls in concurrent batches, sleeping one window between batches.

    already_issued is the number of requests made in the current window
    before this call; it shrinks the batch size accordingly. Results are
    returned in call order. The first failure in a batch propagates.
    """
    batch_size = max(1, rate_limit.requests_per_window - already_issued)
    results: List[Any] = []
    for start in range(0, len(calls), batch_size):
        if start > 0:
            await sleep(rate_limit.window_seconds)
        batch = calls[start:start + batch_size]
        batch_results = await asyncio.gather(*(call() for call in batch))
        results.extend(batch_results)
    return results


def extract_items(item: str, pages: Sequence[PageResponse]) -> List[Dict[str, Any]]:
    """Concatenate body._embedded["osdi:<item>"] across pages, in page order."""
    key = f"osdi:{item.rsplit('/', 1)[-1]}"
    items: List[Dict[str, Any]] = []
    for page in pages:
        embedded = page.body.get("_embedded") or {}
        found = embedded.get(key) if isinstance(embedded, dict) else None
        if isinstance(found, list):
            items.extend(found)
    return items


def _total_pages(body: Dict[str, Any]) -> int:
    try:
        total = int(body.get("total_pages") or 1)
    except (TypeError, ValueError):
        return 1
    return max(total, 1)


class ActionNetworkClient:
    """Authenticated, rate-limited client for one organization's API key."""

    def __init__(
        self,
        organization: Any = None,
        session: Optional[requests.Session] = None,
        sleep: Optional[Sleep] = None,
        rate_limit: Optional[RateLimit] = None,
    ):
        self.organization = organization
        self.session = session or requests.Session()
        self.sleep = sleep or asyncio.sleep
        self.rate_limit = rate_limit or RateLimit.for_organization(organization)
        self.timeout = loader_config.http_timeout_seconds(organization)
        self.api_root = loader_config.api_root(organization)

    def make_url(self, path: str) -> str:
        return f"{self.api_root}/{path}"

    def auth_headers(self) -> Dict[str, str]:
        key = loader_config.api_key(self.organization)
        if not key:
            logger.warning("%s is not configured; request will be unauthenticated", loader_config.API_KEY)
            return {}
        return {AUTH_HEADER: key}

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = self.make_url(path)
        logger.info("HTTP GET %s %s", url, params or "")
        try:
            resp = self.session.get(url, headers=self.auth_headers(), params=params, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = f"Error retrieving {path} from ActionNetwork: HTTP {status}"
            logger.error(message)
            raise TransportError(message, url=url, status_code=status) from exc
        except requests.RequestException as exc:
            message = f"Error retrieving {path} from ActionNetwork: {exc}"
            logger.error(message)
            raise TransportError(message, url=url) from exc
        try:
            body = resp.json()
        except ValueError as exc:
            message = f"Invalid JSON from ActionNetwork for {path}: {exc}"
            logger.error(message)
            raise TransportError(message, url=url, status_code=resp.status_code) from exc
        if body is None:
            return {}
        if not isinstance(body, dict):
            message = f"Unexpected {type(body).__name__} body from ActionNetwork for {path}"
            logger.error(message)
            raise TransportError(message, url=url, status_code=resp.status_code)
        return body

    async def fetch_page(self, item: str, page: int) -> PageResponse:
        """GET <root>/<item>?page=<page> and return the parsed body."""
        try:
            body = await asyncio.to_thread(self._get_json, item, {"page": page})
        except TransportError:
            logger.error("Error loading %s page %d from ActionNetwork", item, page)
            raise
        return PageResponse(item=item, page=page, body=body or {})

    async def fetch_all_pages(self, item: str) -> List[Dict[str, Any]]:
        """Fetch every page of item and return the embedded records, flattened.

        Page 1 reveals total_pages; the remaining pages are fetched in
        rate-limited batches. Any page failure aborts the whole call.
        """
        first = await self.fetch_page(item, 1)
        total = _total_pages(first.body)
        calls = [
            (lambda page=page: self.fetch_page(item, page))
            for page in range(2, total + 1)
        ]
        rest = await run_rate_limited(calls, self.rate_limit, self.sleep, already_issued=1)
        pages = [first, *rest]
        logger.info("Fetched %d page(s) of %s", len(pages), item)
        return extract_items(item, pages)

    async def fetch_person(self, person_id: str) -> Dict[str, Any]:
        """GET <root>/people/<person_id>."""
        return await asyncio.to_thread(self._get_json, f"people/{person_id}")

