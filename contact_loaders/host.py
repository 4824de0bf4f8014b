"""Callbacks a contact loader makes into the host job system."""
import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import db.repositories.jobs as jobs_repo
import db.repositories.zip_codes as zip_repo
from db.connection import get_db

logger = logging.getLogger(__name__)


class ContactLoadHost(Protocol):
    async def complete_contact_load(
        self, job: Any, ingest_data_reference: Optional[str], ingest_result: Optional[str]
    ) -> None: ...

    async def failed_contact_load(
        self, job: Any, ingest_data_reference: Optional[str], ingest_result: Optional[str]
    ) -> None: ...

    async def get_timezone_by_zip(self, zip_code: Optional[str]) -> Optional[str]: ...


class DatabaseContactLoadHost:
    """Finalizes jobs in job_request and resolves timezones from zip_code."""

    def __init__(self) -> None:
        self._timezones: Dict[str, "asyncio.Future[Optional[str]]"] = {}

    async def complete_contact_load(self, job, ingest_data_reference=None, ingest_result=None) -> None:
        async with get_db() as session:
            await jobs_repo.finish(
                session,
                job.id,
                "completed",
                ingest_data_reference=ingest_data_reference,
                ingest_result=ingest_result,
            )
        logger.info("Contact load job %s completed: %s", job.id, ingest_result)

    async def failed_contact_load(self, job, ingest_data_reference=None, ingest_result=None) -> None:
        async with get_db() as session:
            await jobs_repo.finish(
                session,
                job.id,
                "failed",
                ingest_data_reference=ingest_data_reference,
                ingest_result=ingest_result,
                result_message=ingest_result,
            )
        logger.warning("Contact load job %s failed: %s", job.id, ingest_result)

    async def get_timezone_by_zip(self, zip_code: Optional[str]) -> Optional[str]:
        """Resolve a zip's timezone once per host; concurrent callers share the lookup."""
        if not zip_code:
            return None
        lookup = self._timezones.get(zip_code)
        if lookup is None:
            lookup = asyncio.ensure_future(self._lookup_timezone(zip_code))
            self._timezones[zip_code] = lookup
        try:
            return await asyncio.shield(lookup)
        except Exception:
            # Failed lookups are retried by the next caller
            if self._timezones.get(zip_code) is lookup:
                del self._timezones[zip_code]
            raise

    async def _lookup_timezone(self, zip_code: str) -> Optional[str]:
        async with get_db() as session:
            return await zip_repo.get_timezone_by_zip(session, zip_code)
