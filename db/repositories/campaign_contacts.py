"""Campaign contact repository — clear and bulk load a campaign's contacts."""
import logging
from typing import Iterable, Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import CampaignContact

logger = logging.getLogger(__name__)

INSERT_CHUNK_SIZE = 100


async def delete_for_campaign(session: AsyncSession, campaign_id: int) -> int:
    """Hard-delete every contact row for the campaign. Returns rows removed."""
    result = await session.execute(
        delete(CampaignContact).where(CampaignContact.campaign_id == campaign_id)
    )
    await session.flush()
    logger.info("Deleted %d campaign_contact rows for campaign %s", result.rowcount, campaign_id)
    return result.rowcount


async def bulk_insert(
    session: AsyncSession,
    rows: Sequence[dict],
    chunk_size: int = INSERT_CHUNK_SIZE,
) -> int:
    """Insert contact rows in chunks of chunk_size. Returns rows inserted.

    rows dict keys: first_name, last_name, cell, zip, custom_fields,
    timezone_offset, message_status, campaign_id
    """
    inserted = 0
    for chunk in chunked(rows, chunk_size):
        chunk = list(chunk)
        await session.execute(insert(CampaignContact), chunk)
        inserted += len(chunk)
    await session.flush()
    return inserted


async def list_for_campaign(session: AsyncSession, campaign_id: int) -> list[CampaignContact]:
    result = await session.execute(
        select(CampaignContact)
        .where(CampaignContact.campaign_id == campaign_id)
        .order_by(CampaignContact.id)
    )
    return list(result.scalars().all())


async def count_for_campaign(session: AsyncSession, campaign_id: int) -> int:
    result = await session.execute(
        select(func.count()).select_from(CampaignContact).where(CampaignContact.campaign_id == campaign_id)
    )
    return result.scalar_one()


def chunked(rows: Sequence[dict], chunk_size: int = INSERT_CHUNK_SIZE) -> Iterable[Sequence[dict]]:
    for start in range(0, len(rows), chunk_size):
        yield rows[start:start + chunk_size]
