"""Organization and campaign lookups used to scope loader configuration."""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import Campaign, Organization

logger = logging.getLogger(__name__)


async def get_by_id(session: AsyncSession, organization_id: int) -> Optional[Organization]:
    """Return the Organization with this id, or None."""
    result = await session.execute(
        select(Organization).where(Organization.id == organization_id)
    )
    return result.scalar_one_or_none()


async def get_campaign(session: AsyncSession, campaign_id: int) -> Optional[Campaign]:
    result = await session.execute(select(Campaign).where(Campaign.id == campaign_id))
    return result.scalar_one_or_none()


async def get_for_campaign(session: AsyncSession, campaign_id: int) -> Optional[Organization]:
    """Return the organization that owns the campaign, or None."""
    result = await session.execute(
        select(Organization)
        .join(Campaign, Campaign.organization_id == Organization.id)
        .where(Campaign.id == campaign_id)
    )
    return result.scalar_one_or_none()


async def set_feature(session: AsyncSession, organization_id: int, key: str, value) -> Optional[Organization]:
    """Set one per-organization config override in features."""
    org = await get_by_id(session, organization_id)
    if org is None:
        return None
    # Reassign so the JSON column is marked dirty.
    org.features = {**(org.features or {}), key: value}
    await session.flush()
    return org
