"""Zip code repository — timezone lookup for campaign contacts."""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import ZipCode

logger = logging.getLogger(__name__)


def format_offset(timezone_offset: float, has_dst: bool) -> str:
    """Return the campaign_contact.timezone_offset form, e.g. '-5_1'."""
    offset = int(timezone_offset) if float(timezone_offset).is_integer() else timezone_offset
    return f"{offset}_{1 if has_dst else 0}"


async def get_timezone_by_zip(session: AsyncSession, zip_code: str) -> Optional[str]:
    """Return '<offset>_<dst>' for a 5-digit zip, or None when unknown."""
    if not zip_code:
        return None
    result = await session.execute(
        select(ZipCode).where(ZipCode.zip == str(zip_code).strip()[:5])
    )
    row = result.scalar_one_or_none()
    if row is None:
        return None
    return format_offset(row.timezone_offset, row.has_dst)
