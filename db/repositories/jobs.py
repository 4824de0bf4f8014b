"""Job request repository — load and finalize contact load jobs."""
import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import JobRequest

logger = logging.getLogger(__name__)


async def get_by_id(session: AsyncSession, job_id: int) -> Optional[JobRequest]:
    """Return the JobRequest with this id, or None."""
    result = await session.execute(select(JobRequest).where(JobRequest.id == job_id))
    return result.scalar_one_or_none()


async def create(session: AsyncSession, campaign_id: int, job_type: str, payload: str) -> JobRequest:
    job = JobRequest(campaign_id=campaign_id, job_type=job_type, payload=payload, status="pending")
    session.add(job)
    await session.flush()
    return job


async def mark_running(session: AsyncSession, job_id: int) -> None:
    await session.execute(
        update(JobRequest)
        .where(JobRequest.id == job_id)
        .values(status="running", updated_at=func.now())
    )
    await session.flush()


async def finish(
    session: AsyncSession,
    job_id: int,
    status: str,
    ingest_data_reference: Optional[str] = None,
    ingest_result: Optional[str] = None,
    result_message: Optional[str] = None,
) -> Optional[JobRequest]:
    """Record a terminal status and the loader's result on the job.

    status must be one of: 'completed', 'failed'
    """
    if status not in ("completed", "failed"):
        raise ValueError(f"Invalid terminal job status: {status!r}")
    result = await session.execute(
        update(JobRequest)
        .where(JobRequest.id == job_id)
        .values(
            status=status,
            ingest_data_reference=ingest_data_reference,
            ingest_result=ingest_result,
            result_message=result_message,
            updated_at=func.now(),
        )
        .returning(JobRequest)
    )
    await session.flush()
    job = result.scalar_one_or_none()
    if job is None:
        logger.warning("Job %s not found while marking it %s", job_id, status)
    return job
