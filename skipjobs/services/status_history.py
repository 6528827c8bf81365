"""Status history recording.

The only component allowed to fail silently: the insert runs inside a
SAVEPOINT so a broken audit table rolls back just the history row and the
caller's transition still commits.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skipjobs.models import SkipJobStatusHistory

logger = logging.getLogger(__name__)


async def record_status_change(
    db: AsyncSession,
    skip_job_id: str,
    old_status: str | None,
    new_status: str,
    changed_by: str = "system",
) -> bool:
    """Append one history row in the caller's transaction. Never raises."""
    try:
        async with db.begin_nested():
            db.add(SkipJobStatusHistory(
                skip_job_id=skip_job_id,
                old_status=old_status,
                new_status=new_status,
                changed_by=changed_by,
            ))
        return True
    except SQLAlchemyError:
        logger.exception(
            "Status history insert failed for job %s (%s -> %s)",
            skip_job_id, old_status, new_status,
        )
        return False
