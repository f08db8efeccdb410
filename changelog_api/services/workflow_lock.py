from datetime import datetime

from sqlalchemy import insert, update
from sqlalchemy.ext.asyncio import AsyncSession

from changelog_api.logs.debug_log import debug_logger
from changelog_api.models.workflow_lock import StatusWorkflowLock

WORKFLOW_LOCK_ID = 1


async def acquire_workflow_lock(db: AsyncSession) -> None:
    """Lock the status workflow until the current transaction ends

    Every write to statuses or their mappings calls this before reading the
    status set. The lock is a write on one shared row, so a concurrent writer
    waits for this transaction to commit or roll back and then reads the new
    state. PostgreSQL holds the row lock; SQLite holds its database write lock.

    Args:
        db: Database session whose transaction takes the lock
    """
    stmt = (
        update(StatusWorkflowLock)
        .where(StatusWorkflowLock.id == WORKFLOW_LOCK_ID)
        .values(revision=StatusWorkflowLock.revision + 1, updated_at=datetime.utcnow())
    )
    result = await db.execute(stmt)

    if result.rowcount == 0:
        # Databases built without migrations start with no lock row
        await db.execute(
            insert(StatusWorkflowLock).values(id=WORKFLOW_LOCK_ID, revision=1, updated_at=datetime.utcnow())
        )
        debug_logger.debug("Created status workflow lock row")
