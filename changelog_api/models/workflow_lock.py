from datetime import datetime
from sqlalchemy import Column, Integer, DateTime

from changelog_api.db.base import Base


class StatusWorkflowLock(Base):
    """Single row that writers of the status workflow lock for their transaction

    ``revision`` goes up by one on every locked write.
    """

    __tablename__ = "status_workflow_locks"

    id = Column(Integer, primary_key=True)
    revision = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
