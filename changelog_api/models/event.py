from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean

from changelog_api.db.base import Base


class Event(Base):
    """Changelog entry placed in one of the status columns"""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    slug = Column(String(60), nullable=False, unique=True)
    # References StatusDefinition.display_name, kept in sync on rename
    status = Column(String(50), nullable=False, index=True)
    content = Column(Text, nullable=True)  # Markdown
    votes = Column(Integer, nullable=False, default=0)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
