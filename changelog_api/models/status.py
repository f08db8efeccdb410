from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship

from changelog_api.db.base import Base


class StatusDefinition(Base):
    """Status (Kanban column) definition for changelog events"""

    __tablename__ = "event_status_definitions"

    id = Column(Integer, primary_key=True, index=True)
    display_name = Column(String(50), nullable=False, unique=True)
    slug = Column(String(60), nullable=False, unique=True)
    order = Column(Integer, nullable=False, default=0)  # Display position, dense
    is_reserved = Column(Boolean, nullable=False, default=False)  # Backlogs / Archived
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Rows are removed by the ON DELETE CASCADE foreign key
    mappings = relationship(
        "StatusCategoryMapping",
        back_populates="status",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<StatusDefinition id={self.id} display_name={self.display_name!r} order={self.order}>"
