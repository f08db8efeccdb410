from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from changelog_api.db.base import Base


class StatusCategoryMapping(Base):
    """Binding of a status to a category of a theme manifest"""

    __tablename__ = "status_category_mappings"
    __table_args__ = (
        UniqueConstraint("status_definition_id", "theme_id", name="uq_status_mapping_status_theme"),
    )

    id = Column(Integer, primary_key=True, index=True)
    status_definition_id = Column(
        Integer,
        ForeignKey("event_status_definitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    theme_id = Column(String, nullable=False, index=True)
    category_id = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    status = relationship("StatusDefinition", back_populates="mappings")
