import enum
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class MovePosition(str, enum.Enum):
    """Side of the target status a dragged status lands on"""
    BEFORE = "before"
    AFTER = "after"


class StatusBase(BaseModel):
    """Base schema for status data"""
    display_name: str = Field(..., description="Column name, 1-50 characters")


class StatusCreate(StatusBase):
    """Schema for status creation"""
    category_id: Optional[str] = Field(None, description="Category of the current theme to map to")


class StatusUpdate(BaseModel):
    """Schema for status rename"""
    display_name: str


class StatusInDB(StatusBase):
    """Schema for status representation in the database"""
    id: int
    slug: str
    order: int
    is_reserved: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StatusResponse(StatusInDB):
    pass


class StatusList(BaseModel):
    statuses: List[StatusResponse]


class StatusOrderUpdate(BaseModel):
    """Schema for setting the full status order at once"""
    status_order: List[int]


class StatusMove(BaseModel):
    """Drag-and-drop move relative to another status"""
    target_status_id: int
    position: MovePosition


class ColumnView(BaseModel):
    """One Kanban column: status, its label and the number of events on it"""
    status: StatusResponse
    label: str
    count: int
    category_id: Optional[str] = None
    category_label: Optional[str] = None


class ColumnList(BaseModel):
    columns: List[ColumnView]
