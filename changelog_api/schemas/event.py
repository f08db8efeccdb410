from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class EventBase(BaseModel):
    """Base schema for event data"""
    title: str = Field(..., min_length=1)
    content: Optional[str] = None


class EventCreate(EventBase):
    """Schema for event creation"""
    status: str = Field(..., description="Display name of an existing status")
    is_public: bool = True


class EventUpdate(BaseModel):
    """Schema for event update"""
    title: Optional[str] = None
    content: Optional[str] = None
    status: Optional[str] = None
    is_public: Optional[bool] = None


class EventResponse(EventBase):
    id: int
    slug: str
    status: str
    votes: int
    is_public: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EventsByCategory(BaseModel):
    success: bool = True
    theme_id: Optional[str] = None
    theme_name: Optional[str] = None
    categories: Dict[str, List[EventResponse]] = {}
