from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from changelog_api.schemas.status import StatusResponse


class StatusMappingUpdate(BaseModel):
    """Schema for setting a status category; null clears the mapping"""
    category_id: Optional[str] = Field(None, description="Category id from the current theme manifest")


class StatusMappingResponse(BaseModel):
    id: int
    status_definition_id: int
    theme_id: str
    category_id: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MappedStatus(BaseModel):
    status_id: int
    status_name: str
    category_id: str
    category_label: Optional[str] = None
    theme_id: str


class UnmappedStatus(BaseModel):
    status_id: int
    status_name: str
    suggested_category: Optional[str] = None


class StatusMappingOverview(BaseModel):
    success: bool = True
    theme_id: Optional[str] = None
    theme_name: Optional[str] = None
    mappings: List[MappedStatus] = []
    unmapped_statuses: List[UnmappedStatus] = []


class StatusMappingResult(BaseModel):
    success: bool = True
    mapping: Optional[StatusMappingResponse] = None


class DefaultMappingsResult(BaseModel):
    success: bool = True
    created: List[StatusMappingResponse] = []


class PublicStatusMappings(BaseModel):
    success: bool = True
    theme_id: Optional[str] = None
    categories: Dict[str, List[StatusResponse]] = {}
