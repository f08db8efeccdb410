from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from changelog_api.db.database import get_async_session
from changelog_api.api.dependencies.theme import get_theme_manifest
from changelog_api.schemas.event import EventsByCategory
from changelog_api.schemas.status_mapping import PublicStatusMappings
from changelog_api.schemas.theme import ThemeManifest
from changelog_api.services.status_mapping_service import StatusMappingService

router = APIRouter(
    prefix="/public",
    tags=["public"],
)


@router.get("/status-mappings", response_model=PublicStatusMappings)
async def get_public_status_mappings(
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Statuses grouped by theme category for the public page"""
    categories = await StatusMappingService.get_public_mappings(db=db, manifest=manifest)
    return {
        "success": True,
        "theme_id": manifest.id if manifest else None,
        "categories": categories,
    }


@router.get("/events/by-category", response_model=EventsByCategory)
async def get_public_events_by_category(
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Public events grouped by the category of their status"""
    categories = await StatusMappingService.get_public_events_by_category(db=db, manifest=manifest)
    return {
        "success": True,
        "theme_id": manifest.id if manifest else None,
        "theme_name": manifest.name if manifest else None,
        "categories": categories,
    }
