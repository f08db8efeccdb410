from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from changelog_api.db.database import get_async_session
from changelog_api.api.dependencies.theme import get_theme_manifest
from changelog_api.schemas.theme import ThemeManifest, ThemeManifestResponse
from changelog_api.services.status_mapping_service import StatusMappingService
from changelog_api.schemas.status_mapping import (
    StatusMappingUpdate,
    StatusMappingOverview,
    StatusMappingResult,
    DefaultMappingsResult,
)

router = APIRouter(
    tags=["status-mappings"],
)


@router.get("/theme/manifest", response_model=ThemeManifestResponse)
async def get_manifest(
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Manifest of the currently applied theme"""
    if manifest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No theme is currently applied"
        )
    return {"success": True, "manifest": manifest}


@router.get("/status-mappings", response_model=StatusMappingOverview)
async def get_status_mappings(
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Mapped and unmapped statuses for the current theme"""
    overview = await StatusMappingService.get_overview(db=db, manifest=manifest)
    return {"success": True, **overview}


@router.put("/status-mappings/{status_id}", response_model=StatusMappingResult)
async def update_status_mapping(
    status_id: int,
    mapping_update: StatusMappingUpdate,
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Map a status to a category, or unmap it with a null category"""
    mapping = await StatusMappingService.set_mapping(
        db=db,
        status_id=status_id,
        category_id=mapping_update.category_id,
        manifest=manifest,
    )
    return {"success": True, "mapping": mapping}


@router.delete("/status-mappings/{status_id}", response_model=StatusMappingResult)
async def delete_status_mapping(
    status_id: int,
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Remove the category mapping of a status"""
    await StatusMappingService.set_mapping(
        db=db,
        status_id=status_id,
        category_id=None,
        manifest=manifest,
    )
    return {"success": True, "mapping": None}


@router.post("/status-mappings/defaults", response_model=DefaultMappingsResult)
async def apply_default_mappings(
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Give every unmapped status its suggested category"""
    created = await StatusMappingService.apply_default_mappings(db=db, manifest=manifest)
    return {"success": True, "created": created}
