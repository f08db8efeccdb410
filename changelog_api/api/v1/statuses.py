from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from changelog_api.db.database import get_async_session
from changelog_api.api.dependencies.theme import get_theme_manifest
from changelog_api.logs.server_log import api_logger
from changelog_api.schemas.theme import ThemeManifest
from changelog_api.services.status_service import StatusService
from changelog_api.schemas.status import (
    StatusCreate,
    StatusResponse,
    StatusUpdate,
    StatusList,
    StatusOrderUpdate,
    StatusMove,
    ColumnList,
)

router = APIRouter(
    prefix="/statuses",
    tags=["statuses"],
)


@router.get("/columns", response_model=ColumnList)
async def get_columns(
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Kanban columns in display order with event counts"""
    columns = await StatusService.list_columns(db=db, manifest=manifest)
    return {"columns": columns}


@router.put("/reorder", response_model=StatusList)
async def reorder_statuses(
    status_order: StatusOrderUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Set the order of all statuses at once"""
    statuses = await StatusService.reorder_all(db=db, status_order=status_order.status_order)
    api_logger.info(f"Statuses reordered: {status_order.status_order}")
    return {"statuses": statuses}


@router.get("", response_model=StatusList)
async def get_statuses(
    db: AsyncSession = Depends(get_async_session),
):
    """Get all statuses in display order"""
    statuses = await StatusService.get_all(db=db)
    return {"statuses": statuses}


@router.post("", response_model=StatusResponse, status_code=status.HTTP_201_CREATED)
async def create_status(
    status_create: StatusCreate,
    db: AsyncSession = Depends(get_async_session),
    manifest: Optional[ThemeManifest] = Depends(get_theme_manifest),
):
    """Create a new status at the end of the board"""
    created = await StatusService.create(
        db=db,
        display_name=status_create.display_name,
        category_id=status_create.category_id,
        manifest=manifest,
    )
    return created


@router.get("/{status_id}", response_model=StatusResponse)
async def get_status(
    status_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    """Get a specific status by ID"""
    found = await StatusService.get_by_id(db=db, status_id=status_id)
    if not found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Status not found"
        )
    return found


@router.put("/{status_id}", response_model=StatusResponse)
async def rename_status(
    status_id: int,
    status_update: StatusUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Rename a status; events on it follow the new name"""
    return await StatusService.rename(
        db=db,
        status_id=status_id,
        display_name=status_update.display_name,
    )


@router.put("/{status_id}/move", response_model=StatusList)
async def move_status(
    status_id: int,
    move: StatusMove,
    db: AsyncSession = Depends(get_async_session),
):
    """Drag-and-drop a status before or after another one"""
    statuses = await StatusService.reorder(
        db=db,
        status_id=status_id,
        target_status_id=move.target_status_id,
        position=move.position,
    )
    return {"statuses": statuses}


@router.delete("/{status_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_status(
    status_id: int,
    reassign_to: Optional[int] = Query(None, description="Status receiving the events of the deleted one"),
    db: AsyncSession = Depends(get_async_session),
):
    """Delete a status (never reserved ones, never the last one)"""
    await StatusService.delete(db=db, status_id=status_id, reassign_to_id=reassign_to)
    if reassign_to is not None:
        api_logger.info(f"Status {status_id} deleted, events reassigned to {reassign_to}")
    else:
        api_logger.info(f"Status {status_id} deleted")
