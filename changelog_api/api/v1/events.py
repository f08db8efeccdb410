from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from changelog_api.db.database import get_async_session
from changelog_api.services.event_service import EventService
from changelog_api.schemas.event import EventCreate, EventUpdate, EventResponse

router = APIRouter(
    prefix="/events",
    tags=["events"],
)


@router.get("", response_model=List[EventResponse])
async def get_events(
    status_name: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_session),
):
    """Get events, optionally only those on one status"""
    return await EventService.get_all(db=db, status_name=status_name)


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_create: EventCreate,
    db: AsyncSession = Depends(get_async_session),
):
    """Create an event on an existing status"""
    return await EventService.create(
        db=db,
        title=event_create.title,
        status_name=event_create.status,
        content=event_create.content,
        is_public=event_create.is_public,
    )


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    event = await EventService.get_by_id(db=db, event_id=event_id)
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )
    return event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    event_update: EventUpdate,
    db: AsyncSession = Depends(get_async_session),
):
    """Update an event, including moving it to another status"""
    event = await EventService.update(
        db=db,
        event_id=event_id,
        title=event_update.title,
        status_name=event_update.status,
        content=event_update.content,
        is_public=event_update.is_public,
    )
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    db: AsyncSession = Depends(get_async_session),
):
    deleted = await EventService.delete(db=db, event_id=event_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found"
        )
