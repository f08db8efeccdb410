from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func

from changelog_api.core.exceptions import ValidationError
from changelog_api.logs.debug_log import debug_logger
from changelog_api.models.event import Event
from changelog_api.models.status import StatusDefinition
from changelog_api.services.workflow_lock import acquire_workflow_lock
from changelog_api.utils.slug import generate_unique_slug


class EventService:
    """Event store used by the status workflow: counts, moves and reassignment"""

    @staticmethod
    async def count_by_status(db: AsyncSession) -> Dict[str, int]:
        """Number of events per status name"""
        query = select(Event.status, func.count(Event.id)).group_by(Event.status)
        result = await db.execute(query)
        return {status_name: count for status_name, count in result.all()}

    @staticmethod
    async def count_for_status(db: AsyncSession, status_name: str) -> int:
        query = select(func.count(Event.id)).where(Event.status == status_name)
        result = await db.execute(query)
        return result.scalar() or 0

    @staticmethod
    async def reassign_status(
        db: AsyncSession,
        old_status: str,
        new_status: str
    ) -> int:
        """Move every event from one status to another

        Does not commit: callers run it inside their own transaction.
        """
        stmt = update(Event).where(Event.status == old_status).values(status=new_status)
        result = await db.execute(stmt)
        debug_logger.debug(f"Moved {result.rowcount} events from '{old_status}' to '{new_status}'")
        return result.rowcount

    @staticmethod
    async def _ensure_status_exists(db: AsyncSession, status_name: str) -> None:
        query = select(StatusDefinition.id).where(StatusDefinition.display_name == status_name)
        result = await db.execute(query)
        if result.scalar() is None:
            raise ValidationError(f"Unknown status '{status_name}'")

    @staticmethod
    async def get_by_id(db: AsyncSession, event_id: int) -> Optional[Event]:
        query = select(Event).where(Event.id == event_id)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_all(
        db: AsyncSession,
        status_name: Optional[str] = None,
        public_only: bool = False
    ) -> List[Event]:
        """Events, newest first, optionally limited to one status or to public ones"""
        query = select(Event).order_by(Event.created_at.desc(), Event.id.desc())
        if status_name is not None:
            query = query.where(Event.status == status_name)
        if public_only:
            query = query.where(Event.is_public.is_(True))
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        db: AsyncSession,
        title: str,
        status_name: str,
        content: Optional[str] = None,
        is_public: bool = True
    ) -> Event:
        """Create an event on an existing status"""
        title = title.strip()
        if not title:
            raise ValidationError("title cannot be empty")

        await acquire_workflow_lock(db)
        await EventService._ensure_status_exists(db, status_name)

        event = Event(
            title=title,
            slug=await generate_unique_slug(db, Event, title),
            status=status_name,
            content=content,
            is_public=is_public,
        )
        db.add(event)
        await db.commit()
        await db.refresh(event)
        return event

    @staticmethod
    async def update(
        db: AsyncSession,
        event_id: int,
        title: Optional[str] = None,
        status_name: Optional[str] = None,
        content: Optional[str] = None,
        is_public: Optional[bool] = None
    ) -> Optional[Event]:
        """Update an event; any status may move to any other status

        Args:
            db: Database session
            event_id: ID of the event to update
            title: New title, trimmed and non-empty
            status_name: Display name of the status to move the event to
            content: New body
            is_public: Show the event on the public page

        Returns:
            The updated event, or None if it does not exist
        """
        event = await EventService.get_by_id(db, event_id)
        if not event:
            return None

        if title is not None:
            title = title.strip()
            if not title:
                raise ValidationError("title cannot be empty")
        if status_name is not None and status_name != event.status:
            await acquire_workflow_lock(db)
            await EventService._ensure_status_exists(db, status_name)

        if title is not None and title != event.title:
            event.title = title
            event.slug = await generate_unique_slug(db, Event, title, exclude_id=event.id)

        if status_name is not None and status_name != event.status:
            debug_logger.debug(f"Event {event.id} moves from '{event.status}' to '{status_name}'")
            event.status = status_name

        if content is not None:
            event.content = content
        if is_public is not None:
            event.is_public = is_public

        await db.commit()
        await db.refresh(event)
        return event

    @staticmethod
    async def delete(db: AsyncSession, event_id: int) -> bool:
        stmt = delete(Event).where(Event.id == event_id)
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0
