from typing import List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError

from changelog_api.core.exceptions import (
    ConflictError,
    LastStatusError,
    NotFoundError,
    ReservedStatusError,
    ValidationError,
)
from changelog_api.logs.debug_log import debug_logger
from changelog_api.models.status import StatusDefinition
from changelog_api.models.status_mapping import StatusCategoryMapping
from changelog_api.schemas.status import MovePosition
from changelog_api.schemas.theme import ThemeManifest
from changelog_api.services.event_service import EventService
from changelog_api.services.status_mapping_service import StatusMappingService
from changelog_api.services.workflow_lock import acquire_workflow_lock
from changelog_api.utils.slug import generate_unique_slug

MAX_DISPLAY_NAME_LENGTH = 50
RESERVED_STATUSES = ("Backlogs", "Archived")


def _renormalize(statuses: List[StatusDefinition], base: int) -> None:
    """Rewrite orders as base, base + 1, ... following the list order"""
    for offset, status in enumerate(statuses):
        if status.order != base + offset:
            status.order = base + offset


class StatusService:
    """Ordered status (Kanban column) workflow

    Every mutating call is one transaction: it takes the workflow lock, commits
    once at the end and rolls back everything on error.
    """

    @staticmethod
    def clean_display_name(display_name: Optional[str]) -> str:
        name = (display_name or "").strip()
        if not name:
            raise ValidationError("display_name cannot be empty")
        if len(name) > MAX_DISPLAY_NAME_LENGTH:
            raise ValidationError(f"display_name cannot be longer than {MAX_DISPLAY_NAME_LENGTH} characters")
        return name

    @staticmethod
    async def get_by_id(db: AsyncSession, status_id: int) -> Optional[StatusDefinition]:
        query = select(StatusDefinition).where(StatusDefinition.id == status_id)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_by_display_name(db: AsyncSession, display_name: str) -> Optional[StatusDefinition]:
        query = select(StatusDefinition).where(StatusDefinition.display_name == display_name)
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_all(db: AsyncSession) -> List[StatusDefinition]:
        """All statuses in display order"""
        query = select(StatusDefinition).order_by(StatusDefinition.order, StatusDefinition.display_name)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def count(db: AsyncSession) -> int:
        result = await db.execute(select(func.count(StatusDefinition.id)))
        return result.scalar() or 0

    @staticmethod
    async def _require(db: AsyncSession, status_id: int) -> StatusDefinition:
        status = await StatusService.get_by_id(db, status_id)
        if not status:
            raise NotFoundError("Status not found")
        return status

    @staticmethod
    async def _ensure_unique_name(
        db: AsyncSession,
        display_name: str,
        exclude_id: Optional[int] = None
    ) -> None:
        query = select(func.count(StatusDefinition.id)).where(StatusDefinition.display_name == display_name)
        if exclude_id is not None:
            query = query.where(StatusDefinition.id != exclude_id)
        result = await db.execute(query)
        if result.scalar():
            raise ConflictError(f"Status '{display_name}' already exists")

    @staticmethod
    async def _next_order(db: AsyncSession) -> int:
        result = await db.execute(select(func.max(StatusDefinition.order)))
        max_order = result.scalar()
        return 0 if max_order is None else max_order + 1

    @staticmethod
    async def create(
        db: AsyncSession,
        display_name: str,
        category_id: Optional[str] = None,
        manifest: Optional[ThemeManifest] = None,
        is_reserved: bool = False
    ) -> StatusDefinition:
        """Append a new status, optionally mapped to a category of the current theme

        Args:
            db: Database session
            display_name: Column name; trimmed, 1-50 characters, unique
            category_id: Category of the current theme to map the status to
            manifest: Manifest of the applied theme, required with category_id
            is_reserved: Protect the status from deletion

        Returns:
            The created status, placed after every existing one
        """
        name = StatusService.clean_display_name(display_name)

        await acquire_workflow_lock(db)
        await StatusService._ensure_unique_name(db, name)
        if category_id:
            await StatusMappingService.check_capacity(db, category_id, manifest)

        try:
            status = StatusDefinition(
                display_name=name,
                slug=await generate_unique_slug(db, StatusDefinition, name),
                order=await StatusService._next_order(db),
                is_reserved=is_reserved,
            )
            db.add(status)
            await db.flush()

            if category_id:
                await StatusMappingService.assign(db, status.id, category_id, manifest)

            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError(f"Status '{name}' already exists") from e
        except Exception:
            await db.rollback()
            raise

        await db.refresh(status)
        debug_logger.info(f"Created status '{status.display_name}' (id={status.id}, order={status.order})")
        return status

    @staticmethod
    async def rename(
        db: AsyncSession,
        status_id: int,
        display_name: str
    ) -> StatusDefinition:
        """Rename a status and move its events to the new name

        Reserved statuses can be renamed; they keep their reserved flag.
        """
        name = StatusService.clean_display_name(display_name)

        await acquire_workflow_lock(db)
        status = await StatusService._require(db, status_id)

        if name == status.display_name:
            return status

        original_name = status.display_name
        await StatusService._ensure_unique_name(db, name, exclude_id=status.id)

        try:
            status.display_name = name
            status.slug = await generate_unique_slug(db, StatusDefinition, name, exclude_id=status.id)
            await EventService.reassign_status(db, original_name, name)

            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError(f"Status '{name}' already exists") from e
        except Exception:
            await db.rollback()
            raise

        await db.refresh(status)
        debug_logger.info(f"Renamed status {status.id}: '{original_name}' -> '{status.display_name}'")
        return status

    @staticmethod
    async def delete(
        db: AsyncSession,
        status_id: int,
        reassign_to_id: Optional[int] = None
    ) -> None:
        """Delete a status, its category mappings, and move its events away

        Args:
            db: Database session
            status_id: ID of the status to delete
            reassign_to_id: Status receiving the events of the deleted one;
                required when the status still has events

        Raises:
            NotFoundError: the status or the reassignment target does not exist
            LastStatusError: the status is the only one left
            ReservedStatusError: the status is reserved
            ValidationError: events would be left without a status
        """
        await acquire_workflow_lock(db)
        status = await StatusService._require(db, status_id)

        statuses = await StatusService.get_all(db)
        if len(statuses) <= 1:
            raise LastStatusError("Cannot delete the last remaining status")
        if status.is_reserved:
            raise ReservedStatusError(f"Status '{status.display_name}' is reserved and cannot be deleted")

        target = None
        if reassign_to_id is not None:
            if reassign_to_id == status.id:
                raise ValidationError("Events cannot be reassigned to the status being deleted")
            target = await StatusService.get_by_id(db, reassign_to_id)
            if not target:
                raise NotFoundError("Reassignment target status not found")

        event_count = await EventService.count_for_status(db, status.display_name)
        if event_count and target is None:
            raise ValidationError(
                f"Status '{status.display_name}' is used by {event_count} events; "
                f"choose a status to move them to"
            )

        deleted_name = status.display_name
        base = statuses[0].order
        remaining = [s for s in statuses if s.id != status.id]

        try:
            if event_count:
                await EventService.reassign_status(db, status.display_name, target.display_name)

            await db.execute(
                delete(StatusCategoryMapping).where(StatusCategoryMapping.status_definition_id == status.id)
            )
            await db.execute(delete(StatusDefinition).where(StatusDefinition.id == status.id))
            _renormalize(remaining, base)

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        debug_logger.info(f"Deleted status '{deleted_name}' (id={status_id})")

    @staticmethod
    async def reorder(
        db: AsyncSession,
        status_id: int,
        target_status_id: int,
        position: Union[MovePosition, str]
    ) -> List[StatusDefinition]:
        """Move a status right before or after another one

        Args:
            db: Database session
            status_id: ID of the dragged status
            target_status_id: ID of the status it is dropped next to
            position: ``before`` or ``after`` the target

        Returns:
            All statuses in their new display order
        """
        try:
            position = MovePosition(position)
        except ValueError as e:
            raise ValidationError("position must be 'before' or 'after'") from e

        await acquire_workflow_lock(db)
        statuses = await StatusService.get_all(db)
        by_id = {s.id: s for s in statuses}
        if status_id not in by_id or target_status_id not in by_id:
            raise NotFoundError("Status not found")

        if status_id == target_status_id:
            return statuses

        base = statuses[0].order
        moving = by_id[status_id]
        ordered = [s for s in statuses if s.id != status_id]
        index = ordered.index(by_id[target_status_id])
        if position == MovePosition.AFTER:
            index += 1
        ordered.insert(index, moving)

        try:
            _renormalize(ordered, base)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        debug_logger.debug(
            f"Moved status {status_id} {position.value} {target_status_id}: {[s.id for s in ordered]}"
        )
        return ordered

    @staticmethod
    async def reorder_all(db: AsyncSession, status_order: List[int]) -> List[StatusDefinition]:
        """Apply a full ordering given as the list of every status id"""
        await acquire_workflow_lock(db)
        statuses = await StatusService.get_all(db)
        by_id = {s.id: s for s in statuses}

        if len(status_order) != len(set(status_order)) or set(status_order) != set(by_id):
            raise ValidationError("status_order must list every status exactly once")

        if not statuses:
            return []

        base = statuses[0].order
        ordered = [by_id[status_id] for status_id in status_order]

        try:
            _renormalize(ordered, base)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        debug_logger.log_data("Status order", [s.id for s in ordered])
        return ordered

    @staticmethod
    async def list_columns(
        db: AsyncSession,
        manifest: Optional[ThemeManifest] = None
    ) -> List[dict]:
        """Kanban columns in display order with live event counts

        Args:
            db: Database session
            manifest: Manifest of the applied theme, used for category labels

        Returns:
            One dict per status with ``status``, ``label``, ``count``,
            ``category_id`` and ``category_label``
        """
        statuses = await StatusService.get_all(db)
        counts = await EventService.count_by_status(db)

        category_map = {}
        if manifest is not None:
            category_map = await StatusMappingService.get_category_map(db, manifest.id)

        columns = []
        for status in statuses:
            category_id = category_map.get(status.id)
            category = manifest.get_category(category_id) if manifest and category_id else None
            columns.append({
                "status": status,
                "label": status.display_name,
                "count": counts.get(status.display_name, 0),
                "category_id": category_id,
                "category_label": category.label if category else None,
            })
        return columns

    @staticmethod
    async def seed_reserved(db: AsyncSession) -> List[StatusDefinition]:
        """Create Backlogs and Archived when no status exists yet"""
        await acquire_workflow_lock(db)
        if await StatusService.count(db):
            await db.commit()
            return []

        seeded = []
        for name in RESERVED_STATUSES:
            seeded.append(await StatusService.create(db, name, is_reserved=True))
        debug_logger.info(f"Seeded reserved statuses: {', '.join(RESERVED_STATUSES)}")
        return seeded
