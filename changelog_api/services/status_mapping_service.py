from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from changelog_api.core.exceptions import (
    CategoryCapacityError,
    NotFoundError,
    UnknownCategoryError,
)
from changelog_api.logs.debug_log import debug_logger
from changelog_api.models.event import Event
from changelog_api.models.status import StatusDefinition
from changelog_api.models.status_mapping import StatusCategoryMapping
from changelog_api.schemas.theme import ThemeCategory, ThemeManifest
from changelog_api.services.theme_service import ThemeService
from changelog_api.services.workflow_lock import acquire_workflow_lock


class StatusMappingService:
    """Binding of statuses to the categories of the current theme

    A category marked ``multiple = false`` holds at most one status. A second
    status is rejected with CategoryCapacityError; the previous holder is never
    unmapped implicitly.
    """

    @staticmethod
    def require_manifest(manifest: Optional[ThemeManifest]) -> ThemeManifest:
        if manifest is None:
            raise UnknownCategoryError("No theme is currently applied")
        return manifest

    @staticmethod
    def require_category(manifest: Optional[ThemeManifest], category_id: str) -> ThemeCategory:
        manifest = StatusMappingService.require_manifest(manifest)
        category = manifest.get_category(category_id)
        if category is None:
            raise UnknownCategoryError(f"Category '{category_id}' does not exist in current theme")
        return category

    @staticmethod
    async def get_for_status(
        db: AsyncSession,
        status_id: int,
        theme_id: str
    ) -> Optional[StatusCategoryMapping]:
        query = select(StatusCategoryMapping).where(
            StatusCategoryMapping.status_definition_id == status_id,
            StatusCategoryMapping.theme_id == theme_id,
        )
        result = await db.execute(query)
        return result.scalars().first()

    @staticmethod
    async def get_category_map(db: AsyncSession, theme_id: str) -> Dict[int, str]:
        """status id -> category id for one theme"""
        query = select(
            StatusCategoryMapping.status_definition_id,
            StatusCategoryMapping.category_id,
        ).where(StatusCategoryMapping.theme_id == theme_id)
        result = await db.execute(query)
        return {status_id: category_id for status_id, category_id in result.all()}

    @staticmethod
    async def check_capacity(
        db: AsyncSession,
        category_id: str,
        manifest: Optional[ThemeManifest],
        status_id: Optional[int] = None
    ) -> ThemeCategory:
        """Reject a mapping onto a single-status category held by another status"""
        category = StatusMappingService.require_category(manifest, category_id)
        if category.multiple:
            return category

        query = (
            select(StatusDefinition.display_name)
            .join(StatusCategoryMapping, StatusCategoryMapping.status_definition_id == StatusDefinition.id)
            .where(
                StatusCategoryMapping.theme_id == manifest.id,
                StatusCategoryMapping.category_id == category_id,
            )
        )
        if status_id is not None:
            query = query.where(StatusCategoryMapping.status_definition_id != status_id)

        result = await db.execute(query)
        holder = result.scalars().first()
        if holder is not None:
            raise CategoryCapacityError(
                f"Category '{category.label}' does not allow multiple statuses. "
                f"Status '{holder}' is already mapped to this category."
            )
        return category

    @staticmethod
    async def assign(
        db: AsyncSession,
        status_id: int,
        category_id: str,
        manifest: Optional[ThemeManifest]
    ) -> StatusCategoryMapping:
        """Create or update the mapping of a status without committing"""
        await StatusMappingService.check_capacity(db, category_id, manifest, status_id)

        mapping = await StatusMappingService.get_for_status(db, status_id, manifest.id)
        if mapping:
            mapping.category_id = category_id
        else:
            mapping = StatusCategoryMapping(
                status_definition_id=status_id,
                theme_id=manifest.id,
                category_id=category_id,
            )
            db.add(mapping)

        await db.flush()
        return mapping

    @staticmethod
    async def set_mapping(
        db: AsyncSession,
        status_id: int,
        category_id: Optional[str],
        manifest: Optional[ThemeManifest]
    ) -> Optional[StatusCategoryMapping]:
        """Set the category of a status, or clear it when category_id is None

        Args:
            db: Database session
            status_id: ID of the status to map
            category_id: Category of the current theme, or None to unmap
            manifest: Manifest of the applied theme

        Returns:
            The stored mapping, or None when the mapping was cleared

        Raises:
            UnknownCategoryError: no theme is applied or the category is not in it
            CategoryCapacityError: the category takes one status and another holds it
            NotFoundError: the status does not exist
        """
        manifest = StatusMappingService.require_manifest(manifest)
        await acquire_workflow_lock(db)

        query = select(StatusDefinition.id).where(StatusDefinition.id == status_id)
        result = await db.execute(query)
        if result.scalar() is None:
            raise NotFoundError("Status not found")

        if category_id is None:
            await StatusMappingService.delete_mapping(db, status_id, manifest.id)
            return None

        await StatusMappingService.check_capacity(db, category_id, manifest, status_id)

        try:
            mapping = await StatusMappingService.assign(db, status_id, category_id, manifest)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        await db.refresh(mapping)
        debug_logger.info(f"Status {status_id} mapped to category '{category_id}' of theme '{manifest.id}'")
        return mapping

    @staticmethod
    async def delete_mapping(db: AsyncSession, status_id: int, theme_id: str) -> bool:
        stmt = delete(StatusCategoryMapping).where(
            StatusCategoryMapping.status_definition_id == status_id,
            StatusCategoryMapping.theme_id == theme_id,
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount > 0

    @staticmethod
    async def _get_statuses(db: AsyncSession) -> List[StatusDefinition]:
        query = select(StatusDefinition).order_by(StatusDefinition.order, StatusDefinition.display_name)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_overview(db: AsyncSession, manifest: Optional[ThemeManifest]) -> dict:
        """Mapped statuses with their category label, unmapped ones with a suggestion"""
        if manifest is None:
            return {
                "theme_id": None,
                "theme_name": None,
                "mappings": [],
                "unmapped_statuses": [],
            }

        statuses = await StatusMappingService._get_statuses(db)
        category_map = await StatusMappingService.get_category_map(db, manifest.id)

        mapped = []
        unmapped = []
        for status in statuses:
            category_id = category_map.get(status.id)
            if category_id is not None:
                category = manifest.get_category(category_id)
                mapped.append({
                    "status_id": status.id,
                    "status_name": status.display_name,
                    "category_id": category_id,
                    "category_label": category.label if category else None,
                    "theme_id": manifest.id,
                })
            else:
                unmapped.append({
                    "status_id": status.id,
                    "status_name": status.display_name,
                    "suggested_category": ThemeService.suggest_category_for_status(
                        status.display_name, manifest.categories
                    ),
                })

        return {
            "theme_id": manifest.id,
            "theme_name": manifest.name,
            "mappings": mapped,
            "unmapped_statuses": unmapped,
        }

    @staticmethod
    async def apply_default_mappings(
        db: AsyncSession,
        manifest: Optional[ThemeManifest]
    ) -> List[StatusCategoryMapping]:
        """Map every unmapped status to its suggested category

        Single-status categories that are already taken are skipped, leaving the
        status unmapped.

        Returns:
            The mappings created by this call
        """
        manifest = StatusMappingService.require_manifest(manifest)
        await acquire_workflow_lock(db)
        statuses = await StatusMappingService._get_statuses(db)
        category_map = await StatusMappingService.get_category_map(db, manifest.id)

        single_categories = {c.id for c in manifest.categories if not c.multiple}
        taken = {category_id for category_id in category_map.values() if category_id in single_categories}

        created = []
        try:
            for status in statuses:
                if status.id in category_map:
                    continue

                suggested = ThemeService.suggest_category_for_status(status.display_name, manifest.categories)
                if suggested is None:
                    continue
                if suggested in taken:
                    debug_logger.warning(
                        f"Category '{suggested}' already holds a status, leaving '{status.display_name}' unmapped"
                    )
                    continue

                mapping = StatusCategoryMapping(
                    status_definition_id=status.id,
                    theme_id=manifest.id,
                    category_id=suggested,
                )
                db.add(mapping)
                created.append(mapping)
                if suggested in single_categories:
                    taken.add(suggested)

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        debug_logger.info(f"Created {len(created)} default mappings for theme '{manifest.id}'")
        return created

    @staticmethod
    async def get_public_mappings(
        db: AsyncSession,
        manifest: Optional[ThemeManifest]
    ) -> Dict[str, List[StatusDefinition]]:
        """Statuses grouped by category id, each group in display order"""
        if manifest is None:
            return {}

        statuses = await StatusMappingService._get_statuses(db)
        category_map = await StatusMappingService.get_category_map(db, manifest.id)

        grouped: Dict[str, List[StatusDefinition]] = {}
        for status in statuses:
            category_id = category_map.get(status.id)
            if category_id is not None:
                grouped.setdefault(category_id, []).append(status)
        return grouped

    @staticmethod
    async def get_public_events_by_category(
        db: AsyncSession,
        manifest: Optional[ThemeManifest]
    ) -> Dict[str, List[Event]]:
        """Public events grouped by the category of their status

        Every manifest category is present; events on unmapped statuses are left out.
        """
        if manifest is None:
            return {}

        grouped = await StatusMappingService.get_public_mappings(db, manifest)
        status_to_category = {
            status.display_name: category_id
            for category_id, statuses in grouped.items()
            for status in statuses
        }

        categorized: Dict[str, List[Event]] = {category.id: [] for category in manifest.categories}

        query = select(Event).where(Event.is_public.is_(True)).order_by(Event.created_at.desc(), Event.id.desc())
        result = await db.execute(query)
        for event in result.scalars().all():
            category_id = status_to_category.get(event.status)
            if category_id in categorized:
                categorized[category_id].append(event)

        return categorized
