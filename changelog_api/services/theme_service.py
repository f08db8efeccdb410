import json
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from changelog_api.core.exceptions import ThemeManifestError
from changelog_api.logs.debug_log import debug_logger
from changelog_api.schemas.theme import ThemeCategory, ThemeManifest

MANIFEST_FILENAME = "theme.json"

# Checked in this order; the first category present in the theme whose keyword
# appears in the status name wins
CATEGORY_KEYWORDS = [
    ("upcoming", ["doing", "progress", "wip", "dev", "development", "building",
                  "cours", "actuel", "en cours", "current", "in progress"]),
    ("released", ["done", "released", "shipped", "live", "deployed", "completed",
                  "terminé", "publié", "fini", "sortie", "launch"]),
    ("proposed", ["vote", "voting", "proposed", "idea", "suggestion", "feedback",
                  "proposition", "idée", "request"]),
    ("feedback", ["feedback", "suggestion", "suggestions", "user feedback", "feature request"]),
]


class ThemeService:
    """Loads and inspects the manifest of the currently applied theme"""

    @staticmethod
    def validate_manifest(manifest: ThemeManifest) -> ThemeManifest:
        """Ensure required manifest fields are present and category ids are unique"""
        if not manifest.id:
            raise ThemeManifestError("theme ID is required")
        if not manifest.name:
            raise ThemeManifestError("theme name is required")
        if not manifest.version:
            raise ThemeManifestError("theme version is required")
        if not manifest.categories:
            raise ThemeManifestError("at least one category is required")

        seen = set()
        for index, category in enumerate(manifest.categories):
            if not category.id:
                raise ThemeManifestError(f"category {index}: ID is required")
            if category.id in seen:
                raise ThemeManifestError(f"duplicate category ID: {category.id}")
            seen.add(category.id)

            if not category.label:
                raise ThemeManifestError(f"category {category.id}: label is required")
            if not category.description:
                raise ThemeManifestError(f"category {category.id}: description is required")

        return manifest

    @staticmethod
    def load_manifest(theme_path: str) -> ThemeManifest:
        """Read, parse and validate ``<theme_path>/theme.json``

        Args:
            theme_path: Directory of the applied theme

        Returns:
            The validated manifest

        Raises:
            ThemeManifestError: the file is missing, unreadable or invalid
        """
        manifest_path = Path(theme_path) / MANIFEST_FILENAME

        if not manifest_path.is_file():
            raise ThemeManifestError(f"theme.json not found at {manifest_path}")

        try:
            data = json.loads(manifest_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ThemeManifestError(f"failed to read theme.json: {e}") from e
        except json.JSONDecodeError as e:
            raise ThemeManifestError(f"failed to parse theme.json: {e}") from e

        try:
            manifest = ThemeManifest.model_validate(data)
        except PydanticValidationError as e:
            raise ThemeManifestError(f"failed to parse theme.json: {e}") from e

        return ThemeService.validate_manifest(manifest)

    @staticmethod
    def load_current(theme_path: str) -> Optional[ThemeManifest]:
        """Manifest of the applied theme, or None when no theme is applied

        A theme directory that exists but carries a broken manifest still raises.
        """
        if not (Path(theme_path) / MANIFEST_FILENAME).exists():
            debug_logger.debug(f"No theme applied at {theme_path}")
            return None
        return ThemeService.load_manifest(theme_path)

    @staticmethod
    def suggest_category_for_status(status_name: str, categories: List[ThemeCategory]) -> Optional[str]:
        """Guess a category for a status from keywords in its name

        Args:
            status_name: Display name of the status
            categories: Categories of the applied theme

        Returns:
            The first matching category id, the first category when nothing
            matches, or None for a theme without categories
        """
        lower = status_name.lower()
        available = {category.id for category in categories}

        for category_id, keywords in CATEGORY_KEYWORDS:
            if category_id not in available:
                continue
            if any(keyword in lower for keyword in keywords):
                return category_id

        if categories:
            return categories[0].id
        return None
