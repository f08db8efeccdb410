from typing import Optional

from changelog_api.core import get_settings
from changelog_api.schemas.theme import ThemeManifest
from changelog_api.services.theme_service import ThemeService


async def get_theme_manifest() -> Optional[ThemeManifest]:
    """Manifest of the applied theme, read fresh on every request"""
    settings = get_settings()
    return ThemeService.load_current(settings.THEME_PATH)
