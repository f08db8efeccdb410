from changelog_api.core.config import Settings, get_settings
