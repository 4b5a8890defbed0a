# core/settings/app.py
from functools import lru_cache

# Sections
from core.settings.sections.auth import AuthSettings
from core.settings.sections.chapa import ChapaSettings
from core.settings.sections.database import DatabaseSettings
from core.settings.sections.integrations import TelegramSettings
from core.settings.sections.marketplace import MarketplaceSettings
from core.settings.sections.server import ServerSettings


class AppSettings:
    """
    Central application settings aggregator.
    Settings are loaded lazily inside __init__
    to prevent eager evaluation at import time.
    """

    def __init__(self):
        self.database = DatabaseSettings()
        self.marketplace = MarketplaceSettings()
        self.chapa = ChapaSettings()
        self.auth = AuthSettings()
        self.telegram = TelegramSettings()
        self.server = ServerSettings()


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings()
