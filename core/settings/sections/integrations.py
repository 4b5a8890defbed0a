from pydantic_settings import BaseSettings
from pydantic import Field

from core.settings.base import ENV_MODEL_CONFIG


class TelegramSettings(BaseSettings):
    """
    Telegram ops-alert settings.
    Loaded from .env file with exact variable name matching.
    """

    enabled: bool = Field(default=False, alias="MESOB_TELEGRAM_ENABLED")
    token: str = Field(default="", alias="TELEGRAM_BOT_TOKEN")
    chat_id: str = Field(default="", alias="TELEGRAM_CHAT_ID")
    prefix: str = Field(default="[MESOB]", alias="MESOB_TELEGRAM_PREFIX")
    min_severity: int = Field(default=50, alias="MESOB_TELEGRAM_MIN_SEVERITY")

    model_config = ENV_MODEL_CONFIG
