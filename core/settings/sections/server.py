from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field

from core.settings.base import ENV_MODEL_CONFIG


class ServerSettings(BaseSettings):
    """
    HTTP server settings.
    Loaded from .env file with exact variable name matching.
    """

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000", alias="ALLOWED_ORIGINS"
    )

    model_config = ENV_MODEL_CONFIG

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS (comma-separated) into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
