from pydantic_settings import BaseSettings
from pydantic import Field

from core.settings.base import ENV_MODEL_CONFIG


class DatabaseSettings(BaseSettings):
    """
    Database connection settings.
    Loaded from .env file with exact variable name matching.
    """

    database_url: str = Field(
        default="sqlite+aiosqlite:///./mesob.db", alias="DATABASE_URL"
    )

    # Connection pool settings (ignored by SQLite)
    pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    max_overflow: int = Field(default=20, alias="DB_MAX_OVERFLOW")
    pool_timeout: int = Field(default=30, alias="DB_POOL_TIMEOUT")
    pool_recycle: int = Field(default=3600, alias="DB_POOL_RECYCLE")

    echo_sql: bool = Field(default=False, alias="DB_ECHO_SQL")

    model_config = ENV_MODEL_CONFIG

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")
