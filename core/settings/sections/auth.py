from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field

from core.settings.base import ENV_MODEL_CONFIG


class AuthSettings(BaseSettings):
    """
    JWT and bootstrap admin settings.
    Loaded from .env file with exact variable name matching.
    """

    jwt_secret: str = Field(default="change-me", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24, alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    admin_email: Optional[str] = Field(default=None, alias="ADMIN_EMAIL")
    admin_password: Optional[str] = Field(default=None, alias="ADMIN_PASSWORD")
    admin_name: str = Field(default="Marketplace Admin", alias="ADMIN_NAME")

    model_config = ENV_MODEL_CONFIG
