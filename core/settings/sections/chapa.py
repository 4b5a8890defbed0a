from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field

from core.settings.base import ENV_MODEL_CONFIG


class ChapaSettings(BaseSettings):
    """
    Chapa payment gateway settings.
    Loaded from .env file with exact variable name matching.
    """

    secret_key: str = Field(default="", alias="CHAPA_SECRET_KEY")
    public_key: str = Field(default="", alias="CHAPA_PUBLIC_KEY")
    webhook_secret: str = Field(default="", alias="CHAPA_WEBHOOK_SECRET")
    base_url: str = Field(default="https://api.chapa.co/v1", alias="CHAPA_BASE_URL")
    timeout_seconds: float = Field(default=10.0, alias="CHAPA_TIMEOUT_SECONDS")

    # Re-check every webhook against GET /transaction/verify/{tx_ref}
    verify_transactions: bool = Field(default=False, alias="CHAPA_VERIFY_TRANSACTIONS")

    # Chapa test mode only accepts a few sandbox addresses
    test_email: Optional[str] = Field(default=None, alias="CHAPA_TEST_EMAIL")

    backend_url: str = Field(default="http://localhost:8000", alias="BACKEND_URL")
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")
    checkout_title: str = Field(default="Mesob Marketplace", alias="CHAPA_CHECKOUT_TITLE")

    model_config = ENV_MODEL_CONFIG
