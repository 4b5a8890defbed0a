from decimal import Decimal

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

from core.settings.base import ENV_MODEL_CONFIG


class MarketplaceSettings(BaseSettings):
    """
    Commission and payout schedule settings.
    Loaded from .env file with exact variable name matching.
    """

    commission_rate: Decimal = Field(
        default=Decimal("0.10"), alias="MARKETPLACE_COMMISSION_RATE"
    )
    currency: str = Field(default="ETB", alias="MARKETPLACE_CURRENCY")

    # Monday=0 ... Sunday=6, payouts go out every Friday at noon by default
    payout_weekday: int = Field(default=4, ge=0, le=6, alias="PAYOUT_WEEKDAY")
    payout_hour: int = Field(default=12, ge=0, le=23, alias="PAYOUT_HOUR")

    model_config = ENV_MODEL_CONFIG

    @field_validator("commission_rate")
    @classmethod
    def _check_rate(cls, value: Decimal) -> Decimal:
        if value < 0 or value >= 1:
            raise ValueError(f"Commission rate must be in [0, 1), got: {value}")
        return value
