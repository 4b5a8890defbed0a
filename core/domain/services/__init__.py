"""Pure domain services."""

from .bank_accounts import (
    ACCOUNT_TYPES,
    ETHIOPIAN_BANKS,
    describe_destination,
    mask_account_number,
    payout_method_for_bank,
)
from .commission import (
    CommissionCalculator,
    ProducerShare,
    ProducerSplit,
    SplitLine,
    validate_shares,
)
from .payout_schedule import next_payout_date
from .ratings import RatingSummary, to_rating, validate_rating

__all__ = [
    "ACCOUNT_TYPES",
    "CommissionCalculator",
    "ETHIOPIAN_BANKS",
    "ProducerShare",
    "ProducerSplit",
    "RatingSummary",
    "SplitLine",
    "describe_destination",
    "mask_account_number",
    "next_payout_date",
    "payout_method_for_bank",
    "to_rating",
    "validate_rating",
    "validate_shares",
]
