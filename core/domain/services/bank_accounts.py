"""
Payout destination rules for producer bank accounts.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from typing import Optional, Tuple

from ..enums import PayoutMethod

ETHIOPIAN_BANKS: Tuple[str, ...] = (
    "Commercial Bank of Ethiopia (CBE)",
    "Awash Bank",
    "Bank of Abyssinia",
    "Dashen Bank",
    "Hibret Bank",
    "Nib International Bank",
    "Cooperative Bank of Oromia",
    "Lion International Bank",
    "Zemen Bank",
    "Oromia Bank",
    "Bunna Bank",
    "Berhan Bank",
    "Abay Bank",
    "Addis International Bank",
    "Debub Global Bank",
    "Enat Bank",
    "Wegagen Bank",
    "Global Bank Ethiopia",
    "Tsehay Bank",
    "Amhara Bank",
    "Ahadu Bank",
    "Siinqee Bank",
    "Hijra Bank",
    "Shabelle Bank",
    "ZamZam Bank",
    "Gadaa Bank",
    "Telebirr",
    "M-Pesa Ethiopia",
    "Other",
)

MOBILE_MONEY_PROVIDERS = frozenset({"Telebirr", "M-Pesa Ethiopia"})

ACCOUNT_TYPES = ("SAVINGS", "CURRENT", "MOBILE_WALLET")


def mask_account_number(account_number: Optional[str]) -> Optional[str]:
    """`1000123456789` -> `***6789`."""
    if not account_number:
        return account_number
    return f"***{account_number[-4:]}"


def payout_method_for_bank(bank_name: str) -> PayoutMethod:
    """Wallet providers are paid by mobile money, everything else by transfer."""
    if bank_name in MOBILE_MONEY_PROVIDERS:
        return PayoutMethod.MOBILE_MONEY
    return PayoutMethod.BANK_TRANSFER


def describe_destination(bank_name: str, account_number: str, account_name: str) -> str:
    """Masked one-line snapshot stored on a paid batch."""
    return f"{bank_name} {mask_account_number(account_number)} ({account_name})"
