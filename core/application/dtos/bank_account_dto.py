"""Application DTOs for producer bank accounts."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class BankAccountRequest(BaseModel):
    """Request DTO for adding a payout account."""

    bank_name: str = Field(..., min_length=1, description="Bank or wallet provider")
    account_number: str = Field(..., min_length=1, max_length=50)
    account_name: str = Field(..., min_length=1, description="Name on the account")
    branch_name: Optional[str] = None
    swift_code: Optional[str] = None
    account_type: str = Field(default="SAVINGS", description="SAVINGS, CURRENT or MOBILE_WALLET")
    is_primary: bool = Field(default=False, description="Make this the payout account")

    model_config = {"frozen": True}


class UpdateBankAccountRequest(BaseModel):
    """Partial update; omitted fields are left alone."""

    bank_name: Optional[str] = Field(None, min_length=1)
    account_number: Optional[str] = Field(None, min_length=1, max_length=50)
    account_name: Optional[str] = Field(None, min_length=1)
    branch_name: Optional[str] = None
    swift_code: Optional[str] = None
    account_type: Optional[str] = None

    model_config = {"frozen": True}


class BankAccountDTO(BaseModel):
    """Response DTO for a payout account."""

    id: str
    producer_id: str
    bank_name: str
    account_number: str
    account_name: str
    branch_name: Optional[str] = None
    swift_code: Optional[str] = None
    account_type: str
    is_primary: bool
    is_verified: bool
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}


class BankAccountListDTO(BaseModel):
    accounts: List[BankAccountDTO] = Field(default_factory=list)

    model_config = {"frozen": True}
