"""Application DTOs for payouts."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.enums import PayoutMethod

from .common_dto import PaginationDTO


class PayoutItemDTO(BaseModel):
    """Order producer split carried by a payout."""

    id: str
    order_producer_id: str
    order_id: Optional[str] = None
    amount: Decimal

    model_config = {"frozen": True}


class PayoutDTO(BaseModel):
    """Response DTO for a payout batch."""

    id: str
    producer_id: str
    producer_name: Optional[str] = None
    amount: Decimal = Field(..., description="Gross order subtotal")
    commission: Decimal = Field(..., description="Marketplace commission")
    net_amount: Decimal = Field(..., description="Amount owed to the producer")
    currency: str
    status: str
    payout_method: Optional[str] = None
    payout_reference: Optional[str] = None
    bank_account_id: Optional[str] = None
    payout_destination: Optional[str] = None
    scheduled_for: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[PayoutItemDTO] = Field(default_factory=list)

    model_config = {"frozen": True}


class PayoutListDTO(BaseModel):
    """DTO for listing payouts."""

    payouts: List[PayoutDTO] = Field(default_factory=list)
    pagination: Optional[PaginationDTO] = None

    model_config = {"frozen": True}


class EarningsDTO(BaseModel):
    """Producer earnings summary."""

    producer_id: str
    pending: Decimal
    completed: Decimal
    total: Decimal
    currency: str

    model_config = {"frozen": True}


class ScheduleResultDTO(BaseModel):
    """Result of a scheduling sweep."""

    scheduled_count: int = Field(..., ge=0, description="Order producer splits scheduled")
    payout_ids: List[str] = Field(default_factory=list, description="Batches touched")

    model_config = {"frozen": True}


class CompletePayoutRequest(BaseModel):
    """Request DTO for marking a payout paid."""

    reference: str = Field(..., min_length=1, description="Bank/transfer reference")
    method: Optional[PayoutMethod] = Field(
        None, description="Defaults from the account paid into"
    )
    bank_account_id: Optional[str] = Field(
        None, description="Producer account paid into; defaults to the primary account"
    )

    model_config = {"frozen": True}


class FailPayoutRequest(BaseModel):
    """Request DTO for marking a payout failed."""

    reason: str = Field(..., min_length=1, description="Failure reason")

    model_config = {"frozen": True}


class CancelPayoutRequest(BaseModel):
    """Request DTO for cancelling a payout."""

    reason: Optional[str] = Field(None, description="Cancellation reason")

    model_config = {"frozen": True}
