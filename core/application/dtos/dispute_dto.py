"""Application DTOs for disputes."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from core.domain.enums import DisputeStatus

from .common_dto import PaginationDTO


class CreateDisputeRequest(BaseModel):
    order_id: str = Field(..., description="Disputed order")
    reason: str = Field(..., min_length=1, description="Short reason")
    description: Optional[str] = Field(None, description="Details")

    model_config = {"frozen": True}


class DisputeMessageRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Message body")

    model_config = {"frozen": True}


class UpdateDisputeStatusRequest(BaseModel):
    status: DisputeStatus
    resolution: Optional[str] = None
    refund_amount: Optional[Decimal] = Field(None, description="Refund granted to the buyer")

    model_config = {"frozen": True}


class DisputeMessageDTO(BaseModel):
    id: str
    sender_id: str
    sender_name: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}


class DisputeDTO(BaseModel):
    """Response DTO for a dispute and its thread."""

    id: str
    order_id: str
    raised_by_id: str
    raised_by_name: Optional[str] = None
    reason: str
    description: Optional[str] = None
    status: str
    resolution: Optional[str] = None
    refund_amount: Optional[Decimal] = None
    resolved_by_id: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    messages: List[DisputeMessageDTO] = Field(default_factory=list)

    model_config = {"frozen": True}


class DisputeListDTO(BaseModel):
    disputes: List[DisputeDTO] = Field(default_factory=list)
    pagination: PaginationDTO

    model_config = {"frozen": True}
