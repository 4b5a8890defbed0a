"""Application DTOs for payments."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CustomerInfo(BaseModel):
    """Payer details forwarded to the gateway; defaults come from the buyer account."""

    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"frozen": True}


class CreatePaymentIntentRequest(BaseModel):
    """Request DTO for starting a hosted checkout."""

    order_id: str = Field(..., description="Order to pay")
    customer_info: Optional[CustomerInfo] = None

    model_config = {"frozen": True}


class PaymentIntentDTO(BaseModel):
    """Hosted checkout handle."""

    checkout_url: str
    tx_ref: str
    payment_id: str

    model_config = {"frozen": True}


class WebhookResultDTO(BaseModel):
    """Outcome of processing a gateway callback."""

    status: str = Field(..., description="success, ignored or error")
    message: str
    order_id: Optional[str] = None
    payment_status: Optional[str] = None

    model_config = {"frozen": True}


class PaymentStatusDTO(BaseModel):
    """Latest payment state of an order."""

    order_id: str
    status: str = Field(..., description="NOT_INITIATED, PENDING or CONFIRMED")
    payment_status: str
    amount: Decimal
    method: Optional[str] = None
    transaction_id: Optional[str] = None
    confirmed_at: Optional[datetime] = None

    model_config = {"frozen": True}
