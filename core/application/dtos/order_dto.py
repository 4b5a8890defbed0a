"""Application DTOs for Order operations."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from core.domain.enums import DeliveryStatus

from .common_dto import PaginationDTO


class OrderItemRequest(BaseModel):
    """One line of a new order; price is taken from the product."""

    product_id: str = Field(..., description="Product ID")
    quantity: int = Field(..., gt=0, description="Quantity ordered")

    model_config = {"frozen": True}


class CreateOrderRequest(BaseModel):
    """Request DTO for creating an order."""

    items: List[OrderItemRequest] = Field(..., min_length=1, description="Order lines")
    shipping_address: Optional[Dict[str, Any]] = Field(None, description="Shipping address")

    model_config = {"frozen": True}


class UpdateOrderStatusRequest(BaseModel):
    """Request DTO for a delivery status change."""

    status: DeliveryStatus = Field(..., description="Target delivery status")
    reason: Optional[str] = Field(None, description="Note stored in history")

    model_config = {"frozen": True}


class CancelOrderRequest(BaseModel):
    """Request DTO for a buyer cancellation."""

    reason: Optional[str] = Field(None, description="Cancellation reason")

    model_config = {"frozen": True}


class OrderItemDTO(BaseModel):
    """DTO for order item."""

    id: str
    product_id: str
    product_name: str
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0)
    subtotal: Decimal = Field(..., ge=0)

    model_config = {"frozen": True}


class OrderProducerDTO(BaseModel):
    """One producer's commission split of an order."""

    id: str
    order_id: str
    producer_id: str
    product_ids: List[str] = Field(default_factory=list)
    subtotal: Decimal
    marketplace_commission: Decimal
    producer_amount: Decimal
    payout_status: str
    paid_at: Optional[datetime] = None
    payout_reference: Optional[str] = None

    model_config = {"frozen": True}


class OrderDTO(BaseModel):
    """Response DTO for order details."""

    id: str
    buyer_id: str
    total_amount: Decimal = Field(..., ge=0)
    currency: str
    payment_status: str
    delivery_status: str
    shipping_address: Optional[Dict[str, Any]] = None
    order_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemDTO] = Field(default_factory=list)
    producer_splits: List[OrderProducerDTO] = Field(default_factory=list)

    model_config = {"frozen": True}


class OrderListDTO(BaseModel):
    """DTO for listing orders."""

    orders: List[OrderDTO] = Field(default_factory=list, description="List of orders")
    pagination: PaginationDTO

    model_config = {"frozen": True}


class OrderStatusHistoryDTO(BaseModel):
    """One status history row."""

    id: str
    order_id: str
    status: str
    notes: Optional[str] = None
    changed_by_id: Optional[str] = None
    changed_at: Optional[datetime] = None

    model_config = {"frozen": True}
