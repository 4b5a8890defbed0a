"""
Order API routes.

Buyers place and cancel orders, producers and admins move them through
delivery. Producer splits are computed when the order is placed.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from api.auth import get_current_user, require_admin, require_buyer, require_producer
from api.dependencies import get_order_service
from core.application.dtos import (
    CancelOrderRequest,
    CreateOrderRequest,
    OrderDTO,
    OrderListDTO,
    OrderStatusHistoryDTO,
    UpdateOrderStatusRequest,
    UserContext,
)
from core.application.services import OrderApplicationService
from core.domain.enums import DeliveryStatus


router = APIRouter()


# ========================================================================
# CREATE
# ========================================================================

@router.post(
    "",
    response_model=OrderDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Place order",
    description="Create an order, reserve stock and compute producer splits",
)
async def create_order(
    request: CreateOrderRequest,
    user: UserContext = Depends(require_buyer),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """
    Place an order.

    Prices come from the catalog. Stock is reserved in the same
    transaction; an item exceeding stock fails the whole order.

    **Returns**: The created order with its producer splits
    """
    return await service.create_order(user, request)


# ========================================================================
# READ
# ========================================================================

@router.get("", response_model=OrderListDTO, summary="List all orders (admin)")
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: Optional[DeliveryStatus] = Query(None, alias="status"),
    _: UserContext = Depends(require_admin),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderListDTO:
    return await service.list_orders(page=page, limit=limit, status=status_filter)


@router.get("/my/orders", response_model=OrderListDTO, summary="Buyer's orders")
async def list_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: UserContext = Depends(require_buyer),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderListDTO:
    return await service.list_buyer_orders(user, page=page, limit=limit)


@router.get("/producer/orders", response_model=OrderListDTO, summary="Orders containing my products")
async def list_producer_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: UserContext = Depends(require_producer),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderListDTO:
    """Producers only see their own items and split on each order."""
    return await service.list_producer_orders(user, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderDTO, summary="Get order")
async def get_order(
    order_id: str,
    user: UserContext = Depends(get_current_user),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    return await service.get_order(order_id, user)


@router.get(
    "/{order_id}/history",
    response_model=List[OrderStatusHistoryDTO],
    summary="Order status history",
)
async def get_order_history(
    order_id: str,
    user: UserContext = Depends(get_current_user),
    service: OrderApplicationService = Depends(get_order_service),
) -> List[OrderStatusHistoryDTO]:
    return await service.get_status_history(order_id, user)


# ========================================================================
# STATUS CHANGES
# ========================================================================

@router.put(
    "/{order_id}/status",
    response_model=OrderDTO,
    summary="Update delivery status",
    description="Producers and admins advance delivery; admins may also reinstate cancelled orders",
)
async def update_order_status(
    order_id: str,
    request: UpdateOrderStatusRequest,
    user: UserContext = Depends(get_current_user),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    """
    Change the delivery status.

    Cancelling restores stock and releases unpaid producer splits.
    Delivering a cash order confirms its payment and schedules payouts.
    """
    return await service.update_status(order_id, request.status, user, request.reason)


@router.post("/{order_id}/cancel", response_model=OrderDTO, summary="Cancel order (buyer)")
async def cancel_order(
    order_id: str,
    request: Optional[CancelOrderRequest] = None,
    user: UserContext = Depends(get_current_user),
    service: OrderApplicationService = Depends(get_order_service),
) -> OrderDTO:
    reason = request.reason if request else None
    return await service.cancel_order(order_id, user, reason)
