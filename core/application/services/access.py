"""Resolve marketplace profiles for the authenticated user."""

from typing import List, Optional

from core.application.dtos import UserContext
from core.data.models import BuyerModel, OrderModel, ProducerModel
from core.data.uow import UnitOfWork
from core.domain.enums import UserRole
from core.domain.exceptions import AccessDeniedError, NotFoundError


async def require_buyer(uow: UnitOfWork, user: UserContext) -> BuyerModel:
    """Buyer profile of `user`, or AccessDeniedError."""
    buyer = await uow.users.get_buyer_by_user(user.id)
    if buyer is None:
        raise AccessDeniedError("Buyer profile required")
    return buyer


async def require_producer(uow: UnitOfWork, user: UserContext) -> ProducerModel:
    """Producer profile of `user`, or AccessDeniedError."""
    producer = await uow.users.get_producer_by_user(user.id)
    if producer is None:
        raise AccessDeniedError("Producer profile required")
    return producer


async def get_order_or_404(uow: UnitOfWork, order_id: str) -> OrderModel:
    order = await uow.orders.get(order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


async def order_access_role(
    uow: UnitOfWork, order: OrderModel, user: UserContext
) -> Optional[UserRole]:
    """
    Role under which `user` may see `order`, or None.

    Admins always see it; buyers see their own orders; producers see orders
    that carry a split for them.
    """
    if user.role == UserRole.ADMIN:
        return UserRole.ADMIN
    if user.role == UserRole.BUYER:
        buyer = await uow.users.get_buyer_by_user(user.id)
        if buyer is not None and order.buyer_id == buyer.id:
            return UserRole.BUYER
        return None
    if user.role == UserRole.PRODUCER:
        producer = await uow.users.get_producer_by_user(user.id)
        if producer is not None and any(
            op.producer_id == producer.id for op in order.order_producers
        ):
            return UserRole.PRODUCER
    return None


async def ensure_order_access(uow: UnitOfWork, order: OrderModel, user: UserContext) -> UserRole:
    role = await order_access_role(uow, order, user)
    if role is None:
        raise AccessDeniedError("Access denied")
    return role


async def producer_user_ids(uow: UnitOfWork, producer_ids: List[str]) -> List[str]:
    producers = await uow.users.get_producers(producer_ids)
    return [p.user_id for p in producers]
