"""SQLAlchemy repository for the Order aggregate."""

from typing import List, Optional, Tuple

from sqlalchemy import select

from ..models.order_model import OrderItemModel, OrderModel, OrderStatusHistoryModel
from ..models.payout_model import OrderProducerModel
from .base import SqlAlchemyRepository


class SqlAlchemyOrderRepository(SqlAlchemyRepository):
    """Orders, their items and status history."""

    async def add(self, order: OrderModel) -> OrderModel:
        return await self._add(order)

    async def get(self, order_id: str) -> Optional[OrderModel]:
        """Retrieve order by id with items and producer splits loaded."""
        return await self._first(select(OrderModel).where(OrderModel.id == order_id))

    async def list_all(
        self,
        page: int = 1,
        limit: int = 20,
        delivery_status: Optional[str] = None,
    ) -> Tuple[List[OrderModel], int]:
        stmt = select(OrderModel)
        if delivery_status:
            stmt = stmt.where(OrderModel.delivery_status == delivery_status)
        stmt = stmt.order_by(OrderModel.order_date.desc(), OrderModel.id)
        return await self._paginate(stmt, page, limit)

    async def list_by_buyer(
        self, buyer_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[OrderModel], int]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.buyer_id == buyer_id)
            .order_by(OrderModel.order_date.desc(), OrderModel.id)
        )
        return await self._paginate(stmt, page, limit)

    async def list_by_producer(
        self, producer_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[OrderModel], int]:
        """Orders that carry a split for `producer_id`."""
        involved = select(OrderProducerModel.order_id).where(
            OrderProducerModel.producer_id == producer_id
        )
        stmt = (
            select(OrderModel)
            .where(OrderModel.id.in_(involved))
            .order_by(OrderModel.order_date.desc(), OrderModel.id)
        )
        return await self._paginate(stmt, page, limit)

    async def add_history(
        self,
        order_id: str,
        status: str,
        notes: Optional[str] = None,
        changed_by_id: Optional[str] = None,
    ) -> OrderStatusHistoryModel:
        return await self._add(
            OrderStatusHistoryModel(
                order_id=order_id,
                status=status,
                notes=notes,
                changed_by_id=changed_by_id,
            )
        )

    async def get_history(self, order_id: str) -> List[OrderStatusHistoryModel]:
        return await self._all(
            select(OrderStatusHistoryModel)
            .where(OrderStatusHistoryModel.order_id == order_id)
            .order_by(OrderStatusHistoryModel.changed_at.asc())
        )

    async def has_paid_purchase(self, buyer_id: str, product_id: str) -> bool:
        """True when the buyer has a payment-confirmed order containing the product."""
        stmt = (
            select(OrderItemModel.id)
            .join(OrderModel, OrderModel.id == OrderItemModel.order_id)
            .where(
                OrderModel.buyer_id == buyer_id,
                OrderModel.payment_status == "CONFIRMED",
                OrderItemModel.product_id == product_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.first() is not None
