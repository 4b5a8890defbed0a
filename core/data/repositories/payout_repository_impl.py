"""SQLAlchemy repository for the payout ledger."""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select, update

from ..models.order_model import OrderModel
from ..models.payout_model import (
    OrderProducerModel,
    PayoutOrderItemModel,
    ProducerPayoutModel,
)
from .base import SqlAlchemyRepository


class SqlAlchemyPayoutRepository(SqlAlchemyRepository):
    """Order producer splits, payout batches and the links between them."""

    # ------------------------------------------------------------------
    # Order producer splits
    # ------------------------------------------------------------------

    async def add_order_producer(self, order_producer: OrderProducerModel) -> OrderProducerModel:
        return await self._add(order_producer)

    async def get_order_producer(
        self, order_id: str, producer_id: str
    ) -> Optional[OrderProducerModel]:
        return await self._first(
            select(OrderProducerModel).where(
                OrderProducerModel.order_id == order_id,
                OrderProducerModel.producer_id == producer_id,
            )
        )

    async def get_order_producers(self, order_id: str) -> List[OrderProducerModel]:
        return await self._all(
            select(OrderProducerModel)
            .where(OrderProducerModel.order_id == order_id)
            .order_by(OrderProducerModel.created_at, OrderProducerModel.id)
        )

    async def get_order_producers_by_ids(self, ids: Iterable[str]) -> List[OrderProducerModel]:
        ids = list(ids)
        if not ids:
            return []
        return await self._all(select(OrderProducerModel).where(OrderProducerModel.id.in_(ids)))

    async def list_schedulable_order_producers(self) -> List[OrderProducerModel]:
        """PENDING splits whose order payment is CONFIRMED."""
        return await self._all(
            select(OrderProducerModel)
            .join(OrderModel, OrderModel.id == OrderProducerModel.order_id)
            .where(
                OrderProducerModel.payout_status == "PENDING",
                OrderModel.payment_status == "CONFIRMED",
            )
            .order_by(OrderProducerModel.created_at, OrderProducerModel.id)
        )

    async def sum_order_producer_amounts(
        self, producer_id: str, statuses: Iterable[str]
    ) -> Decimal:
        result = await self._session.execute(
            select(func.coalesce(func.sum(OrderProducerModel.producer_amount), 0)).where(
                OrderProducerModel.producer_id == producer_id,
                OrderProducerModel.payout_status.in_(list(statuses)),
            )
        )
        return Decimal(str(result.scalar_one()))

    # ------------------------------------------------------------------
    # Payout batches
    # ------------------------------------------------------------------

    async def add(self, payout: ProducerPayoutModel) -> ProducerPayoutModel:
        return await self._add(payout)

    async def get(self, payout_id: str) -> Optional[ProducerPayoutModel]:
        return await self._first(
            select(ProducerPayoutModel).where(ProducerPayoutModel.id == payout_id)
        )

    async def find_open_batch(
        self, producer_id: str, scheduled_for: datetime
    ) -> Optional[ProducerPayoutModel]:
        """Open (PENDING/SCHEDULED) batch of a producer for one payout date."""
        return await self._first(
            select(ProducerPayoutModel)
            .where(
                ProducerPayoutModel.producer_id == producer_id,
                ProducerPayoutModel.status.in_(["PENDING", "SCHEDULED"]),
                ProducerPayoutModel.scheduled_for == scheduled_for,
            )
            .order_by(ProducerPayoutModel.created_at)
        )

    async def list(self, status: Optional[str] = None) -> List[ProducerPayoutModel]:
        stmt = select(ProducerPayoutModel)
        if status:
            stmt = stmt.where(ProducerPayoutModel.status == status)
        return await self._all(stmt.order_by(ProducerPayoutModel.created_at.desc()))

    async def list_open(self, due_before: Optional[datetime] = None) -> List[ProducerPayoutModel]:
        """PENDING/SCHEDULED batches by schedule date, optionally only those due."""
        stmt = select(ProducerPayoutModel).where(
            ProducerPayoutModel.status.in_(["PENDING", "SCHEDULED"])
        )
        if due_before is not None:
            stmt = stmt.where(ProducerPayoutModel.scheduled_for <= due_before)
        return await self._all(stmt.order_by(ProducerPayoutModel.scheduled_for.asc()))

    async def detach_bank_account(self, bank_account_id: str) -> None:
        """Drop the account link from batches; their destination snapshot stays."""
        await self._session.execute(
            update(ProducerPayoutModel)
            .where(ProducerPayoutModel.bank_account_id == bank_account_id)
            .values(bank_account_id=None)
        )

    async def list_by_producer(
        self, producer_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[ProducerPayoutModel], int]:
        stmt = (
            select(ProducerPayoutModel)
            .where(ProducerPayoutModel.producer_id == producer_id)
            .order_by(ProducerPayoutModel.created_at.desc(), ProducerPayoutModel.id)
        )
        return await self._paginate(stmt, page, limit)

    async def sum_net_amount(self, producer_id: str, status: str) -> Decimal:
        result = await self._session.execute(
            select(func.coalesce(func.sum(ProducerPayoutModel.net_amount), 0)).where(
                ProducerPayoutModel.producer_id == producer_id,
                ProducerPayoutModel.status == status,
            )
        )
        return Decimal(str(result.scalar_one()))

    # ------------------------------------------------------------------
    # Payout items
    # ------------------------------------------------------------------

    async def add_item(self, item: PayoutOrderItemModel) -> PayoutOrderItemModel:
        return await self._add(item)

    async def get_items_for_order_producer(
        self, order_producer_id: str
    ) -> List[PayoutOrderItemModel]:
        return await self._all(
            select(PayoutOrderItemModel).where(
                PayoutOrderItemModel.order_producer_id == order_producer_id
            )
        )

    async def get_items_for_payout(self, payout_id: str) -> List[PayoutOrderItemModel]:
        return await self._all(
            select(PayoutOrderItemModel)
            .where(PayoutOrderItemModel.payout_id == payout_id)
            .order_by(PayoutOrderItemModel.created_at, PayoutOrderItemModel.id)
        )

    async def delete_item(self, item: PayoutOrderItemModel) -> None:
        await self._session.delete(item)
        await self._session.flush()
