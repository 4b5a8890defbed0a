"""SQLAlchemy repository for disputes."""

from typing import List, Optional, Tuple

from sqlalchemy import or_, select

from ..models.dispute_model import DisputeMessageModel, DisputeModel
from ..models.order_model import OrderModel
from ..models.payout_model import OrderProducerModel
from .base import SqlAlchemyRepository


class SqlAlchemyDisputeRepository(SqlAlchemyRepository):
    """Disputes and their message threads."""

    async def add(self, dispute: DisputeModel) -> DisputeModel:
        return await self._add(dispute)

    async def add_message(self, message: DisputeMessageModel) -> DisputeMessageModel:
        return await self._add(message)

    async def get(self, dispute_id: str) -> Optional[DisputeModel]:
        return await self._first(select(DisputeModel).where(DisputeModel.id == dispute_id))

    async def get_by_order(self, order_id: str) -> Optional[DisputeModel]:
        return await self._first(select(DisputeModel).where(DisputeModel.order_id == order_id))

    async def list(
        self,
        page: int = 1,
        limit: int = 20,
        status: Optional[str] = None,
        user_id: Optional[str] = None,
        buyer_id: Optional[str] = None,
        producer_id: Optional[str] = None,
    ) -> Tuple[List[DisputeModel], int]:
        """
        List disputes.

        When `user_id` is given, only disputes the user raised, or that
        concern an order of `buyer_id` or an order split with `producer_id`,
        are returned.
        """
        stmt = select(DisputeModel)
        if status:
            stmt = stmt.where(DisputeModel.status == status)
        if user_id:
            visible = [DisputeModel.raised_by_id == user_id]
            if buyer_id:
                visible.append(
                    DisputeModel.order_id.in_(
                        select(OrderModel.id).where(OrderModel.buyer_id == buyer_id)
                    )
                )
            if producer_id:
                visible.append(
                    DisputeModel.order_id.in_(
                        select(OrderProducerModel.order_id).where(
                            OrderProducerModel.producer_id == producer_id
                        )
                    )
                )
            stmt = stmt.where(or_(*visible))
        stmt = stmt.order_by(DisputeModel.created_at.desc(), DisputeModel.id)
        return await self._paginate(stmt, page, limit)
