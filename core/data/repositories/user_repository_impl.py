"""SQLAlchemy repository for users and marketplace profiles."""

from typing import List, Optional

from sqlalchemy import select

from ..models.user_model import BuyerModel, ProducerModel, UserModel
from .base import SqlAlchemyRepository


class SqlAlchemyUserRepository(SqlAlchemyRepository):
    """Users, buyers and producers."""

    async def add(self, user: UserModel) -> UserModel:
        return await self._add(user)

    async def add_buyer(self, buyer: BuyerModel) -> BuyerModel:
        return await self._add(buyer)

    async def add_producer(self, producer: ProducerModel) -> ProducerModel:
        return await self._add(producer)

    async def get(self, user_id: str) -> Optional[UserModel]:
        return await self._first(select(UserModel).where(UserModel.id == user_id))

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        return await self._first(select(UserModel).where(UserModel.email == email.lower()))

    async def get_buyer(self, buyer_id: str) -> Optional[BuyerModel]:
        return await self._first(select(BuyerModel).where(BuyerModel.id == buyer_id))

    async def get_buyer_by_user(self, user_id: str) -> Optional[BuyerModel]:
        return await self._first(select(BuyerModel).where(BuyerModel.user_id == user_id))

    async def get_producer_by_user(self, user_id: str) -> Optional[ProducerModel]:
        return await self._first(select(ProducerModel).where(ProducerModel.user_id == user_id))

    async def get_producer(self, producer_id: str) -> Optional[ProducerModel]:
        return await self._first(select(ProducerModel).where(ProducerModel.id == producer_id))

    async def get_producers(self, producer_ids: List[str]) -> List[ProducerModel]:
        if not producer_ids:
            return []
        return await self._all(select(ProducerModel).where(ProducerModel.id.in_(producer_ids)))

    async def list_admins(self) -> List[UserModel]:
        return await self._all(
            select(UserModel).where(UserModel.role == "ADMIN", UserModel.is_active.is_(True))
        )
