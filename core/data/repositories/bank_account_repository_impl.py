"""SQLAlchemy repository for producer bank accounts."""

from typing import List, Optional

from sqlalchemy import select, update

from ..models.bank_account_model import ProducerBankAccountModel
from .base import SqlAlchemyRepository


class SqlAlchemyBankAccountRepository(SqlAlchemyRepository):
    """Producer payout accounts."""

    async def add(self, account: ProducerBankAccountModel) -> ProducerBankAccountModel:
        return await self._add(account)

    async def get(self, account_id: str) -> Optional[ProducerBankAccountModel]:
        return await self._first(
            select(ProducerBankAccountModel).where(ProducerBankAccountModel.id == account_id)
        )

    async def get_for_producer(
        self, account_id: str, producer_id: str
    ) -> Optional[ProducerBankAccountModel]:
        return await self._first(
            select(ProducerBankAccountModel).where(
                ProducerBankAccountModel.id == account_id,
                ProducerBankAccountModel.producer_id == producer_id,
            )
        )

    async def get_primary(self, producer_id: str) -> Optional[ProducerBankAccountModel]:
        return await self._first(
            select(ProducerBankAccountModel).where(
                ProducerBankAccountModel.producer_id == producer_id,
                ProducerBankAccountModel.is_primary.is_(True),
            )
        )

    async def list_by_producer(self, producer_id: str) -> List[ProducerBankAccountModel]:
        """Primary account first, then newest first."""
        return await self._all(
            select(ProducerBankAccountModel)
            .where(ProducerBankAccountModel.producer_id == producer_id)
            .order_by(
                ProducerBankAccountModel.is_primary.desc(),
                ProducerBankAccountModel.created_at.desc(),
                ProducerBankAccountModel.id,
            )
        )

    async def clear_primary(self, producer_id: str) -> None:
        await self._session.execute(
            update(ProducerBankAccountModel)
            .where(
                ProducerBankAccountModel.producer_id == producer_id,
                ProducerBankAccountModel.is_primary.is_(True),
            )
            .values(is_primary=False)
        )

    async def delete(self, account: ProducerBankAccountModel) -> None:
        await self._session.delete(account)
        await self._session.flush()
