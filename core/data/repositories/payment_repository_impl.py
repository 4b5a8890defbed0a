"""SQLAlchemy repository for payment references and confirmations."""

from typing import Optional

from sqlalchemy import select

from ..models.order_model import PaymentConfirmationModel, PaymentReferenceModel
from .base import SqlAlchemyRepository


class SqlAlchemyPaymentRepository(SqlAlchemyRepository):
    """Gateway references and payment outcomes."""

    async def add_reference(self, reference: PaymentReferenceModel) -> PaymentReferenceModel:
        return await self._add(reference)

    async def get_reference(self, payment_code: str) -> Optional[PaymentReferenceModel]:
        return await self._first(
            select(PaymentReferenceModel).where(PaymentReferenceModel.payment_code == payment_code)
        )

    async def add_confirmation(
        self, confirmation: PaymentConfirmationModel
    ) -> PaymentConfirmationModel:
        return await self._add(confirmation)

    async def get_confirmation_by_transaction(
        self, transaction_id: str
    ) -> Optional[PaymentConfirmationModel]:
        return await self._first(
            select(PaymentConfirmationModel).where(
                PaymentConfirmationModel.transaction_id == transaction_id
            )
        )

    async def get_latest_confirmation(self, order_id: str) -> Optional[PaymentConfirmationModel]:
        return await self._first(
            select(PaymentConfirmationModel)
            .where(PaymentConfirmationModel.order_id == order_id)
            .order_by(PaymentConfirmationModel.created_at.desc())
        )

    async def get_pending_confirmation(self, order_id: str) -> Optional[PaymentConfirmationModel]:
        """Latest unconfirmed payment attempt of an order."""
        return await self._first(
            select(PaymentConfirmationModel)
            .where(
                PaymentConfirmationModel.order_id == order_id,
                PaymentConfirmationModel.is_confirmed.is_(False),
            )
            .order_by(PaymentConfirmationModel.created_at.desc())
        )
