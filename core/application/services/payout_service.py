"""
Payout engine.

Aggregates order producer splits into weekly payout batches and drives the
batch lifecycle. Ledger operations that run inside another service's
transaction (`schedule_order_payouts`, `release_order`) take the caller's
unit of work; everything else opens its own.

Ledger invariants kept by every operation:
- batch.amount == batch.commission + batch.net_amount
- batch.net_amount == sum(item.amount for item in batch.items)
- a COMPLETED batch has only COMPLETED order producers
"""

import logging
from datetime import datetime
from typing import List, Optional, Set

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    EarningsDTO,
    PaginationDTO,
    PayoutDTO,
    PayoutListDTO,
    ScheduleResultDTO,
    UserContext,
)
from core.application.interfaces import INotificationService
from core.data.mappers import PayoutMapper
from core.data.models import (
    PayoutOrderItemModel,
    ProducerBankAccountModel,
    ProducerPayoutModel,
)
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import UNPAID_STATUSES, PayoutLifecycle
from core.domain.enums import (
    NotificationType,
    OrderProducerStatus,
    PayoutMethod,
    PayoutStatus,
)
from core.domain.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.domain.services import (
    describe_destination,
    next_payout_date,
    payout_method_for_bank,
)
from core.domain.value_objects import to_decimal
from core.settings.sections.marketplace import MarketplaceSettings

from .access import require_producer
from .notification_service import push_notifications

logger = logging.getLogger(__name__)


class PayoutApplicationService:
    """
    Application service for producer payouts.

    Responsibilities:
    - Schedule confirmed order producer splits into open batches
    - Release splits of cancelled or refunded orders
    - Move batches through PROCESSING -> COMPLETED | FAILED, retry, cancel
    - Producer earnings and payout queries
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: MarketplaceSettings,
        notification_service: Optional[INotificationService] = None,
    ) -> None:
        """Initialize payout service.

        Args:
            session_factory: SQLAlchemy async session factory
            settings: Commission and payout calendar settings
            notification_service: Ops alert channel (optional)
        """
        self._session_factory = session_factory
        self._settings = settings
        self._alerts = notification_service

    def next_payout_date(self, now: Optional[datetime] = None) -> datetime:
        return next_payout_date(
            now or datetime.utcnow(),
            weekday=self._settings.payout_weekday,
            hour=self._settings.payout_hour,
        )

    # ------------------------------------------------------------------
    # Ledger operations (caller's transaction)
    # ------------------------------------------------------------------

    async def schedule_order_payouts(
        self, uow: UnitOfWork, order_id: str, now: Optional[datetime] = None
    ) -> List[str]:
        """
        Put every PENDING split of an order into its producer's open batch.

        The batch for the next payout date is reused when one is open,
        otherwise a SCHEDULED batch is created.

        Returns:
            Ids of the batches that received splits
        """
        scheduled_for = self.next_payout_date(now)
        payout_ids: List[str] = []

        for op in await uow.payouts.get_order_producers(order_id):
            if op.payout_status != OrderProducerStatus.PENDING.value:
                continue

            batch = await uow.payouts.find_open_batch(op.producer_id, scheduled_for)
            if batch is None:
                batch = await uow.payouts.add(
                    ProducerPayoutModel(
                        producer_id=op.producer_id,
                        amount=to_decimal(0),
                        commission=to_decimal(0),
                        net_amount=to_decimal(0),
                        currency=self._settings.currency,
                        status=PayoutStatus.SCHEDULED.value,
                        scheduled_for=scheduled_for,
                    )
                )
                logger.info(
                    f"[{uow.execution_id.short()}] New payout batch {batch.id} "
                    f"for producer {op.producer_id} on {scheduled_for.isoformat()}"
                )

            batch.amount = to_decimal(batch.amount) + to_decimal(op.subtotal)
            batch.commission = to_decimal(batch.commission) + to_decimal(op.marketplace_commission)
            batch.net_amount = to_decimal(batch.net_amount) + to_decimal(op.producer_amount)

            await uow.payouts.add_item(
                PayoutOrderItemModel(
                    payout_id=batch.id,
                    order_producer_id=op.id,
                    amount=to_decimal(op.producer_amount),
                )
            )
            op.payout_status = OrderProducerStatus.SCHEDULED.value

            if batch.id not in payout_ids:
                payout_ids.append(batch.id)

        if payout_ids:
            logger.info(
                f"[{uow.execution_id.short()}] Order {order_id} scheduled into "
                f"{len(payout_ids)} payout batch(es)"
            )
        return payout_ids

    async def release_order(
        self, uow: UnitOfWork, order_id: str, reason: str = "", strict: bool = True
    ) -> int:
        """
        Cancel the unpaid splits of an order and pull them out of their batches.

        Batches left without items are cancelled. With `strict=False`
        splits that are PROCESSING or COMPLETED are left untouched and only
        the releasable ones are cancelled (refunds after payout).

        Returns:
            Number of splits released

        Raises:
            BusinessRuleError: If strict and any split is already PROCESSING or COMPLETED
        """
        ops = await uow.payouts.get_order_producers(order_id)
        locked = [
            op for op in ops
            if op.payout_status in (
                OrderProducerStatus.PROCESSING.value,
                OrderProducerStatus.COMPLETED.value,
            )
        ]
        if locked and strict:
            raise BusinessRuleError(
                f"Order {order_id} has payouts in progress or paid; it cannot be released"
            )
        if locked:
            logger.warning(
                f"[{uow.execution_id.short()}] Order {order_id}: {len(locked)} split(s) "
                f"already in payment are kept"
            )

        touched: Set[str] = set()
        released = 0
        for op in ops:
            if not PayoutLifecycle.is_releasable(op.payout_status):
                continue

            for item in await uow.payouts.get_items_for_order_producer(op.id):
                batch = await uow.payouts.get(item.payout_id)
                batch.amount = to_decimal(batch.amount) - to_decimal(op.subtotal)
                batch.commission = to_decimal(batch.commission) - to_decimal(op.marketplace_commission)
                batch.net_amount = to_decimal(batch.net_amount) - to_decimal(item.amount)
                await uow.payouts.delete_item(item)
                touched.add(batch.id)

            op.payout_status = OrderProducerStatus.CANCELLED.value
            released += 1

        for payout_id in touched:
            batch = await uow.payouts.get(payout_id)
            if not batch.items and PayoutLifecycle.can_transition(batch.status, PayoutStatus.CANCELLED):
                batch.status = PayoutStatus.CANCELLED.value
                batch.notes = f"All orders released. {reason}".strip()

        logger.info(
            f"[{uow.execution_id.short()}] Released {released} split(s) of order {order_id}"
            + (f": {reason}" if reason else "")
        )
        return released

    # ------------------------------------------------------------------
    # Scheduling sweep
    # ------------------------------------------------------------------

    async def schedule_pending_payouts(self, now: Optional[datetime] = None) -> ScheduleResultDTO:
        """Schedule every PENDING split whose order payment is CONFIRMED."""
        async with create_uow(self._session_factory) as uow:
            ops = await uow.payouts.list_schedulable_order_producers()
            order_ids = list(dict.fromkeys(op.order_id for op in ops))

            payout_ids: List[str] = []
            for order_id in order_ids:
                for payout_id in await self.schedule_order_payouts(uow, order_id, now=now):
                    if payout_id not in payout_ids:
                        payout_ids.append(payout_id)

            await uow.commit()

        logger.info(f"✅ Scheduled {len(ops)} pending split(s) into {len(payout_ids)} batch(es)")
        return ScheduleResultDTO(scheduled_count=len(ops), payout_ids=payout_ids)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_payouts(self, status: Optional[PayoutStatus] = None) -> PayoutListDTO:
        async with create_uow(self._session_factory) as uow:
            rows = await uow.payouts.list(PayoutStatus(status).value if status else None)
            return PayoutListDTO(payouts=PayoutMapper.to_dtos(rows))

    async def get_pending_payouts(self) -> PayoutListDTO:
        async with create_uow(self._session_factory) as uow:
            return PayoutListDTO(payouts=PayoutMapper.to_dtos(await uow.payouts.list_open()))

    async def get_due_payouts(self, now: Optional[datetime] = None) -> PayoutListDTO:
        """Open batches whose payout date has arrived."""
        async with create_uow(self._session_factory) as uow:
            rows = await uow.payouts.list_open(due_before=now or datetime.utcnow())
            return PayoutListDTO(payouts=PayoutMapper.to_dtos(rows))

    async def get_payout(self, payout_id: str, user: Optional[UserContext] = None) -> PayoutDTO:
        """
        Payout details. Non-admin callers only see their own batches
        (other producers' batches are reported as missing).
        """
        async with create_uow(self._session_factory) as uow:
            payout = await self._get_or_404(uow, payout_id)
            if user is not None and not user.is_admin:
                producer = await require_producer(uow, user)
                if payout.producer_id != producer.id:
                    raise NotFoundError("Payout", payout_id)
            return PayoutMapper.to_dto(payout)

    async def get_producer_payouts(
        self, producer_id: str, page: int = 1, limit: int = 20
    ) -> PayoutListDTO:
        async with create_uow(self._session_factory) as uow:
            rows, total = await uow.payouts.list_by_producer(producer_id, page=page, limit=limit)
            return PayoutListDTO(
                payouts=PayoutMapper.to_dtos(rows),
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def get_my_payouts(self, user: UserContext, page: int = 1, limit: int = 20) -> PayoutListDTO:
        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)
        return await self.get_producer_payouts(producer.id, page=page, limit=limit)

    async def get_producer_earnings(self, producer_id: str) -> EarningsDTO:
        """
        Earnings summary.

        pending: splits not yet paid (PENDING, SCHEDULED, PROCESSING, FAILED)
        completed: net amount of COMPLETED batches
        total: every non-cancelled split
        """
        async with create_uow(self._session_factory) as uow:
            pending = await uow.payouts.sum_order_producer_amounts(
                producer_id, [s.value for s in UNPAID_STATUSES]
            )
            completed = await uow.payouts.sum_net_amount(producer_id, PayoutStatus.COMPLETED.value)
            total = await uow.payouts.sum_order_producer_amounts(
                producer_id,
                [s.value for s in OrderProducerStatus if s != OrderProducerStatus.CANCELLED],
            )
        return EarningsDTO(
            producer_id=producer_id,
            pending=to_decimal(pending),
            completed=to_decimal(completed),
            total=to_decimal(total),
            currency=self._settings.currency,
        )

    async def get_my_earnings(self, user: UserContext) -> EarningsDTO:
        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)
        return await self.get_producer_earnings(producer.id)

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    async def mark_processing(self, payout_id: str, admin: Optional[UserContext] = None) -> PayoutDTO:
        return await self._transition(payout_id, PayoutStatus.PROCESSING, admin)

    async def mark_completed(
        self,
        payout_id: str,
        reference: str,
        method: Optional[PayoutMethod] = None,
        admin: Optional[UserContext] = None,
        bank_account_id: Optional[str] = None,
    ) -> PayoutDTO:
        """
        Record a paid batch; every linked split becomes COMPLETED.

        The batch is paid into `bank_account_id` when given, else into the
        producer's primary account. Without an explicit `method` the account
        decides it: wallet providers are MOBILE_MONEY, banks BANK_TRANSFER.
        With no account on file the method falls back to BANK_TRANSFER.

        Raises:
            NotFoundError: If `bank_account_id` is not one of the producer's accounts
        """
        if not reference or not reference.strip():
            raise ValidationError("Payout reference is required")
        return await self._transition(
            payout_id,
            PayoutStatus.COMPLETED,
            admin,
            reference=reference.strip(),
            method=PayoutMethod(method) if method is not None else None,
            bank_account_id=bank_account_id,
        )

    async def mark_failed(
        self, payout_id: str, reason: str, admin: Optional[UserContext] = None
    ) -> PayoutDTO:
        if not reason or not reason.strip():
            raise ValidationError("Failure reason is required")
        return await self._transition(payout_id, PayoutStatus.FAILED, admin, note=reason.strip())

    async def retry(
        self, payout_id: str, admin: Optional[UserContext] = None, now: Optional[datetime] = None
    ) -> PayoutDTO:
        """Reschedule a FAILED batch for the next payout date."""
        return await self._transition(
            payout_id,
            PayoutStatus.SCHEDULED,
            admin,
            scheduled_for=self.next_payout_date(now),
        )

    async def cancel(
        self, payout_id: str, reason: Optional[str] = None, admin: Optional[UserContext] = None
    ) -> PayoutDTO:
        """
        Cancel a batch. Its splits return to PENDING without a batch link
        and are picked up again by the next scheduling sweep.
        """
        return await self._transition(payout_id, PayoutStatus.CANCELLED, admin, note=reason)

    async def _transition(
        self,
        payout_id: str,
        target: PayoutStatus,
        admin: Optional[UserContext],
        reference: Optional[str] = None,
        method: Optional[PayoutMethod] = None,
        note: Optional[str] = None,
        scheduled_for: Optional[datetime] = None,
        bank_account_id: Optional[str] = None,
    ) -> PayoutDTO:
        async with create_uow(self._session_factory) as uow:
            payout = await self._get_or_404(uow, payout_id)
            current = payout.status
            PayoutLifecycle.ensure_transition(current, target)

            now = datetime.utcnow()
            payout.status = target.value
            if target == PayoutStatus.COMPLETED:
                account = await self._payout_account(uow, payout, bank_account_id)
                if method is None:
                    method = (
                        payout_method_for_bank(account.bank_name)
                        if account is not None
                        else PayoutMethod.BANK_TRANSFER
                    )
                payout.paid_at = now
                payout.payout_reference = reference
                payout.payout_method = method.value
                if account is not None:
                    payout.bank_account_id = account.id
                    payout.payout_destination = describe_destination(
                        account.bank_name, account.account_number, account.account_name
                    )
            if note:
                payout.notes = note
            if scheduled_for is not None:
                payout.scheduled_for = scheduled_for

            message = self._producer_message(payout, target, note)
            old_values = {"status": current, "net_amount": str(to_decimal(payout.net_amount))}
            await self._apply_to_splits(uow, payout, target, now)

            await uow.audit.record(
                action=f"PAYOUT_{target.value}",
                entity="ProducerPayout",
                entity_id=payout.id,
                old_values=old_values,
                new_values={
                    "status": target.value,
                    "payout_reference": reference,
                    "payout_method": method.value if method else None,
                    "payout_destination": payout.payout_destination,
                    "notes": note,
                },
                user_id=admin.id if admin else None,
                execution_id=str(uow.execution_id),
            )

            producer = await uow.users.get_producer(payout.producer_id)
            if producer is not None:
                await push_notifications(
                    uow,
                    [producer.user_id],
                    message,
                    NotificationType.PAYOUT,
                )

            await uow.commit()
            logger.info(
                f"[{uow.execution_id.short()}] Payout {payout.id}: {current} -> {target.value}"
            )
            result = PayoutMapper.to_dto(await uow.payouts.get(payout.id))

        if target == PayoutStatus.FAILED and self._alerts is not None:
            await self._alerts.notify(
                f"❌ Payout {payout_id} failed ({result.net_amount} {result.currency}): {note}",
                severity=80,
            )
        return result

    async def _apply_to_splits(
        self, uow: UnitOfWork, payout: ProducerPayoutModel, target: PayoutStatus, now: datetime
    ) -> None:
        linked = PayoutLifecycle.linked_status(target)
        if linked is None:
            return

        items = await uow.payouts.get_items_for_payout(payout.id)
        ops = await uow.payouts.get_order_producers_by_ids(i.order_producer_id for i in items)

        for op in ops:
            op.payout_status = linked.value
            if target == PayoutStatus.COMPLETED:
                op.paid_at = now
                op.payout_reference = payout.payout_reference

        if target == PayoutStatus.CANCELLED:
            for item in items:
                await uow.payouts.delete_item(item)
            payout.amount = to_decimal(0)
            payout.commission = to_decimal(0)
            payout.net_amount = to_decimal(0)

    @staticmethod
    def _producer_message(payout: ProducerPayoutModel, target: PayoutStatus, note: Optional[str]) -> str:
        amount = f"{to_decimal(payout.net_amount)} {payout.currency}"
        if target == PayoutStatus.PROCESSING:
            return f"Your payout of {amount} is being processed."
        if target == PayoutStatus.COMPLETED:
            return f"Your payout of {amount} has been sent. Reference: {payout.payout_reference}"
        if target == PayoutStatus.FAILED:
            return f"Your payout of {amount} failed: {note}"
        if target == PayoutStatus.SCHEDULED:
            return (
                f"Your payout of {amount} has been rescheduled for "
                f"{payout.scheduled_for:%Y-%m-%d}."
            )
        return f"Your payout of {amount} was cancelled." + (f" {note}" if note else "")

    @staticmethod
    async def _payout_account(
        uow: UnitOfWork, payout: ProducerPayoutModel, bank_account_id: Optional[str]
    ) -> Optional[ProducerBankAccountModel]:
        """Account a batch is paid into: the requested one, else the primary."""
        if bank_account_id is None:
            return await uow.bank_accounts.get_primary(payout.producer_id)
        account = await uow.bank_accounts.get_for_producer(bank_account_id, payout.producer_id)
        if account is None:
            raise NotFoundError("Bank account", bank_account_id)
        return account

    @staticmethod
    async def _get_or_404(uow: UnitOfWork, payout_id: str) -> ProducerPayoutModel:
        payout = await uow.payouts.get(payout_id)
        if payout is None:
            raise NotFoundError("Payout", payout_id)
        return payout


