"""Application service for order disputes."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    DisputeDTO,
    DisputeListDTO,
    PaginationDTO,
    UpdateDisputeStatusRequest,
    UserContext,
)
from core.data.mappers import DisputeMapper
from core.data.models import DisputeMessageModel, DisputeModel, OrderModel
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import DisputeLifecycle, OrderStatusPolicy
from core.domain.enums import DisputeStatus, NotificationType, PaymentStatus, UserRole
from core.domain.exceptions import (
    AccessDeniedError,
    BusinessRuleError,
    NotFoundError,
    ValidationError,
)
from core.domain.value_objects import to_decimal

from .access import get_order_or_404, order_access_role, producer_user_ids
from .notification_service import push_notifications
from .payout_service import PayoutApplicationService

logger = logging.getLogger(__name__)


class DisputeApplicationService:
    """
    Dispute workflow.

    Buyers and involved producers raise disputes on confirmed, shipped or
    delivered orders; admins move them through review and may grant a
    refund, which releases the order's unpaid producer splits.
    """

    def __init__(
        self, session_factory: async_sessionmaker, payout_service: PayoutApplicationService
    ) -> None:
        self._session_factory = session_factory
        self._payouts = payout_service

    async def create_dispute(
        self,
        order_id: str,
        user: UserContext,
        reason: str,
        description: Optional[str] = None,
    ) -> DisputeDTO:
        """
        Open a dispute.

        Raises:
            AccessDeniedError: If the caller is neither the buyer nor an involved producer
            ValidationError: If the order is not confirmed, shipped or delivered
            BusinessRuleError: If the order already has a dispute
        """
        if not reason or not reason.strip():
            raise ValidationError("Dispute reason is required")

        async with create_uow(self._session_factory) as uow:
            order = await get_order_or_404(uow, order_id)
            role = await order_access_role(uow, order, user)
            if role not in (UserRole.BUYER, UserRole.PRODUCER):
                raise AccessDeniedError("Only the buyer or an involved producer can raise a dispute")

            if not OrderStatusPolicy.is_disputable(order.delivery_status):
                raise ValidationError(
                    f"Disputes can only be raised for confirmed, shipped or delivered orders "
                    f"(order is {order.delivery_status})"
                )
            if await uow.disputes.get_by_order(order.id) is not None:
                raise BusinessRuleError("A dispute already exists for this order")

            dispute = await uow.disputes.add(
                DisputeModel(
                    order_id=order.id,
                    raised_by_id=user.id,
                    reason=reason.strip(),
                    description=description,
                    status=DisputeStatus.OPEN.value,
                )
            )

            recipients = await self._parties(uow, order)
            recipients += [admin.id for admin in await uow.users.list_admins()]
            await push_notifications(
                uow,
                [uid for uid in recipients if uid != user.id],
                f"Dispute raised on order #{order.id[:8]}: {dispute.reason}",
                NotificationType.DISPUTE_RAISED,
            )

            await uow.commit()
            logger.info(f"[{uow.execution_id.short()}] Dispute {dispute.id} opened on order {order.id}")
            return DisputeMapper.to_dto(await uow.disputes.get(dispute.id))

    async def add_message(self, dispute_id: str, user: UserContext, content: str) -> DisputeDTO:
        if not content or not content.strip():
            raise ValidationError("Message content is required")

        async with create_uow(self._session_factory) as uow:
            dispute, order = await self._get_visible(uow, dispute_id, user)

            await uow.disputes.add_message(
                DisputeMessageModel(dispute_id=dispute.id, sender_id=user.id, content=content.strip())
            )
            recipients = await self._parties(uow, order)
            if dispute.raised_by_id not in recipients:
                recipients.append(dispute.raised_by_id)
            await push_notifications(
                uow,
                [uid for uid in recipients if uid != user.id],
                f"New message on the dispute for order #{order.id[:8]}.",
                NotificationType.GENERAL,
            )

            await uow.commit()
            return DisputeMapper.to_dto(await uow.disputes.get(dispute.id))

    async def update_status(
        self, dispute_id: str, admin: UserContext, request: UpdateDisputeStatusRequest
    ) -> DisputeDTO:
        """
        Admin status change.

        A refund amount is only accepted when resolving and must satisfy
        0 < refund <= order total. Resolving with a refund marks the order
        payment REFUNDED and releases the order's unpaid producer splits;
        splits already being paid out or paid stay with their batches.

        Raises:
            InvalidTransitionError: If the dispute is already settled
            ValidationError: If the refund amount is misplaced or out of range
        """
        if not admin.is_admin:
            raise AccessDeniedError("Only admins can update dispute status")

        async with create_uow(self._session_factory) as uow:
            dispute = await self._get_or_404(uow, dispute_id)
            order = await get_order_or_404(uow, dispute.order_id)
            status = DisputeStatus(request.status)
            DisputeLifecycle.ensure_transition(dispute.status, status)

            refund: Optional[Decimal] = None
            if request.refund_amount is not None:
                if status != DisputeStatus.RESOLVED:
                    raise ValidationError("A refund can only be granted when resolving a dispute")
                refund = to_decimal(request.refund_amount)
                total = to_decimal(order.total_amount)
                if refund <= 0 or refund > total:
                    raise ValidationError(
                        f"Refund amount must be greater than 0 and at most the order total ({total})"
                    )

            old_status = dispute.status
            dispute.status = status.value
            if request.resolution is not None:
                dispute.resolution = request.resolution
            if refund is not None:
                dispute.refund_amount = refund
            if DisputeLifecycle.is_settled(status) and dispute.resolved_at is None:
                dispute.resolved_by_id = admin.id
                dispute.resolved_at = datetime.utcnow()

            if refund is not None:
                await self._payouts.release_order(
                    uow, order.id, f"Refund of {refund} granted", strict=False
                )
                order.payment_status = PaymentStatus.REFUNDED.value
                order.updated_at = datetime.utcnow()
                await uow.orders.add_history(
                    order.id, order.delivery_status, f"Refunded {refund} after dispute", admin.id
                )

            note = f"Status changed from {old_status} to {status.value}"
            if request.resolution:
                note = f"{note}. Resolution: {request.resolution}"
            await uow.disputes.add_message(
                DisputeMessageModel(dispute_id=dispute.id, sender_id=admin.id, content=note)
            )
            await uow.audit.record(
                action="UPDATE_DISPUTE_STATUS",
                entity="Dispute",
                entity_id=dispute.id,
                old_values={"status": old_status},
                new_values={
                    "status": status.value,
                    "refund_amount": str(refund) if refund is not None else None,
                },
                user_id=admin.id,
                execution_id=str(uow.execution_id),
            )

            recipients = await self._parties(uow, order)
            await push_notifications(
                uow,
                recipients,
                f"The dispute for order #{order.id[:8]} is now {status.value}.",
                NotificationType.GENERAL,
            )

            await uow.commit()
            logger.info(
                f"[{uow.execution_id.short()}] Dispute {dispute.id}: {old_status} -> {status.value}"
            )
            return DisputeMapper.to_dto(await uow.disputes.get(dispute.id))

    async def list_disputes(
        self,
        user: UserContext,
        status: Optional[DisputeStatus] = None,
        page: int = 1,
        limit: int = 20,
    ) -> DisputeListDTO:
        """Admins see every dispute; others see the ones they are party to."""
        async with create_uow(self._session_factory) as uow:
            status_value = DisputeStatus(status).value if status else None
            if user.is_admin:
                rows, total = await uow.disputes.list(page=page, limit=limit, status=status_value)
            else:
                buyer = await uow.users.get_buyer_by_user(user.id)
                producer = await uow.users.get_producer_by_user(user.id)
                rows, total = await uow.disputes.list(
                    page=page,
                    limit=limit,
                    status=status_value,
                    user_id=user.id,
                    buyer_id=buyer.id if buyer else None,
                    producer_id=producer.id if producer else None,
                )
            return DisputeListDTO(
                disputes=[DisputeMapper.to_dto(d) for d in rows],
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def get_dispute(self, dispute_id: str, user: UserContext) -> DisputeDTO:
        async with create_uow(self._session_factory) as uow:
            dispute, _ = await self._get_visible(uow, dispute_id, user)
            return DisputeMapper.to_dto(dispute)

    async def _get_visible(self, uow: UnitOfWork, dispute_id: str, user: UserContext):
        dispute = await self._get_or_404(uow, dispute_id)
        order = await get_order_or_404(uow, dispute.order_id)
        if dispute.raised_by_id != user.id and await order_access_role(uow, order, user) is None:
            raise AccessDeniedError("Access denied")
        return dispute, order

    @staticmethod
    async def _parties(uow: UnitOfWork, order: OrderModel) -> List[str]:
        """User ids of the buyer and every producer on the order."""
        users = []
        if order.buyer is not None:
            users.append(order.buyer.user_id)
        users += await producer_user_ids(uow, [op.producer_id for op in order.order_producers])
        return users

    @staticmethod
    async def _get_or_404(uow: UnitOfWork, dispute_id: str) -> DisputeModel:
        dispute = await uow.disputes.get(dispute_id)
        if dispute is None:
            raise NotFoundError("Dispute", dispute_id)
        return dispute
