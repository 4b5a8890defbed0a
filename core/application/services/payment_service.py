"""
Application service for payments.

Hosted checkout through the payment gateway, webhook processing and
payment status lookups. A confirmed payment is what makes an order's
producer splits eligible for payout.
"""

import json
import logging
import time
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CustomerInfo,
    PaymentIntentDTO,
    PaymentStatusDTO,
    UserContext,
    WebhookResultDTO,
)
from core.application.interfaces import IPaymentGateway
from core.data.models import OrderModel, PaymentConfirmationModel, PaymentReferenceModel
from core.data.uow import UnitOfWork, create_uow
from core.domain.enums import NotificationType, PaymentStatus
from core.domain.exceptions import AccessDeniedError, AuthenticationError, BusinessRuleError
from core.domain.value_objects import to_decimal
from core.settings.sections.chapa import ChapaSettings

from .access import ensure_order_access, get_order_or_404, producer_user_ids, require_buyer
from .notification_service import push_notification, push_notifications
from .payout_service import PayoutApplicationService

logger = logging.getLogger(__name__)

TX_REF_MAX_LENGTH = 50


def build_tx_ref(order_id: str, now_ms: Optional[int] = None) -> str:
    """`ord-<first 8 chars of order id>-<epoch ms>`, at most 50 chars."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"ord-{order_id[:8]}-{now_ms}"[:TX_REF_MAX_LENGTH]


def split_name(name: str) -> tuple:
    """First word is the first name, the rest is the last name."""
    parts = (name or "").split()
    first = parts[0] if parts else "Customer"
    last = " ".join(parts[1:]) or "User"
    return first, last


def gateway_amount(amount: Decimal) -> str:
    """Whole-unit amount string expected by the gateway."""
    return str(to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


async def confirm_order_payment(
    uow: UnitOfWork,
    order: OrderModel,
    payouts: PayoutApplicationService,
    method: str,
    transaction_id: Optional[str] = None,
    changed_by_id: Optional[str] = None,
) -> List[str]:
    """
    Mark an order paid inside the caller's transaction and schedule its
    producer payouts.

    The latest unconfirmed payment attempt is confirmed when there is one,
    otherwise a confirmation row is written.

    Returns:
        Ids of the payout batches that received splits
    """
    now = datetime.utcnow()
    order.payment_status = PaymentStatus.CONFIRMED.value
    order.updated_at = now

    confirmation = await uow.payments.get_pending_confirmation(order.id)
    if confirmation is None:
        confirmation = await uow.payments.add_confirmation(
            PaymentConfirmationModel(order_id=order.id, method=method)
        )
    confirmation.is_confirmed = True
    confirmation.confirmed_at = now
    if transaction_id:
        confirmation.transaction_id = transaction_id

    note = f"Payment confirmed via {method}"
    if transaction_id:
        note = f"{note} - TX: {transaction_id}"
    await uow.orders.add_history(order.id, order.delivery_status, note, changed_by_id)

    return await payouts.schedule_order_payouts(uow, order.id)


class PaymentApplicationService:
    """Checkout, webhook and status operations."""

    def __init__(
        self,
        session_factory: async_sessionmaker,
        gateway: IPaymentGateway,
        settings: ChapaSettings,
        payout_service: PayoutApplicationService,
    ) -> None:
        """Initialize payment service.

        Args:
            session_factory: SQLAlchemy async session factory
            gateway: Payment gateway adapter
            settings: Gateway settings (callback urls, test email, verification)
            payout_service: Payout engine used once a payment is confirmed
        """
        self._session_factory = session_factory
        self._gateway = gateway
        self._settings = settings
        self._payouts = payout_service

    async def create_payment_intent(
        self,
        order_id: str,
        user: UserContext,
        customer_info: Optional[CustomerInfo] = None,
    ) -> PaymentIntentDTO:
        """
        Start a hosted checkout for an unpaid order.

        Raises:
            AccessDeniedError: If the caller is not the order's buyer
            BusinessRuleError: If the order is not awaiting payment
            PaymentGatewayError: If the gateway rejects the request
        """
        customer_info = customer_info or CustomerInfo()
        async with create_uow(self._session_factory) as uow:
            order = await get_order_or_404(uow, order_id)
            buyer = await require_buyer(uow, user)
            if order.buyer_id != buyer.id:
                raise AccessDeniedError("Only the buyer can pay for this order")
            if order.payment_status != PaymentStatus.PENDING.value:
                raise BusinessRuleError(f"Order payment already {order.payment_status}")

            account = buyer.user
            first_name, last_name = split_name(customer_info.name or account.name)
            tx_ref = build_tx_ref(order.id)
            payload: Dict[str, Any] = {
                "amount": gateway_amount(order.total_amount),
                "currency": order.currency,
                "email": self._settings.test_email or customer_info.email or account.email,
                "first_name": first_name,
                "last_name": last_name,
                "phone_number": customer_info.phone or account.phone,
                "tx_ref": tx_ref,
                "callback_url": f"{self._settings.backend_url}/api/v1/payments/webhook/chapa",
                "return_url": f"{self._settings.frontend_url}/order/{order.id}",
                "customization": {
                    "title": self._settings.checkout_title,
                    "description": f"Order {order.id[:8]}",
                },
            }
            if not payload["phone_number"]:
                del payload["phone_number"]

            response = await self._gateway.initialize_transaction(payload)
            checkout_url = response["data"]["checkout_url"]

            confirmation = await uow.payments.add_confirmation(
                PaymentConfirmationModel(order_id=order.id, method="CHAPA", is_confirmed=False)
            )
            await uow.payments.add_reference(
                PaymentReferenceModel(order_id=order.id, payment_code=tx_ref)
            )
            await uow.commit()

            logger.info(f"[{uow.execution_id.short()}] Payment intent {tx_ref} for order {order.id}")
            return PaymentIntentDTO(
                checkout_url=checkout_url, tx_ref=tx_ref, payment_id=confirmation.id
            )

    async def handle_webhook(self, raw_body: bytes, signature: Optional[str]) -> WebhookResultDTO:
        """
        Process a gateway callback.

        Raises:
            AuthenticationError: If the signature does not match

        Everything else is reported in the result so the gateway does not
        keep retrying.
        """
        if not self._gateway.verify_webhook_signature(raw_body, signature):
            logger.warning("❌ Rejected payment webhook with invalid signature")
            raise AuthenticationError("Invalid webhook signature")

        try:
            payload = json.loads(raw_body or b"{}")
        except ValueError:
            return WebhookResultDTO(status="error", message="Malformed JSON payload")
        if not isinstance(payload, dict):
            return WebhookResultDTO(status="error", message="Malformed JSON payload")

        # Some gateway events nest the transaction under "data"
        if "tx_ref" not in payload and isinstance(payload.get("data"), dict):
            payload = payload["data"]

        tx_ref = payload.get("tx_ref")
        if not tx_ref:
            return WebhookResultDTO(status="error", message="Missing tx_ref")

        async with create_uow(self._session_factory) as uow:
            reference = await uow.payments.get_reference(tx_ref)
            if reference is None:
                logger.warning(f"Payment reference not found: {tx_ref}")
                return WebhookResultDTO(
                    status="error", message=f"Payment reference not found: {tx_ref}"
                )

            order = await get_order_or_404(uow, reference.order_id)
            if reference.used_at is not None:
                logger.info(f"Webhook for {tx_ref} already processed")
                return WebhookResultDTO(
                    status="ignored",
                    message="Reference already processed",
                    order_id=order.id,
                    payment_status=order.payment_status,
                )

            status = str(payload.get("status", "")).lower()
            amount = payload.get("amount")
            transaction_id = payload.get("reference") or payload.get("transaction_id") or tx_ref

            if self._settings.verify_transactions:
                verified = await self._gateway.verify_transaction(tx_ref)
                data = verified.get("data") or {}
                status = str(data.get("status", "")).lower()
                amount = data.get("amount", amount)

            succeeded = status == "success" and self._amount_matches(order, amount)
            reference.used_at = datetime.utcnow()

            if succeeded and order.payment_status != PaymentStatus.CONFIRMED.value:
                await confirm_order_payment(
                    uow, order, self._payouts, method="CHAPA", transaction_id=transaction_id
                )
                await push_notification(
                    uow,
                    order.buyer.user_id,
                    f"Payment for order #{order.id[:8]} confirmed.",
                    NotificationType.PAYMENT_CONFIRMED,
                )
                await push_notifications(
                    uow,
                    await producer_user_ids(uow, [op.producer_id for op in order.order_producers]),
                    f"Order #{order.id[:8]} has been paid. You can prepare it for shipping.",
                    NotificationType.PAYMENT_CONFIRMED,
                )
            elif not succeeded and order.payment_status == PaymentStatus.PENDING.value:
                order.payment_status = PaymentStatus.FAILED.value
                order.updated_at = datetime.utcnow()
                pending = await uow.payments.get_pending_confirmation(order.id)
                if pending is not None:
                    pending.transaction_id = transaction_id

            await uow.commit()
            logger.info(
                f"[{uow.execution_id.short()}] Webhook {tx_ref}: gateway status '{status}', "
                f"order {order.id} payment {order.payment_status}"
            )
            return WebhookResultDTO(
                status="success",
                message="Webhook processed",
                order_id=order.id,
                payment_status=order.payment_status,
            )

    async def get_payment_status(self, order_id: str, user: UserContext) -> PaymentStatusDTO:
        async with create_uow(self._session_factory) as uow:
            order = await get_order_or_404(uow, order_id)
            await ensure_order_access(uow, order, user)
            confirmation = await uow.payments.get_latest_confirmation(order.id)
            if confirmation is None:
                return PaymentStatusDTO(
                    order_id=order.id,
                    status="NOT_INITIATED",
                    payment_status=order.payment_status,
                    amount=to_decimal(order.total_amount),
                )
            return PaymentStatusDTO(
                order_id=order.id,
                status=order.payment_status,
                payment_status=order.payment_status,
                amount=to_decimal(order.total_amount),
                method=confirmation.method,
                transaction_id=confirmation.transaction_id,
                confirmed_at=confirmation.confirmed_at,
            )

    @staticmethod
    def _amount_matches(order: OrderModel, amount: Any) -> bool:
        """
        The gateway charges whole units, so a paid amount matches when it
        equals the order total rounded the same way. A callback without an
        amount never matches.
        """
        if amount is None or amount == "":
            return False
        try:
            paid = Decimal(str(amount))
        except ArithmeticError:
            return False
        expected = to_decimal(order.total_amount)
        return paid == expected or paid == Decimal(gateway_amount(expected))
