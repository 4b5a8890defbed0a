"""Integration tests for Chapa checkout and webhook handling."""

import json
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from core.application.dtos import CustomerInfo
from core.application.services import PaymentApplicationService
from core.data.uow import create_uow
from core.domain.enums import PaymentStatus
from core.domain.exceptions import AccessDeniedError, AuthenticationError, BusinessRuleError
from core.infrastructure.adapters.chapa import ChapaClient, compute_signature
from core.settings.sections.chapa import ChapaSettings


WEBHOOK_SECRET = "whsec-test"
CHECKOUT_URL = "https://checkout.chapa.co/checkout/payment/abc123"


@pytest.fixture
def chapa_settings():
    return ChapaSettings(
        CHAPA_SECRET_KEY="CHASECK_TEST-key",
        CHAPA_WEBHOOK_SECRET=WEBHOOK_SECRET,
        BACKEND_URL="https://api.mesob.test",
        FRONTEND_URL="https://mesob.test",
        CHAPA_TEST_EMAIL=None,
    )


@pytest.fixture
def gateway(chapa_settings):
    client = ChapaClient(chapa_settings, retries=0)
    client.initialize_transaction = AsyncMock(
        return_value={"status": "success", "data": {"checkout_url": CHECKOUT_URL}}
    )
    client.verify_transaction = AsyncMock()
    return client


@pytest.fixture
def payment_service(session_factory, gateway, chapa_settings, payout_service):
    return PaymentApplicationService(session_factory, gateway, chapa_settings, payout_service)


def _signed(payload):
    body = json.dumps(payload).encode("utf-8")
    return body, compute_signature(WEBHOOK_SECRET, body)


@pytest.mark.asyncio
async def test_create_payment_intent(place_order, payment_service, gateway, actors):
    order = await place_order(honey=2, coffee=1)

    intent = await payment_service.create_payment_intent(
        order.id, actors.buyer, CustomerInfo(name="Abebe Kebede Tesfaye", phone="0911000000")
    )

    assert intent.checkout_url == CHECKOUT_URL
    assert intent.tx_ref.startswith(f"ord-{order.id[:8]}-")
    assert len(intent.tx_ref) <= 50

    payload = gateway.initialize_transaction.await_args.args[0]
    assert payload["amount"] == "450"
    assert payload["currency"] == "ETB"
    assert payload["first_name"] == "Abebe"
    assert payload["last_name"] == "Kebede Tesfaye"
    assert payload["email"] == "buyer@mesob.test"
    assert payload["callback_url"] == "https://api.mesob.test/api/v1/payments/webhook/chapa"
    assert payload["return_url"] == f"https://mesob.test/order/{order.id}"

    status = await payment_service.get_payment_status(order.id, actors.buyer)
    assert status.status == PaymentStatus.PENDING.value
    assert status.method == "CHAPA"


@pytest.mark.asyncio
async def test_only_buyer_can_pay(place_order, payment_service, actors):
    order = await place_order(honey=1)

    with pytest.raises(AccessDeniedError):
        await payment_service.create_payment_intent(order.id, actors.other_buyer)
    with pytest.raises(AccessDeniedError):
        await payment_service.create_payment_intent(order.id, actors.producer_a)


@pytest.mark.asyncio
async def test_status_before_checkout(place_order, payment_service, actors):
    order = await place_order(honey=1)

    status = await payment_service.get_payment_status(order.id, actors.buyer)

    assert status.status == "NOT_INITIATED"
    assert status.amount == Decimal("100.00")


@pytest.mark.asyncio
async def test_successful_webhook_confirms_and_schedules(
    place_order, payment_service, payout_service, actors, session_factory
):
    order = await place_order(honey=2, coffee=1)
    intent = await payment_service.create_payment_intent(order.id, actors.buyer)
    body, signature = _signed(
        {"tx_ref": intent.tx_ref, "status": "success", "amount": "450.00", "reference": "APx1"}
    )

    result = await payment_service.handle_webhook(body, signature)

    assert result.status == "success"
    assert result.order_id == order.id
    assert result.payment_status == PaymentStatus.CONFIRMED.value

    status = await payment_service.get_payment_status(order.id, actors.buyer)
    assert status.status == PaymentStatus.CONFIRMED.value
    assert status.transaction_id == "APx1"
    assert status.confirmed_at is not None

    payouts = await payout_service.list_payouts()
    assert sum(p.net_amount for p in payouts.payouts) == Decimal("405.00")

    replay = await payment_service.handle_webhook(body, signature)
    assert replay.status == "ignored"
    assert len((await payout_service.list_payouts()).payouts) == 2


@pytest.mark.asyncio
async def test_paid_order_cannot_start_new_checkout(place_order, payment_service, actors):
    order = await place_order(honey=1)
    intent = await payment_service.create_payment_intent(order.id, actors.buyer)
    body, signature = _signed({"tx_ref": intent.tx_ref, "status": "success", "amount": "100"})
    await payment_service.handle_webhook(body, signature)

    with pytest.raises(BusinessRuleError):
        await payment_service.create_payment_intent(order.id, actors.buyer)


@pytest.mark.asyncio
async def test_invalid_signature_is_rejected(place_order, payment_service, actors):
    order = await place_order(honey=1)
    intent = await payment_service.create_payment_intent(order.id, actors.buyer)
    body, _ = _signed({"tx_ref": intent.tx_ref, "status": "success"})

    with pytest.raises(AuthenticationError):
        await payment_service.handle_webhook(body, "deadbeef")


@pytest.mark.asyncio
async def test_amount_mismatch_fails_payment(
    place_order, payment_service, payout_service, actors, session_factory
):
    order = await place_order(honey=1)
    intent = await payment_service.create_payment_intent(order.id, actors.buyer)
    body, signature = _signed({"tx_ref": intent.tx_ref, "status": "success", "amount": "1.00"})

    result = await payment_service.handle_webhook(body, signature)

    assert result.payment_status == PaymentStatus.FAILED.value
    assert (await payout_service.list_payouts()).payouts == []
    async with create_uow(session_factory) as uow:
        splits = await uow.payouts.get_order_producers(order.id)
        assert {op.payout_status for op in splits} == {"PENDING"}


@pytest.mark.asyncio
async def test_success_without_amount_does_not_confirm(
    place_order, payment_service, payout_service, actors, session_factory
):
    order = await place_order(honey=1)
    intent = await payment_service.create_payment_intent(order.id, actors.buyer)
    body, signature = _signed({"tx_ref": intent.tx_ref, "status": "success"})

    result = await payment_service.handle_webhook(body, signature)

    assert result.status == "success"
    assert result.payment_status == PaymentStatus.FAILED.value
    assert (await payout_service.list_payouts()).payouts == []
    async with create_uow(session_factory) as uow:
        order_row = await uow.orders.get(order.id)
        assert order_row.payment_status == PaymentStatus.FAILED.value


@pytest.mark.asyncio
async def test_unknown_reference_and_bad_payloads(payment_service):
    body, signature = _signed({"tx_ref": "ord-unknown-1", "status": "success"})
    assert (await payment_service.handle_webhook(body, signature)).status == "error"

    body, signature = _signed({"status": "success"})
    assert (await payment_service.handle_webhook(body, signature)).status == "error"

    raw = b"not json"
    assert (await payment_service.handle_webhook(raw, compute_signature(WEBHOOK_SECRET, raw))).status == "error"


@pytest.mark.asyncio
async def test_nested_payload_and_verification(
    place_order, payment_service, gateway, chapa_settings, actors
):
    chapa_settings.verify_transactions = True
    order = await place_order(honey=1)
    intent = await payment_service.create_payment_intent(order.id, actors.buyer)
    gateway.verify_transaction.return_value = {"data": {"status": "success", "amount": "100"}}
    body, signature = _signed({"event": "charge.success", "data": {"tx_ref": intent.tx_ref}})

    result = await payment_service.handle_webhook(body, signature)

    gateway.verify_transaction.assert_awaited_once_with(intent.tx_ref)
    assert result.payment_status == PaymentStatus.CONFIRMED.value
