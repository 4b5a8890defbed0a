"""Integration tests for disputes and refunds."""

from decimal import Decimal

import pytest

from core.application.dtos import UpdateDisputeStatusRequest
from core.application.services import NotificationApplicationService
from core.data.uow import create_uow
from core.domain.enums import DeliveryStatus, DisputeStatus, PaymentStatus, PayoutStatus
from core.domain.exceptions import (
    AccessDeniedError,
    BusinessRuleError,
    InvalidTransitionError,
    ValidationError,
)


@pytest.fixture
def confirmed_order(place_order, confirm_payment, order_service, actors):
    """A paid order (honey x1, coffee x1) moved to CONFIRMED by producer A."""

    async def _make():
        order = await place_order(honey=1, coffee=1)
        await confirm_payment(order.id)
        return await order_service.update_status(order.id, DeliveryStatus.CONFIRMED, actors.producer_a)

    return _make


@pytest.mark.asyncio
async def test_pending_order_cannot_be_disputed(place_order, dispute_service, actors):
    order = await place_order(honey=1)

    with pytest.raises(ValidationError):
        await dispute_service.create_dispute(order.id, actors.buyer, "Never arrived")


@pytest.mark.asyncio
async def test_buyer_raises_dispute_and_parties_are_notified(
    confirmed_order, dispute_service, actors, session_factory
):
    order = await confirmed_order()

    dispute = await dispute_service.create_dispute(
        order.id, actors.buyer, "Damaged jar", "The honey jar arrived cracked"
    )

    assert dispute.status == DisputeStatus.OPEN.value
    assert dispute.raised_by_id == actors.buyer.id

    notifications = NotificationApplicationService(session_factory)
    for user in (actors.admin, actors.producer_a, actors.producer_b):
        assert await notifications.unread_count(user) >= 1
    listed = await notifications.list_notifications(actors.admin)
    assert any("Damaged jar" in n.message for n in listed.notifications)

    with pytest.raises(BusinessRuleError):
        await dispute_service.create_dispute(order.id, actors.buyer, "Again")


@pytest.mark.asyncio
async def test_only_parties_can_view_or_message(confirmed_order, dispute_service, actors):
    order = await confirmed_order()
    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Late delivery")

    with pytest.raises(AccessDeniedError):
        await dispute_service.get_dispute(dispute.id, actors.other_buyer)
    with pytest.raises(AccessDeniedError):
        await dispute_service.create_dispute(order.id, actors.other_buyer, "Not mine")

    updated = await dispute_service.add_message(dispute.id, actors.producer_b, "Shipped on time")
    assert [m.content for m in updated.messages] == ["Shipped on time"]

    assert (await dispute_service.list_disputes(actors.other_buyer)).disputes == []
    assert len((await dispute_service.list_disputes(actors.producer_b)).disputes) == 1
    assert len((await dispute_service.list_disputes(actors.admin)).disputes) == 1


@pytest.mark.asyncio
async def test_only_admin_updates_status(confirmed_order, dispute_service, actors):
    order = await confirmed_order()
    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Late delivery")

    with pytest.raises(AccessDeniedError):
        await dispute_service.update_status(
            dispute.id, actors.buyer, UpdateDisputeStatusRequest(status=DisputeStatus.CLOSED)
        )


@pytest.mark.asyncio
@pytest.mark.parametrize("refund", [Decimal("0"), Decimal("350.01")])
async def test_refund_must_be_within_order_total(confirmed_order, dispute_service, actors, refund):
    order = await confirmed_order()
    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Wrong item")

    with pytest.raises(ValidationError):
        await dispute_service.update_status(
            dispute.id,
            actors.admin,
            UpdateDisputeStatusRequest(status=DisputeStatus.RESOLVED, refund_amount=refund),
        )


@pytest.mark.asyncio
async def test_refund_resolution_releases_producer_splits(
    confirmed_order, dispute_service, payout_service, actors, session_factory
):
    order = await confirmed_order()
    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Wrong item")

    await dispute_service.update_status(
        dispute.id, actors.admin, UpdateDisputeStatusRequest(status=DisputeStatus.UNDER_REVIEW)
    )
    resolved = await dispute_service.update_status(
        dispute.id,
        actors.admin,
        UpdateDisputeStatusRequest(
            status=DisputeStatus.RESOLVED,
            resolution="Full refund",
            refund_amount=Decimal("350.00"),
        ),
    )

    assert resolved.status == DisputeStatus.RESOLVED.value
    assert resolved.refund_amount == Decimal("350.00")
    assert resolved.resolved_by_id == actors.admin.id
    assert resolved.resolved_at is not None
    assert any("UNDER_REVIEW to RESOLVED" in m.content for m in resolved.messages)

    async with create_uow(session_factory) as uow:
        order_row = await uow.orders.get(order.id)
        assert order_row.payment_status == PaymentStatus.REFUNDED.value
        splits = await uow.payouts.get_order_producers(order.id)
        assert {op.payout_status for op in splits} == {"CANCELLED"}

    for producer_id in (actors.producer_a_id, actors.producer_b_id):
        batch = (await payout_service.get_producer_payouts(producer_id)).payouts[0]
        assert batch.status == PayoutStatus.CANCELLED.value


@pytest.mark.asyncio
async def test_refund_after_payout_keeps_paid_splits(
    confirmed_order, dispute_service, payout_service, order_service, actors, session_factory
):
    order = await confirmed_order()
    await order_service.update_status(order.id, DeliveryStatus.SHIPPED, actors.producer_a)
    await order_service.update_status(order.id, DeliveryStatus.DELIVERED, actors.producer_a)

    paid_batch = (await payout_service.get_producer_payouts(actors.producer_a_id)).payouts[0]
    await payout_service.mark_processing(paid_batch.id, actors.admin)
    await payout_service.mark_completed(paid_batch.id, "CBE-778", admin=actors.admin)

    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Coffee was stale")
    resolved = await dispute_service.update_status(
        dispute.id,
        actors.admin,
        UpdateDisputeStatusRequest(status=DisputeStatus.RESOLVED, refund_amount=Decimal("50.00")),
    )

    assert resolved.status == DisputeStatus.RESOLVED.value
    assert resolved.refund_amount == Decimal("50.00")

    async with create_uow(session_factory) as uow:
        order_row = await uow.orders.get(order.id)
        assert order_row.payment_status == PaymentStatus.REFUNDED.value
        splits = {op.producer_id: op.payout_status for op in await uow.payouts.get_order_producers(order.id)}
    assert splits == {actors.producer_a_id: "COMPLETED", actors.producer_b_id: "CANCELLED"}

    paid = await payout_service.get_payout(paid_batch.id)
    assert paid.status == PayoutStatus.COMPLETED.value
    assert paid.net_amount == Decimal("225.00")

    open_batch = (await payout_service.get_producer_payouts(actors.producer_b_id)).payouts[0]
    assert open_batch.status == PayoutStatus.CANCELLED.value
    assert open_batch.net_amount == Decimal("0.00")


@pytest.mark.asyncio
async def test_settled_dispute_cannot_be_resolved_again(confirmed_order, dispute_service, actors):
    order = await confirmed_order()
    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Wrong item")

    await dispute_service.update_status(
        dispute.id,
        actors.admin,
        UpdateDisputeStatusRequest(status=DisputeStatus.RESOLVED, refund_amount=Decimal("100.00")),
    )

    with pytest.raises(InvalidTransitionError):
        await dispute_service.update_status(
            dispute.id,
            actors.admin,
            UpdateDisputeStatusRequest(status=DisputeStatus.RESOLVED, refund_amount=Decimal("100.00")),
        )

    closed = await dispute_service.update_status(
        dispute.id, actors.admin, UpdateDisputeStatusRequest(status=DisputeStatus.CLOSED)
    )
    assert closed.status == DisputeStatus.CLOSED.value
    assert closed.refund_amount == Decimal("100.00")

    with pytest.raises(InvalidTransitionError):
        await dispute_service.update_status(
            dispute.id, actors.admin, UpdateDisputeStatusRequest(status=DisputeStatus.OPEN)
        )


@pytest.mark.asyncio
async def test_refund_only_accepted_when_resolving(confirmed_order, dispute_service, actors):
    order = await confirmed_order()
    dispute = await dispute_service.create_dispute(order.id, actors.buyer, "Wrong item")

    with pytest.raises(ValidationError):
        await dispute_service.update_status(
            dispute.id,
            actors.admin,
            UpdateDisputeStatusRequest(status=DisputeStatus.REJECTED, refund_amount=Decimal("10.00")),
        )
