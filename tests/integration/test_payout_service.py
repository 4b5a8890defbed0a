"""Integration tests for payout scheduling and the batch lifecycle."""

from decimal import Decimal

import pytest

from core.application.services import NotificationApplicationService
from core.data.uow import create_uow
from core.domain.enums import DeliveryStatus, PayoutMethod, PayoutStatus
from core.domain.exceptions import BusinessRuleError, InvalidTransitionError, NotFoundError


async def _split_statuses(session_factory, order_id):
    async with create_uow(session_factory) as uow:
        return {op.producer_id: op.payout_status for op in await uow.payouts.get_order_producers(order_id)}


async def _batch_for(payout_service, producer_id):
    payouts = await payout_service.get_producer_payouts(producer_id)
    assert payouts.payouts, f"no payout batch for {producer_id}"
    return payouts.payouts[0]


def _assert_balanced(batch):
    assert batch.amount == batch.commission + batch.net_amount
    assert batch.net_amount == sum((i.amount for i in batch.items), Decimal("0.00"))


# ========================================================================
# SCHEDULING
# ========================================================================

@pytest.mark.asyncio
async def test_confirmed_payment_schedules_one_batch_per_producer(
    place_order, confirm_payment, payout_service, actors, session_factory
):
    order = await place_order(honey=2, coffee=1)

    payout_ids = await confirm_payment(order.id)

    assert len(payout_ids) == 2
    batch = await _batch_for(payout_service, actors.producer_a_id)
    assert batch.status == PayoutStatus.SCHEDULED.value
    assert (batch.amount, batch.commission, batch.net_amount) == (
        Decimal("350.00"), Decimal("35.00"), Decimal("315.00")
    )
    assert batch.scheduled_for.weekday() == 4
    assert batch.scheduled_for.hour == 12
    assert [i.order_id for i in batch.items] == [order.id]
    _assert_balanced(batch)

    assert set((await _split_statuses(session_factory, order.id)).values()) == {"SCHEDULED"}


@pytest.mark.asyncio
async def test_orders_in_same_week_share_a_batch(
    place_order, confirm_payment, payout_service, actors
):
    first = await place_order(honey=2, coffee=1)
    second = await place_order(honey=1)
    await confirm_payment(first.id, "tx-1")
    await confirm_payment(second.id, "tx-2")

    a_payouts = await payout_service.get_producer_payouts(actors.producer_a_id)
    assert len(a_payouts.payouts) == 1
    batch = a_payouts.payouts[0]
    assert batch.net_amount == Decimal("405.00")
    assert len(batch.items) == 2
    _assert_balanced(batch)

    b_batch = await _batch_for(payout_service, actors.producer_b_id)
    assert b_batch.net_amount == Decimal("90.00")


@pytest.mark.asyncio
async def test_sweep_ignores_unpaid_orders(place_order, payout_service):
    await place_order(honey=1)

    result = await payout_service.schedule_pending_payouts()

    assert result.scheduled_count == 0
    assert result.payout_ids == []


# ========================================================================
# LIFECYCLE
# ========================================================================

@pytest.mark.asyncio
async def test_complete_payout_marks_splits_paid(
    place_order, confirm_payment, payout_service, actors, session_factory
):
    order = await place_order(honey=2, coffee=1)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)

    processing = await payout_service.mark_processing(batch.id, actors.admin)
    assert processing.status == PayoutStatus.PROCESSING.value

    completed = await payout_service.mark_completed(
        batch.id, "CBE-2025-0001", PayoutMethod.BANK_TRANSFER, actors.admin
    )

    assert completed.status == PayoutStatus.COMPLETED.value
    assert completed.payout_reference == "CBE-2025-0001"
    assert completed.payout_method == PayoutMethod.BANK_TRANSFER.value
    assert completed.paid_at is not None
    assert completed.bank_account_id is None
    assert completed.payout_destination is None

    async with create_uow(session_factory) as uow:
        op = await uow.payouts.get_order_producer(order.id, actors.producer_a_id)
        assert op.payout_status == "COMPLETED"
        assert op.payout_reference == "CBE-2025-0001"
        assert op.paid_at is not None
        audit = await uow.audit.list_for_entity("ProducerPayout", batch.id)
        assert [row.action for row in audit] == ["PAYOUT_PROCESSING", "PAYOUT_COMPLETED"]

    earnings = await payout_service.get_my_earnings(actors.producer_a)
    assert earnings.completed == Decimal("315.00")
    assert earnings.pending == Decimal("0.00")
    assert earnings.total == Decimal("315.00")

    notifications = await NotificationApplicationService(session_factory).list_notifications(
        actors.producer_a
    )
    assert any("CBE-2025-0001" in n.message for n in notifications.notifications)


@pytest.mark.asyncio
async def test_complete_requires_processing(
    place_order, confirm_payment, payout_service, actors
):
    order = await place_order(honey=1)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)

    with pytest.raises(InvalidTransitionError):
        await payout_service.mark_completed(batch.id, "REF-1", admin=actors.admin)


@pytest.mark.asyncio
async def test_failed_payout_alerts_and_can_be_retried(
    place_order, confirm_payment, payout_service, actors, alerts, session_factory
):
    order = await place_order(honey=1)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)
    await payout_service.mark_processing(batch.id, actors.admin)

    failed = await payout_service.mark_failed(batch.id, "Account closed", actors.admin)

    assert failed.status == PayoutStatus.FAILED.value
    assert failed.notes == "Account closed"
    assert (await _split_statuses(session_factory, order.id))[actors.producer_a_id] == "FAILED"
    assert [n["severity"] for n in alerts.get_notifications()] == [80]
    assert "Account closed" in alerts.get_notifications()[0]["message"]

    retried = await payout_service.retry(batch.id, actors.admin)

    assert retried.status == PayoutStatus.SCHEDULED.value
    assert retried.scheduled_for.weekday() == 4
    assert (await _split_statuses(session_factory, order.id))[actors.producer_a_id] == "SCHEDULED"


@pytest.mark.asyncio
async def test_cancelled_batch_is_rescheduled_by_sweep(
    place_order, confirm_payment, payout_service, actors, session_factory
):
    order = await place_order(honey=2)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)

    cancelled = await payout_service.cancel(batch.id, "Wrong bank details", actors.admin)

    assert cancelled.status == PayoutStatus.CANCELLED.value
    assert cancelled.net_amount == Decimal("0.00")
    assert cancelled.items == []
    assert (await _split_statuses(session_factory, order.id))[actors.producer_a_id] == "PENDING"

    result = await payout_service.schedule_pending_payouts()

    assert result.scheduled_count == 1
    assert len(result.payout_ids) == 1
    assert result.payout_ids[0] != batch.id
    rescheduled = await payout_service.get_payout(result.payout_ids[0])
    assert rescheduled.net_amount == Decimal("180.00")
    _assert_balanced(rescheduled)


@pytest.mark.asyncio
async def test_completed_batch_cannot_be_cancelled(
    place_order, confirm_payment, payout_service, actors
):
    order = await place_order(honey=1)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)
    await payout_service.mark_processing(batch.id, actors.admin)
    await payout_service.mark_completed(batch.id, "REF-1", admin=actors.admin)

    with pytest.raises(InvalidTransitionError):
        await payout_service.cancel(batch.id, admin=actors.admin)


# ========================================================================
# RELEASE
# ========================================================================

@pytest.mark.asyncio
async def test_cancelling_paid_order_releases_scheduled_splits(
    place_order, confirm_payment, order_service, payout_service, actors, session_factory
):
    order = await place_order(honey=1, coffee=1)
    await confirm_payment(order.id)

    await order_service.update_status(order.id, DeliveryStatus.CANCELLED, actors.admin, "Out of season")

    assert set((await _split_statuses(session_factory, order.id)).values()) == {"CANCELLED"}
    for producer_id in (actors.producer_a_id, actors.producer_b_id):
        batch = await _batch_for(payout_service, producer_id)
        assert batch.status == PayoutStatus.CANCELLED.value
        assert batch.net_amount == Decimal("0.00")
        assert batch.items == []


@pytest.mark.asyncio
async def test_release_keeps_other_orders_in_batch(
    place_order, confirm_payment, order_service, payout_service, actors
):
    keep = await place_order(honey=1)
    drop = await place_order(honey=2)
    await confirm_payment(keep.id, "tx-keep")
    await confirm_payment(drop.id, "tx-drop")

    await order_service.update_status(drop.id, DeliveryStatus.CANCELLED, actors.producer_a)

    batch = await _batch_for(payout_service, actors.producer_a_id)
    assert batch.status == PayoutStatus.SCHEDULED.value
    assert batch.net_amount == Decimal("90.00")
    assert [i.order_id for i in batch.items] == [keep.id]
    _assert_balanced(batch)


@pytest.mark.asyncio
async def test_cannot_cancel_order_with_payout_in_progress(
    place_order, confirm_payment, order_service, payout_service, actors, products, session_factory
):
    order = await place_order(honey=1)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)
    await payout_service.mark_processing(batch.id, actors.admin)

    with pytest.raises(BusinessRuleError):
        await order_service.update_status(order.id, DeliveryStatus.CANCELLED, actors.admin)

    async with create_uow(session_factory) as uow:
        assert (await uow.products.get(products["honey"])).quantity_available == 9
        assert (await uow.orders.get(order.id)).delivery_status == DeliveryStatus.PENDING.value


# ========================================================================
# QUERIES
# ========================================================================

@pytest.mark.asyncio
async def test_earnings_before_payout(place_order, confirm_payment, payout_service, actors):
    order = await place_order(honey=2, coffee=1)
    await confirm_payment(order.id)

    earnings = await payout_service.get_producer_earnings(actors.producer_b_id)

    assert earnings.pending == Decimal("90.00")
    assert earnings.completed == Decimal("0.00")
    assert earnings.total == Decimal("90.00")
    assert earnings.currency == "ETB"


@pytest.mark.asyncio
async def test_producer_cannot_see_other_producers_batch(
    place_order, confirm_payment, payout_service, actors
):
    order = await place_order(honey=1)
    await confirm_payment(order.id)
    batch = await _batch_for(payout_service, actors.producer_a_id)

    assert (await payout_service.get_payout(batch.id, actors.producer_a)).id == batch.id
    with pytest.raises(NotFoundError):
        await payout_service.get_payout(batch.id, actors.producer_b)


@pytest.mark.asyncio
async def test_pending_and_due_payouts(place_order, confirm_payment, payout_service, actors):
    order = await place_order(honey=1)
    await confirm_payment(order.id)

    pending = await payout_service.get_pending_payouts()
    assert len(pending.payouts) == 1

    batch = pending.payouts[0]
    assert (await payout_service.get_due_payouts()).payouts == []
    due = await payout_service.get_due_payouts(now=batch.scheduled_for)
    assert [p.id for p in due.payouts] == [batch.id]
