"""Integration tests for producer bank accounts and payout destinations."""

import pytest

from core.application.dtos import BankAccountRequest, UpdateBankAccountRequest
from core.application.services import BankAccountApplicationService
from core.data.uow import create_uow
from core.domain.enums import PayoutMethod, PayoutStatus
from core.domain.exceptions import AccessDeniedError, NotFoundError, ValidationError


@pytest.fixture
def bank_service(session_factory):
    return BankAccountApplicationService(session_factory)


def _cbe(number="1000123456789", **extra):
    return BankAccountRequest(
        bank_name="Commercial Bank of Ethiopia (CBE)",
        account_number=number,
        account_name="Sidama Honey PLC",
        branch_name="Hawassa",
        **extra,
    )


def _telebirr(**extra):
    return BankAccountRequest(
        bank_name="Telebirr",
        account_number="0911225678",
        account_name="Almaz Bekele",
        account_type="MOBILE_WALLET",
        **extra,
    )


async def _processing_batch(place_order, confirm_payment, payout_service, actors):
    order = await place_order(honey=1)
    await confirm_payment(order.id)
    batch = (await payout_service.get_producer_payouts(actors.producer_a_id)).payouts[0]
    return await payout_service.mark_processing(batch.id, actors.admin)


# ========================================================================
# ACCOUNTS
# ========================================================================

@pytest.mark.asyncio
async def test_first_account_becomes_primary(bank_service, actors, session_factory):
    first = await bank_service.add_account(actors.producer_a, _cbe())
    second = await bank_service.add_account(actors.producer_a, _telebirr())

    assert first.is_primary is True
    assert first.is_verified is False
    assert second.is_primary is False

    accounts = (await bank_service.list_my_accounts(actors.producer_a)).accounts
    assert [a.id for a in accounts] == [first.id, second.id]

    async with create_uow(session_factory) as uow:
        audit = await uow.audit.list_for_entity("ProducerBankAccount", first.id)
        assert [row.action for row in audit] == ["ADD_BANK_ACCOUNT"]
        assert audit[0].new_values["account_number"] == "***6789"


@pytest.mark.asyncio
async def test_set_primary_moves_the_flag(bank_service, actors):
    first = await bank_service.add_account(actors.producer_a, _cbe())
    second = await bank_service.add_account(actors.producer_a, _telebirr())

    promoted = await bank_service.set_primary(second.id, actors.producer_a)

    assert promoted.is_primary is True
    accounts = (await bank_service.list_my_accounts(actors.producer_a)).accounts
    assert [(a.id, a.is_primary) for a in accounts] == [(second.id, True), (first.id, False)]


@pytest.mark.asyncio
async def test_adding_primary_account_replaces_the_old_one(bank_service, actors):
    first = await bank_service.add_account(actors.producer_a, _cbe())
    second = await bank_service.add_account(actors.producer_a, _telebirr(is_primary=True))

    accounts = {a.id: a for a in (await bank_service.list_my_accounts(actors.producer_a)).accounts}
    assert accounts[second.id].is_primary is True
    assert accounts[first.id].is_primary is False


@pytest.mark.asyncio
async def test_deleting_primary_promotes_remaining_account(bank_service, actors):
    first = await bank_service.add_account(actors.producer_a, _cbe())
    second = await bank_service.add_account(actors.producer_a, _telebirr())

    await bank_service.delete_account(first.id, actors.producer_a)

    accounts = (await bank_service.list_my_accounts(actors.producer_a)).accounts
    assert [(a.id, a.is_primary) for a in accounts] == [(second.id, True)]


@pytest.mark.asyncio
async def test_update_account_resets_verification(bank_service, actors, session_factory):
    account = await bank_service.add_account(actors.producer_a, _cbe())
    async with create_uow(session_factory) as uow:
        row = await uow.bank_accounts.get(account.id)
        row.is_verified = True
        await uow.commit()

    updated = await bank_service.update_account(
        account.id, actors.producer_a, UpdateBankAccountRequest(account_number="1000999988887777")
    )

    assert updated.account_number == "1000999988887777"
    assert updated.branch_name == "Hawassa"
    assert updated.is_verified is False


@pytest.mark.asyncio
async def test_accounts_are_private_to_their_producer(bank_service, actors):
    account = await bank_service.add_account(actors.producer_a, _cbe())

    with pytest.raises(NotFoundError):
        await bank_service.set_primary(account.id, actors.producer_b)
    with pytest.raises(NotFoundError):
        await bank_service.delete_account(account.id, actors.producer_b)
    with pytest.raises(AccessDeniedError):
        await bank_service.add_account(actors.buyer, _cbe())
    assert (await bank_service.list_my_accounts(actors.producer_b)).accounts == []


@pytest.mark.asyncio
async def test_admin_lists_producer_accounts(bank_service, actors):
    account = await bank_service.add_account(actors.producer_a, _cbe())

    listed = await bank_service.list_producer_accounts(actors.producer_a_id, actors.admin)

    assert [a.id for a in listed.accounts] == [account.id]
    with pytest.raises(AccessDeniedError):
        await bank_service.list_producer_accounts(actors.producer_a_id, actors.producer_a)
    with pytest.raises(NotFoundError):
        await bank_service.list_producer_accounts("no-such-producer", actors.admin)


@pytest.mark.asyncio
async def test_unknown_account_type_is_rejected(bank_service, actors):
    with pytest.raises(ValidationError):
        await bank_service.add_account(actors.producer_a, _cbe(account_type="CRYPTO"))


# ========================================================================
# PAYOUT DESTINATION
# ========================================================================

@pytest.mark.asyncio
async def test_completion_pays_into_primary_account(
    bank_service, place_order, confirm_payment, payout_service, actors
):
    wallet = await bank_service.add_account(actors.producer_a, _telebirr())
    batch = await _processing_batch(place_order, confirm_payment, payout_service, actors)

    completed = await payout_service.mark_completed(batch.id, "TB-0001", admin=actors.admin)

    assert completed.status == PayoutStatus.COMPLETED.value
    assert completed.payout_method == PayoutMethod.MOBILE_MONEY.value
    assert completed.bank_account_id == wallet.id
    assert completed.payout_destination == "Telebirr ***5678 (Almaz Bekele)"


@pytest.mark.asyncio
async def test_completion_into_named_account_with_explicit_method(
    bank_service, place_order, confirm_payment, payout_service, actors
):
    await bank_service.add_account(actors.producer_a, _telebirr())
    bank = await bank_service.add_account(actors.producer_a, _cbe())
    batch = await _processing_batch(place_order, confirm_payment, payout_service, actors)

    completed = await payout_service.mark_completed(
        batch.id, "CBE-0001", PayoutMethod.MANUAL, actors.admin, bank_account_id=bank.id
    )

    assert completed.payout_method == PayoutMethod.MANUAL.value
    assert completed.bank_account_id == bank.id
    assert completed.payout_destination.startswith("Commercial Bank of Ethiopia (CBE) ***6789")


@pytest.mark.asyncio
async def test_completion_rejects_another_producers_account(
    bank_service, place_order, confirm_payment, payout_service, actors
):
    foreign = await bank_service.add_account(actors.producer_b, _cbe())
    batch = await _processing_batch(place_order, confirm_payment, payout_service, actors)

    with pytest.raises(NotFoundError):
        await payout_service.mark_completed(
            batch.id, "CBE-0002", admin=actors.admin, bank_account_id=foreign.id
        )
    assert (await payout_service.get_payout(batch.id)).status == PayoutStatus.PROCESSING.value


@pytest.mark.asyncio
async def test_deleted_account_keeps_payout_snapshot(
    bank_service, place_order, confirm_payment, payout_service, actors
):
    account = await bank_service.add_account(actors.producer_a, _cbe())
    batch = await _processing_batch(place_order, confirm_payment, payout_service, actors)
    await payout_service.mark_completed(batch.id, "CBE-0003", admin=actors.admin)

    await bank_service.delete_account(account.id, actors.producer_a)

    paid = await payout_service.get_payout(batch.id)
    assert paid.bank_account_id is None
    assert paid.payout_destination == "Commercial Bank of Ethiopia (CBE) ***6789 (Sidama Honey PLC)"
