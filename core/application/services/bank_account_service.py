"""Application service for producer payout accounts."""

import logging
from typing import List

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    BankAccountDTO,
    BankAccountListDTO,
    BankAccountRequest,
    UpdateBankAccountRequest,
    UserContext,
)
from core.data.mappers import BankAccountMapper
from core.data.models import ProducerBankAccountModel
from core.data.uow import UnitOfWork, create_uow
from core.domain.exceptions import AccessDeniedError, NotFoundError, ValidationError
from core.domain.services import ACCOUNT_TYPES, ETHIOPIAN_BANKS, mask_account_number

from .access import require_producer

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = (
    "bank_name",
    "account_number",
    "account_name",
    "branch_name",
    "swift_code",
    "account_type",
)


class BankAccountApplicationService:
    """
    Accounts producers are paid into.

    Each producer has at most one primary account. The first account a
    producer adds becomes primary, and deleting the primary promotes the
    newest remaining one. Payout completion reads the primary account for
    the payout method and destination.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    @staticmethod
    def list_banks() -> List[str]:
        return list(ETHIOPIAN_BANKS)

    async def list_my_accounts(self, user: UserContext) -> BankAccountListDTO:
        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)
            accounts = await uow.bank_accounts.list_by_producer(producer.id)
            return BankAccountListDTO(accounts=[BankAccountMapper.to_dto(a) for a in accounts])

    async def list_producer_accounts(self, producer_id: str, admin: UserContext) -> BankAccountListDTO:
        if not admin.is_admin:
            raise AccessDeniedError("Only admins can view producer bank accounts")
        async with create_uow(self._session_factory) as uow:
            if await uow.users.get_producer(producer_id) is None:
                raise NotFoundError("Producer", producer_id)
            accounts = await uow.bank_accounts.list_by_producer(producer_id)
            return BankAccountListDTO(accounts=[BankAccountMapper.to_dto(a) for a in accounts])

    async def add_account(self, user: UserContext, request: BankAccountRequest) -> BankAccountDTO:
        """
        Add a payout account.

        Raises:
            AccessDeniedError: If the caller has no producer profile
            ValidationError: If the account type is unknown
        """
        self._validate_account_type(request.account_type)

        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)
            existing = await uow.bank_accounts.list_by_producer(producer.id)
            make_primary = request.is_primary or not existing
            if make_primary:
                await uow.bank_accounts.clear_primary(producer.id)

            account = await uow.bank_accounts.add(
                ProducerBankAccountModel(
                    producer_id=producer.id,
                    bank_name=request.bank_name.strip(),
                    account_number=request.account_number.strip(),
                    account_name=request.account_name.strip(),
                    branch_name=request.branch_name,
                    swift_code=request.swift_code,
                    account_type=request.account_type,
                    is_primary=make_primary,
                    is_verified=False,
                )
            )
            await uow.audit.record(
                action="ADD_BANK_ACCOUNT",
                entity="ProducerBankAccount",
                entity_id=account.id,
                new_values={
                    "bank_name": account.bank_name,
                    "account_number": mask_account_number(account.account_number),
                    "is_primary": make_primary,
                },
                user_id=user.id,
                execution_id=str(uow.execution_id),
            )

            await uow.commit()
            logger.info(
                f"[{uow.execution_id.short()}] Bank account {account.id} added for producer {producer.id}"
            )
            return BankAccountMapper.to_dto(account)

    async def update_account(
        self, account_id: str, user: UserContext, request: UpdateBankAccountRequest
    ) -> BankAccountDTO:
        if request.account_type is not None:
            self._validate_account_type(request.account_type)

        async with create_uow(self._session_factory) as uow:
            account = await self._get_own_or_404(uow, account_id, user)

            old_values = {
                "bank_name": account.bank_name,
                "account_number": mask_account_number(account.account_number),
            }
            for name in _EDITABLE_FIELDS:
                value = getattr(request, name)
                if value is not None:
                    setattr(account, name, value.strip() if isinstance(value, str) else value)
            # Edited accounts stay unverified until re-checked.
            account.is_verified = False

            await uow.audit.record(
                action="UPDATE_BANK_ACCOUNT",
                entity="ProducerBankAccount",
                entity_id=account.id,
                old_values=old_values,
                new_values={
                    "bank_name": account.bank_name,
                    "account_number": mask_account_number(account.account_number),
                },
                user_id=user.id,
                execution_id=str(uow.execution_id),
            )
            await uow.commit()
            return BankAccountMapper.to_dto(account)

    async def set_primary(self, account_id: str, user: UserContext) -> BankAccountDTO:
        async with create_uow(self._session_factory) as uow:
            account = await self._get_own_or_404(uow, account_id, user)
            await uow.bank_accounts.clear_primary(account.producer_id)
            account.is_primary = True
            await uow.commit()
            logger.info(f"[{uow.execution_id.short()}] Primary bank account set to {account.id}")
            return BankAccountMapper.to_dto(account)

    async def delete_account(self, account_id: str, user: UserContext) -> None:
        """Delete an account; paid batches keep their destination snapshot."""
        async with create_uow(self._session_factory) as uow:
            account = await self._get_own_or_404(uow, account_id, user)
            producer_id = account.producer_id
            was_primary = account.is_primary
            masked = mask_account_number(account.account_number)

            await uow.payouts.detach_bank_account(account.id)
            await uow.bank_accounts.delete(account)

            if was_primary:
                remaining = await uow.bank_accounts.list_by_producer(producer_id)
                if remaining:
                    remaining[0].is_primary = True

            await uow.audit.record(
                action="DELETE_BANK_ACCOUNT",
                entity="ProducerBankAccount",
                entity_id=account_id,
                old_values={"account_number": masked, "is_primary": was_primary},
                user_id=user.id,
                execution_id=str(uow.execution_id),
            )
            await uow.commit()

    @staticmethod
    def _validate_account_type(account_type: str) -> None:
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Account type must be one of: {', '.join(ACCOUNT_TYPES)}"
            )

    @staticmethod
    async def _get_own_or_404(
        uow: UnitOfWork, account_id: str, user: UserContext
    ) -> ProducerBankAccountModel:
        producer = await require_producer(uow, user)
        account = await uow.bank_accounts.get_for_producer(account_id, producer.id)
        if account is None:
            raise NotFoundError("Bank account", account_id)
        return account
