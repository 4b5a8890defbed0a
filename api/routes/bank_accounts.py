"""Producer bank account endpoints."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from api.auth import require_admin, require_producer
from api.dependencies import get_bank_account_service
from core.application.dtos import (
    BankAccountDTO,
    BankAccountListDTO,
    BankAccountRequest,
    UpdateBankAccountRequest,
    UserContext,
)
from core.application.services import BankAccountApplicationService


router = APIRouter()


@router.get("/banks/list", response_model=List[str], summary="Supported banks and wallets")
async def list_banks() -> List[str]:
    return BankAccountApplicationService.list_banks()


# =============================================================================
# PRODUCER
# =============================================================================

@router.get("/my-accounts", response_model=BankAccountListDTO, summary="Caller's payout accounts")
async def list_my_accounts(
    user: UserContext = Depends(require_producer),
    service: BankAccountApplicationService = Depends(get_bank_account_service),
) -> BankAccountListDTO:
    """Primary account first, then newest first."""
    return await service.list_my_accounts(user)


@router.post(
    "",
    response_model=BankAccountDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Add a payout account",
)
async def add_account(
    request: BankAccountRequest,
    user: UserContext = Depends(require_producer),
    service: BankAccountApplicationService = Depends(get_bank_account_service),
) -> BankAccountDTO:
    """The first account added becomes primary."""
    return await service.add_account(user, request)


@router.put("/{account_id}", response_model=BankAccountDTO, summary="Edit a payout account")
async def update_account(
    account_id: str,
    request: UpdateBankAccountRequest,
    user: UserContext = Depends(require_producer),
    service: BankAccountApplicationService = Depends(get_bank_account_service),
) -> BankAccountDTO:
    return await service.update_account(account_id, user, request)


@router.put(
    "/{account_id}/set-primary",
    response_model=BankAccountDTO,
    summary="Make an account the payout destination",
)
async def set_primary(
    account_id: str,
    user: UserContext = Depends(require_producer),
    service: BankAccountApplicationService = Depends(get_bank_account_service),
) -> BankAccountDTO:
    return await service.set_primary(account_id, user)


@router.delete(
    "/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a payout account",
)
async def delete_account(
    account_id: str,
    user: UserContext = Depends(require_producer),
    service: BankAccountApplicationService = Depends(get_bank_account_service),
) -> Response:
    await service.delete_account(account_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# ADMIN
# =============================================================================

@router.get(
    "/admin/producer/{producer_id}",
    response_model=BankAccountListDTO,
    summary="Payout accounts of a producer",
)
async def list_producer_accounts(
    producer_id: str,
    admin: UserContext = Depends(require_admin),
    service: BankAccountApplicationService = Depends(get_bank_account_service),
) -> BankAccountListDTO:
    return await service.list_producer_accounts(producer_id, admin)
