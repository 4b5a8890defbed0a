"""
Payout API routes.

Admins run the weekly scheduling sweep and move payout batches through
PROCESSING to COMPLETED or FAILED. Producers see their own batches and
earnings.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.auth import get_current_user, require_admin, require_producer
from api.dependencies import get_payout_service
from core.application.dtos import (
    CancelPayoutRequest,
    CompletePayoutRequest,
    EarningsDTO,
    FailPayoutRequest,
    PayoutDTO,
    PayoutListDTO,
    ScheduleResultDTO,
    UserContext,
)
from core.application.services import PayoutApplicationService
from core.domain.enums import PayoutStatus


router = APIRouter()


# ========================================================================
# ADMIN QUERIES
# ========================================================================

@router.get("", response_model=PayoutListDTO, summary="List payouts (admin)")
async def list_payouts(
    status_filter: Optional[PayoutStatus] = Query(None, alias="status"),
    _: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutListDTO:
    return await service.list_payouts(status_filter)


@router.get("/pending", response_model=PayoutListDTO, summary="Open payout batches")
async def get_pending_payouts(
    _: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutListDTO:
    return await service.get_pending_payouts()


@router.get("/due", response_model=PayoutListDTO, summary="Batches due for payment")
async def get_due_payouts(
    _: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutListDTO:
    return await service.get_due_payouts()


@router.post(
    "/schedule-pending",
    response_model=ScheduleResultDTO,
    summary="Schedule unbatched splits",
    description="Attach every PENDING split of a paid, non-cancelled order to its producer's next batch",
)
async def schedule_pending_payouts(
    _: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> ScheduleResultDTO:
    return await service.schedule_pending_payouts()


# ========================================================================
# PRODUCER QUERIES
# ========================================================================

@router.get("/my-payouts", response_model=PayoutListDTO, summary="My payout batches")
async def get_my_payouts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: UserContext = Depends(require_producer),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutListDTO:
    return await service.get_my_payouts(user, page=page, limit=limit)


@router.get("/my-earnings", response_model=EarningsDTO, summary="My earnings")
async def get_my_earnings(
    user: UserContext = Depends(require_producer),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> EarningsDTO:
    return await service.get_my_earnings(user)


@router.get("/producer/{producer_id}", response_model=PayoutListDTO, summary="Producer's payouts (admin)")
async def get_producer_payouts(
    producer_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    _: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutListDTO:
    return await service.get_producer_payouts(producer_id, page=page, limit=limit)


@router.get("/{payout_id}", response_model=PayoutDTO, summary="Get payout")
async def get_payout(
    payout_id: str,
    user: UserContext = Depends(get_current_user),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutDTO:
    return await service.get_payout(payout_id, user)


# ========================================================================
# LIFECYCLE
# ========================================================================

@router.post("/{payout_id}/process", response_model=PayoutDTO, summary="Start paying a batch")
async def process_payout(
    payout_id: str,
    admin: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutDTO:
    return await service.mark_processing(payout_id, admin)


@router.post("/{payout_id}/complete", response_model=PayoutDTO, summary="Mark batch paid")
async def complete_payout(
    payout_id: str,
    request: CompletePayoutRequest,
    admin: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutDTO:
    """
    Record the transfer reference. Every split in the batch becomes
    COMPLETED with the same reference and paid date. The producer's
    primary bank account is used unless `bank_account_id` names another.
    """
    return await service.mark_completed(
        payout_id,
        request.reference,
        request.method,
        admin,
        bank_account_id=request.bank_account_id,
    )


@router.post("/{payout_id}/fail", response_model=PayoutDTO, summary="Mark batch failed")
async def fail_payout(
    payout_id: str,
    request: FailPayoutRequest,
    admin: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutDTO:
    return await service.mark_failed(payout_id, request.reason, admin)


@router.post("/{payout_id}/retry", response_model=PayoutDTO, summary="Reschedule a failed batch")
async def retry_payout(
    payout_id: str,
    admin: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutDTO:
    return await service.retry(payout_id, admin)


@router.post("/{payout_id}/cancel", response_model=PayoutDTO, summary="Cancel batch")
async def cancel_payout(
    payout_id: str,
    request: Optional[CancelPayoutRequest] = None,
    admin: UserContext = Depends(require_admin),
    service: PayoutApplicationService = Depends(get_payout_service),
) -> PayoutDTO:
    return await service.cancel(payout_id, request.reason if request else None, admin)
