"""Dispute API routes."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.auth import get_current_user, require_admin
from api.dependencies import get_dispute_service
from core.application.dtos import (
    CreateDisputeRequest,
    DisputeDTO,
    DisputeListDTO,
    DisputeMessageRequest,
    UpdateDisputeStatusRequest,
    UserContext,
)
from core.application.services import DisputeApplicationService
from core.domain.enums import DisputeStatus


router = APIRouter()


@router.post(
    "",
    response_model=DisputeDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Raise dispute",
)
async def create_dispute(
    request: CreateDisputeRequest,
    user: UserContext = Depends(get_current_user),
    service: DisputeApplicationService = Depends(get_dispute_service),
) -> DisputeDTO:
    """One dispute per order, raised by its buyer or an involved producer."""
    return await service.create_dispute(request.order_id, user, request.reason, request.description)


@router.get("", response_model=DisputeListDTO, summary="List disputes")
async def list_disputes(
    status_filter: Optional[DisputeStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: UserContext = Depends(get_current_user),
    service: DisputeApplicationService = Depends(get_dispute_service),
) -> DisputeListDTO:
    return await service.list_disputes(user, status=status_filter, page=page, limit=limit)


@router.get("/{dispute_id}", response_model=DisputeDTO, summary="Get dispute")
async def get_dispute(
    dispute_id: str,
    user: UserContext = Depends(get_current_user),
    service: DisputeApplicationService = Depends(get_dispute_service),
) -> DisputeDTO:
    return await service.get_dispute(dispute_id, user)


@router.post("/{dispute_id}/messages", response_model=DisputeDTO, summary="Post message")
async def add_dispute_message(
    dispute_id: str,
    request: DisputeMessageRequest,
    user: UserContext = Depends(get_current_user),
    service: DisputeApplicationService = Depends(get_dispute_service),
) -> DisputeDTO:
    return await service.add_message(dispute_id, user, request.content)


@router.put("/{dispute_id}/status", response_model=DisputeDTO, summary="Update dispute status (admin)")
async def update_dispute_status(
    dispute_id: str,
    request: UpdateDisputeStatusRequest,
    admin: UserContext = Depends(require_admin),
    service: DisputeApplicationService = Depends(get_dispute_service),
) -> DisputeDTO:
    """Resolving with a refund releases the order's unpaid producer splits."""
    return await service.update_status(dispute_id, admin, request)
