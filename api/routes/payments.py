"""
Payment API routes.

Hosted checkout through Chapa and the gateway's webhook callback.
"""
import logging

from fastapi import APIRouter, Depends, Request, status

from api.auth import get_current_user, require_buyer
from api.dependencies import get_payment_service
from core.application.dtos import (
    CreatePaymentIntentRequest,
    PaymentIntentDTO,
    PaymentStatusDTO,
    UserContext,
    WebhookResultDTO,
)
from core.application.services import PaymentApplicationService
from core.infrastructure.adapters.chapa import SIGNATURE_HEADER


logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/create-intent",
    response_model=PaymentIntentDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Start hosted checkout",
)
async def create_payment_intent(
    request: CreatePaymentIntentRequest,
    user: UserContext = Depends(require_buyer),
    service: PaymentApplicationService = Depends(get_payment_service),
) -> PaymentIntentDTO:
    """
    Initialize a Chapa transaction for an unpaid order.

    **Returns**: The checkout URL and the transaction reference
    """
    return await service.create_payment_intent(request.order_id, user, request.customer_info)


@router.post("/webhook/chapa", response_model=WebhookResultDTO, summary="Chapa webhook")
async def chapa_webhook(
    request: Request,
    service: PaymentApplicationService = Depends(get_payment_service),
) -> WebhookResultDTO:
    """
    Gateway callback.

    The signature header is checked against the raw body, so the body is
    read before any JSON parsing.
    """
    raw_body = await request.body()
    signature = request.headers.get(SIGNATURE_HEADER)
    logger.info(f"📨 Chapa webhook received ({len(raw_body)} bytes)")
    return await service.handle_webhook(raw_body, signature)


@router.get("/{order_id}/status", response_model=PaymentStatusDTO, summary="Payment status")
async def get_payment_status(
    order_id: str,
    user: UserContext = Depends(get_current_user),
    service: PaymentApplicationService = Depends(get_payment_service),
) -> PaymentStatusDTO:
    return await service.get_payment_status(order_id, user)
