"""
FastAPI Dependencies.

Provides dependency injection for application services.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import Depends
from sqlalchemy.ext.asyncio import async_sessionmaker

# Load environment variables ONCE before any settings objects are created
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=_PROJECT_ROOT / ".env")

from core.application.interfaces import INotificationService, IPaymentGateway
from core.application.services import (
    BankAccountApplicationService,
    DisputeApplicationService,
    NotificationApplicationService,
    OrderApplicationService,
    PaymentApplicationService,
    PayoutApplicationService,
    ProductApplicationService,
    ReviewApplicationService,
    UserApplicationService,
)
from core.infrastructure.adapters.notifications.mock_notification_service import MockNotificationService
from core.infrastructure.database import config as database
from core.settings import AppSettings, get_app_settings

logger = logging.getLogger(__name__)


# =============================================================================
# SINGLETON INSTANCES
# =============================================================================

_session_factory: Optional[async_sessionmaker] = None
_notification_service: Optional[INotificationService] = None
_payment_gateway: Optional[IPaymentGateway] = None


# =============================================================================
# INFRASTRUCTURE
# =============================================================================

def get_settings() -> AppSettings:
    return get_app_settings()


def get_session_factory() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = database.get_session_factory(get_app_settings().database)
        logger.info("Created database session factory")
    return _session_factory


def get_notification_service() -> INotificationService:
    global _notification_service

    if _notification_service is None:
        settings = get_app_settings()

        if settings.telegram.enabled:
            from core.infrastructure.adapters.notifications.telegram_notification_service import TelegramNotificationService
            _notification_service = TelegramNotificationService(settings.telegram)
            logger.info("Created TelegramNotificationService instance")
        else:
            _notification_service = MockNotificationService()
            logger.info("Using MockNotificationService (notifications disabled)")

    return _notification_service


def get_payment_gateway() -> IPaymentGateway:
    global _payment_gateway
    if _payment_gateway is None:
        from core.infrastructure.adapters.chapa import ChapaClient
        _payment_gateway = ChapaClient(get_app_settings().chapa)
    return _payment_gateway


# =============================================================================
# APPLICATION SERVICES
# =============================================================================

def get_payout_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: AppSettings = Depends(get_settings),
    notification_service: INotificationService = Depends(get_notification_service),
) -> PayoutApplicationService:
    return PayoutApplicationService(session_factory, settings.marketplace, notification_service)


def get_order_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: AppSettings = Depends(get_settings),
    payout_service: PayoutApplicationService = Depends(get_payout_service),
) -> OrderApplicationService:
    return OrderApplicationService(session_factory, settings.marketplace, payout_service)


def get_payment_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: AppSettings = Depends(get_settings),
    gateway: IPaymentGateway = Depends(get_payment_gateway),
    payout_service: PayoutApplicationService = Depends(get_payout_service),
) -> PaymentApplicationService:
    return PaymentApplicationService(session_factory, gateway, settings.chapa, payout_service)


def get_dispute_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    payout_service: PayoutApplicationService = Depends(get_payout_service),
) -> DisputeApplicationService:
    return DisputeApplicationService(session_factory, payout_service)


def get_product_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> ProductApplicationService:
    return ProductApplicationService(session_factory)


def get_review_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> ReviewApplicationService:
    return ReviewApplicationService(session_factory)


def get_bank_account_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> BankAccountApplicationService:
    return BankAccountApplicationService(session_factory)


def get_user_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
    settings: AppSettings = Depends(get_settings),
) -> UserApplicationService:
    return UserApplicationService(session_factory, settings.auth)


def get_notification_app_service(
    session_factory: async_sessionmaker = Depends(get_session_factory),
) -> NotificationApplicationService:
    return NotificationApplicationService(session_factory)


# =============================================================================
# RESET (for testing)
# =============================================================================

def reset_dependencies():
    global _session_factory, _notification_service, _payment_gateway

    _session_factory = None
    _notification_service = None
    _payment_gateway = None

    logger.info("Dependencies reset")
