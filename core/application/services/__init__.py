"""Application services."""
from .bank_account_service import BankAccountApplicationService
from .dispute_service import DisputeApplicationService
from .notification_service import NotificationApplicationService
from .order_service import OrderApplicationService
from .payment_service import PaymentApplicationService
from .payout_service import PayoutApplicationService
from .product_service import ProductApplicationService
from .review_service import ReviewApplicationService
from .user_service import UserApplicationService

__all__ = [
    "BankAccountApplicationService",
    "DisputeApplicationService",
    "NotificationApplicationService",
    "OrderApplicationService",
    "PaymentApplicationService",
    "PayoutApplicationService",
    "ProductApplicationService",
    "ReviewApplicationService",
    "UserApplicationService",
]
