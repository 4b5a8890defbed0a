"""Repository implementations."""

from .audit_repository_impl import SqlAlchemyAuditRepository
from .bank_account_repository_impl import SqlAlchemyBankAccountRepository
from .dispute_repository_impl import SqlAlchemyDisputeRepository
from .notification_repository_impl import SqlAlchemyNotificationRepository
from .order_repository_impl import SqlAlchemyOrderRepository
from .payment_repository_impl import SqlAlchemyPaymentRepository
from .payout_repository_impl import SqlAlchemyPayoutRepository
from .product_repository_impl import SqlAlchemyProductRepository
from .review_repository_impl import SqlAlchemyReviewRepository
from .user_repository_impl import SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyAuditRepository",
    "SqlAlchemyBankAccountRepository",
    "SqlAlchemyDisputeRepository",
    "SqlAlchemyNotificationRepository",
    "SqlAlchemyOrderRepository",
    "SqlAlchemyPaymentRepository",
    "SqlAlchemyPayoutRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyReviewRepository",
    "SqlAlchemyUserRepository",
]
