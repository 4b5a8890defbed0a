"""Domain enums."""

from .statuses import (
    DeliveryStatus,
    DisputeStatus,
    NotificationType,
    OrderProducerStatus,
    PaymentStatus,
    PayoutMethod,
    PayoutStatus,
    UserRole,
)

__all__ = [
    "DeliveryStatus",
    "DisputeStatus",
    "NotificationType",
    "OrderProducerStatus",
    "PaymentStatus",
    "PayoutMethod",
    "PayoutStatus",
    "UserRole",
]
