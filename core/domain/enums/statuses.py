"""
Marketplace status enums.

Values are stored as plain strings in the database.
"""
from enum import Enum


class UserRole(str, Enum):
    """Account roles."""

    BUYER = "BUYER"
    PRODUCER = "PRODUCER"
    ADMIN = "ADMIN"


class DeliveryStatus(str, Enum):
    """Order fulfilment status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Order payment status."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PayoutStatus(str, Enum):
    """Producer payout batch status."""

    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class OrderProducerStatus(str, Enum):
    """Payout status of a single producer's split of an order."""

    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class PayoutMethod(str, Enum):
    """How a payout was disbursed."""

    BANK_TRANSFER = "BANK_TRANSFER"
    MOBILE_MONEY = "MOBILE_MONEY"
    CHAPA = "CHAPA"
    MANUAL = "MANUAL"


class DisputeStatus(str, Enum):
    """Dispute status."""

    OPEN = "OPEN"
    UNDER_REVIEW = "UNDER_REVIEW"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"


class NotificationType(str, Enum):
    """In-app notification categories."""

    GENERAL = "GENERAL"
    ORDER_UPDATE = "ORDER_UPDATE"
    NEW_ORDER = "NEW_ORDER"
    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    PAYOUT = "PAYOUT"
    DISPUTE_RAISED = "DISPUTE_RAISED"
