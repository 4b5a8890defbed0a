"""Database models."""

from .audit_model import AuditLogModel
from .bank_account_model import ProducerBankAccountModel
from .base import Base
from .dispute_model import DisputeMessageModel, DisputeModel
from .notification_model import NotificationModel
from .order_model import (
    OrderItemModel,
    OrderModel,
    OrderStatusHistoryModel,
    PaymentConfirmationModel,
    PaymentReferenceModel,
)
from .payout_model import OrderProducerModel, PayoutOrderItemModel, ProducerPayoutModel
from .product_model import ProductModel, ProductProducerModel
from .review_model import ReviewModel
from .user_model import BuyerModel, ProducerModel, UserModel

__all__ = [
    "AuditLogModel",
    "Base",
    "BuyerModel",
    "DisputeMessageModel",
    "DisputeModel",
    "NotificationModel",
    "OrderItemModel",
    "OrderModel",
    "OrderProducerModel",
    "OrderStatusHistoryModel",
    "PaymentConfirmationModel",
    "PaymentReferenceModel",
    "PayoutOrderItemModel",
    "ProducerModel",
    "ProducerBankAccountModel",
    "ProducerPayoutModel",
    "ProductModel",
    "ProductProducerModel",
    "ReviewModel",
    "UserModel",
]
