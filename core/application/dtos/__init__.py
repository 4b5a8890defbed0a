"""Application DTOs."""

from .bank_account_dto import (
    BankAccountDTO,
    BankAccountListDTO,
    BankAccountRequest,
    UpdateBankAccountRequest,
)
from .common_dto import PaginationDTO
from .dispute_dto import (
    CreateDisputeRequest,
    DisputeDTO,
    DisputeListDTO,
    DisputeMessageDTO,
    DisputeMessageRequest,
    UpdateDisputeStatusRequest,
)
from .notification_dto import NotificationDTO, NotificationListDTO
from .order_dto import (
    CancelOrderRequest,
    CreateOrderRequest,
    OrderDTO,
    OrderItemDTO,
    OrderItemRequest,
    OrderListDTO,
    OrderProducerDTO,
    OrderStatusHistoryDTO,
    UpdateOrderStatusRequest,
)
from .payment_dto import (
    CreatePaymentIntentRequest,
    CustomerInfo,
    PaymentIntentDTO,
    PaymentStatusDTO,
    WebhookResultDTO,
)
from .payout_dto import (
    CancelPayoutRequest,
    CompletePayoutRequest,
    EarningsDTO,
    FailPayoutRequest,
    PayoutDTO,
    PayoutItemDTO,
    PayoutListDTO,
    ScheduleResultDTO,
)
from .product_dto import (
    CreateProductRequest,
    ProducerShareDTO,
    ProductDTO,
    ProductListDTO,
    UpdateStockRequest,
)
from .review_dto import (
    CreateReviewRequest,
    RatingStatsDTO,
    ReviewDTO,
    ReviewListDTO,
    UpdateReviewRequest,
)
from .user_dto import LoginRequest, RegisterRequest, TokenDTO, UserContext, UserDTO

__all__ = [
    "BankAccountDTO",
    "BankAccountListDTO",
    "BankAccountRequest",
    "CancelOrderRequest",
    "CancelPayoutRequest",
    "CompletePayoutRequest",
    "CreateDisputeRequest",
    "CreateOrderRequest",
    "CreatePaymentIntentRequest",
    "CreateProductRequest",
    "CreateReviewRequest",
    "CustomerInfo",
    "DisputeDTO",
    "DisputeListDTO",
    "DisputeMessageDTO",
    "DisputeMessageRequest",
    "EarningsDTO",
    "FailPayoutRequest",
    "LoginRequest",
    "NotificationDTO",
    "NotificationListDTO",
    "OrderDTO",
    "OrderItemDTO",
    "OrderItemRequest",
    "OrderListDTO",
    "OrderProducerDTO",
    "OrderStatusHistoryDTO",
    "PaginationDTO",
    "PaymentIntentDTO",
    "PaymentStatusDTO",
    "PayoutDTO",
    "PayoutItemDTO",
    "PayoutListDTO",
    "ProducerShareDTO",
    "ProductDTO",
    "ProductListDTO",
    "RatingStatsDTO",
    "RegisterRequest",
    "ReviewDTO",
    "ReviewListDTO",
    "ScheduleResultDTO",
    "TokenDTO",
    "UpdateBankAccountRequest",
    "UpdateDisputeStatusRequest",
    "UpdateOrderStatusRequest",
    "UpdateReviewRequest",
    "UserContext",
    "UserDTO",
]
