"""Static mappers for database models → application DTOs."""

from typing import List, Optional

from core.application.dtos import (
    BankAccountDTO,
    DisputeDTO,
    DisputeMessageDTO,
    NotificationDTO,
    OrderDTO,
    OrderItemDTO,
    OrderProducerDTO,
    OrderStatusHistoryDTO,
    PayoutDTO,
    PayoutItemDTO,
    ProducerShareDTO,
    ProductDTO,
    RatingStatsDTO,
    ReviewDTO,
    UserDTO,
)
from core.domain.services import RatingSummary, to_rating
from core.domain.value_objects import to_decimal

from .models import (
    BuyerModel,
    DisputeMessageModel,
    DisputeModel,
    NotificationModel,
    OrderItemModel,
    OrderModel,
    OrderProducerModel,
    OrderStatusHistoryModel,
    PayoutOrderItemModel,
    ProducerBankAccountModel,
    ProducerModel,
    ProducerPayoutModel,
    ProductModel,
    ReviewModel,
    UserModel,
)


class UserMapper:
    """Static mapper for UserModel (+ profiles) → UserDTO."""

    @staticmethod
    def to_dto(
        model: UserModel,
        buyer: Optional[BuyerModel] = None,
        producer: Optional[ProducerModel] = None,
    ) -> UserDTO:
        return UserDTO(
            id=model.id,
            email=model.email,
            name=model.name,
            role=model.role,
            phone=model.phone,
            buyer_id=buyer.id if buyer else None,
            producer_id=producer.id if producer else None,
            business_name=producer.business_name if producer else None,
            location=producer.location if producer else None,
            created_at=model.created_at,
        )


class ProductMapper:
    """Static mapper for ProductModel → ProductDTO."""

    @staticmethod
    def to_dto(model: ProductModel) -> ProductDTO:
        producer_name = None
        if model.producer is not None:
            producer_name = model.producer.business_name or model.producer.user.name
        return ProductDTO(
            id=model.id,
            producer_id=model.producer_id,
            producer_name=producer_name,
            name=model.name,
            description=model.description,
            category=model.category,
            price=to_decimal(model.price),
            quantity_available=model.quantity_available,
            is_active=model.is_active,
            average_rating=to_rating(model.average_rating),
            review_count=model.review_count or 0,
            shares=[
                ProducerShareDTO(
                    producer_id=share.producer_id,
                    share_percentage=to_decimal(share.share_percentage),
                    role=share.role,
                )
                for share in model.shares
            ],
            created_at=model.created_at,
        )


class OrderMapper:
    """Static mapper for Order aggregate models → DTOs."""

    @staticmethod
    def item_to_dto(model: OrderItemModel) -> OrderItemDTO:
        return OrderItemDTO(
            id=model.id,
            product_id=model.product_id,
            product_name=model.product_name,
            quantity=model.quantity,
            price=to_decimal(model.price),
            subtotal=to_decimal(model.subtotal),
        )

    @staticmethod
    def split_to_dto(model: OrderProducerModel) -> OrderProducerDTO:
        return OrderProducerDTO(
            id=model.id,
            order_id=model.order_id,
            producer_id=model.producer_id,
            product_ids=list(model.product_ids or []),
            subtotal=to_decimal(model.subtotal),
            marketplace_commission=to_decimal(model.marketplace_commission),
            producer_amount=to_decimal(model.producer_amount),
            payout_status=model.payout_status,
            paid_at=model.paid_at,
            payout_reference=model.payout_reference,
        )

    @staticmethod
    def to_dto(model: OrderModel, producer_id: Optional[str] = None) -> OrderDTO:
        """Convert ORM model to DTO.

        Args:
            model: OrderModel with items and splits loaded
            producer_id: When set, only that producer's split is included

        Returns:
            OrderDTO
        """
        splits = [
            OrderMapper.split_to_dto(op)
            for op in model.order_producers
            if producer_id is None or op.producer_id == producer_id
        ]
        return OrderDTO(
            id=model.id,
            buyer_id=model.buyer_id,
            total_amount=to_decimal(model.total_amount),
            currency=model.currency,
            payment_status=model.payment_status,
            delivery_status=model.delivery_status,
            shipping_address=model.shipping_address,
            order_date=model.order_date,
            updated_at=model.updated_at,
            items=[OrderMapper.item_to_dto(item) for item in model.items],
            producer_splits=splits,
        )

    @staticmethod
    def history_to_dto(model: OrderStatusHistoryModel) -> OrderStatusHistoryDTO:
        return OrderStatusHistoryDTO(
            id=model.id,
            order_id=model.order_id,
            status=model.status,
            notes=model.notes,
            changed_by_id=model.changed_by_id,
            changed_at=model.changed_at,
        )


class PayoutMapper:
    """Static mapper for ProducerPayoutModel → PayoutDTO."""

    @staticmethod
    def item_to_dto(model: PayoutOrderItemModel) -> PayoutItemDTO:
        return PayoutItemDTO(
            id=model.id,
            order_producer_id=model.order_producer_id,
            order_id=model.order_producer.order_id if model.order_producer else None,
            amount=to_decimal(model.amount),
        )

    @staticmethod
    def to_dto(model: ProducerPayoutModel) -> PayoutDTO:
        producer_name = None
        if model.producer is not None:
            producer_name = model.producer.business_name or model.producer.user.name
        return PayoutDTO(
            id=model.id,
            producer_id=model.producer_id,
            producer_name=producer_name,
            amount=to_decimal(model.amount),
            commission=to_decimal(model.commission),
            net_amount=to_decimal(model.net_amount),
            currency=model.currency,
            status=model.status,
            payout_method=model.payout_method,
            payout_reference=model.payout_reference,
            bank_account_id=model.bank_account_id,
            payout_destination=model.payout_destination,
            scheduled_for=model.scheduled_for,
            paid_at=model.paid_at,
            notes=model.notes,
            created_at=model.created_at,
            items=[PayoutMapper.item_to_dto(item) for item in model.items],
        )

    @staticmethod
    def to_dtos(models: List[ProducerPayoutModel]) -> List[PayoutDTO]:
        return [PayoutMapper.to_dto(model) for model in models]


class DisputeMapper:
    """Static mapper for DisputeModel → DisputeDTO."""

    @staticmethod
    def message_to_dto(model: DisputeMessageModel) -> DisputeMessageDTO:
        return DisputeMessageDTO(
            id=model.id,
            sender_id=model.sender_id,
            sender_name=model.sender.name if model.sender else None,
            content=model.content,
            created_at=model.created_at,
        )

    @staticmethod
    def to_dto(model: DisputeModel) -> DisputeDTO:
        return DisputeDTO(
            id=model.id,
            order_id=model.order_id,
            raised_by_id=model.raised_by_id,
            raised_by_name=model.raised_by.name if model.raised_by else None,
            reason=model.reason,
            description=model.description,
            status=model.status,
            resolution=model.resolution,
            refund_amount=(
                to_decimal(model.refund_amount) if model.refund_amount is not None else None
            ),
            resolved_by_id=model.resolved_by_id,
            resolved_at=model.resolved_at,
            created_at=model.created_at,
            messages=[DisputeMapper.message_to_dto(m) for m in model.messages],
        )


class NotificationMapper:
    """Static mapper for NotificationModel → NotificationDTO."""

    @staticmethod
    def to_dto(model: NotificationModel) -> NotificationDTO:
        return NotificationDTO(
            id=model.id,
            user_id=model.user_id,
            message=model.message,
            type=model.type,
            is_read=model.is_read,
            created_at=model.created_at,
        )


class ReviewMapper:
    """Static mapper for ReviewModel → ReviewDTO."""

    @staticmethod
    def to_dto(model: ReviewModel) -> ReviewDTO:
        buyer_name = None
        if model.buyer is not None and model.buyer.user is not None:
            buyer_name = model.buyer.user.name
        return ReviewDTO(
            id=model.id,
            product_id=model.product_id,
            product_name=model.product.name if model.product else None,
            buyer_id=model.buyer_id,
            buyer_name=buyer_name,
            rating=model.rating,
            comment=model.comment,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def stats_to_dto(summary: RatingSummary) -> RatingStatsDTO:
        return RatingStatsDTO(
            total=summary.total,
            average=summary.average,
            distribution=dict(summary.distribution),
        )


class BankAccountMapper:
    """Static mapper for ProducerBankAccountModel → BankAccountDTO."""

    @staticmethod
    def to_dto(model: ProducerBankAccountModel) -> BankAccountDTO:
        return BankAccountDTO(
            id=model.id,
            producer_id=model.producer_id,
            bank_name=model.bank_name,
            account_number=model.account_number,
            account_name=model.account_name,
            branch_name=model.branch_name,
            swift_code=model.swift_code,
            account_type=model.account_type,
            is_primary=model.is_primary,
            is_verified=model.is_verified,
            created_at=model.created_at,
        )
