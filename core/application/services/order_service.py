"""Application service for Order operations."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CreateOrderRequest,
    OrderDTO,
    OrderListDTO,
    OrderStatusHistoryDTO,
    PaginationDTO,
    UserContext,
)
from core.data.mappers import OrderMapper
from core.data.models import (
    OrderItemModel,
    OrderModel,
    OrderProducerModel,
    ProductModel,
)
from core.data.models.base import new_id
from core.data.uow import UnitOfWork, create_uow
from core.domain.entities import OrderStatusPolicy
from core.domain.enums import (
    DeliveryStatus,
    NotificationType,
    OrderProducerStatus,
    PaymentStatus,
    UserRole,
)
from core.domain.exceptions import AccessDeniedError, InsufficientStockError, NotFoundError, ValidationError
from core.domain.services import CommissionCalculator, ProducerShare, SplitLine
from core.domain.value_objects import Money, to_decimal
from core.settings.sections.marketplace import MarketplaceSettings

from .access import (
    ensure_order_access,
    get_order_or_404,
    producer_user_ids,
    require_buyer,
    require_producer,
)
from .notification_service import push_notification, push_notifications
from .payment_service import confirm_order_payment
from .payout_service import PayoutApplicationService

logger = logging.getLogger(__name__)


def product_shares(product: ProductModel) -> List[ProducerShare]:
    """Revenue shares of a product; a product without co-producers is 100% its owner's."""
    if not product.shares:
        return [ProducerShare(product.producer_id, Decimal("100"))]
    return [ProducerShare(s.producer_id, to_decimal(s.share_percentage)) for s in product.shares]


class OrderApplicationService:
    """
    Application service for orchestrating order operations.

    Responsibilities:
    - Coordinate domain + infrastructure
    - Handle transactions via UoW
    - Propagate ExecutionID for tracing
    - Keep stock, commission splits and payouts in step with order status
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        settings: MarketplaceSettings,
        payout_service: PayoutApplicationService,
    ) -> None:
        """Initialize order application service.

        Args:
            session_factory: SQLAlchemy async session factory
            settings: Commission rate and currency
            payout_service: Payout engine used for scheduling and release
        """
        self._session_factory = session_factory
        self._settings = settings
        self._payouts = payout_service
        self._calculator = CommissionCalculator(settings.commission_rate)

    async def create_order(self, user: UserContext, request: CreateOrderRequest) -> OrderDTO:
        """Create a new order.

        Everything runs in one transaction: stock is reserved, items are
        priced from the catalog, and one commission split per producer is
        written with status PENDING.

        Args:
            user: Authenticated buyer
            request: CreateOrderRequest DTO

        Returns:
            OrderDTO with created order details
        """
        currency = self._settings.currency
        async with create_uow(self._session_factory) as uow:
            execution_id = uow.execution_id
            buyer = await require_buyer(uow, user)

            products: Dict[str, ProductModel] = {
                p.id: p
                for p in await uow.products.get_many([i.product_id for i in request.items])
            }

            # 1. Validate and reserve stock
            items: List[OrderItemModel] = []
            lines: List[SplitLine] = []
            total = Money.zero(currency)
            for line in request.items:
                product = products.get(line.product_id)
                if product is None:
                    raise NotFoundError("Product", line.product_id)
                if not product.is_active:
                    raise ValidationError(f"Product is not available: {product.name}")
                if product.quantity_available < line.quantity:
                    raise InsufficientStockError(
                        product.name, product.quantity_available, line.quantity
                    )
                product.quantity_available -= line.quantity

                price = Money(to_decimal(product.price), currency)
                subtotal = price.times(line.quantity)
                total = total + subtotal

                items.append(
                    OrderItemModel(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=line.quantity,
                        price=price.amount,
                        subtotal=subtotal.amount,
                    )
                )
                lines.append(SplitLine(product.id, subtotal, product_shares(product)))

            # 2. Persist order
            order = await uow.orders.add(
                OrderModel(
                    id=new_id(),
                    buyer_id=buyer.id,
                    total_amount=total.amount,
                    currency=currency,
                    payment_status=PaymentStatus.PENDING.value,
                    delivery_status=DeliveryStatus.PENDING.value,
                    shipping_address=request.shipping_address,
                    items=items,
                )
            )
            await uow.orders.add_history(
                order.id, DeliveryStatus.PENDING.value, "Order created", user.id
            )

            # 3. Commission splits
            splits = self._calculator.split(lines)
            for split in splits:
                await uow.payouts.add_order_producer(
                    OrderProducerModel(
                        order_id=order.id,
                        producer_id=split.producer_id,
                        product_ids=list(split.product_ids),
                        subtotal=split.subtotal.amount,
                        marketplace_commission=split.commission.amount,
                        producer_amount=split.producer_amount.amount,
                        payout_status=OrderProducerStatus.PENDING.value,
                    )
                )

            # 4. Tell producers
            await push_notifications(
                uow,
                await producer_user_ids(uow, [s.producer_id for s in splits]),
                f"New order #{order.id[:8]} received ({total}).",
                NotificationType.NEW_ORDER,
            )

            # 5. Atomic commit
            await uow.commit()
            logger.info(
                f"[{execution_id.short()}] ✅ Order {order.id} created: {total}, "
                f"{len(items)} item(s), {len(splits)} producer split(s)"
            )
            return OrderMapper.to_dto(await uow.orders.get(order.id))

    async def get_order(self, order_id: str, user: UserContext) -> OrderDTO:
        """Get order by ID.

        Producers only see their own split.
        """
        async with create_uow(self._session_factory) as uow:
            order = await get_order_or_404(uow, order_id)
            role = await ensure_order_access(uow, order, user)
            if role == UserRole.PRODUCER:
                producer = await require_producer(uow, user)
                return OrderMapper.to_dto(order, producer_id=producer.id)
            return OrderMapper.to_dto(order)

    async def list_buyer_orders(self, user: UserContext, page: int = 1, limit: int = 20) -> OrderListDTO:
        async with create_uow(self._session_factory) as uow:
            buyer = await require_buyer(uow, user)
            rows, total = await uow.orders.list_by_buyer(buyer.id, page=page, limit=limit)
            return OrderListDTO(
                orders=[OrderMapper.to_dto(o) for o in rows],
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def list_producer_orders(
        self, user: UserContext, page: int = 1, limit: int = 20
    ) -> OrderListDTO:
        """Orders carrying a split for the calling producer, with that split only."""
        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)
            rows, total = await uow.orders.list_by_producer(producer.id, page=page, limit=limit)
            return OrderListDTO(
                orders=[OrderMapper.to_dto(o, producer_id=producer.id) for o in rows],
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def list_orders(
        self, page: int = 1, limit: int = 20, status: Optional[DeliveryStatus] = None
    ) -> OrderListDTO:
        async with create_uow(self._session_factory) as uow:
            rows, total = await uow.orders.list_all(
                page=page,
                limit=limit,
                delivery_status=DeliveryStatus(status).value if status else None,
            )
            return OrderListDTO(
                orders=[OrderMapper.to_dto(o) for o in rows],
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def update_status(
        self,
        order_id: str,
        status: DeliveryStatus,
        user: UserContext,
        reason: Optional[str] = None,
    ) -> OrderDTO:
        """
        Move an order to a new delivery status.

        The allowed moves depend on the caller's role. Side effects:
        - CANCELLED restores stock and releases unpaid producer splits
        - CANCELLED -> PENDING (admin) re-reserves stock and reopens the splits
        - DELIVERED confirms a still-unpaid order (cash on delivery) and
          schedules its payouts
        """
        target = DeliveryStatus(status)
        async with create_uow(self._session_factory) as uow:
            execution_id = uow.execution_id
            order = await get_order_or_404(uow, order_id)
            role = await ensure_order_access(uow, order, user)
            current = DeliveryStatus(order.delivery_status)

            OrderStatusPolicy.ensure_transition(role, current, target)

            old_values = {
                "delivery_status": order.delivery_status,
                "payment_status": order.payment_status,
            }

            if target == DeliveryStatus.CANCELLED:
                await self._restore_stock(uow, order)
                await self._payouts.release_order(uow, order.id, reason or "Order cancelled")
            elif current == DeliveryStatus.CANCELLED:
                await self._reserve_stock(uow, order)
                await self._reopen_splits(uow, order.id)

            order.delivery_status = target.value
            order.updated_at = datetime.utcnow()
            await uow.orders.add_history(order.id, target.value, reason, user.id)

            if target == DeliveryStatus.DELIVERED and order.payment_status in (
                PaymentStatus.PENDING.value,
                PaymentStatus.FAILED.value,
            ):
                await confirm_order_payment(
                    uow, order, self._payouts, method="CASH", changed_by_id=user.id
                )

            await uow.audit.record(
                action="UPDATE_ORDER_STATUS",
                entity="Order",
                entity_id=order.id,
                old_values=old_values,
                new_values={
                    "delivery_status": order.delivery_status,
                    "payment_status": order.payment_status,
                    "reason": reason,
                },
                user_id=user.id,
                execution_id=str(execution_id),
            )

            buyer = await uow.users.get_buyer(order.buyer_id)
            if buyer is not None:
                await push_notification(
                    uow,
                    buyer.user_id,
                    f"Your order #{order.id[:8]} is now {target.value}.",
                    NotificationType.ORDER_UPDATE,
                )

            await uow.commit()
            logger.info(
                f"[{execution_id.short()}] Order {order.id}: {current.value} -> {target.value} "
                f"by {role.value}"
            )
            return OrderMapper.to_dto(await uow.orders.get(order.id))

    async def cancel_order(
        self, order_id: str, user: UserContext, reason: Optional[str] = None
    ) -> OrderDTO:
        """Buyer cancellation of a PENDING order."""
        async with create_uow(self._session_factory) as uow:
            order = await get_order_or_404(uow, order_id)
            buyer = await require_buyer(uow, user)
            if order.buyer_id != buyer.id:
                raise AccessDeniedError("Only the buyer can cancel this order")

            OrderStatusPolicy.ensure_transition(
                UserRole.BUYER, order.delivery_status, DeliveryStatus.CANCELLED
            )

            note = reason or "Cancelled by buyer"
            await self._restore_stock(uow, order)
            await self._payouts.release_order(uow, order.id, note)

            order.delivery_status = DeliveryStatus.CANCELLED.value
            order.updated_at = datetime.utcnow()
            await uow.orders.add_history(order.id, DeliveryStatus.CANCELLED.value, note, user.id)

            await push_notifications(
                uow,
                await producer_user_ids(uow, [op.producer_id for op in order.order_producers]),
                f"Order #{order.id[:8]} was cancelled by the buyer.",
                NotificationType.ORDER_UPDATE,
            )

            await uow.commit()
            logger.info(f"[{uow.execution_id.short()}] Order {order.id} cancelled by buyer")
            return OrderMapper.to_dto(await uow.orders.get(order.id))

    async def get_status_history(
        self, order_id: str, user: UserContext
    ) -> List[OrderStatusHistoryDTO]:
        async with create_uow(self._session_factory) as uow:
            order = await get_order_or_404(uow, order_id)
            await ensure_order_access(uow, order, user)
            return [OrderMapper.history_to_dto(h) for h in await uow.orders.get_history(order.id)]

    @staticmethod
    async def _restore_stock(uow: UnitOfWork, order: OrderModel) -> None:
        products = {
            p.id: p for p in await uow.products.get_many([i.product_id for i in order.items])
        }
        for item in order.items:
            product = products.get(item.product_id)
            if product is not None:
                product.quantity_available += item.quantity

    @staticmethod
    async def _reserve_stock(uow: UnitOfWork, order: OrderModel) -> None:
        products = {
            p.id: p for p in await uow.products.get_many([i.product_id for i in order.items])
        }
        for item in order.items:
            product = products.get(item.product_id)
            if product is None:
                raise NotFoundError("Product", item.product_id)
            if product.quantity_available < item.quantity:
                raise InsufficientStockError(
                    product.name, product.quantity_available, item.quantity
                )
            product.quantity_available -= item.quantity

    @staticmethod
    async def _reopen_splits(uow: UnitOfWork, order_id: str) -> None:
        for op in await uow.payouts.get_order_producers(order_id):
            if op.payout_status == OrderProducerStatus.CANCELLED.value:
                op.payout_status = OrderProducerStatus.PENDING.value
