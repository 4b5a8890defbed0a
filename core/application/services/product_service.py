"""Application service for the product catalog."""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CreateProductRequest,
    PaginationDTO,
    ProducerShareDTO,
    ProductDTO,
    ProductListDTO,
    UserContext,
)
from core.data.mappers import ProductMapper
from core.data.models import ProductModel, ProductProducerModel
from core.data.uow import create_uow
from core.domain.exceptions import AccessDeniedError, NotFoundError
from core.domain.services import ProducerShare, validate_shares

from .access import require_producer

logger = logging.getLogger(__name__)


class ProductApplicationService:
    """Product creation, lookup and stock management."""

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def create_product(self, user: UserContext, request: CreateProductRequest) -> ProductDTO:
        """
        Create a product owned by the calling producer.

        Without explicit shares the creator owns 100% of the revenue.
        Co-producer shares must reference existing producers and total 100.
        """
        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)

            shares = request.shares or [
                ProducerShareDTO(producer_id=producer.id, share_percentage=Decimal("100"))
            ]
            validate_shares(
                [ProducerShare(s.producer_id, s.share_percentage) for s in shares]
            )

            known = {p.id for p in await uow.users.get_producers([s.producer_id for s in shares])}
            for share in shares:
                if share.producer_id not in known:
                    raise NotFoundError("Producer", share.producer_id)

            product = ProductModel(
                producer_id=producer.id,
                name=request.name,
                description=request.description,
                category=request.category,
                price=request.price,
                quantity_available=request.quantity_available,
                is_active=True,
            )
            product.shares = [
                ProductProducerModel(
                    producer_id=share.producer_id,
                    share_percentage=share.share_percentage,
                    role=share.role,
                    position=position,
                )
                for position, share in enumerate(shares)
            ]
            await uow.products.add(product)
            await uow.commit()

            logger.info(f"✅ Product created: {product.id} by producer {producer.id}")
            return ProductMapper.to_dto(await uow.products.get(product.id))

    async def get_product(self, product_id: str) -> ProductDTO:
        async with create_uow(self._session_factory) as uow:
            product = await uow.products.get(product_id)
            if product is None:
                raise NotFoundError("Product", product_id)
            return ProductMapper.to_dto(product)

    async def list_products(
        self,
        page: int = 1,
        limit: int = 20,
        category: Optional[str] = None,
        producer_id: Optional[str] = None,
    ) -> ProductListDTO:
        async with create_uow(self._session_factory) as uow:
            rows, total = await uow.products.list(
                page=page, limit=limit, category=category, producer_id=producer_id
            )
            return ProductListDTO(
                products=[ProductMapper.to_dto(p) for p in rows],
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def update_stock(self, product_id: str, user: UserContext, quantity: int) -> ProductDTO:
        """Set stock; only the owning producer or an admin may do this."""
        async with create_uow(self._session_factory) as uow:
            product = await uow.products.get(product_id)
            if product is None:
                raise NotFoundError("Product", product_id)

            if not user.is_admin:
                producer = await require_producer(uow, user)
                if product.producer_id != producer.id:
                    raise AccessDeniedError("Only the owning producer can update stock")

            old = product.quantity_available
            product.quantity_available = quantity
            await uow.audit.record(
                action="UPDATE_STOCK",
                entity="Product",
                entity_id=product.id,
                old_values={"quantity_available": old},
                new_values={"quantity_available": quantity},
                user_id=user.id,
                execution_id=str(uow.execution_id),
            )
            await uow.commit()
            return ProductMapper.to_dto(await uow.products.get(product_id))
