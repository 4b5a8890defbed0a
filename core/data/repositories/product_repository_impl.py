"""SQLAlchemy repository for the product catalog."""

from typing import List, Optional, Tuple

from sqlalchemy import or_, select

from ..models.product_model import ProductModel, ProductProducerModel
from .base import SqlAlchemyRepository


class SqlAlchemyProductRepository(SqlAlchemyRepository):
    """Products and their co-producer shares."""

    async def add(self, product: ProductModel) -> ProductModel:
        return await self._add(product)

    async def get(self, product_id: str) -> Optional[ProductModel]:
        return await self._first(select(ProductModel).where(ProductModel.id == product_id))

    async def get_many(self, product_ids: List[str]) -> List[ProductModel]:
        if not product_ids:
            return []
        return await self._all(select(ProductModel).where(ProductModel.id.in_(product_ids)))

    async def list(
        self,
        page: int = 1,
        limit: int = 20,
        category: Optional[str] = None,
        producer_id: Optional[str] = None,
        active_only: bool = True,
    ) -> Tuple[List[ProductModel], int]:
        """List products, optionally by category or by owning/sharing producer."""
        stmt = select(ProductModel)
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        if category:
            stmt = stmt.where(ProductModel.category == category)
        if producer_id:
            shared = select(ProductProducerModel.product_id).where(
                ProductProducerModel.producer_id == producer_id
            )
            stmt = stmt.where(
                or_(ProductModel.producer_id == producer_id, ProductModel.id.in_(shared))
            )
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id)
        return await self._paginate(stmt, page, limit)
