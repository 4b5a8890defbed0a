"""SQLAlchemy repository for product reviews."""

from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_, select

from ..models.product_model import ProductModel, ProductProducerModel
from ..models.review_model import ReviewModel
from .base import SqlAlchemyRepository


class SqlAlchemyReviewRepository(SqlAlchemyRepository):
    """Reviews and the rating aggregates derived from them."""

    async def add(self, review: ReviewModel) -> ReviewModel:
        return await self._add(review)

    async def get(self, review_id: str) -> Optional[ReviewModel]:
        return await self._first(select(ReviewModel).where(ReviewModel.id == review_id))

    async def get_by_buyer_and_product(
        self, buyer_id: str, product_id: str
    ) -> Optional[ReviewModel]:
        return await self._first(
            select(ReviewModel).where(
                ReviewModel.buyer_id == buyer_id, ReviewModel.product_id == product_id
            )
        )

    async def delete(self, review: ReviewModel) -> None:
        await self._session.delete(review)
        await self._session.flush()

    async def list_by_product(
        self, product_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[ReviewModel], int]:
        stmt = (
            select(ReviewModel)
            .where(ReviewModel.product_id == product_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id)
        )
        return await self._paginate(stmt, page, limit)

    async def list_by_buyer(self, buyer_id: str) -> List[ReviewModel]:
        return await self._all(
            select(ReviewModel)
            .where(ReviewModel.buyer_id == buyer_id)
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id)
        )

    async def list_by_producer(
        self, producer_id: str, page: int = 1, limit: int = 20
    ) -> Tuple[List[ReviewModel], int]:
        """Reviews of products the producer owns or holds a share in."""
        stmt = (
            select(ReviewModel)
            .where(ReviewModel.product_id.in_(self._producer_products(producer_id)))
            .order_by(ReviewModel.created_at.desc(), ReviewModel.id)
        )
        return await self._paginate(stmt, page, limit)

    async def rating_counts(
        self, product_id: Optional[str] = None, producer_id: Optional[str] = None
    ) -> Dict[int, int]:
        """{rating: review_count} for one product or for a producer's products."""
        stmt = select(ReviewModel.rating, func.count(ReviewModel.id)).group_by(ReviewModel.rating)
        if product_id is not None:
            stmt = stmt.where(ReviewModel.product_id == product_id)
        if producer_id is not None:
            stmt = stmt.where(ReviewModel.product_id.in_(self._producer_products(producer_id)))
        result = await self._session.execute(stmt)
        return {int(rating): int(count) for rating, count in result.all()}

    @staticmethod
    def _producer_products(producer_id: str):
        shared = select(ProductProducerModel.product_id).where(
            ProductProducerModel.producer_id == producer_id
        )
        return select(ProductModel.id).where(
            or_(ProductModel.producer_id == producer_id, ProductModel.id.in_(shared))
        )
