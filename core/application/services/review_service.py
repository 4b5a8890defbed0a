"""Application service for product reviews."""

import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from core.application.dtos import (
    CreateReviewRequest,
    PaginationDTO,
    RatingStatsDTO,
    ReviewDTO,
    ReviewListDTO,
    UpdateReviewRequest,
    UserContext,
)
from core.data.mappers import ReviewMapper
from core.data.models import ProductModel, ReviewModel
from core.data.uow import UnitOfWork, create_uow
from core.domain.enums import NotificationType
from core.domain.exceptions import AccessDeniedError, BusinessRuleError, NotFoundError
from core.domain.services import RatingSummary, validate_rating

from .access import producer_user_ids, require_buyer, require_producer
from .notification_service import push_notifications

logger = logging.getLogger(__name__)


class ReviewApplicationService:
    """
    Product reviews.

    A buyer may review a product once, and only after paying for an order
    that contains it. Every write recomputes the product's cached
    average_rating and review_count.
    """

    def __init__(self, session_factory: async_sessionmaker) -> None:
        self._session_factory = session_factory

    async def create_review(self, user: UserContext, request: CreateReviewRequest) -> ReviewDTO:
        """
        Review a purchased product.

        Raises:
            ValidationError: If the rating is outside 1..5
            NotFoundError: If the product does not exist
            AccessDeniedError: If the buyer never paid for the product
            BusinessRuleError: If the buyer already reviewed it
        """
        rating = validate_rating(request.rating)

        async with create_uow(self._session_factory) as uow:
            buyer = await require_buyer(uow, user)
            product = await self._get_product_or_404(uow, request.product_id)

            if not await uow.orders.has_paid_purchase(buyer.id, product.id):
                raise AccessDeniedError("You can only review products you have purchased")
            if await uow.reviews.get_by_buyer_and_product(buyer.id, product.id) is not None:
                raise BusinessRuleError("You have already reviewed this product")

            review = await uow.reviews.add(
                ReviewModel(
                    product_id=product.id,
                    buyer_id=buyer.id,
                    rating=rating,
                    comment=request.comment,
                )
            )
            await self._refresh_product_rating(uow, product)

            owners = await producer_user_ids(uow, [product.producer_id])
            await push_notifications(
                uow,
                owners,
                f"New {rating}-star review on {product.name}.",
                NotificationType.GENERAL,
            )

            await uow.commit()
            logger.info(f"[{uow.execution_id.short()}] Review {review.id} on product {product.id}")
            return ReviewMapper.to_dto(await uow.reviews.get(review.id))

    async def update_review(
        self, review_id: str, user: UserContext, request: UpdateReviewRequest
    ) -> ReviewDTO:
        """Only the author may edit a review."""
        async with create_uow(self._session_factory) as uow:
            review = await self._get_or_404(uow, review_id)
            buyer = await require_buyer(uow, user)
            if review.buyer_id != buyer.id:
                raise AccessDeniedError("You can only edit your own reviews")

            if request.rating is not None:
                review.rating = validate_rating(request.rating)
            if request.comment is not None:
                review.comment = request.comment

            product = await self._get_product_or_404(uow, review.product_id)
            await self._refresh_product_rating(uow, product)

            await uow.commit()
            return ReviewMapper.to_dto(await uow.reviews.get(review.id))

    async def delete_review(self, review_id: str, user: UserContext) -> None:
        """The author or an admin may delete a review."""
        async with create_uow(self._session_factory) as uow:
            review = await self._get_or_404(uow, review_id)
            if not user.is_admin:
                buyer = await require_buyer(uow, user)
                if review.buyer_id != buyer.id:
                    raise AccessDeniedError("You can only delete your own reviews")

            product = await self._get_product_or_404(uow, review.product_id)
            await uow.reviews.delete(review)
            await self._refresh_product_rating(uow, product)

            await uow.commit()
            logger.info(f"[{uow.execution_id.short()}] Review {review_id} deleted by {user.id}")

    async def list_product_reviews(
        self, product_id: str, page: int = 1, limit: int = 20
    ) -> ReviewListDTO:
        async with create_uow(self._session_factory) as uow:
            await self._get_product_or_404(uow, product_id)
            rows, total = await uow.reviews.list_by_product(product_id, page=page, limit=limit)
            summary = RatingSummary.from_counts(await uow.reviews.rating_counts(product_id=product_id))
            return ReviewListDTO(
                reviews=[ReviewMapper.to_dto(r) for r in rows],
                stats=ReviewMapper.stats_to_dto(summary),
                pagination=PaginationDTO.build(page, limit, total),
            )

    async def get_product_review_stats(self, product_id: str) -> RatingStatsDTO:
        async with create_uow(self._session_factory) as uow:
            await self._get_product_or_404(uow, product_id)
            summary = RatingSummary.from_counts(await uow.reviews.rating_counts(product_id=product_id))
            return ReviewMapper.stats_to_dto(summary)

    async def list_my_reviews(self, user: UserContext) -> ReviewListDTO:
        async with create_uow(self._session_factory) as uow:
            buyer = await require_buyer(uow, user)
            rows = await uow.reviews.list_by_buyer(buyer.id)
            return ReviewListDTO(reviews=[ReviewMapper.to_dto(r) for r in rows])

    async def list_producer_reviews(
        self, user: UserContext, page: int = 1, limit: int = 20
    ) -> ReviewListDTO:
        """Reviews across every product the producer owns or shares, with overall stats."""
        async with create_uow(self._session_factory) as uow:
            producer = await require_producer(uow, user)
            rows, total = await uow.reviews.list_by_producer(producer.id, page=page, limit=limit)
            summary = RatingSummary.from_counts(
                await uow.reviews.rating_counts(producer_id=producer.id)
            )
            return ReviewListDTO(
                reviews=[ReviewMapper.to_dto(r) for r in rows],
                stats=ReviewMapper.stats_to_dto(summary),
                pagination=PaginationDTO.build(page, limit, total),
            )

    @staticmethod
    async def _refresh_product_rating(uow: UnitOfWork, product: ProductModel) -> None:
        summary = RatingSummary.from_counts(await uow.reviews.rating_counts(product_id=product.id))
        product.average_rating = summary.average
        product.review_count = summary.total

    @staticmethod
    async def _get_product_or_404(uow: UnitOfWork, product_id: str) -> ProductModel:
        product = await uow.products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    @staticmethod
    async def _get_or_404(uow: UnitOfWork, review_id: str) -> ReviewModel:
        review = await uow.reviews.get(review_id)
        if review is None:
            raise NotFoundError("Review", review_id)
        return review
