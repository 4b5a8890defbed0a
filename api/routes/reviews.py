"""Product review endpoints."""
from fastapi import APIRouter, Depends, Query, Response, status

from api.auth import get_current_user, require_buyer, require_producer
from api.dependencies import get_review_service
from core.application.dtos import (
    CreateReviewRequest,
    RatingStatsDTO,
    ReviewDTO,
    ReviewListDTO,
    UpdateReviewRequest,
    UserContext,
)
from core.application.services import ReviewApplicationService


router = APIRouter()


# =============================================================================
# BUYER
# =============================================================================

@router.post(
    "",
    response_model=ReviewDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Review a purchased product",
)
async def create_review(
    request: CreateReviewRequest,
    user: UserContext = Depends(require_buyer),
    service: ReviewApplicationService = Depends(get_review_service),
) -> ReviewDTO:
    """One review per product, only after a payment-confirmed order containing it."""
    return await service.create_review(user, request)


@router.get("/my-reviews", response_model=ReviewListDTO, summary="Reviews written by the caller")
async def list_my_reviews(
    user: UserContext = Depends(require_buyer),
    service: ReviewApplicationService = Depends(get_review_service),
) -> ReviewListDTO:
    return await service.list_my_reviews(user)


@router.put("/{review_id}", response_model=ReviewDTO, summary="Edit own review")
async def update_review(
    review_id: str,
    request: UpdateReviewRequest,
    user: UserContext = Depends(require_buyer),
    service: ReviewApplicationService = Depends(get_review_service),
) -> ReviewDTO:
    return await service.update_review(review_id, user, request)


@router.delete(
    "/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a review",
)
async def delete_review(
    review_id: str,
    user: UserContext = Depends(get_current_user),
    service: ReviewApplicationService = Depends(get_review_service),
) -> Response:
    """The author or an admin may delete a review."""
    await service.delete_review(review_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# PUBLIC / PRODUCER
# =============================================================================

@router.get(
    "/product/{product_id}",
    response_model=ReviewListDTO,
    summary="Reviews of a product with rating stats",
)
async def list_product_reviews(
    product_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    service: ReviewApplicationService = Depends(get_review_service),
) -> ReviewListDTO:
    return await service.list_product_reviews(product_id, page=page, limit=limit)


@router.get(
    "/product/{product_id}/stats",
    response_model=RatingStatsDTO,
    summary="Rating count, average and distribution",
)
async def get_product_review_stats(
    product_id: str,
    service: ReviewApplicationService = Depends(get_review_service),
) -> RatingStatsDTO:
    return await service.get_product_review_stats(product_id)


@router.get(
    "/producer/my-reviews",
    response_model=ReviewListDTO,
    summary="Reviews across the caller's products",
)
async def list_producer_reviews(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user: UserContext = Depends(require_producer),
    service: ReviewApplicationService = Depends(get_review_service),
) -> ReviewListDTO:
    return await service.list_producer_reviews(user, page=page, limit=limit)
