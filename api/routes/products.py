"""Product catalog endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from api.auth import get_current_user, require_producer
from api.dependencies import get_product_service
from core.application.dtos import (
    CreateProductRequest,
    ProductDTO,
    ProductListDTO,
    UpdateStockRequest,
    UserContext,
)
from core.application.services import ProductApplicationService


router = APIRouter()


@router.post(
    "",
    response_model=ProductDTO,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
    description="Create a product owned by the calling producer, optionally shared with co-producers",
)
async def create_product(
    request: CreateProductRequest,
    user: UserContext = Depends(require_producer),
    service: ProductApplicationService = Depends(get_product_service),
) -> ProductDTO:
    """
    Create a product.

    Shares must sum to 100%. Without shares the creator owns 100%.
    """
    return await service.create_product(user, request)


@router.get("", response_model=ProductListDTO, summary="List active products")
async def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[str] = Query(None, description="Filter by category"),
    producer_id: Optional[str] = Query(None, description="Filter by owning producer"),
    service: ProductApplicationService = Depends(get_product_service),
) -> ProductListDTO:
    return await service.list_products(
        page=page, limit=limit, category=category, producer_id=producer_id
    )


@router.get("/{product_id}", response_model=ProductDTO, summary="Get product")
async def get_product(
    product_id: str,
    service: ProductApplicationService = Depends(get_product_service),
) -> ProductDTO:
    return await service.get_product(product_id)


@router.patch("/{product_id}/stock", response_model=ProductDTO, summary="Set stock level")
async def update_stock(
    product_id: str,
    request: UpdateStockRequest,
    user: UserContext = Depends(get_current_user),
    service: ProductApplicationService = Depends(get_product_service),
) -> ProductDTO:
    """Only the owning producer or an admin may change stock."""
    return await service.update_stock(product_id, user, request.quantity)
