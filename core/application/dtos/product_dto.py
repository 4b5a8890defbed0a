"""Application DTOs for the product catalog."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from .common_dto import PaginationDTO


class ProducerShareDTO(BaseModel):
    """Co-producer share of a product."""

    producer_id: str = Field(..., description="Producer profile ID")
    share_percentage: Decimal = Field(..., gt=0, le=100, description="Share in percent")
    role: str = Field(default="OWNER", description="Producer role on the product")

    model_config = {"frozen": True}


class CreateProductRequest(BaseModel):
    """Request DTO for creating a product."""

    name: str = Field(..., min_length=1, description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    category: Optional[str] = Field(None, description="Catalog category")
    price: Decimal = Field(..., gt=0, description="Unit price")
    quantity_available: int = Field(default=0, ge=0, description="Stock on hand")
    shares: Optional[List[ProducerShareDTO]] = Field(
        None, description="Co-producer shares; defaults to 100% for the creator"
    )

    model_config = {"frozen": True}


class UpdateStockRequest(BaseModel):
    """Request DTO for setting stock."""

    quantity: int = Field(..., ge=0, description="New stock level")

    model_config = {"frozen": True}


class ProductDTO(BaseModel):
    """Response DTO for product details."""

    id: str
    producer_id: str
    producer_name: Optional[str] = None
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    price: Decimal
    quantity_available: int
    is_active: bool
    average_rating: Decimal = Decimal("0")
    review_count: int = 0
    shares: List[ProducerShareDTO] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    model_config = {"frozen": True}


class ProductListDTO(BaseModel):
    """DTO for listing products."""

    products: List[ProductDTO] = Field(default_factory=list)
    pagination: PaginationDTO

    model_config = {"frozen": True}
