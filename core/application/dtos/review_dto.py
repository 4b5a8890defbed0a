"""Application DTOs for product reviews."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .common_dto import PaginationDTO


class CreateReviewRequest(BaseModel):
    product_id: str = Field(..., description="Reviewed product")
    rating: int = Field(..., ge=1, le=5, description="Stars, 1 to 5")
    comment: Optional[str] = Field(None, description="Free-text review")

    model_config = {"frozen": True}


class UpdateReviewRequest(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5, description="Stars, 1 to 5")
    comment: Optional[str] = Field(None, description="Free-text review")

    model_config = {"frozen": True}


class ReviewDTO(BaseModel):
    """Response DTO for a review."""

    id: str
    product_id: str
    product_name: Optional[str] = None
    buyer_id: str
    buyer_name: Optional[str] = None
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}


class RatingStatsDTO(BaseModel):
    """Review count, average and star histogram."""

    total: int = Field(..., ge=0)
    average: Decimal = Field(..., description="Average rating rounded to one decimal")
    distribution: Dict[int, int] = Field(default_factory=dict, description="Reviews per star")

    model_config = {"frozen": True}


class ReviewListDTO(BaseModel):
    """Reviews with their rating stats."""

    reviews: List[ReviewDTO] = Field(default_factory=list)
    stats: Optional[RatingStatsDTO] = None
    pagination: Optional[PaginationDTO] = None

    model_config = {"frozen": True}
