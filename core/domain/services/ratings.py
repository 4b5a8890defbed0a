"""
Product rating rules.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping

from ..exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5

ONE_DECIMAL = Decimal("0.1")


def validate_rating(rating: int) -> int:
    """Ratings are whole stars from 1 to 5."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be a whole number")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


@dataclass(frozen=True)
class RatingSummary:
    """Review count, average rounded to one decimal, and stars histogram."""

    total: int
    average: Decimal
    distribution: Dict[int, int] = field(default_factory=dict)

    @classmethod
    def from_counts(cls, counts: Mapping[int, int]) -> "RatingSummary":
        """
        Build a summary from {rating: review_count}.

        Every star value 1..5 appears in the distribution, with zero when
        nobody gave it. An empty histogram averages to 0.0.
        """
        distribution = {star: int(counts.get(star, 0)) for star in range(MIN_RATING, MAX_RATING + 1)}
        total = sum(distribution.values())
        if total == 0:
            return cls(total=0, average=Decimal("0.0"), distribution=distribution)
        stars = sum(star * n for star, n in distribution.items())
        average = (Decimal(stars) / Decimal(total)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
        return cls(total=total, average=average, distribution=distribution)


def to_rating(value) -> Decimal:
    """Coerce a stored average to one-decimal precision."""
    return Decimal(str(value or 0)).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
