"""
Commission split engine.

Turns the lines of an order into one split per producer: the producer's
share of the order subtotal, the marketplace commission on it and the net
amount owed to the producer.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Sequence

from ..exceptions import ValidationError
from ..value_objects import Money


HUNDRED = Decimal("100")


@dataclass(frozen=True)
class ProducerShare:
    """Percentage of a product's revenue owed to one producer."""
    producer_id: str
    share_percentage: Decimal

    def __post_init__(self):
        if not isinstance(self.share_percentage, Decimal):
            object.__setattr__(self, "share_percentage", Decimal(str(self.share_percentage)))


@dataclass(frozen=True)
class SplitLine:
    """One order line as seen by the split engine."""
    product_id: str
    subtotal: Money
    shares: Sequence[ProducerShare]


@dataclass
class ProducerSplit:
    """Aggregated split for one producer on one order."""
    producer_id: str
    subtotal: Money
    commission: Money
    producer_amount: Money
    product_ids: List[str] = field(default_factory=list)

    def is_balanced(self) -> bool:
        return self.producer_amount + self.commission == self.subtotal


def validate_shares(shares: Sequence[ProducerShare]) -> None:
    """
    Validate co-producer shares for a product.

    Raises:
        ValidationError: empty list, duplicate producer, non-positive share,
            or shares not totalling exactly 100
    """
    if not shares:
        raise ValidationError("A product needs at least one producer share")

    seen = set()
    total = Decimal("0")
    for share in shares:
        if share.producer_id in seen:
            raise ValidationError(f"Duplicate producer in shares: {share.producer_id}")
        seen.add(share.producer_id)

        if share.share_percentage <= 0:
            raise ValidationError(
                f"Share for producer {share.producer_id} must be positive, "
                f"got {share.share_percentage}"
            )
        total += share.share_percentage

    if total != HUNDRED:
        raise ValidationError(f"Producer shares must total 100, got {total}")


class CommissionCalculator:
    """
    Computes per-producer commission splits.

    Example:
        >>> calc = CommissionCalculator(Decimal("0.10"))
        >>> line = SplitLine("p1", Money(Decimal("100.00")), [ProducerShare("a", Decimal("100"))])
        >>> calc.split([line])[0].producer_amount
        Money(amount=Decimal('90.00'), currency='ETB')
    """

    def __init__(self, rate: Decimal):
        rate = Decimal(str(rate))
        if rate < 0 or rate >= 1:
            raise ValueError(f"Commission rate must be in [0, 1), got {rate}")
        self.rate = rate

    def commission_for(self, subtotal: Money) -> Money:
        return subtotal.times(self.rate)

    def split(self, lines: Sequence[SplitLine]) -> List[ProducerSplit]:
        """
        Split order lines across producers.

        Each line subtotal is allocated over its shares so per-line parts
        sum to the line subtotal. Parts are then grouped per producer in
        first-seen order and commission is taken on each producer subtotal.
        """
        subtotals: Dict[str, Money] = {}
        products: Dict[str, List[str]] = {}

        for line in lines:
            validate_shares(line.shares)
            parts = line.subtotal.allocate([s.share_percentage for s in line.shares])

            for share, part in zip(line.shares, parts):
                if share.producer_id not in subtotals:
                    subtotals[share.producer_id] = Money.zero(line.subtotal.currency)
                    products[share.producer_id] = []
                subtotals[share.producer_id] = subtotals[share.producer_id] + part
                if line.product_id not in products[share.producer_id]:
                    products[share.producer_id].append(line.product_id)

        splits = []
        for producer_id, subtotal in subtotals.items():
            commission = self.commission_for(subtotal)
            splits.append(
                ProducerSplit(
                    producer_id=producer_id,
                    subtotal=subtotal,
                    commission=commission,
                    producer_amount=subtotal - commission,
                    product_ids=products[producer_id],
                )
            )
        return splits
