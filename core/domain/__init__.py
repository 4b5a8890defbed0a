"""Domain layer - pure domain models and rules."""

from .entities import OrderStatusPolicy, PayoutLifecycle
from .services import CommissionCalculator, ProducerShare, SplitLine, next_payout_date
from .value_objects import ExecutionID, Money

__all__ = [
    "CommissionCalculator",
    "ExecutionID",
    "Money",
    "OrderStatusPolicy",
    "PayoutLifecycle",
    "ProducerShare",
    "SplitLine",
    "next_payout_date",
]
