"""Domain entities and lifecycle rules."""

from .dispute import DISPUTE_TRANSITIONS, SETTLED_DISPUTE_STATUSES, DisputeLifecycle
from .order import DISPUTABLE_STATUSES, ROLE_TRANSITIONS, OrderStatusPolicy
from .payout import (
    OPEN_PAYOUT_STATUSES,
    PAYOUT_TRANSITIONS,
    RELEASABLE_STATUSES,
    UNPAID_STATUSES,
    PayoutLifecycle,
)

__all__ = [
    "DISPUTABLE_STATUSES",
    "DISPUTE_TRANSITIONS",
    "DisputeLifecycle",
    "OPEN_PAYOUT_STATUSES",
    "OrderStatusPolicy",
    "PAYOUT_TRANSITIONS",
    "PayoutLifecycle",
    "RELEASABLE_STATUSES",
    "ROLE_TRANSITIONS",
    "SETTLED_DISPUTE_STATUSES",
    "UNPAID_STATUSES",
]
