"""
Payout lifecycle rules.

A ProducerPayout batch moves through
PENDING -> SCHEDULED -> PROCESSING -> COMPLETED | FAILED. FAILED -> SCHEDULED
is the retry path, and CANCELLED is reachable from PENDING, SCHEDULED and
FAILED. Linked OrderProducer rows follow their batch.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from typing import Dict, FrozenSet, Optional

from ..enums import OrderProducerStatus, PayoutStatus
from ..exceptions import InvalidTransitionError


PAYOUT_TRANSITIONS: Dict[PayoutStatus, FrozenSet[PayoutStatus]] = {
    PayoutStatus.PENDING: frozenset({PayoutStatus.SCHEDULED, PayoutStatus.CANCELLED}),
    PayoutStatus.SCHEDULED: frozenset({PayoutStatus.PROCESSING, PayoutStatus.CANCELLED}),
    PayoutStatus.PROCESSING: frozenset({PayoutStatus.COMPLETED, PayoutStatus.FAILED}),
    PayoutStatus.FAILED: frozenset({PayoutStatus.SCHEDULED, PayoutStatus.CANCELLED}),
    PayoutStatus.COMPLETED: frozenset(),
    PayoutStatus.CANCELLED: frozenset(),
}

# Batches that still accept new order producer splits
OPEN_PAYOUT_STATUSES: FrozenSet[PayoutStatus] = frozenset(
    {PayoutStatus.PENDING, PayoutStatus.SCHEDULED}
)

# Order producer splits that can still be detached from the ledger
RELEASABLE_STATUSES: FrozenSet[OrderProducerStatus] = frozenset(
    {OrderProducerStatus.PENDING, OrderProducerStatus.SCHEDULED, OrderProducerStatus.FAILED}
)

# Splits that count toward a producer's unpaid earnings
UNPAID_STATUSES: FrozenSet[OrderProducerStatus] = frozenset(
    {
        OrderProducerStatus.PENDING,
        OrderProducerStatus.SCHEDULED,
        OrderProducerStatus.PROCESSING,
        OrderProducerStatus.FAILED,
    }
)

_LINKED_STATUS: Dict[PayoutStatus, OrderProducerStatus] = {
    PayoutStatus.SCHEDULED: OrderProducerStatus.SCHEDULED,
    PayoutStatus.PROCESSING: OrderProducerStatus.PROCESSING,
    PayoutStatus.COMPLETED: OrderProducerStatus.COMPLETED,
    PayoutStatus.FAILED: OrderProducerStatus.FAILED,
    PayoutStatus.CANCELLED: OrderProducerStatus.PENDING,
}


class PayoutLifecycle:
    """Transition checks for payout batches."""

    @staticmethod
    def can_transition(current: PayoutStatus, target: PayoutStatus) -> bool:
        return PayoutStatus(target) in PAYOUT_TRANSITIONS[PayoutStatus(current)]

    @classmethod
    def ensure_transition(cls, current: PayoutStatus, target: PayoutStatus) -> None:
        if not cls.can_transition(current, target):
            raise InvalidTransitionError(
                "payout", PayoutStatus(current).value, PayoutStatus(target).value
            )

    @staticmethod
    def linked_status(target: PayoutStatus) -> Optional[OrderProducerStatus]:
        """
        Status the linked order producers take when their batch moves
        to `target`.

        A cancelled batch hands its splits back to PENDING so that the
        next scheduling sweep can pick them up again.
        """
        return _LINKED_STATUS.get(PayoutStatus(target))

    @staticmethod
    def is_open(status: PayoutStatus) -> bool:
        return PayoutStatus(status) in OPEN_PAYOUT_STATUSES

    @staticmethod
    def is_releasable(status: OrderProducerStatus) -> bool:
        return OrderProducerStatus(status) in RELEASABLE_STATUSES
