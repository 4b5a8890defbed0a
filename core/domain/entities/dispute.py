"""
Dispute lifecycle rules.

OPEN and UNDER_REVIEW are working statuses. RESOLVED and REJECTED can
only be closed afterwards, and CLOSED is final, so a refund is granted at
most once per dispute.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from typing import Dict, FrozenSet

from ..enums import DisputeStatus
from ..exceptions import InvalidTransitionError


DISPUTE_TRANSITIONS: Dict[DisputeStatus, FrozenSet[DisputeStatus]] = {
    DisputeStatus.OPEN: frozenset(
        {
            DisputeStatus.UNDER_REVIEW,
            DisputeStatus.RESOLVED,
            DisputeStatus.REJECTED,
            DisputeStatus.CLOSED,
        }
    ),
    DisputeStatus.UNDER_REVIEW: frozenset(
        {
            DisputeStatus.OPEN,
            DisputeStatus.RESOLVED,
            DisputeStatus.REJECTED,
            DisputeStatus.CLOSED,
        }
    ),
    DisputeStatus.RESOLVED: frozenset({DisputeStatus.CLOSED}),
    DisputeStatus.REJECTED: frozenset({DisputeStatus.CLOSED}),
    DisputeStatus.CLOSED: frozenset(),
}

SETTLED_DISPUTE_STATUSES: FrozenSet[DisputeStatus] = frozenset(
    {DisputeStatus.RESOLVED, DisputeStatus.REJECTED, DisputeStatus.CLOSED}
)


class DisputeLifecycle:
    """Transition checks for disputes."""

    @staticmethod
    def can_transition(current: DisputeStatus, target: DisputeStatus) -> bool:
        return DisputeStatus(target) in DISPUTE_TRANSITIONS[DisputeStatus(current)]

    @classmethod
    def ensure_transition(cls, current: DisputeStatus, target: DisputeStatus) -> None:
        if not cls.can_transition(current, target):
            raise InvalidTransitionError(
                "dispute", DisputeStatus(current).value, DisputeStatus(target).value
            )

    @staticmethod
    def is_settled(status: DisputeStatus) -> bool:
        return DisputeStatus(status) in SETTLED_DISPUTE_STATUSES
