"""
Order lifecycle rules.

CRITICAL: This file must contain ZERO imports from:
- sqlalchemy
- pydantic
- fastapi
"""
from typing import Dict, FrozenSet

from ..enums import DeliveryStatus, UserRole
from ..exceptions import InvalidTransitionError


_PRODUCER_TRANSITIONS: Dict[DeliveryStatus, FrozenSet[DeliveryStatus]] = {
    DeliveryStatus.PENDING: frozenset(
        {DeliveryStatus.CONFIRMED, DeliveryStatus.SHIPPED, DeliveryStatus.CANCELLED}
    ),
    DeliveryStatus.CONFIRMED: frozenset({DeliveryStatus.SHIPPED, DeliveryStatus.CANCELLED}),
    DeliveryStatus.SHIPPED: frozenset({DeliveryStatus.DELIVERED}),
}

ROLE_TRANSITIONS: Dict[UserRole, Dict[DeliveryStatus, FrozenSet[DeliveryStatus]]] = {
    UserRole.BUYER: {
        DeliveryStatus.PENDING: frozenset({DeliveryStatus.CANCELLED}),
    },
    UserRole.PRODUCER: _PRODUCER_TRANSITIONS,
    UserRole.ADMIN: {
        **_PRODUCER_TRANSITIONS,
        DeliveryStatus.CANCELLED: frozenset({DeliveryStatus.PENDING}),
    },
}

DISPUTABLE_STATUSES: FrozenSet[DeliveryStatus] = frozenset(
    {DeliveryStatus.CONFIRMED, DeliveryStatus.SHIPPED, DeliveryStatus.DELIVERED}
)


class OrderStatusPolicy:
    """Role-based delivery status transitions."""

    @staticmethod
    def allowed_targets(role: UserRole, current: DeliveryStatus) -> FrozenSet[DeliveryStatus]:
        return ROLE_TRANSITIONS.get(UserRole(role), {}).get(DeliveryStatus(current), frozenset())

    @classmethod
    def can_transition(cls, role: UserRole, current: DeliveryStatus, target: DeliveryStatus) -> bool:
        return DeliveryStatus(target) in cls.allowed_targets(role, current)

    @classmethod
    def ensure_transition(cls, role: UserRole, current: DeliveryStatus, target: DeliveryStatus) -> None:
        """
        Raise InvalidTransitionError unless `role` may move an order
        from `current` to `target`.
        """
        if not cls.can_transition(role, current, target):
            raise InvalidTransitionError(
                "order",
                DeliveryStatus(current).value,
                DeliveryStatus(target).value,
                f"for role {UserRole(role).value}",
            )

    @staticmethod
    def is_disputable(status: DeliveryStatus) -> bool:
        return DeliveryStatus(status) in DISPUTABLE_STATUSES
