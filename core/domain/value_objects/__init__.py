"""Domain value objects."""

from .value_objects import CENT, ExecutionID, Money, to_decimal

__all__ = [
    "CENT",
    "ExecutionID",
    "Money",
    "to_decimal",
]
