"""Domain value objects - pure Python immutable types."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import List, Sequence
from uuid import UUID, uuid4


CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Immutable monetary value with currency.

    CRITICAL: Always use Decimal, never float!
    All ledger amounts are kept at two decimal places (ROUND_HALF_UP).
    """
    amount: Decimal
    currency: str = "ETB"

    def __post_init__(self):
        # Convert to Decimal if needed
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        # Validate currency code (3 letters)
        if not isinstance(self.currency, str) or len(self.currency) != 3:
            raise ValueError(
                f"Currency must be 3-letter ISO code, got: {self.currency}"
            )

    @classmethod
    def zero(cls, currency: str = "ETB") -> "Money":
        return cls(amount=Decimal("0.00"), currency=currency)

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def _check_currency(self, other: "Money", operation: str) -> None:
        if self.currency != other.currency:
            raise ValueError(
                f"Cannot {operation} different currencies: {self.currency} vs {other.currency}"
            )

    def __add__(self, other: "Money") -> "Money":
        """Add two Money objects (must have same currency)."""
        self._check_currency(other, "add")
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: "Money") -> "Money":
        """Subtract two Money objects (must have same currency)."""
        self._check_currency(other, "subtract")
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other, "compare")
        return self.amount <= other.amount

    def is_positive(self) -> bool:
        return self.amount > 0

    def is_zero(self) -> bool:
        return self.amount == 0

    def quantize(self) -> "Money":
        """Round to cents."""
        return Money(
            amount=self.amount.quantize(CENT, rounding=ROUND_HALF_UP),
            currency=self.currency,
        )

    def times(self, factor) -> "Money":
        """Multiply by a quantity or rate and round to cents."""
        return Money(amount=self.amount * Decimal(str(factor)), currency=self.currency).quantize()

    def percent(self, percentage) -> "Money":
        """Return `percentage` percent of this amount, rounded to cents."""
        return self.times(Decimal(str(percentage)) / Decimal("100"))

    def allocate(self, weights: Sequence[Decimal]) -> List["Money"]:
        """
        Split the amount proportionally to `weights`.

        Largest remainder method: every part is rounded down to cents, then
        the leftover cents go one at a time to the parts with the largest
        dropped fraction (earlier parts win ties). Parts always sum to the
        original amount and none is negative.

        Args:
            weights: Non-negative weights (e.g. share percentages)

        Returns:
            One Money per weight, in the same order
        """
        if not weights:
            raise ValueError("Cannot allocate across zero weights")

        decimal_weights = [Decimal(str(w)) for w in weights]
        if any(w < 0 for w in decimal_weights):
            raise ValueError("Allocation weights must not be negative")
        total_weight = sum(decimal_weights)
        if total_weight <= 0:
            raise ValueError("Allocation weights must sum to a positive value")

        whole = self.quantize()
        if whole.amount < 0:
            raise ValueError(f"Cannot allocate a negative amount: {whole}")

        exact = [whole.amount * w / total_weight for w in decimal_weights]
        floors = [e.quantize(CENT, rounding=ROUND_DOWN) for e in exact]

        leftover = int((whole.amount - sum(floors)) / CENT)
        by_remainder = sorted(
            range(len(exact)), key=lambda i: (-(exact[i] - floors[i]), i)
        )
        for i in by_remainder[:leftover]:
            floors[i] += CENT

        return [Money(amount=amount, currency=self.currency) for amount in floors]


@dataclass(frozen=True)
class ExecutionID:
    """Unique identifier for workflow execution tracing."""

    value: UUID

    @classmethod
    def generate(cls) -> "ExecutionID":
        """Generate a new ExecutionID."""
        return cls(value=uuid4())

    def short(self) -> str:
        """First block of the UUID, for log prefixes."""
        return str(self.value).split("-")[0]

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)


def to_decimal(value) -> Decimal:
    """Coerce DB/JSON numerics to a cent-precision Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
