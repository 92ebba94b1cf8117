"""Value Objects and closed enumerations shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ire.domain.exceptions import ValidationError


class TransactionType(Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"
    RESTOCK = "restock"
    DAMAGE = "damage"
    RETURN = "return"
    # Informational only: they record reservation movements, not on-hand changes
    RESERVATION_HOLD = "reservation_hold"
    RESERVATION_RELEASE = "reservation_release"

    @property
    def affects_on_hand(self) -> bool:
        return self not in (
            TransactionType.RESERVATION_HOLD,
            TransactionType.RESERVATION_RELEASE,
        )

    def check_sign(self, delta: int) -> None:
        """Reject a delta whose direction contradicts the transaction type."""
        if not self.affects_on_hand:
            raise ValidationError(
                f"'{self.value}' records cannot be used for stock adjustments"
            )
        require_whole_number("Stock adjustment", delta)
        if delta == 0:
            raise ValidationError("Stock adjustment must be non-zero")
        if self in _INBOUND_TYPES and delta < 0:
            raise ValidationError(f"'{self.value}' must increase stock")
        if self in _OUTBOUND_TYPES and delta > 0:
            raise ValidationError(f"'{self.value}' must decrease stock")


_INBOUND_TYPES = frozenset(
    {TransactionType.PURCHASE, TransactionType.RESTOCK, TransactionType.RETURN}
)
_OUTBOUND_TYPES = frozenset({TransactionType.SALE, TransactionType.DAMAGE})


class AlertType(Enum):
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    CRITICAL = "critical"


class AuditAction(Enum):
    INITIALIZE_STOCK = "initialize_stock"
    UPDATE_STOCK = "update_stock"
    SET_THRESHOLD = "set_threshold"
    ACKNOWLEDGE_ALERT = "acknowledge_alert"
    REMOVE_TRACKING = "remove_tracking"


class ForecastMethod(Enum):
    MOVING_AVERAGE = "moving_average"
    TREND = "trend"
    SEASONAL = "seasonal"


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def require_whole_number(name: str, value: object) -> None:
    """Stock is counted in whole units; bools are not counts."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{name} must be an integer, got {type(value).__name__}"
        )


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot reserve zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        require_whole_number("Quantity", self.value)
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
