"""StockLedgerEntry aggregate: the single mutable stock record per product.

Each tracked product has one ledger entry that knows how much is on hand,
how much of it is held by unfulfilled orders, and when to raise the alarm.
Every other inventory entity is an immutable fact about this record's history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ire.domain.exceptions import (
    InsufficientStockError,
    ValidationError,
    WouldUnderflowError,
)
from ire.domain.model.value_objects import StockStatus, require_whole_number


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StockLedgerEntry:
    """Aggregate root for stock accounting.

    Invariants:
    - ``reserved_stock`` can never exceed ``current_stock``
    - ``available_stock`` is always ``current_stock - reserved_stock`` and >= 0

    Use ``StockLedgerEntry.open()`` for new entries. The ``__init__`` is kept
    simple so repositories can reconstitute persisted entries.
    """

    product_id: str
    current_stock: int
    minimum_threshold: int
    reorder_quantity: int
    reserved_stock: int = 0
    seller_id: str | None = None
    initial_stock: int = 0
    last_restocked_at: datetime | None = None
    version: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def open(
        product_id: str,
        initial_stock: int,
        minimum_threshold: int,
        reorder_quantity: int,
        seller_id: str | None = None,
        at: datetime | None = None,
    ) -> StockLedgerEntry:
        """Start tracking a product, enforcing all invariants."""
        if not product_id or not str(product_id).strip():
            raise ValidationError("Product ID is required")
        for name, value in (
            ("Initial stock", initial_stock),
            ("Minimum threshold", minimum_threshold),
            ("Reorder quantity", reorder_quantity),
        ):
            require_whole_number(name, value)
            if value < 0:
                raise ValidationError(f"{name} cannot be negative, got {value}")

        now = at or utcnow()
        return StockLedgerEntry(
            product_id=str(product_id).strip(),
            current_stock=initial_stock,
            minimum_threshold=minimum_threshold,
            reorder_quantity=reorder_quantity,
            seller_id=seller_id,
            initial_stock=initial_stock,
            last_restocked_at=now if initial_stock > 0 else None,
            created_at=now,
            updated_at=now,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def available_stock(self) -> int:
        return self.current_stock - self.reserved_stock

    @property
    def is_below_threshold(self) -> bool:
        return self.available_stock < self.minimum_threshold

    @property
    def status(self) -> StockStatus:
        if self.current_stock == 0 or self.available_stock == 0:
            return StockStatus.OUT_OF_STOCK
        if self.is_below_threshold:
            return StockStatus.LOW_STOCK
        return StockStatus.IN_STOCK

    # --- Mutations (Reservation Manager only) ---------------------------------

    def hold(self, quantity: int, at: datetime | None = None) -> None:
        """Soft-hold stock for an order. On-hand is untouched.

        Raises InsufficientStockError if not enough stock is available.
        """
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_stock:
            raise InsufficientStockError(
                f"Insufficient stock for product {self.product_id} "
                f"(need {quantity}, have {self.available_stock} available)"
            )
        self.reserved_stock += quantity
        self._touch(at)

    def release_hold(self, quantity: int, at: datetime | None = None) -> None:
        """Give held stock back to the available pool, never below zero."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        self.reserved_stock = max(0, self.reserved_stock - quantity)
        self._touch(at)

    def commit_hold(
        self, reserved: int, shipped: int, at: datetime | None = None
    ) -> None:
        """Turn a hold into a hard decrement.

        ``reserved`` leaves the reserved pool and ``shipped`` leaves on-hand.
        They differ on partial fulfillment or an approved overage.
        """
        if reserved <= 0:
            raise ValidationError("Committed reservation must be positive")
        if shipped < 0:
            raise ValidationError("Shipped quantity cannot be negative")

        new_reserved = max(0, self.reserved_stock - reserved)
        new_current = self.current_stock - shipped
        self._check_levels(new_current, new_reserved)
        self.reserved_stock = new_reserved
        self.current_stock = new_current
        self._touch(at)

    def apply_delta(
        self, delta: int, restocked: bool = False, at: datetime | None = None
    ) -> None:
        """Change on-hand stock directly, bypassing reservations."""
        if delta == 0:
            raise ValidationError("Stock adjustment must be non-zero")
        new_current = self.current_stock + delta
        self._check_levels(new_current, self.reserved_stock)
        self.current_stock = new_current
        if restocked:
            self.last_restocked_at = at or utcnow()
        self._touch(at)

    def change_threshold(
        self,
        minimum_threshold: int,
        reorder_quantity: int | None = None,
        at: datetime | None = None,
    ) -> None:
        require_whole_number("Minimum threshold", minimum_threshold)
        if minimum_threshold < 0:
            raise ValidationError("Minimum threshold cannot be negative")
        if reorder_quantity is not None:
            require_whole_number("Reorder quantity", reorder_quantity)
        if reorder_quantity is not None and reorder_quantity < 0:
            raise ValidationError("Reorder quantity cannot be negative")
        self.minimum_threshold = minimum_threshold
        if reorder_quantity is not None:
            self.reorder_quantity = reorder_quantity
        self._touch(at)

    # --- Internal helpers -----------------------------------------------------

    def _check_levels(self, current: int, reserved: int) -> None:
        if current < 0:
            raise WouldUnderflowError(
                f"Stock for product {self.product_id} would drop to {current}"
            )
        if current < reserved:
            raise WouldUnderflowError(
                f"Stock for product {self.product_id} would drop to {current}, "
                f"below the {reserved} units reserved"
            )

    def _touch(self, at: datetime | None) -> None:
        self.updated_at = at or utcnow()
