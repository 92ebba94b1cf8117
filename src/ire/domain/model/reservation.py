"""Reservation entity: the handle an order holds on a product's stock.

Reservations transition ACTIVE -> COMMITTED (fulfilled) or
ACTIVE -> RELEASED (cancelled). Both end states are terminal.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ire.domain.exceptions import (
    AlreadyCommittedError,
    EntityNotFoundError,
    QuantityMismatchError,
    ValidationError,
)
from ire.domain.model.stock_ledger import utcnow
from ire.domain.model.value_objects import Quantity, require_whole_number


class ReservationStatus(Enum):
    ACTIVE = "active"
    RELEASED = "released"
    COMMITTED = "committed"


@dataclass
class Reservation:

    id: str
    product_id: str
    quantity: Quantity
    idempotency_key: str | None = None
    reference_id: str | None = None
    status: ReservationStatus = ReservationStatus.ACTIVE
    created_at: datetime = field(default_factory=utcnow)
    released_at: datetime | None = None
    committed_at: datetime | None = None
    committed_quantity: int | None = None

    @staticmethod
    def create(
        product_id: str,
        quantity: int,
        idempotency_key: str | None = None,
        reference_id: str | None = None,
        at: datetime | None = None,
    ) -> Reservation:
        return Reservation(
            id=uuid.uuid4().hex,
            product_id=product_id,
            quantity=Quantity(quantity),
            idempotency_key=idempotency_key,
            reference_id=reference_id,
            created_at=at or utcnow(),
        )

    @property
    def is_active(self) -> bool:
        return self.status == ReservationStatus.ACTIVE

    def matches(self, product_id: str, quantity: int) -> bool:
        """True if a retried reserve call asks for the same hold."""
        return self.product_id == product_id and self.quantity.value == quantity

    # --- State transitions ----------------------------------------------------

    def release(self, at: datetime | None = None) -> bool:
        """Mark the reservation released.

        Returns False when it was already released so retried calls are
        a no-op.
        """
        if self.status == ReservationStatus.RELEASED:
            return False
        if self.status == ReservationStatus.COMMITTED:
            raise AlreadyCommittedError(
                f"Reservation {self.id} was already committed and cannot be released"
            )
        self.status = ReservationStatus.RELEASED
        self.released_at = at or utcnow()
        return True

    def check_commit(self, actual_quantity: int, allow_overage: bool = False) -> None:
        """Validate a commit without changing state."""
        if self.status == ReservationStatus.COMMITTED:
            raise AlreadyCommittedError(f"Reservation {self.id} was already committed")
        if self.status == ReservationStatus.RELEASED:
            raise EntityNotFoundError(
                f"Reservation {self.id} was released and has nothing to commit"
            )
        require_whole_number("Committed quantity", actual_quantity)
        if actual_quantity < 0:
            raise ValidationError("Committed quantity cannot be negative")
        if actual_quantity > self.quantity.value and not allow_overage:
            raise QuantityMismatchError(
                f"Cannot commit {actual_quantity} against reservation {self.id} "
                f"of {self.quantity.value} without an override"
            )

    def commit(
        self,
        actual_quantity: int,
        allow_overage: bool = False,
        at: datetime | None = None,
    ) -> None:
        self.check_commit(actual_quantity, allow_overage)
        self.status = ReservationStatus.COMMITTED
        self.committed_quantity = actual_quantity
        self.committed_at = at or utcnow()
