"""TransactionRecord: one immutable line in a product's stock history."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from ire.domain.model.stock_ledger import utcnow
from ire.domain.model.value_objects import TransactionType


@dataclass(frozen=True)
class TransactionRecord:
    """Signed stock movement.

    Positive ``quantity`` increases on-hand, negative decreases it.
    Reservation sub-types carry the held amount but never count toward
    on-hand.
    """

    product_id: str
    transaction_type: TransactionType
    quantity: int
    reference_id: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def on_hand_delta(self) -> int:
        return self.quantity if self.transaction_type.affects_on_hand else 0


def fold_on_hand(records: list[TransactionRecord]) -> int:
    """Net on-hand change described by a product's history."""
    return sum(record.on_hand_delta for record in records)
