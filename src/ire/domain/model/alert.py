"""Low-stock alerts and the per-product policy that throttles them.

At most one alert per product is open (unacknowledged) at any time.
While it is open, new threshold crossings refresh its snapshot instead of
creating duplicates.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ire.domain.exceptions import AlreadyAcknowledgedError, ValidationError
from ire.domain.model.stock_ledger import StockLedgerEntry, utcnow
from ire.domain.model.value_objects import AlertType

DEFAULT_ALERT_FREQUENCY_HOURS = 24


def classify(entry: StockLedgerEntry) -> AlertType | None:
    """Return the alert level for a ledger entry, or None when stock is healthy."""
    if not entry.is_below_threshold:
        return None
    if entry.current_stock == 0:
        return AlertType.OUT_OF_STOCK
    if entry.available_stock == 0:
        return AlertType.CRITICAL
    return AlertType.LOW_STOCK


@dataclass
class LowStockAlert:

    product_id: str
    alert_type: AlertType
    current_stock: int
    available_stock: int
    minimum_threshold: int
    seller_id: str | None = None
    acknowledged: bool = False
    acknowledged_at: datetime | None = None
    acknowledged_by: str | None = None
    pending_delivery: bool = True
    delivered_at: datetime | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @staticmethod
    def raise_for(
        entry: StockLedgerEntry, alert_type: AlertType, at: datetime | None = None
    ) -> LowStockAlert:
        now = at or utcnow()
        return LowStockAlert(
            product_id=entry.product_id,
            seller_id=entry.seller_id,
            alert_type=alert_type,
            current_stock=entry.current_stock,
            available_stock=entry.available_stock,
            minimum_threshold=entry.minimum_threshold,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_open(self) -> bool:
        return not self.acknowledged

    def refresh(
        self, entry: StockLedgerEntry, alert_type: AlertType, at: datetime | None = None
    ) -> None:
        """Overwrite the snapshot with the latest ledger values."""
        self.alert_type = alert_type
        self.current_stock = entry.current_stock
        self.available_stock = entry.available_stock
        self.minimum_threshold = entry.minimum_threshold
        self.updated_at = at or utcnow()

    def rearm(self) -> None:
        self.pending_delivery = True

    def mark_delivered(self, at: datetime | None = None) -> None:
        self.pending_delivery = False
        self.delivered_at = at or utcnow()

    def acknowledge(self, user_id: str, at: datetime | None = None) -> None:
        if self.acknowledged:
            raise AlreadyAcknowledgedError(
                f"Alert {self.id} was already acknowledged by {self.acknowledged_by}"
            )
        if not user_id:
            raise ValidationError("Acknowledging user is required")
        self.acknowledged = True
        self.acknowledged_at = at or utcnow()
        self.acknowledged_by = user_id
        self.pending_delivery = False


@dataclass
class AlertPolicy:
    """Per-product alert settings: who is told, how often, and whether at all."""

    product_id: str
    seller_id: str | None = None
    alert_frequency_hours: int = DEFAULT_ALERT_FREQUENCY_HOURS
    is_active: bool = True
    last_alert_sent: datetime | None = None

    def __post_init__(self) -> None:
        if self.alert_frequency_hours < 0:
            raise ValidationError("Alert frequency cannot be negative")

    @property
    def cool_down(self) -> timedelta:
        return timedelta(hours=self.alert_frequency_hours)

    def cooling_down(self, since: datetime | None, now: datetime) -> bool:
        """True if ``since`` falls inside the cool-down window ending at ``now``."""
        return since is not None and now - since < self.cool_down


@dataclass(frozen=True)
class AlertState:
    """Derived alert state of a product: Normal, or Alerted(level, since)."""

    product_id: str
    level: AlertType | None = None
    since: datetime | None = None
    alert_id: str | None = None

    @property
    def is_alerted(self) -> bool:
        return self.level is not None
