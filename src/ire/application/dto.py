"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Enums travel as their
string values and timestamps as display strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ire.domain.model.alert import AlertPolicy, LowStockAlert
from ire.domain.model.reservation import Reservation
from ire.domain.model.stock_ledger import StockLedgerEntry


def format_timestamp(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value else "-"


@dataclass(frozen=True)
class StockDTO:
    product_id: str
    seller_id: str | None
    current_stock: int
    reserved_stock: int
    available_stock: int
    minimum_threshold: int
    reorder_quantity: int
    status: str
    last_restocked_at: str
    updated_at: str

    @staticmethod
    def from_entry(entry: StockLedgerEntry) -> StockDTO:
        return StockDTO(
            product_id=entry.product_id,
            seller_id=entry.seller_id,
            current_stock=entry.current_stock,
            reserved_stock=entry.reserved_stock,
            available_stock=entry.available_stock,
            minimum_threshold=entry.minimum_threshold,
            reorder_quantity=entry.reorder_quantity,
            status=entry.status.value,
            last_restocked_at=format_timestamp(entry.last_restocked_at),
            updated_at=format_timestamp(entry.updated_at),
        )


@dataclass(frozen=True)
class ReservationDTO:
    id: str
    product_id: str
    quantity: int
    status: str
    reference_id: str | None
    committed_quantity: int | None
    created_at: str

    @staticmethod
    def from_reservation(reservation: Reservation) -> ReservationDTO:
        return ReservationDTO(
            id=reservation.id,
            product_id=reservation.product_id,
            quantity=reservation.quantity.value,
            status=reservation.status.value,
            reference_id=reservation.reference_id,
            committed_quantity=reservation.committed_quantity,
            created_at=format_timestamp(reservation.created_at),
        )


@dataclass(frozen=True)
class TransactionDTO:
    """Output: one line of stock history."""

    transaction_type: str
    quantity: int
    reference_id: str | None
    notes: str | None
    created_at: str


@dataclass(frozen=True)
class AuditEntryDTO:
    user_id: str
    action: str
    old_value: str | None
    new_value: str | None
    reason: str | None
    created_at: str


@dataclass(frozen=True)
class AlertDTO:
    id: str
    product_id: str
    seller_id: str | None
    alert_type: str
    current_stock: int
    available_stock: int
    minimum_threshold: int
    acknowledged: bool
    acknowledged_by: str | None
    created_at: str

    @staticmethod
    def from_alert(alert: LowStockAlert) -> AlertDTO:
        return AlertDTO(
            id=alert.id,
            product_id=alert.product_id,
            seller_id=alert.seller_id,
            alert_type=alert.alert_type.value,
            current_stock=alert.current_stock,
            available_stock=alert.available_stock,
            minimum_threshold=alert.minimum_threshold,
            acknowledged=alert.acknowledged,
            acknowledged_by=alert.acknowledged_by,
            created_at=format_timestamp(alert.created_at),
        )


@dataclass(frozen=True)
class AlertPolicyDTO:
    product_id: str
    seller_id: str | None
    alert_frequency_hours: int
    is_active: bool
    last_alert_sent: str

    @staticmethod
    def from_policy(policy: AlertPolicy) -> AlertPolicyDTO:
        return AlertPolicyDTO(
            product_id=policy.product_id,
            seller_id=policy.seller_id,
            alert_frequency_hours=policy.alert_frequency_hours,
            is_active=policy.is_active,
            last_alert_sent=format_timestamp(policy.last_alert_sent),
        )


@dataclass(frozen=True)
class ReconciliationDTO:
    product_id: str
    recorded_current: int
    derived_current: int
    recorded_reserved: int
    derived_reserved: int
    consistent: bool


@dataclass(frozen=True)
class ForecastLineDTO:
    forecast_date: str  # YYYY-MM-DD
    projected_stock: float
    projected_sales: float
    method: str
    confidence: int


@dataclass(frozen=True)
class ReplenishmentDTO:
    """Output: sales pace and reorder advice for one product."""

    product_id: str
    current_stock: int
    daily_average: float
    weekly_average: float
    monthly_average: float
    trend: str
    days_until_stockout: float | None
    forecasted_stockout: str  # YYYY-MM-DD or "-"
    recommended_reorder_quantity: int
    lead_time_days: int
