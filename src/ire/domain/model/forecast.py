"""Forecast read models produced by the Forecast Estimator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from ire.domain.model.stock_ledger import utcnow
from ire.domain.model.value_objects import ForecastMethod


@dataclass(frozen=True)
class InventoryForecast:
    """Projected stock for one product on one future day."""

    product_id: str
    forecast_date: date
    projected_stock: float
    projected_sales: float
    forecast_method: ForecastMethod
    confidence: int
    created_at: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class SalesVelocity:
    product_id: str
    daily_average: float
    weekly_average: float
    monthly_average: float
    trend: str  # increasing | stable | decreasing


@dataclass(frozen=True)
class ReplenishmentAdvice:
    product_id: str
    current_stock: int
    daily_sales_average: float
    days_until_stockout: float | None
    forecasted_stockout: date | None
    recommended_reorder_quantity: int
    lead_time_days: int
