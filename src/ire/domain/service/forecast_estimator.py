"""Domain service: Forecast Estimator.

Runs out-of-band (e.g. a daily scheduler invoking ``ire forecast run``), never
per transaction, and only reads history, so it takes no product lock.

Daily sales are taken from ``sale`` records in a trailing window and
projected over the horizon with one of three methods:

- moving_average: mean of the most recent week
- trend:          least-squares line through the window
- seasonal:       recent mean scaled by weekday factors (needs two weeks)

Confidence starts from the coefficient of variation of daily sales and is
capped by the number of sale records, so a thin history never reports high
confidence however well it fits.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Callable
from datetime import date, datetime, timedelta

import structlog

from ire.domain.exceptions import EntityNotFoundError
from ire.domain.model.forecast import (
    InventoryForecast,
    ReplenishmentAdvice,
    SalesVelocity,
)
from ire.domain.model.stock_ledger import StockLedgerEntry, utcnow
from ire.domain.model.value_objects import ForecastMethod, TransactionType
from ire.domain.repository.forecast_repository import ForecastRepository
from ire.domain.repository.stock_ledger_repository import StockLedgerRepository
from ire.domain.repository.transaction_repository import TransactionRepository

logger = structlog.get_logger(__name__)

RECENT_DAYS = 7
MIN_SEASONAL_DAYS = 14
CONFIDENCE_PER_SAMPLE = 10
MAX_CONFIDENCE = 95
SAFETY_BUFFER_DAYS = 14

_METHOD_ADJUSTMENT = {
    ForecastMethod.MOVING_AVERAGE: 0,
    ForecastMethod.TREND: -5,
    ForecastMethod.SEASONAL: -5,
}


class ForecastEstimator:

    def __init__(
        self,
        ledger_repo: StockLedgerRepository,
        transaction_repo: TransactionRepository,
        forecast_repo: ForecastRepository,
        window_days: int = 90,
        horizon_days: int = 30,
        default_method: ForecastMethod = ForecastMethod.MOVING_AVERAGE,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if window_days < 1 or horizon_days < 1:
            raise ValueError("Forecast window and horizon must be at least one day")
        self._ledger_repo = ledger_repo
        self._transaction_repo = transaction_repo
        self._forecast_repo = forecast_repo
        self._window_days = window_days
        self._horizon_days = horizon_days
        self._default_method = default_method
        self._clock = clock

    # --- Forecasts ------------------------------------------------------------

    def estimate(
        self,
        product_id: str,
        method: ForecastMethod | None = None,
        as_of: datetime | None = None,
    ) -> list[InventoryForecast]:
        """Recompute and store the forecast horizon for one product.

        Returns the new rows. A product without sales in the window gets no
        rows and its previously stored forecast is left as it was.
        """
        method = method or self._default_method
        as_of = as_of or self._clock()
        entry = self._get_entry(product_id)

        daily, sample_count = self._daily_sales(entry, as_of, self._window_days, clip=True)
        if sample_count == 0:
            logger.info("No sales history, forecast skipped", product_id=product_id)
            return []

        start = as_of.date() + timedelta(days=1)
        dates = [start + timedelta(days=i) for i in range(self._horizon_days)]
        projected = self._project(daily, dates, method, as_of.date())
        confidence = self._confidence(daily, sample_count, method)

        forecasts: list[InventoryForecast] = []
        cumulative = 0.0
        for day, sales in zip(dates, projected):
            cumulative += sales
            forecasts.append(
                InventoryForecast(
                    product_id=product_id,
                    forecast_date=day,
                    projected_stock=round(max(0.0, entry.current_stock - cumulative), 2),
                    projected_sales=round(sales, 2),
                    forecast_method=method,
                    confidence=confidence,
                    created_at=as_of,
                )
            )

        self._forecast_repo.replace(product_id, dates[0], dates[-1], forecasts)
        logger.info(
            "Forecast recomputed",
            product_id=product_id,
            method=method.value,
            horizon_days=self._horizon_days,
            sample_count=sample_count,
            confidence=confidence,
        )
        return forecasts

    def run_all(
        self,
        method: ForecastMethod | None = None,
        as_of: datetime | None = None,
    ) -> dict[str, int]:
        """Recompute every tracked product.

        Returns the number of rows written per product.
        """
        written: dict[str, int] = {}
        for entry in self._ledger_repo.list_all():
            written[entry.product_id] = len(
                self.estimate(entry.product_id, method, as_of)
            )
        return written

    def list_forecasts(
        self,
        product_id: str,
        since: date | None = None,
        until: date | None = None,
    ) -> list[InventoryForecast]:
        return self._forecast_repo.list_for_product(product_id, since, until)

    # --- Velocity and replenishment ------------------------------------------

    def sales_velocity(
        self, product_id: str, as_of: datetime | None = None
    ) -> SalesVelocity:
        """Average sales per day, week and 30-day month, and their direction."""
        as_of = as_of or self._clock()
        entry = self._get_entry(product_id)
        daily, _ = self._daily_sales(entry, as_of, self._window_days, clip=False)

        recent = daily[-RECENT_DAYS:]
        baseline = daily[-4 * RECENT_DAYS:]
        daily_average = sum(recent) / len(recent)
        baseline_daily = sum(baseline) / len(baseline)

        trend = "stable"
        if daily_average > baseline_daily * 1.1:
            trend = "increasing"
        elif daily_average < baseline_daily * 0.9:
            trend = "decreasing"

        return SalesVelocity(
            product_id=product_id,
            daily_average=round(daily_average, 2),
            weekly_average=round(baseline_daily * 7, 2),
            monthly_average=round(sum(daily) / len(daily) * 30, 2),
            trend=trend,
        )

    def replenishment_advice(
        self,
        product_id: str,
        lead_time_days: int = 7,
        as_of: datetime | None = None,
    ) -> ReplenishmentAdvice:
        """When the product runs out at the current pace, and how much to order."""
        as_of = as_of or self._clock()
        entry = self._get_entry(product_id)
        daily = self.sales_velocity(product_id, as_of).daily_average

        days_left: float | None = None
        stockout: date | None = None
        if daily > 0:
            days_left = round(entry.current_stock / daily, 1)
            stockout = as_of.date() + timedelta(days=math.ceil(entry.current_stock / daily))
            recommended = math.ceil(daily * (lead_time_days + SAFETY_BUFFER_DAYS))
        else:
            recommended = entry.reorder_quantity

        return ReplenishmentAdvice(
            product_id=product_id,
            current_stock=entry.current_stock,
            daily_sales_average=daily,
            days_until_stockout=days_left,
            forecasted_stockout=stockout,
            recommended_reorder_quantity=recommended,
            lead_time_days=lead_time_days,
        )

    # --- Internal helpers -----------------------------------------------------

    def _get_entry(self, product_id: str) -> StockLedgerEntry:
        entry = self._ledger_repo.get_by_product_id(product_id)
        if entry is None:
            raise EntityNotFoundError(f"No stock record for product '{product_id}'")
        return entry

    def _daily_sales(
        self,
        entry: StockLedgerEntry,
        as_of: datetime,
        days: int,
        clip: bool,
    ) -> tuple[list[float], int]:
        """Units sold per day over ``days`` days ending on ``as_of``.

        With ``clip`` the series starts no earlier than the day tracking began,
        so young products are not diluted by days they did not exist.
        """
        end = as_of.date()
        start = end - timedelta(days=days - 1)
        if clip:
            start = max(start, entry.created_at.date())
        length = (end - start).days + 1

        records = self._transaction_repo.list_for_product(
            entry.product_id,
            since=datetime.combine(start, datetime.min.time(), tzinfo=as_of.tzinfo),
            until=as_of,
            transaction_type=TransactionType.SALE,
        )

        series = [0.0] * length
        sample_count = 0
        for record in records:
            index = (record.created_at.date() - start).days
            if 0 <= index < length and record.quantity != 0:
                series[index] += -record.quantity
                sample_count += 1
        return series, sample_count

    def _project(
        self,
        daily: list[float],
        dates: list[date],
        method: ForecastMethod,
        today: date,
    ) -> list[float]:
        if method == ForecastMethod.TREND:
            return _linear_trend(daily, len(dates))
        if method == ForecastMethod.SEASONAL and len(daily) >= MIN_SEASONAL_DAYS:
            return _seasonal(daily, dates, today)
        return [_recent_mean(daily)] * len(dates)

    @staticmethod
    def _confidence(daily: list[float], sample_count: int, method: ForecastMethod) -> int:
        mean = statistics.fmean(daily)
        spread = statistics.pstdev(daily) if len(daily) > 1 else 0.0
        variation = spread / mean if mean > 0 else 1.0
        score = 90 - variation * 100 + _METHOD_ADJUSTMENT[method]
        score = max(0.0, min(float(MAX_CONFIDENCE), score))
        cap = min(MAX_CONFIDENCE, CONFIDENCE_PER_SAMPLE * sample_count)
        return int(round(min(score, cap)))


def _recent_mean(daily: list[float]) -> float:
    recent = daily[-RECENT_DAYS:]
    return sum(recent) / len(recent)


def _linear_trend(daily: list[float], periods: int) -> list[float]:
    """Least-squares line through the series, extended ``periods`` days."""
    n = len(daily)
    if n < 3:
        return [sum(daily) / n] * periods

    xs = range(n)
    sum_x = sum(xs)
    sum_y = sum(daily)
    sum_xy = sum(x * y for x, y in zip(xs, daily))
    sum_x2 = sum(x * x for x in xs)

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return [max(0.0, intercept + slope * (n + i)) for i in range(periods)]


def _seasonal(daily: list[float], dates: list[date], today: date) -> list[float]:
    """Recent mean scaled by how each weekday compares with the overall mean."""
    overall = sum(daily) / len(daily)
    first_day = today - timedelta(days=len(daily) - 1)

    by_weekday: dict[int, list[float]] = {}
    for offset, sales in enumerate(daily):
        weekday = (first_day + timedelta(days=offset)).weekday()
        by_weekday.setdefault(weekday, []).append(sales)

    factors = {
        weekday: (sum(values) / len(values)) / overall if overall > 0 else 1.0
        for weekday, values in by_weekday.items()
    }
    base = _recent_mean(daily)
    return [base * factors.get(day.weekday(), 1.0) for day in dates]
