"""Unit tests for the ForecastEstimator domain service."""

from datetime import timedelta

import pytest

from ire.domain.exceptions import EntityNotFoundError
from ire.domain.model.forecast import InventoryForecast
from ire.domain.model.stock_ledger import StockLedgerEntry
from ire.domain.model.transaction import TransactionRecord
from ire.domain.model.value_objects import ForecastMethod, TransactionType
from tests.fakes import START, FakeStockLedgerRepository, wire


def _setup(history_days: int, stock: int = 100, sales: list[int] | None = None):
    """Product tracked for ``history_days`` days with one sale record per day.

    ``sales`` lists units sold per day, oldest first; defaults to 2 a day.
    """
    created = START - timedelta(days=history_days - 1)
    ledger = FakeStockLedgerRepository(
        [StockLedgerEntry.open("P1", stock, 10, 40, at=created)]
    )
    w = wire(ledger_repo=ledger)
    sales = sales if sales is not None else [2] * history_days
    for offset, units in enumerate(sales):
        if units:
            w.transaction_repo.append(
                TransactionRecord(
                    product_id="P1",
                    transaction_type=TransactionType.SALE,
                    quantity=-units,
                    created_at=created + timedelta(days=offset),
                )
            )
    return w


class TestEstimate:

    def test_moving_average_projection(self):
        w = _setup(history_days=31)
        rows = w.estimator.estimate("P1")

        assert len(rows) == 30
        assert rows[0].forecast_date == START.date() + timedelta(days=1)
        assert rows[0].projected_sales == 2.0
        assert rows[0].projected_stock == 98.0
        assert rows[-1].projected_stock == 40.0
        assert all(r.forecast_method == ForecastMethod.MOVING_AVERAGE for r in rows)

    def test_steady_sales_give_high_confidence(self):
        w = _setup(history_days=31)
        rows = w.estimator.estimate("P1")
        assert rows[0].confidence == 90

    def test_thin_history_caps_confidence(self):
        w = _setup(history_days=3)
        rows = w.estimator.estimate("P1")
        assert rows[0].confidence == 30

    def test_trend_follows_growth(self):
        w = _setup(history_days=10, stock=500, sales=list(range(1, 11)))
        rows = w.estimator.estimate("P1", ForecastMethod.TREND)
        assert rows[0].projected_sales == pytest.approx(11.0)
        assert rows[1].projected_sales == pytest.approx(12.0)
        assert rows[0].forecast_method == ForecastMethod.TREND

    def test_seasonal_falls_back_on_short_history(self):
        w = _setup(history_days=10)
        seasonal = w.estimator.estimate("P1", ForecastMethod.SEASONAL)
        moving = w.estimator.estimate("P1", ForecastMethod.MOVING_AVERAGE)
        assert [r.projected_sales for r in seasonal] == [r.projected_sales for r in moving]
        assert seasonal[0].confidence == moving[0].confidence - 5

    def test_seasonal_weights_weekdays(self):
        # Sales only on the weekday START falls on
        days = 28
        created = START - timedelta(days=days - 1)
        sales = [7 if (created + timedelta(days=i)).weekday() == START.weekday() else 0
                 for i in range(days)]
        w = _setup(history_days=days, stock=1000, sales=sales)

        rows = w.estimator.estimate("P1", ForecastMethod.SEASONAL)

        busy = [r for r in rows if r.forecast_date.weekday() == START.weekday()]
        quiet = [r for r in rows if r.forecast_date.weekday() != START.weekday()]
        assert all(r.projected_sales > 0 for r in busy)
        assert all(r.projected_sales == 0 for r in quiet)

    def test_projected_stock_never_negative(self):
        w = _setup(history_days=31, stock=10)
        rows = w.estimator.estimate("P1")
        assert rows[-1].projected_stock == 0.0

    def test_no_sales_leaves_stored_forecast(self):
        w = _setup(history_days=5, sales=[])
        old = InventoryForecast(
            product_id="P1",
            forecast_date=START.date() + timedelta(days=1),
            projected_stock=50,
            projected_sales=1,
            forecast_method=ForecastMethod.MOVING_AVERAGE,
            confidence=40,
        )
        w.forecast_repo.replace("P1", old.forecast_date, old.forecast_date, [old])

        assert w.estimator.estimate("P1") == []
        assert w.estimator.list_forecasts("P1") == [old]

    def test_rerun_replaces_horizon(self):
        w = _setup(history_days=31)
        w.estimator.estimate("P1")
        w.estimator.estimate("P1", ForecastMethod.TREND)
        rows = w.estimator.list_forecasts("P1")
        assert len(rows) == 30
        assert {r.forecast_method for r in rows} == {ForecastMethod.TREND}

    def test_unknown_product(self):
        w = wire()
        with pytest.raises(EntityNotFoundError):
            w.estimator.estimate("missing")

    def test_run_all_reports_rows_per_product(self):
        w = _setup(history_days=31)
        w.ledger_repo.add(StockLedgerEntry.open("P2", 50, 5, 10, at=START))
        assert w.estimator.run_all() == {"P1": 30, "P2": 0}

    def test_run_all_applies_method_to_every_product(self):
        w = _setup(history_days=31)
        assert w.estimator.run_all(ForecastMethod.TREND) == {"P1": 30}
        rows = w.estimator.list_forecasts("P1")
        assert {r.forecast_method for r in rows} == {ForecastMethod.TREND}


class TestVelocityAndAdvice:

    def test_recent_sales_read_as_increasing(self):
        w = _setup(history_days=7)
        velocity = w.estimator.sales_velocity("P1")
        assert velocity.daily_average == 2.0
        assert velocity.weekly_average == 3.5
        assert velocity.trend == "increasing"

    def test_steady_sales_read_as_stable(self):
        w = _setup(history_days=60)
        assert w.estimator.sales_velocity("P1").trend == "stable"

    def test_replenishment_advice(self):
        w = _setup(history_days=31)
        advice = w.estimator.replenishment_advice("P1", lead_time_days=7)
        assert advice.daily_sales_average == 2.0
        assert advice.days_until_stockout == 50.0
        assert advice.forecasted_stockout == START.date() + timedelta(days=50)
        assert advice.recommended_reorder_quantity == 42

    def test_no_sales_falls_back_to_reorder_quantity(self):
        w = _setup(history_days=5, sales=[])
        advice = w.estimator.replenishment_advice("P1")
        assert advice.days_until_stockout is None
        assert advice.forecasted_stockout is None
        assert advice.recommended_reorder_quantity == 40
