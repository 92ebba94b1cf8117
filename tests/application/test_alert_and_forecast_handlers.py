"""Integration tests for the alert and forecast use cases."""

from datetime import timedelta

import pytest

from ire.application.acknowledge_alert import AcknowledgeAlertHandler
from ire.application.configure_alerts import ConfigureAlertsHandler
from ire.application.dispatch_alerts import DispatchAlertsHandler
from ire.application.list_alerts import ListAlertsHandler
from ire.application.run_forecast import RunForecastHandler
from ire.application.show_forecast import ShowForecastHandler, ShowReplenishmentHandler
from ire.domain.exceptions import EntityNotFoundError, ValidationError
from ire.domain.model.transaction import TransactionRecord
from ire.domain.model.value_objects import TransactionType
from tests.fakes import START, FailingNotifier, wire


def _alerted(notifier=None):
    w = wire(notifier=notifier)
    w.service.initialize("P1", 20, 10, 50, seller_id="S1")
    w.service.reserve("P1", 15)
    return w


class TestAlertHandlers:

    def test_list_and_acknowledge(self):
        w = _alerted()
        [alert] = ListAlertsHandler(w.alerts).handle(seller_id="S1")
        assert alert.alert_type == "low_stock"
        assert alert.available_stock == 5

        dto = AcknowledgeAlertHandler(w.alerts).handle(alert.id, user_id="seller-1")

        assert dto.acknowledged
        assert ListAlertsHandler(w.alerts).handle() == []
        assert len(ListAlertsHandler(w.alerts).handle(product_id="P1")) == 1

    def test_configure_inherits_seller(self):
        w = _alerted()
        dto = ConfigureAlertsHandler(w.service, w.alerts).handle("P1", alert_frequency_hours=4)
        assert dto.alert_frequency_hours == 4
        assert dto.seller_id == "S1"
        assert dto.is_active

    def test_configure_unknown_product(self):
        w = wire()
        with pytest.raises(EntityNotFoundError):
            ConfigureAlertsHandler(w.service, w.alerts).handle("nope", is_active=False)

    def test_dispatch_counts_nothing_when_notifier_down(self):
        w = _alerted(notifier=FailingNotifier())
        assert DispatchAlertsHandler(w.dispatcher).handle() == 0
        assert w.notifier.attempts == 2


class TestForecastHandlers:

    def _with_sales(self):
        w = wire()
        w.service.initialize("P1", 100, 10, 40)
        for day in range(7):
            w.transaction_repo.append(
                TransactionRecord(
                    product_id="P1",
                    transaction_type=TransactionType.SALE,
                    quantity=-3,
                    created_at=START - timedelta(days=day),
                )
            )
        return w

    def test_run_and_show(self):
        w = self._with_sales()
        assert RunForecastHandler(w.estimator).handle(method="trend") == {"P1": 30}
        lines = ShowForecastHandler(w.estimator).handle("P1")
        assert len(lines) == 30
        assert lines[0].forecast_date == (START.date() + timedelta(days=1)).isoformat()
        assert lines[0].method == "trend"

    def test_unknown_method_rejected(self):
        w = self._with_sales()
        with pytest.raises(ValidationError, match="Unknown forecast method"):
            RunForecastHandler(w.estimator).handle(method="crystal_ball")

    def test_replenishment(self):
        w = self._with_sales()
        dto = ShowReplenishmentHandler(w.estimator).handle("P1", lead_time_days=10)
        assert dto.daily_average == 3.0
        assert dto.recommended_reorder_quantity == 72
        assert dto.forecasted_stockout == (START.date() + timedelta(days=34)).isoformat()
