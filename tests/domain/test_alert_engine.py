"""Unit tests for low-stock alert evaluation, cool-down and acknowledgment."""

import pytest

from ire.domain.exceptions import (
    AlreadyAcknowledgedError,
    EntityNotFoundError,
    ValidationError,
)
from ire.domain.model.alert import AlertPolicy, classify
from ire.domain.model.stock_ledger import StockLedgerEntry
from ire.domain.model.value_objects import AlertType, AuditAction, TransactionType
from tests.fakes import wire


def _setup(stock: int = 20, threshold: int = 10):
    w = wire()
    w.service.initialize("P1", stock, threshold, 50, seller_id="S1")
    return w


class TestClassify:

    def test_healthy_stock_has_no_level(self):
        entry = StockLedgerEntry.open("P1", 20, 10, 5)
        assert classify(entry) is None

    def test_at_threshold_is_healthy(self):
        entry = StockLedgerEntry.open("P1", 10, 10, 5)
        assert classify(entry) is None

    def test_low_stock(self):
        entry = StockLedgerEntry.open("P1", 20, 10, 5)
        entry.reserved_stock = 15
        assert classify(entry) == AlertType.LOW_STOCK

    def test_critical_when_everything_reserved(self):
        entry = StockLedgerEntry.open("P1", 20, 10, 5)
        entry.reserved_stock = 20
        assert classify(entry) == AlertType.CRITICAL

    def test_out_of_stock(self):
        entry = StockLedgerEntry.open("P1", 0, 10, 5)
        assert classify(entry) == AlertType.OUT_OF_STOCK


class TestEvaluate:

    def test_single_open_alert_while_below_threshold(self):
        w = _setup()
        w.service.reserve("P1", 15)
        w.service.reserve("P1", 1)
        w.service.reserve("P1", 1)
        open_alerts = w.alerts.list_open_alerts()
        assert len(open_alerts) == 1
        assert open_alerts[0].available_stock == 3
        assert open_alerts[0].seller_id == "S1"

    def test_snapshot_follows_level_changes(self):
        w = _setup()
        w.service.reserve("P1", 15)
        w.service.reserve("P1", 5)
        [alert] = w.alerts.list_open_alerts()
        assert alert.alert_type == AlertType.CRITICAL
        assert alert.available_stock == 0

    def test_recovery_leaves_alert_open(self):
        w = _setup()
        reservation = w.service.reserve("P1", 15)
        w.service.release(reservation.id)
        state = w.alerts.state_for("P1")
        assert state.is_alerted
        assert state.level == AlertType.LOW_STOCK

    def test_no_alert_when_policy_inactive(self):
        w = _setup()
        w.alerts.configure_alerts("P1", is_active=False)
        w.service.reserve("P1", 15)
        assert w.alerts.list_alerts("P1") == []

    def test_acknowledged_alert_not_duplicated_within_cool_down(self):
        w = _setup()
        first = w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()
        w.alerts.acknowledge(alert.id, user_id="seller-1")

        w.service.release(first.id)
        w.clock.advance(hours=5)
        w.service.reserve("P1", 15)

        assert len(w.alerts.list_alerts("P1")) == 1
        assert not w.alerts.state_for("P1").is_alerted

    def test_new_alert_after_cool_down(self):
        w = _setup()
        first = w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()
        w.alerts.acknowledge(alert.id, user_id="seller-1")

        w.service.release(first.id)
        w.clock.advance(hours=25)
        w.service.reserve("P1", 15)

        alerts = w.alerts.list_alerts("P1")
        assert len(alerts) == 2
        assert alerts[-1].is_open

    def test_custom_frequency(self):
        w = _setup()
        w.alerts.configure_alerts("P1", alert_frequency_hours=2)
        first = w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()
        w.alerts.acknowledge(alert.id, user_id="seller-1")

        w.service.release(first.id)
        w.clock.advance(hours=3)
        w.service.reserve("P1", 15)
        assert len(w.alerts.list_alerts("P1")) == 2

    def test_unacknowledged_alert_rearmed_after_cool_down(self):
        w = _setup()
        w.service.reserve("P1", 15)
        assert len(w.notifier.sent) == 1

        w.clock.advance(hours=25)
        w.service.adjust_stock("P1", -1, TransactionType.DAMAGE)

        assert len(w.alerts.list_alerts("P1")) == 1
        assert len(w.notifier.sent) == 2
        assert w.notifier.sent[-1].current_stock == 19


class TestAcknowledge:

    def test_closes_alert_and_audits(self):
        w = _setup()
        w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()

        acked = w.alerts.acknowledge(alert.id, user_id="seller-1", reason="ordered more")

        assert acked.acknowledged
        assert acked.acknowledged_by == "seller-1"
        assert w.alerts.list_open_alerts() == []
        [audit] = w.audit_repo.entries
        assert audit.action == AuditAction.ACKNOWLEDGE_ALERT
        assert audit.reason == "ordered more"

    def test_second_acknowledge_rejected(self):
        w = _setup()
        w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()
        w.alerts.acknowledge(alert.id, user_id="seller-1")
        with pytest.raises(AlreadyAcknowledgedError):
            w.alerts.acknowledge(alert.id, user_id="seller-2")

    def test_user_required(self):
        w = _setup()
        w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()
        with pytest.raises(ValidationError, match="user is required"):
            w.alerts.acknowledge(alert.id, user_id="")

    def test_unknown_alert(self):
        w = _setup()
        with pytest.raises(EntityNotFoundError):
            w.alerts.acknowledge("missing", user_id="seller-1")


class TestPolicy:

    def test_defaults_when_unconfigured(self):
        w = _setup()
        policy = w.alerts.policy_for("P1")
        assert policy.alert_frequency_hours == 24
        assert policy.is_active

    def test_configure_persists(self):
        w = _setup()
        w.alerts.configure_alerts("P1", alert_frequency_hours=6, seller_id="S2")
        stored = w.policy_repo.get("P1")
        assert stored.alert_frequency_hours == 6
        assert stored.seller_id == "S2"

    def test_negative_frequency_rejected(self):
        with pytest.raises(ValidationError):
            AlertPolicy(product_id="P1", alert_frequency_hours=-1)

    def test_open_alerts_filtered_by_seller(self):
        w = _setup()
        w.service.initialize("P2", 5, 10, 10, seller_id="S2")
        w.service.reserve("P1", 15)
        assert [a.product_id for a in w.alerts.list_open_alerts("S2")] == ["P2"]
        assert len(w.alerts.list_open_alerts()) == 2
