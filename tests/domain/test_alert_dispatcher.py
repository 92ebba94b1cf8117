"""Unit tests for best-effort alert delivery."""

from ire.domain.model.alert import AlertPolicy
from ire.domain.model.value_objects import TransactionType
from ire.domain.service.alert_dispatcher import AlertDispatcher
from tests.fakes import FailingNotifier, RecordingNotifier, wire


class TestDispatch:

    def test_new_alert_delivered_after_mutation(self):
        w = wire()
        w.service.initialize("P1", 20, 10, 50, seller_id="S1")
        w.service.reserve("P1", 15)

        [sent] = w.notifier.sent
        assert sent.product_id == "P1"
        [alert] = w.alerts.list_open_alerts()
        assert not alert.pending_delivery
        assert alert.delivered_at == w.clock.now
        assert w.policy_repo.get("P1").last_alert_sent == w.clock.now

    def test_refresh_does_not_resend(self):
        w = wire()
        w.service.initialize("P1", 20, 10, 50)
        w.service.reserve("P1", 15)
        w.service.reserve("P1", 1)
        assert len(w.notifier.sent) == 1

    def test_notifier_failure_does_not_fail_mutation(self):
        w = wire(notifier=FailingNotifier())
        w.service.initialize("P1", 20, 10, 50)

        reservation = w.service.reserve("P1", 15)

        assert reservation.is_active
        assert w.notifier.attempts == 1
        [alert] = w.alerts.list_open_alerts()
        assert alert.pending_delivery

    def test_pending_alert_retried_next_cycle(self):
        w = wire(notifier=FailingNotifier())
        w.service.initialize("P1", 20, 10, 50)
        w.service.reserve("P1", 15)

        recorder = RecordingNotifier()
        retry = AlertDispatcher(w.alert_repo, w.alerts, recorder, w.locks, clock=w.clock)

        assert retry.dispatch_pending() == 1
        assert len(recorder.sent) == 1
        assert w.alert_repo.list_pending_delivery() == []

    def test_delivery_deferred_inside_cool_down(self):
        w = wire()
        w.service.initialize("P1", 20, 10, 50)
        w.policy_repo.save(AlertPolicy(product_id="P1", last_alert_sent=w.clock.now))

        w.service.reserve("P1", 15)

        assert w.notifier.sent == []
        assert len(w.alert_repo.list_pending_delivery("P1")) == 1

        w.clock.advance(hours=24)
        assert w.dispatcher.dispatch_pending() == 1
        assert len(w.notifier.sent) == 1

    def test_acknowledged_alert_never_delivered(self):
        w = wire(notifier=FailingNotifier())
        w.service.initialize("P1", 20, 10, 50)
        w.service.reserve("P1", 15)
        [alert] = w.alerts.list_open_alerts()
        w.alerts.acknowledge(alert.id, user_id="seller-1")

        recorder = RecordingNotifier()
        retry = AlertDispatcher(w.alert_repo, w.alerts, recorder, w.locks, clock=w.clock)
        assert retry.dispatch_pending() == 0
        assert recorder.sent == []


class TestDeliveryIsolation:

    def test_bookkeeping_failure_does_not_fail_mutation(self, monkeypatch):
        w = wire()
        w.service.initialize("P1", 20, 10, 50)

        def disk_full(alert):
            raise OSError("disk full")

        send = w.notifier.send

        def send_then_lose_disk(alert):
            send(alert)
            monkeypatch.setattr(w.alert_repo, "save", disk_full)

        monkeypatch.setattr(w.notifier, "send", send_then_lose_disk)

        reservation = w.service.reserve("P1", 15)

        assert reservation.is_active
        assert w.service.get_stock("P1").reserved_stock == 15
        assert len(w.notifier.sent) == 1
        [alert] = w.alert_repo.list_pending_delivery("P1")
        assert alert.delivered_at is None

    def test_lookup_failure_does_not_fail_mutation(self, monkeypatch):
        w = wire()
        w.service.initialize("P1", 20, 10, 50)

        def unavailable(product_id=None):
            raise OSError("alerts store unavailable")

        monkeypatch.setattr(w.alert_repo, "list_pending_delivery", unavailable)

        entry = w.service.adjust_stock("P1", -15, TransactionType.DAMAGE)

        assert entry.current_stock == 5
        assert w.notifier.sent == []
