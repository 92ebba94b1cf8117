"""Integration tests for the stock and reservation use cases.

Uses in-memory fake repositories, no file I/O.
"""

import pytest

from ire.application.adjust_stock import AdjustStockHandler
from ire.application.commit_reservation import CommitReservationHandler
from ire.application.initialize_stock import InitializeStockHandler
from ire.application.reconcile_stock import ReconcileStockHandler
from ire.application.release_reservation import ReleaseReservationHandler
from ire.application.remove_tracking import RemoveTrackingHandler
from ire.application.reserve_stock import ReserveStockHandler
from ire.application.set_threshold import SetThresholdHandler
from ire.application.show_history import ShowAuditLogHandler, ShowTransactionsHandler
from ire.application.show_stock import ShowStockHandler
from ire.domain.exceptions import EntityNotFoundError, ValidationError
from tests.fakes import wire


def _setup():
    w = wire()
    InitializeStockHandler(w.service).handle("P1", 100, 20, 50, seller_id="S1")
    return w


class TestInitializeAndShow:

    def test_returns_dto_with_status(self):
        w = wire()
        dto = InitializeStockHandler(w.service).handle("P1", 5, 10, 20)
        assert dto.product_id == "P1"
        assert dto.available_stock == 5
        assert dto.status == "low_stock"

    def test_show_all_sorted(self):
        w = _setup()
        InitializeStockHandler(w.service).handle("A0", 0, 0, 0)
        lines = ShowStockHandler(w.service).handle()
        assert [line.product_id for line in lines] == ["A0", "P1"]
        assert lines[0].status == "out_of_stock"

    def test_show_low_only(self):
        w = _setup()
        InitializeStockHandler(w.service).handle("P2", 3, 10, 20)
        lines = ShowStockHandler(w.service).handle(low_only=True)
        assert [line.product_id for line in lines] == ["P2"]

    def test_show_one(self):
        w = _setup()
        [line] = ShowStockHandler(w.service).handle("P1")
        assert line.current_stock == 100

    def test_show_unknown(self):
        w = _setup()
        with pytest.raises(EntityNotFoundError):
            ShowStockHandler(w.service).handle("nope")


class TestReservationFlow:

    def test_reserve_commit_defaults_to_reserved_quantity(self):
        w = _setup()
        reservation = ReserveStockHandler(w.service).handle("P1", 30, idempotency_key="o-1")
        assert reservation.status == "active"

        committed = CommitReservationHandler(w.service).handle(reservation.id)

        assert committed.status == "committed"
        assert committed.committed_quantity == 30
        [line] = ShowStockHandler(w.service).handle("P1")
        assert line.current_stock == 70
        assert line.reserved_stock == 0

    def test_release(self):
        w = _setup()
        reservation = ReserveStockHandler(w.service).handle("P1", 30)
        released = ReleaseReservationHandler(w.service).handle(reservation.id)
        assert released.status == "released"

    def test_history_lists_records_in_order(self):
        w = _setup()
        reservation = ReserveStockHandler(w.service).handle("P1", 10)
        CommitReservationHandler(w.service).handle(reservation.id, actual_quantity=8)
        lines = ShowTransactionsHandler(w.service).handle("P1")
        assert [line.transaction_type for line in lines] == [
            "reservation_hold",
            "sale",
            "adjustment",
        ]
        assert lines[1].quantity == -8


class TestAdminChanges:

    def test_adjust_by_type_name(self):
        w = _setup()
        dto = AdjustStockHandler(w.service).handle("P1", 25, "restock", user_id="admin")
        assert dto.current_stock == 125
        [audit] = ShowAuditLogHandler(w.service).handle("P1")
        assert audit.action == "update_stock"
        assert (audit.old_value, audit.new_value) == ("100", "125")

    def test_unknown_type_rejected(self):
        w = _setup()
        with pytest.raises(ValidationError, match="Unknown transaction type"):
            AdjustStockHandler(w.service).handle("P1", 5, "gift")

    def test_set_threshold(self):
        w = _setup()
        dto = SetThresholdHandler(w.service).handle("P1", 5, reorder_quantity=15)
        assert dto.minimum_threshold == 5
        assert dto.reorder_quantity == 15

    def test_remove_tracking(self):
        w = _setup()
        RemoveTrackingHandler(w.service).handle("P1", user_id="admin")
        assert ShowStockHandler(w.service).handle() == []

    def test_reconcile_all(self):
        w = _setup()
        InitializeStockHandler(w.service).handle("P2", 10, 0, 0)
        ReserveStockHandler(w.service).handle("P2", 4)
        reports = ReconcileStockHandler(w.service).handle()
        assert [r.product_id for r in reports] == ["P1", "P2"]
        assert all(r.consistent for r in reports)
