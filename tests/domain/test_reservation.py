"""Unit tests for the Reservation lifecycle."""

import pytest

from ire.domain.exceptions import (
    AlreadyCommittedError,
    EntityNotFoundError,
    QuantityMismatchError,
    ValidationError,
)
from ire.domain.model.reservation import Reservation, ReservationStatus


def _reservation(quantity: int = 10) -> Reservation:
    return Reservation.create("P1", quantity, idempotency_key="order-1")


class TestReservation:

    def test_created_active(self):
        r = _reservation()
        assert r.status == ReservationStatus.ACTIVE
        assert r.is_active
        assert len(r.id) == 32

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            Reservation.create("P1", 0)

    def test_matches_same_request(self):
        r = _reservation(10)
        assert r.matches("P1", 10)
        assert not r.matches("P1", 11)
        assert not r.matches("P2", 10)

    def test_release(self):
        r = _reservation()
        assert r.release() is True
        assert r.status == ReservationStatus.RELEASED
        assert r.released_at is not None

    def test_second_release_is_noop(self):
        r = _reservation()
        r.release()
        assert r.release() is False

    def test_release_after_commit_rejected(self):
        r = _reservation()
        r.commit(10)
        with pytest.raises(AlreadyCommittedError):
            r.release()

    def test_commit_records_shipped_quantity(self):
        r = _reservation(10)
        r.commit(8)
        assert r.status == ReservationStatus.COMMITTED
        assert r.committed_quantity == 8

    def test_commit_twice_rejected(self):
        r = _reservation()
        r.commit(10)
        with pytest.raises(AlreadyCommittedError):
            r.commit(10)

    def test_commit_after_release_rejected(self):
        r = _reservation()
        r.release()
        with pytest.raises(EntityNotFoundError, match="released"):
            r.commit(10)

    def test_overage_needs_override(self):
        r = _reservation(10)
        with pytest.raises(QuantityMismatchError, match="without an override"):
            r.commit(12)
        assert r.is_active
        r.commit(12, allow_overage=True)
        assert r.committed_quantity == 12
