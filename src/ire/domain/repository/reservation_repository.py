"""Abstract repository for Reservation handles."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ire.domain.model.reservation import Reservation


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> Reservation | None:
        """Return a reservation by its ID, or None if not found."""

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Reservation | None:
        """Return the reservation created under a caller-supplied key, or None.

        Keys are unique across all products.
        """

    @abstractmethod
    def list_active(self, product_id: str) -> list[Reservation]:
        """Return reservations still holding stock for a product."""

    @abstractmethod
    def save(self, reservation: Reservation) -> None:
        """Persist a new or updated reservation."""
