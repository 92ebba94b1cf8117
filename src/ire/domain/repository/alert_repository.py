"""Abstract repository for LowStockAlert records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ire.domain.model.alert import LowStockAlert


class AlertRepository(ABC):

    @abstractmethod
    def get_by_id(self, alert_id: str) -> LowStockAlert | None:
        """Return an alert by its ID, or None if not found."""

    @abstractmethod
    def get_open(self, product_id: str) -> LowStockAlert | None:
        """Return the unacknowledged alert for a product, or None."""

    @abstractmethod
    def latest_for(self, product_id: str) -> LowStockAlert | None:
        """Return the most recently created alert for a product, or None."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[LowStockAlert]:
        """Return every alert raised for a product, oldest first."""

    @abstractmethod
    def list_open(self, seller_id: str | None = None) -> list[LowStockAlert]:
        """Return unacknowledged alerts, optionally for one seller."""

    @abstractmethod
    def list_pending_delivery(self, product_id: str | None = None) -> list[LowStockAlert]:
        """Return open alerts the notification subsystem has not received yet."""

    @abstractmethod
    def save(self, alert: LowStockAlert) -> None:
        """Persist a new alert or its acknowledgment/snapshot fields."""
