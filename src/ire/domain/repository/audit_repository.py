"""Abstract append-only sink for InventoryAuditLogEntry records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ire.domain.model.audit import InventoryAuditLogEntry


class AuditLogRepository(ABC):

    @abstractmethod
    def append(self, entry: InventoryAuditLogEntry) -> None:
        """Write an entry. Entries are never updated or deleted."""

    @abstractmethod
    def list_for_product(self, product_id: str) -> list[InventoryAuditLogEntry]:
        """Return a product's audit trail, oldest first."""
