"""Abstract append-only store for TransactionRecords."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ire.domain.model.transaction import TransactionRecord
from ire.domain.model.value_objects import TransactionType


class TransactionRepository(ABC):

    @abstractmethod
    def append(self, record: TransactionRecord) -> None:
        """Write a record. Records are never updated or deleted."""

    @abstractmethod
    def list_for_product(
        self,
        product_id: str,
        since: datetime | None = None,
        until: datetime | None = None,
        transaction_type: TransactionType | None = None,
    ) -> list[TransactionRecord]:
        """Return a product's records in creation order, optionally filtered."""
