"""Abstract repository for the StockLedgerEntry aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory) live
in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ire.domain.model.stock_ledger import StockLedgerEntry


class StockLedgerRepository(ABC):

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> StockLedgerEntry | None:
        """Return a copy of the ledger entry for a product, or None."""

    @abstractmethod
    def list_all(self) -> list[StockLedgerEntry]:
        """Return every ledger entry."""

    @abstractmethod
    def add(self, entry: StockLedgerEntry) -> None:
        """Persist a new entry. Raises AlreadyExistsError if one is tracked."""

    @abstractmethod
    def save(self, entry: StockLedgerEntry) -> None:
        """Compare-and-set an existing entry.

        Succeeds only if the stored version equals ``entry.version``, then
        bumps the version on both sides. Raises ConcurrencyConflictError
        otherwise, or EntityNotFoundError if the entry vanished.
        """

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove the entry for a product."""
