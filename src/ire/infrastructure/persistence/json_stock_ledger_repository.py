"""JSON-file-backed implementation of StockLedgerRepository.

The version compare-and-set re-reads the file on every save, so a write
based on a stale read is rejected even when it comes from another process.
The read, compare and write are only atomic within one process though: the
guarding lock is a thread lock, not an OS file lock. Two processes saving
the same product at the same instant can both pass the check, and the later
write wins. Run a single writer process per data directory.
"""

from __future__ import annotations

from pathlib import Path

from ire.domain.exceptions import (
    AlreadyExistsError,
    ConcurrencyConflictError,
    EntityNotFoundError,
)
from ire.domain.model.stock_ledger import StockLedgerEntry
from ire.domain.repository.stock_ledger_repository import StockLedgerRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_datetime,
    load_datetime,
)


class JsonStockLedgerRepository(StockLedgerRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- StockLedgerRepository interface --------------------------------------

    def get_by_product_id(self, product_id: str) -> StockLedgerEntry | None:
        for raw in self._file.load():
            if raw["product_id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[StockLedgerEntry]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def add(self, entry: StockLedgerEntry) -> None:
        with self._file.lock:
            records = self._file.load()
            if any(raw["product_id"] == entry.product_id for raw in records):
                raise AlreadyExistsError(
                    f"Product '{entry.product_id}' already has a stock record"
                )
            records.append(self._to_raw(entry))
            self._file.persist(records)

    def save(self, entry: StockLedgerEntry) -> None:
        with self._file.lock:
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["product_id"] != entry.product_id:
                    continue
                if raw.get("version", 0) != entry.version:
                    raise ConcurrencyConflictError(
                        f"Stock record for product '{entry.product_id}' changed "
                        f"(expected version {entry.version}, found {raw.get('version', 0)})"
                    )
                entry.version += 1
                records[i] = self._to_raw(entry)
                self._file.persist(records)
                return
        raise EntityNotFoundError(f"No stock record for product '{entry.product_id}'")

    def delete(self, product_id: str) -> None:
        with self._file.lock:
            records = [r for r in self._file.load() if r["product_id"] != product_id]
            self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(entry: StockLedgerEntry) -> dict:
        return {
            "product_id": entry.product_id,
            "seller_id": entry.seller_id,
            "current_stock": entry.current_stock,
            "reserved_stock": entry.reserved_stock,
            "available_stock": entry.available_stock,
            "minimum_threshold": entry.minimum_threshold,
            "reorder_quantity": entry.reorder_quantity,
            "initial_stock": entry.initial_stock,
            "last_restocked_at": dump_datetime(entry.last_restocked_at),
            "version": entry.version,
            "created_at": dump_datetime(entry.created_at),
            "updated_at": dump_datetime(entry.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> StockLedgerEntry:
        # available_stock is derived and never read back
        return StockLedgerEntry(
            product_id=raw["product_id"],
            seller_id=raw.get("seller_id"),
            current_stock=raw["current_stock"],
            reserved_stock=raw.get("reserved_stock", 0),
            minimum_threshold=raw["minimum_threshold"],
            reorder_quantity=raw.get("reorder_quantity", 0),
            initial_stock=raw.get("initial_stock", 0),
            last_restocked_at=load_datetime(raw.get("last_restocked_at")),
            version=raw.get("version", 0),
            created_at=load_datetime(raw["created_at"]),
            updated_at=load_datetime(raw["updated_at"]),
        )
