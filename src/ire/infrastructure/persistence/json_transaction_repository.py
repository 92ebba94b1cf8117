"""JSON-file-backed, append-only implementation of TransactionRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ire.domain.model.transaction import TransactionRecord
from ire.domain.model.value_objects import TransactionType
from ire.domain.repository.transaction_repository import TransactionRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_datetime,
    load_datetime,
)


class JsonTransactionRepository(TransactionRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def append(self, record: TransactionRecord) -> None:
        with self._file.lock:
            records = self._file.load()
            records.append(self._to_raw(record))
            self._file.persist(records)

    def list_for_product(
        self,
        product_id: str,
        since: datetime | None = None,
        until: datetime | None = None,
        transaction_type: TransactionType | None = None,
    ) -> list[TransactionRecord]:
        result = []
        for raw in self._file.load():
            if raw["product_id"] != product_id:
                continue
            if transaction_type and raw["transaction_type"] != transaction_type.value:
                continue
            record = self._to_domain(raw)
            if since and record.created_at < since:
                continue
            if until and record.created_at > until:
                continue
            result.append(record)
        return result

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: TransactionRecord) -> dict:
        return {
            "id": record.id,
            "product_id": record.product_id,
            "transaction_type": record.transaction_type.value,
            "quantity": record.quantity,
            "reference_id": record.reference_id,
            "notes": record.notes,
            "created_at": dump_datetime(record.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> TransactionRecord:
        return TransactionRecord(
            id=raw["id"],
            product_id=raw["product_id"],
            transaction_type=TransactionType(raw["transaction_type"]),
            quantity=raw["quantity"],
            reference_id=raw.get("reference_id"),
            notes=raw.get("notes"),
            created_at=load_datetime(raw["created_at"]),
        )
