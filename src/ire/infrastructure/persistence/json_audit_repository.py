"""JSON-file-backed, append-only implementation of AuditLogRepository."""

from __future__ import annotations

from pathlib import Path

from ire.domain.model.audit import InventoryAuditLogEntry
from ire.domain.model.value_objects import AuditAction
from ire.domain.repository.audit_repository import AuditLogRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_datetime,
    load_datetime,
)


class JsonAuditLogRepository(AuditLogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def append(self, entry: InventoryAuditLogEntry) -> None:
        with self._file.lock:
            records = self._file.load()
            records.append(
                {
                    "id": entry.id,
                    "product_id": entry.product_id,
                    "user_id": entry.user_id,
                    "action": entry.action.value,
                    "old_value": entry.old_value,
                    "new_value": entry.new_value,
                    "reason": entry.reason,
                    "created_at": dump_datetime(entry.created_at),
                }
            )
            self._file.persist(records)

    def list_for_product(self, product_id: str) -> list[InventoryAuditLogEntry]:
        return [
            InventoryAuditLogEntry(
                id=raw["id"],
                product_id=raw["product_id"],
                user_id=raw["user_id"],
                action=AuditAction(raw["action"]),
                old_value=raw.get("old_value"),
                new_value=raw.get("new_value"),
                reason=raw.get("reason"),
                created_at=load_datetime(raw["created_at"]),
            )
            for raw in self._file.load()
            if raw["product_id"] == product_id
        ]
