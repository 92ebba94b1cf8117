"""JSON-file-backed implementation of AlertRepository."""

from __future__ import annotations

from pathlib import Path

from ire.domain.model.alert import LowStockAlert
from ire.domain.model.value_objects import AlertType
from ire.domain.repository.alert_repository import AlertRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_datetime,
    load_datetime,
)


class JsonAlertRepository(AlertRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- AlertRepository interface --------------------------------------------

    def get_by_id(self, alert_id: str) -> LowStockAlert | None:
        for raw in self._file.load():
            if raw["id"] == alert_id:
                return self._to_domain(raw)
        return None

    def get_open(self, product_id: str) -> LowStockAlert | None:
        for raw in self._file.load():
            if raw["product_id"] == product_id and not raw["acknowledged"]:
                return self._to_domain(raw)
        return None

    def latest_for(self, product_id: str) -> LowStockAlert | None:
        alerts = self.list_for_product(product_id)
        return alerts[-1] if alerts else None

    def list_for_product(self, product_id: str) -> list[LowStockAlert]:
        alerts = [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["product_id"] == product_id
        ]
        return sorted(alerts, key=lambda a: a.created_at)

    def list_open(self, seller_id: str | None = None) -> list[LowStockAlert]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if not raw["acknowledged"]
            and (seller_id is None or raw.get("seller_id") == seller_id)
        ]

    def list_pending_delivery(self, product_id: str | None = None) -> list[LowStockAlert]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw.get("pending_delivery")
            and not raw["acknowledged"]
            and (product_id is None or raw["product_id"] == product_id)
        ]

    def save(self, alert: LowStockAlert) -> None:
        with self._file.lock:
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] == alert.id:
                    records[i] = self._to_raw(alert)
                    break
            else:
                records.append(self._to_raw(alert))
            self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(alert: LowStockAlert) -> dict:
        return {
            "id": alert.id,
            "product_id": alert.product_id,
            "seller_id": alert.seller_id,
            "alert_type": alert.alert_type.value,
            "current_stock": alert.current_stock,
            "available_stock": alert.available_stock,
            "minimum_threshold": alert.minimum_threshold,
            "acknowledged": alert.acknowledged,
            "acknowledged_at": dump_datetime(alert.acknowledged_at),
            "acknowledged_by": alert.acknowledged_by,
            "pending_delivery": alert.pending_delivery,
            "delivered_at": dump_datetime(alert.delivered_at),
            "created_at": dump_datetime(alert.created_at),
            "updated_at": dump_datetime(alert.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> LowStockAlert:
        return LowStockAlert(
            id=raw["id"],
            product_id=raw["product_id"],
            seller_id=raw.get("seller_id"),
            alert_type=AlertType(raw["alert_type"]),
            current_stock=raw["current_stock"],
            available_stock=raw["available_stock"],
            minimum_threshold=raw["minimum_threshold"],
            acknowledged=raw["acknowledged"],
            acknowledged_at=load_datetime(raw.get("acknowledged_at")),
            acknowledged_by=raw.get("acknowledged_by"),
            pending_delivery=raw.get("pending_delivery", False),
            delivered_at=load_datetime(raw.get("delivered_at")),
            created_at=load_datetime(raw["created_at"]),
            updated_at=load_datetime(raw["updated_at"]),
        )
