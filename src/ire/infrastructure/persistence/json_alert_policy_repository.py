"""JSON-file-backed implementation of AlertPolicyRepository."""

from __future__ import annotations

from pathlib import Path

from ire.domain.model.alert import AlertPolicy
from ire.domain.repository.alert_policy_repository import AlertPolicyRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_datetime,
    load_datetime,
)


class JsonAlertPolicyRepository(AlertPolicyRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    def get(self, product_id: str) -> AlertPolicy | None:
        for raw in self._file.load():
            if raw["product_id"] == product_id:
                return AlertPolicy(
                    product_id=raw["product_id"],
                    seller_id=raw.get("seller_id"),
                    alert_frequency_hours=raw["alert_frequency_hours"],
                    is_active=raw["is_active"],
                    last_alert_sent=load_datetime(raw.get("last_alert_sent")),
                )
        return None

    def save(self, policy: AlertPolicy) -> None:
        raw_policy = {
            "product_id": policy.product_id,
            "seller_id": policy.seller_id,
            "alert_frequency_hours": policy.alert_frequency_hours,
            "is_active": policy.is_active,
            "last_alert_sent": dump_datetime(policy.last_alert_sent),
        }
        with self._file.lock:
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["product_id"] == policy.product_id:
                    records[i] = raw_policy
                    break
            else:
                records.append(raw_policy)
            self._file.persist(records)

    def delete(self, product_id: str) -> None:
        with self._file.lock:
            records = [r for r in self._file.load() if r["product_id"] != product_id]
            self._file.persist(records)
