"""JSON-file-backed implementation of ReservationRepository."""

from __future__ import annotations

from pathlib import Path

from ire.domain.model.reservation import Reservation, ReservationStatus
from ire.domain.model.value_objects import Quantity
from ire.domain.repository.reservation_repository import ReservationRepository
from ire.infrastructure.persistence.json_file import (
    JsonFile,
    dump_datetime,
    load_datetime,
)


class JsonReservationRepository(ReservationRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path)

    # --- ReservationRepository interface --------------------------------------

    def get_by_id(self, reservation_id: str) -> Reservation | None:
        for raw in self._file.load():
            if raw["id"] == reservation_id:
                return self._to_domain(raw)
        return None

    def get_by_idempotency_key(self, key: str) -> Reservation | None:
        for raw in self._file.load():
            if raw.get("idempotency_key") == key:
                return self._to_domain(raw)
        return None

    def list_active(self, product_id: str) -> list[Reservation]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["product_id"] == product_id
            and raw["status"] == ReservationStatus.ACTIVE.value
        ]

    def save(self, reservation: Reservation) -> None:
        with self._file.lock:
            records = self._file.load()
            for i, raw in enumerate(records):
                if raw["id"] == reservation.id:
                    records[i] = self._to_raw(reservation)
                    break
            else:
                records.append(self._to_raw(reservation))
            self._file.persist(records)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(reservation: Reservation) -> dict:
        return {
            "id": reservation.id,
            "product_id": reservation.product_id,
            "quantity": reservation.quantity.value,
            "idempotency_key": reservation.idempotency_key,
            "reference_id": reservation.reference_id,
            "status": reservation.status.value,
            "created_at": dump_datetime(reservation.created_at),
            "released_at": dump_datetime(reservation.released_at),
            "committed_at": dump_datetime(reservation.committed_at),
            "committed_quantity": reservation.committed_quantity,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Reservation:
        return Reservation(
            id=raw["id"],
            product_id=raw["product_id"],
            quantity=Quantity(raw["quantity"]),
            idempotency_key=raw.get("idempotency_key"),
            reference_id=raw.get("reference_id"),
            status=ReservationStatus(raw["status"]),
            created_at=load_datetime(raw["created_at"]),
            released_at=load_datetime(raw.get("released_at")),
            committed_at=load_datetime(raw.get("committed_at")),
            committed_quantity=raw.get("committed_quantity"),
        )
