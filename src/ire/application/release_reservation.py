"""Application service: Release Reservation use case (order cancelled)."""

from __future__ import annotations

from ire.application.dto import ReservationDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ReleaseReservationHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(self, reservation_id: str) -> ReservationDTO:
        return ReservationDTO.from_reservation(self._service.release(reservation_id))
