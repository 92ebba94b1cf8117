"""Application service: Commit Reservation use case (order fulfilled)."""

from __future__ import annotations

from ire.application.dto import ReservationDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class CommitReservationHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self,
        reservation_id: str,
        actual_quantity: int | None = None,
        allow_overage: bool = False,
        reference_id: str | None = None,
    ) -> ReservationDTO:
        """Commit a reservation.

        Args:
            reservation_id: The reservation to fulfill.
            actual_quantity: Units actually shipped. Defaults to the
                reserved quantity.
            allow_overage: Permit shipping more than was reserved.
            reference_id: Shipment or order reference for the sale record.
        """
        if actual_quantity is None:
            actual_quantity = self._service.get_reservation(reservation_id).quantity.value

        reservation = self._service.commit(
            reservation_id,
            actual_quantity=actual_quantity,
            allow_overage=allow_overage,
            reference_id=reference_id,
        )
        return ReservationDTO.from_reservation(reservation)
