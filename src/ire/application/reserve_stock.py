"""Application service: Reserve Stock use case.

Called by the order pipeline when an order is placed. The order's own ID
is a natural idempotency key, so a retried placement never holds twice.
"""

from __future__ import annotations

from ire.application.dto import ReservationDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ReserveStockHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self,
        product_id: str,
        quantity: int,
        idempotency_key: str | None = None,
        reference_id: str | None = None,
    ) -> ReservationDTO:
        reservation = self._service.reserve(
            product_id=product_id,
            quantity=quantity,
            idempotency_key=idempotency_key,
            reference_id=reference_id,
        )
        return ReservationDTO.from_reservation(reservation)
