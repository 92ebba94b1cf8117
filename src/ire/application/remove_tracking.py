"""Application service: Remove Tracking use case, run when a product is deleted."""

from __future__ import annotations

from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class RemoveTrackingHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(self, product_id: str, user_id: str, reason: str | None = None) -> None:
        self._service.remove_tracking(product_id, user_id=user_id, reason=reason)
