"""Application service: Set Threshold use case."""

from __future__ import annotations

from ire.application.dto import StockDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class SetThresholdHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self,
        product_id: str,
        minimum_threshold: int,
        reorder_quantity: int | None = None,
        user_id: str | None = None,
        reason: str | None = None,
    ) -> StockDTO:
        entry = self._service.set_threshold(
            product_id=product_id,
            minimum_threshold=minimum_threshold,
            reorder_quantity=reorder_quantity,
            user_id=user_id,
            reason=reason,
        )
        return StockDTO.from_entry(entry)
