"""Application service: Initialize Stock use case."""

from __future__ import annotations

from ire.application.dto import StockDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class InitializeStockHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self,
        product_id: str,
        initial_stock: int,
        minimum_threshold: int,
        reorder_quantity: int,
        seller_id: str | None = None,
        user_id: str | None = None,
    ) -> StockDTO:
        entry = self._service.initialize(
            product_id=product_id,
            initial_stock=initial_stock,
            minimum_threshold=minimum_threshold,
            reorder_quantity=reorder_quantity,
            seller_id=seller_id,
            user_id=user_id,
        )
        return StockDTO.from_entry(entry)
