"""Application service: Show Stock use case (query)."""

from __future__ import annotations

from ire.application.dto import StockDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ShowStockHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self, product_id: str | None = None, low_only: bool = False
    ) -> list[StockDTO]:
        """One product's stock, or every tracked (or every low) product."""
        if product_id is not None:
            return [StockDTO.from_entry(self._service.get_stock(product_id))]
        entries = self._service.list_low_stock() if low_only else self._service.list_stock()
        entries = sorted(entries, key=lambda e: e.product_id)
        return [StockDTO.from_entry(entry) for entry in entries]
