"""Application service: Adjust Stock use case.

Covers every on-hand change outside the order flow: receiving a purchase,
restocking, writing off damage, accepting a return, or a manual correction.
"""

from __future__ import annotations

from ire.application.dto import StockDTO
from ire.domain.exceptions import ValidationError
from ire.domain.model.value_objects import TransactionType
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class AdjustStockHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self,
        product_id: str,
        delta: int,
        transaction_type: str,
        reason: str | None = None,
        user_id: str | None = None,
        reference_id: str | None = None,
    ) -> StockDTO:
        try:
            kind = TransactionType(transaction_type)
        except ValueError:
            raise ValidationError(f"Unknown transaction type '{transaction_type}'")

        entry = self._service.adjust_stock(
            product_id=product_id,
            delta=delta,
            transaction_type=kind,
            reason=reason,
            user_id=user_id,
            reference_id=reference_id,
        )
        return StockDTO.from_entry(entry)
