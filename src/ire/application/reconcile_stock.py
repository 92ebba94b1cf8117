"""Application service: Reconcile Stock use case.

Rebuilds each ledger entry from its transaction history and reports any
drift. Read-only: drift is for an operator to investigate, not to
auto-correct.
"""

from __future__ import annotations

from ire.application.dto import ReconciliationDTO
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ReconcileStockHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(self, product_id: str | None = None) -> list[ReconciliationDTO]:
        if product_id is not None:
            product_ids = [product_id]
        else:
            product_ids = sorted(e.product_id for e in self._service.list_stock())

        reports = []
        for pid in product_ids:
            report = self._service.reconcile(pid)
            reports.append(
                ReconciliationDTO(
                    product_id=report.product_id,
                    recorded_current=report.recorded_current,
                    derived_current=report.derived_current,
                    recorded_reserved=report.recorded_reserved,
                    derived_reserved=report.derived_reserved,
                    consistent=report.is_consistent,
                )
            )
        return reports
