"""Application services: stock history and audit trail queries."""

from __future__ import annotations

from datetime import datetime

from ire.application.dto import AuditEntryDTO, TransactionDTO, format_timestamp
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ShowTransactionsHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(
        self,
        product_id: str,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[TransactionDTO]:
        self._service.get_stock(product_id)
        return [
            TransactionDTO(
                transaction_type=record.transaction_type.value,
                quantity=record.quantity,
                reference_id=record.reference_id,
                notes=record.notes,
                created_at=format_timestamp(record.created_at),
            )
            for record in self._service.list_transactions(product_id, since, until)
        ]


class ShowAuditLogHandler:

    def __init__(self, service: InventoryReservationService) -> None:
        self._service = service

    def handle(self, product_id: str) -> list[AuditEntryDTO]:
        return [
            AuditEntryDTO(
                user_id=entry.user_id,
                action=entry.action.value,
                old_value=entry.old_value,
                new_value=entry.new_value,
                reason=entry.reason,
                created_at=format_timestamp(entry.created_at),
            )
            for entry in self._service.list_audit_log(product_id)
        ]
