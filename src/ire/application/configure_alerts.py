"""Application service: Configure Alerts use case."""

from __future__ import annotations

from ire.application.dto import AlertPolicyDTO
from ire.domain.service.alert_engine import AlertEngine
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)


class ConfigureAlertsHandler:

    def __init__(
        self,
        service: InventoryReservationService,
        alert_engine: AlertEngine,
    ) -> None:
        self._service = service
        self._alert_engine = alert_engine

    def handle(
        self,
        product_id: str,
        alert_frequency_hours: int | None = None,
        is_active: bool | None = None,
        seller_id: str | None = None,
    ) -> AlertPolicyDTO:
        entry = self._service.get_stock(product_id)
        policy = self._alert_engine.configure_alerts(
            product_id,
            alert_frequency_hours=alert_frequency_hours,
            is_active=is_active,
            seller_id=seller_id or entry.seller_id,
        )
        return AlertPolicyDTO.from_policy(policy)
