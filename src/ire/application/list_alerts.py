"""Application service: List Alerts use case (query)."""

from __future__ import annotations

from ire.application.dto import AlertDTO
from ire.domain.service.alert_engine import AlertEngine


class ListAlertsHandler:

    def __init__(self, alert_engine: AlertEngine) -> None:
        self._alert_engine = alert_engine

    def handle(
        self,
        product_id: str | None = None,
        seller_id: str | None = None,
    ) -> list[AlertDTO]:
        """Full alert history of one product, or every open alert."""
        if product_id is not None:
            alerts = self._alert_engine.list_alerts(product_id)
        else:
            alerts = self._alert_engine.list_open_alerts(seller_id)
        return [AlertDTO.from_alert(alert) for alert in alerts]
