"""Application service: Acknowledge Alert use case."""

from __future__ import annotations

from ire.application.dto import AlertDTO
from ire.domain.service.alert_engine import AlertEngine


class AcknowledgeAlertHandler:

    def __init__(self, alert_engine: AlertEngine) -> None:
        self._alert_engine = alert_engine

    def handle(self, alert_id: str, user_id: str, reason: str | None = None) -> AlertDTO:
        alert = self._alert_engine.acknowledge(alert_id, user_id=user_id, reason=reason)
        return AlertDTO.from_alert(alert)
