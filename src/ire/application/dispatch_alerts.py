"""Application service: Dispatch Alerts use case.

Retries delivery of alerts left pending by an earlier notifier failure or
deferred by a seller's cool-down. Meant for a periodic scheduler.
"""

from __future__ import annotations

from ire.domain.service.alert_dispatcher import AlertDispatcher


class DispatchAlertsHandler:

    def __init__(self, dispatcher: AlertDispatcher) -> None:
        self._dispatcher = dispatcher

    def handle(self, product_id: str | None = None) -> int:
        return self._dispatcher.dispatch_pending(product_id)
