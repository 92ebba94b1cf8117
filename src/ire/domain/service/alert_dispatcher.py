"""Alert delivery to the notification subsystem.

Delivery is decoupled from stock mutation: it runs after the product lock is
released and is best-effort. A notifier failure is logged and the alert stays
pending for the next dispatch cycle; it never reaches the mutation caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime

import structlog

from ire.domain.model.alert import LowStockAlert
from ire.domain.model.stock_ledger import utcnow
from ire.domain.repository.alert_repository import AlertRepository
from ire.domain.service.alert_engine import AlertEngine
from ire.domain.service.product_locks import ProductLockRegistry

logger = structlog.get_logger(__name__)


class AlertNotifier(ABC):
    """Port to whatever tells a seller their stock is low."""

    @abstractmethod
    def send(self, alert: LowStockAlert) -> None:
        """Deliver one alert. Raise on failure."""


class AlertDispatcher:

    def __init__(
        self,
        alert_repo: AlertRepository,
        alert_engine: AlertEngine,
        notifier: AlertNotifier,
        locks: ProductLockRegistry,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._alert_repo = alert_repo
        self._alert_engine = alert_engine
        self._notifier = notifier
        self._locks = locks
        self._clock = clock

    def dispatch_pending(self, product_id: str | None = None) -> int:
        """Send every pending alert, optionally for one product.

        Returns the number of alerts delivered.
        """
        delivered = 0
        for alert in self._alert_repo.list_pending_delivery(product_id):
            if self._dispatch_one(alert):
                delivered += 1
        return delivered

    def _dispatch_one(self, alert: LowStockAlert) -> bool:
        policy = self._alert_engine.policy_for(alert.product_id, alert.seller_id)
        now = self._clock()
        if policy.cooling_down(policy.last_alert_sent, now):
            logger.debug(
                "Delivery deferred, seller notified recently",
                alert_id=alert.id,
                product_id=alert.product_id,
                last_alert_sent=policy.last_alert_sent.isoformat(),
            )
            return False

        try:
            self._notifier.send(alert)
        except Exception as exc:
            logger.warning(
                "Alert delivery failed, will retry next cycle",
                alert_id=alert.id,
                product_id=alert.product_id,
                error=str(exc),
            )
            return False

        try:
            self._locks.run(alert.product_id, lambda: self._mark_delivered(alert.id, now))
        except Exception as exc:
            # The notifier already has it; a duplicate next cycle is acceptable
            logger.warning(
                "Could not record alert delivery",
                alert_id=alert.id,
                product_id=alert.product_id,
                error=str(exc),
            )
            return False

        logger.info(
            "Alert delivered",
            alert_id=alert.id,
            product_id=alert.product_id,
            alert_type=alert.alert_type.value,
        )
        return True

    def _mark_delivered(self, alert_id: str, at: datetime) -> None:
        alert = self._alert_repo.get_by_id(alert_id)
        if alert is None:
            return
        alert.mark_delivered(at)
        self._alert_repo.save(alert)

        policy = self._alert_engine.policy_for(alert.product_id, alert.seller_id)
        policy.last_alert_sent = at
        self._alert_engine.record_policy(policy)
