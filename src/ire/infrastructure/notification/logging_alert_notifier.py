"""AlertNotifier that writes alerts to the structured log.

Stands in for an email or webhook channel: operators tail the log, or a log
shipper forwards ``low_stock_alert`` events to whoever is on call.
"""

from __future__ import annotations

import structlog

from ire.domain.model.alert import LowStockAlert
from ire.domain.service.alert_dispatcher import AlertNotifier

logger = structlog.get_logger(__name__)


class LoggingAlertNotifier(AlertNotifier):

    def send(self, alert: LowStockAlert) -> None:
        logger.warning(
            "low_stock_alert",
            alert_id=alert.id,
            product_id=alert.product_id,
            seller_id=alert.seller_id,
            alert_type=alert.alert_type.value,
            current_stock=alert.current_stock,
            available_stock=alert.available_stock,
            minimum_threshold=alert.minimum_threshold,
        )
