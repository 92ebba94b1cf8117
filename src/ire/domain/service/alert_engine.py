"""Domain service: Alert Engine.

Decides, after every ledger mutation, whether a product needs a new
low-stock alert, a refresh of the alert already open, or nothing at all.

Per-product state machine:
  Normal              -> Alerted(level)  when available < minimum threshold
  Alerted(level)      -> Alerted(level') snapshot refreshed in place
  Alerted(level)      -> Normal          implicitly, once stock recovers
                                         (no record is written for recovery)
Acknowledging an alert closes it regardless of stock level. A closed alert
is only followed by a new one once the product's cool-down has elapsed
since the last alert was raised.

``evaluate`` must run inside the product's lock, in the same unit of work
as the mutation that triggered it.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

import structlog

from ire.domain.exceptions import EntityNotFoundError
from ire.domain.model.alert import (
    DEFAULT_ALERT_FREQUENCY_HOURS,
    AlertPolicy,
    AlertState,
    LowStockAlert,
    classify,
)
from ire.domain.model.audit import InventoryAuditLogEntry
from ire.domain.model.stock_ledger import StockLedgerEntry, utcnow
from ire.domain.model.value_objects import AuditAction
from ire.domain.repository.alert_policy_repository import AlertPolicyRepository
from ire.domain.repository.alert_repository import AlertRepository
from ire.domain.repository.audit_repository import AuditLogRepository
from ire.domain.service.product_locks import ProductLockRegistry

logger = structlog.get_logger(__name__)


class AlertEngine:

    def __init__(
        self,
        alert_repo: AlertRepository,
        policy_repo: AlertPolicyRepository,
        audit_repo: AuditLogRepository,
        locks: ProductLockRegistry,
        default_frequency_hours: int = DEFAULT_ALERT_FREQUENCY_HOURS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._alert_repo = alert_repo
        self._policy_repo = policy_repo
        self._audit_repo = audit_repo
        self._locks = locks
        self._default_frequency_hours = default_frequency_hours
        self._clock = clock

    # --- Evaluation -----------------------------------------------------------

    def policy_for(self, product_id: str, seller_id: str | None = None) -> AlertPolicy:
        policy = self._policy_repo.get(product_id)
        if policy is None:
            policy = AlertPolicy(
                product_id=product_id,
                seller_id=seller_id,
                alert_frequency_hours=self._default_frequency_hours,
            )
        return policy

    def evaluate(self, entry: StockLedgerEntry) -> LowStockAlert | None:
        """Raise, refresh or suppress an alert for the entry's current levels.

        Returns the alert that was created or refreshed, or None.
        """
        level = classify(entry)
        if level is None:
            return None

        policy = self.policy_for(entry.product_id, entry.seller_id)
        if not policy.is_active:
            return None

        now = self._clock()
        open_alert = self._alert_repo.get_open(entry.product_id)

        if open_alert is not None:
            open_alert.refresh(entry, level, at=now)
            if not open_alert.pending_delivery and not policy.cooling_down(
                open_alert.delivered_at or open_alert.created_at, now
            ):
                # Still unacknowledged after a full cool-down: notify again
                open_alert.rearm()
                logger.info(
                    "Open alert re-armed",
                    product_id=entry.product_id,
                    alert_id=open_alert.id,
                    alert_type=level.value,
                )
            self._alert_repo.save(open_alert)
            return open_alert

        latest = self._alert_repo.latest_for(entry.product_id)
        if latest is not None and policy.cooling_down(latest.created_at, now):
            logger.debug(
                "Alert suppressed during cool-down",
                product_id=entry.product_id,
                last_alert_at=latest.created_at.isoformat(),
            )
            return None

        alert = LowStockAlert.raise_for(entry, level, at=now)
        if alert.seller_id is None:
            alert.seller_id = policy.seller_id
        self._alert_repo.save(alert)
        logger.info(
            "Low stock alert raised",
            product_id=entry.product_id,
            alert_id=alert.id,
            alert_type=level.value,
            available_stock=entry.available_stock,
            minimum_threshold=entry.minimum_threshold,
        )
        return alert

    # --- Queries --------------------------------------------------------------

    def state_for(self, product_id: str) -> AlertState:
        open_alert = self._alert_repo.get_open(product_id)
        if open_alert is None:
            return AlertState(product_id=product_id)
        return AlertState(
            product_id=product_id,
            level=open_alert.alert_type,
            since=open_alert.created_at,
            alert_id=open_alert.id,
        )

    def list_open_alerts(self, seller_id: str | None = None) -> list[LowStockAlert]:
        return self._alert_repo.list_open(seller_id)

    def list_alerts(self, product_id: str) -> list[LowStockAlert]:
        return self._alert_repo.list_for_product(product_id)

    # --- Caller-facing mutations ----------------------------------------------

    def acknowledge(
        self, alert_id: str, user_id: str, reason: str | None = None
    ) -> LowStockAlert:
        """Close an open alert.

        Raises EntityNotFoundError for unknown alerts and
        AlreadyAcknowledgedError for alerts that are already closed.
        """
        found = self._alert_repo.get_by_id(alert_id)
        if found is None:
            raise EntityNotFoundError(f"Alert {alert_id} not found")

        def _acknowledge() -> LowStockAlert:
            alert = self._alert_repo.get_by_id(alert_id)
            if alert is None:
                raise EntityNotFoundError(f"Alert {alert_id} not found")
            now = self._clock()
            alert.acknowledge(user_id, at=now)
            self._alert_repo.save(alert)
            self._audit_repo.append(
                InventoryAuditLogEntry(
                    product_id=alert.product_id,
                    user_id=user_id,
                    action=AuditAction.ACKNOWLEDGE_ALERT,
                    old_value="open",
                    new_value="acknowledged",
                    reason=reason,
                    created_at=now,
                )
            )
            return alert

        alert = self._locks.run(found.product_id, _acknowledge)
        logger.info(
            "Alert acknowledged",
            alert_id=alert_id,
            product_id=alert.product_id,
            user_id=user_id,
        )
        return alert

    def configure_alerts(
        self,
        product_id: str,
        alert_frequency_hours: int | None = None,
        is_active: bool | None = None,
        seller_id: str | None = None,
    ) -> AlertPolicy:
        """Create or update the alert policy of a product."""

        def _configure() -> AlertPolicy:
            policy = self.policy_for(product_id, seller_id)
            if alert_frequency_hours is not None:
                policy = replace(policy, alert_frequency_hours=alert_frequency_hours)
            if is_active is not None:
                policy.is_active = is_active
            if seller_id is not None:
                policy.seller_id = seller_id
            self._policy_repo.save(policy)
            return policy

        policy = self._locks.run(product_id, _configure)
        logger.info(
            "Alert policy configured",
            product_id=product_id,
            alert_frequency_hours=policy.alert_frequency_hours,
            is_active=policy.is_active,
        )
        return policy

    def record_policy(self, policy: AlertPolicy) -> None:
        self._policy_repo.save(policy)

    def forget(self, product_id: str, user_id: str, at: datetime | None = None) -> None:
        """Close the open alert and drop the policy of an untracked product.

        Called under the product lock. The alert itself is kept as history.
        """
        alert = self._alert_repo.get_open(product_id)
        if alert is not None:
            alert.acknowledge(user_id, at=at or self._clock())
            self._alert_repo.save(alert)
        self._policy_repo.delete(product_id)
