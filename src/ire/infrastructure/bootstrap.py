"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass

from ire.domain.service.alert_dispatcher import AlertDispatcher, AlertNotifier
from ire.domain.service.alert_engine import AlertEngine
from ire.domain.service.forecast_estimator import ForecastEstimator
from ire.domain.service.inventory_reservation_service import (
    InventoryReservationService,
)
from ire.domain.service.product_locks import ProductLockRegistry
from ire.infrastructure.config import Settings, get_settings
from ire.infrastructure.notification.logging_alert_notifier import LoggingAlertNotifier
from ire.infrastructure.persistence.json_alert_policy_repository import (
    JsonAlertPolicyRepository,
)
from ire.infrastructure.persistence.json_alert_repository import JsonAlertRepository
from ire.infrastructure.persistence.json_audit_repository import JsonAuditLogRepository
from ire.infrastructure.persistence.json_forecast_repository import (
    JsonForecastRepository,
)
from ire.infrastructure.persistence.json_reservation_repository import (
    JsonReservationRepository,
)
from ire.infrastructure.persistence.json_stock_ledger_repository import (
    JsonStockLedgerRepository,
)
from ire.infrastructure.persistence.json_transaction_repository import (
    JsonTransactionRepository,
)


@dataclass
class Container:
    """The wired services, shared by every command in one process."""

    settings: Settings
    reservations: InventoryReservationService
    alerts: AlertEngine
    dispatcher: AlertDispatcher
    forecasts: ForecastEstimator


def build_container(
    settings: Settings | None = None,
    notifier: AlertNotifier | None = None,
) -> Container:
    settings = settings or get_settings()
    data_dir = settings.data_dir

    ledger_repo = JsonStockLedgerRepository(data_dir / "stock_ledger.json")
    reservation_repo = JsonReservationRepository(data_dir / "reservations.json")
    transaction_repo = JsonTransactionRepository(data_dir / "transactions.json")
    alert_repo = JsonAlertRepository(data_dir / "alerts.json")
    policy_repo = JsonAlertPolicyRepository(data_dir / "alert_policies.json")
    audit_repo = JsonAuditLogRepository(data_dir / "audit_log.json")
    forecast_repo = JsonForecastRepository(data_dir / "forecasts.json")

    locks = ProductLockRegistry(
        timeout_seconds=settings.lock_timeout_seconds,
        max_retries=settings.max_conflict_retries,
        backoff_seconds=settings.retry_backoff_seconds,
    )
    alert_engine = AlertEngine(
        alert_repo=alert_repo,
        policy_repo=policy_repo,
        audit_repo=audit_repo,
        locks=locks,
        default_frequency_hours=settings.alert_frequency_hours,
    )
    dispatcher = AlertDispatcher(
        alert_repo=alert_repo,
        alert_engine=alert_engine,
        notifier=notifier or LoggingAlertNotifier(),
        locks=locks,
    )
    reservations = InventoryReservationService(
        ledger_repo=ledger_repo,
        reservation_repo=reservation_repo,
        transaction_repo=transaction_repo,
        audit_repo=audit_repo,
        alert_engine=alert_engine,
        locks=locks,
        dispatcher=dispatcher,
    )
    forecasts = ForecastEstimator(
        ledger_repo=ledger_repo,
        transaction_repo=transaction_repo,
        forecast_repo=forecast_repo,
        window_days=settings.forecast_window_days,
        horizon_days=settings.forecast_horizon_days,
        default_method=settings.forecast_method,
    )
    return Container(
        settings=settings,
        reservations=reservations,
        alerts=alert_engine,
        dispatcher=dispatcher,
        forecasts=forecasts,
    )
