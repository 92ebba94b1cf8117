"""Domain service: Inventory Reservation.

The Reservation Manager. Every operation here is one unit of work against a
single product's ledger entry:

  1. take the product lock (bounded wait)
  2. reload the entry and validate the change
  3. compare-and-set the entry through the repository
  4. append the transaction record(s), and audit entry for admin changes
  5. evaluate alerts against the new levels
  6. release the lock, then hand pending alerts to the dispatcher

Steps 1-5 are retried from scratch on a write conflict, up to the lock
registry's budget, after which TransientConflictError reaches the caller.
Every other error is terminal and propagates untouched.

Reserve puts a soft hold on *available* stock; commit is the only place
on-hand stock leaves for an order. Concurrent orders therefore fail fast on
availability without touching the physical count until fulfillment.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import structlog

from ire.domain.exceptions import (
    AlreadyExistsError,
    EntityNotFoundError,
    OutstandingReservationsError,
    ValidationError,
)
from ire.domain.model.audit import InventoryAuditLogEntry
from ire.domain.model.reservation import Reservation
from ire.domain.model.stock_ledger import StockLedgerEntry, utcnow
from ire.domain.model.transaction import TransactionRecord, fold_on_hand
from ire.domain.model.value_objects import AuditAction, TransactionType
from ire.domain.repository.audit_repository import AuditLogRepository
from ire.domain.repository.reservation_repository import ReservationRepository
from ire.domain.repository.stock_ledger_repository import StockLedgerRepository
from ire.domain.repository.transaction_repository import TransactionRepository
from ire.domain.service.alert_dispatcher import AlertDispatcher
from ire.domain.service.alert_engine import AlertEngine
from ire.domain.service.product_locks import ProductLockRegistry

logger = structlog.get_logger(__name__)

_RESTOCK_TYPES = (TransactionType.RESTOCK, TransactionType.PURCHASE)


@dataclass(frozen=True)
class ReconciliationReport:
    """Ledger values compared with what the history says they should be."""

    product_id: str
    recorded_current: int
    derived_current: int
    recorded_reserved: int
    derived_reserved: int

    @property
    def is_consistent(self) -> bool:
        return (
            self.recorded_current == self.derived_current
            and self.recorded_reserved == self.derived_reserved
        )


class InventoryReservationService:

    def __init__(
        self,
        ledger_repo: StockLedgerRepository,
        reservation_repo: ReservationRepository,
        transaction_repo: TransactionRepository,
        audit_repo: AuditLogRepository,
        alert_engine: AlertEngine,
        locks: ProductLockRegistry,
        dispatcher: AlertDispatcher | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._ledger_repo = ledger_repo
        self._reservation_repo = reservation_repo
        self._transaction_repo = transaction_repo
        self._audit_repo = audit_repo
        self._alert_engine = alert_engine
        self._locks = locks
        self._dispatcher = dispatcher
        self._clock = clock

    # --- Ledger ---------------------------------------------------------------

    def get_stock(self, product_id: str) -> StockLedgerEntry:
        entry = self._ledger_repo.get_by_product_id(product_id)
        if entry is None:
            raise EntityNotFoundError(f"No stock record for product '{product_id}'")
        return entry

    def list_stock(self) -> list[StockLedgerEntry]:
        return self._ledger_repo.list_all()

    def list_low_stock(self) -> list[StockLedgerEntry]:
        """Tracked products whose available stock is below their threshold."""
        return [e for e in self._ledger_repo.list_all() if e.is_below_threshold]

    def initialize(
        self,
        product_id: str,
        initial_stock: int,
        minimum_threshold: int,
        reorder_quantity: int,
        seller_id: str | None = None,
        user_id: str | None = None,
    ) -> StockLedgerEntry:
        """Start tracking stock for a product.

        Raises AlreadyExistsError if the product is already tracked.
        """
        now = self._clock()
        entry = StockLedgerEntry.open(
            product_id=product_id,
            initial_stock=initial_stock,
            minimum_threshold=minimum_threshold,
            reorder_quantity=reorder_quantity,
            seller_id=seller_id,
            at=now,
        )

        def _initialize() -> StockLedgerEntry:
            if self._ledger_repo.get_by_product_id(entry.product_id) is not None:
                raise AlreadyExistsError(
                    f"Product '{entry.product_id}' already has a stock record"
                )
            self._ledger_repo.add(entry)
            if user_id:
                self._audit(
                    entry.product_id,
                    user_id,
                    AuditAction.INITIALIZE_STOCK,
                    old_value=None,
                    new_value=str(entry.current_stock),
                    reason="initial stock",
                    at=now,
                )
            self._alert_engine.evaluate(entry)
            return entry

        result = self._locks.run(entry.product_id, _initialize)
        logger.info(
            "Stock tracking started",
            product_id=result.product_id,
            initial_stock=initial_stock,
            minimum_threshold=minimum_threshold,
        )
        self._dispatch(result.product_id)
        return result

    def set_threshold(
        self,
        product_id: str,
        minimum_threshold: int,
        reorder_quantity: int | None = None,
        user_id: str | None = None,
        reason: str | None = None,
    ) -> StockLedgerEntry:
        """Change the alert trigger level (and optionally the reorder amount)."""

        def _set_threshold() -> StockLedgerEntry:
            entry = self.get_stock(product_id)
            old_threshold = entry.minimum_threshold
            now = self._clock()
            entry.change_threshold(minimum_threshold, reorder_quantity, at=now)
            self._ledger_repo.save(entry)
            if user_id:
                self._audit(
                    product_id,
                    user_id,
                    AuditAction.SET_THRESHOLD,
                    old_value=str(old_threshold),
                    new_value=str(entry.minimum_threshold),
                    reason=reason,
                    at=now,
                )
            self._alert_engine.evaluate(entry)
            return entry

        entry = self._locks.run(product_id, _set_threshold)
        logger.info(
            "Minimum threshold changed",
            product_id=product_id,
            minimum_threshold=entry.minimum_threshold,
            reorder_quantity=entry.reorder_quantity,
        )
        self._dispatch(product_id)
        return entry

    def remove_tracking(
        self, product_id: str, user_id: str, reason: str | None = None
    ) -> None:
        """Stop tracking a product that is being deleted.

        Only allowed when nothing is reserved. An open low-stock alert is
        closed so it is not delivered again. The transaction and audit
        history is kept.
        """
        if not user_id:
            raise ValidationError("Acting user is required to stop tracking")

        def _remove() -> None:
            entry = self.get_stock(product_id)
            active = self._reservation_repo.list_active(product_id)
            if entry.reserved_stock > 0 or active:
                raise OutstandingReservationsError(
                    f"Product '{product_id}' still has {entry.reserved_stock} units "
                    f"reserved across {len(active)} reservations"
                )
            now = self._clock()
            self._ledger_repo.delete(product_id)
            self._alert_engine.forget(product_id, user_id, at=now)
            self._audit(
                product_id,
                user_id,
                AuditAction.REMOVE_TRACKING,
                old_value=str(entry.current_stock),
                new_value=None,
                reason=reason,
                at=now,
            )

        self._locks.run(product_id, _remove)
        logger.info("Stock tracking removed", product_id=product_id, user_id=user_id)

    # --- Reservations ---------------------------------------------------------

    def get_reservation(self, reservation_id: str) -> Reservation:
        return self._find_reservation(reservation_id)

    def reserve(
        self,
        product_id: str,
        quantity: int,
        idempotency_key: str | None = None,
        reference_id: str | None = None,
    ) -> Reservation:
        """Hold ``quantity`` units of available stock.

        A retried call carrying the same ``idempotency_key`` returns the
        original reservation instead of holding stock twice.
        Raises InsufficientStockError if not enough stock is available.
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("Reservation quantity must be a positive integer")

        def _reserve() -> tuple[Reservation, bool]:
            if idempotency_key:
                existing = self._reservation_repo.get_by_idempotency_key(idempotency_key)
                if existing is not None:
                    if not existing.matches(product_id, quantity):
                        raise ValidationError(
                            f"Idempotency key '{idempotency_key}' was already used "
                            f"for a reservation of {existing.quantity.value} x "
                            f"'{existing.product_id}'"
                        )
                    return existing, False

            entry = self.get_stock(product_id)
            now = self._clock()
            entry.hold(quantity, at=now)
            self._ledger_repo.save(entry)

            reservation = Reservation.create(
                product_id=product_id,
                quantity=quantity,
                idempotency_key=idempotency_key,
                reference_id=reference_id,
                at=now,
            )
            self._reservation_repo.save(reservation)
            self._transaction_repo.append(
                TransactionRecord(
                    product_id=product_id,
                    transaction_type=TransactionType.RESERVATION_HOLD,
                    quantity=quantity,
                    reference_id=reference_id or reservation.id,
                    notes=f"reservation {reservation.id}",
                    created_at=now,
                )
            )
            self._alert_engine.evaluate(entry)
            return reservation, True

        reservation, created = self._locks.run(product_id, _reserve)
        if not created:
            logger.info(
                "Duplicate reserve call, returning original reservation",
                product_id=product_id,
                reservation_id=reservation.id,
                idempotency_key=idempotency_key,
            )
            return reservation

        logger.info(
            "Stock reserved",
            product_id=product_id,
            quantity=quantity,
            reservation_id=reservation.id,
        )
        self._dispatch(product_id)
        return reservation

    def release(self, reservation_id: str) -> Reservation:
        """Give a reservation's stock back.

        Releasing twice is a no-op. Raises AlreadyCommittedError if the
        reservation was fulfilled.
        """
        product_id = self._find_reservation(reservation_id).product_id

        def _release() -> tuple[Reservation, bool]:
            reservation = self._find_reservation(reservation_id)
            now = self._clock()
            if not reservation.release(at=now):
                return reservation, False

            entry = self.get_stock(product_id)
            entry.release_hold(reservation.quantity.value, at=now)
            self._ledger_repo.save(entry)
            self._reservation_repo.save(reservation)
            self._transaction_repo.append(
                TransactionRecord(
                    product_id=product_id,
                    transaction_type=TransactionType.RESERVATION_RELEASE,
                    quantity=-reservation.quantity.value,
                    reference_id=reservation.reference_id or reservation.id,
                    notes=f"reservation {reservation.id} released",
                    created_at=now,
                )
            )
            self._alert_engine.evaluate(entry)
            return reservation, True

        reservation, released = self._locks.run(product_id, _release)
        if released:
            logger.info(
                "Reservation released",
                product_id=product_id,
                reservation_id=reservation_id,
                quantity=reservation.quantity.value,
            )
            self._dispatch(product_id)
        else:
            logger.info(
                "Reservation already released", reservation_id=reservation_id
            )
        return reservation

    def commit(
        self,
        reservation_id: str,
        actual_quantity: int,
        allow_overage: bool = False,
        reference_id: str | None = None,
    ) -> Reservation:
        """Fulfill a reservation, taking ``actual_quantity`` off the shelf.

        The whole reservation leaves the reserved pool. A partial shipment or
        an approved overage is explained by an extra ``adjustment`` record.
        Raises QuantityMismatchError if ``actual_quantity`` exceeds the
        reservation without ``allow_overage``.
        """
        product_id = self._find_reservation(reservation_id).product_id

        def _commit() -> Reservation:
            reservation = self._find_reservation(reservation_id)
            reservation.check_commit(actual_quantity, allow_overage)

            entry = self.get_stock(product_id)
            now = self._clock()
            reserved = reservation.quantity.value
            entry.commit_hold(reserved, actual_quantity, at=now)
            self._ledger_repo.save(entry)

            reservation.commit(actual_quantity, allow_overage, at=now)
            self._reservation_repo.save(reservation)

            ref = reference_id or reservation.reference_id or reservation.id
            self._transaction_repo.append(
                TransactionRecord(
                    product_id=product_id,
                    transaction_type=TransactionType.SALE,
                    quantity=-actual_quantity,
                    reference_id=ref,
                    notes=f"reservation {reservation.id} committed",
                    created_at=now,
                )
            )
            difference = reserved - actual_quantity
            if difference:
                kind = "shortfall" if difference > 0 else "overage"
                self._transaction_repo.append(
                    TransactionRecord(
                        product_id=product_id,
                        transaction_type=TransactionType.ADJUSTMENT,
                        quantity=0,
                        reference_id=ref,
                        notes=(
                            f"reservation {reservation.id}: reserved {reserved}, "
                            f"shipped {actual_quantity} ({kind} {abs(difference)})"
                        ),
                        created_at=now,
                    )
                )
            self._alert_engine.evaluate(entry)
            return reservation

        reservation = self._locks.run(product_id, _commit)
        logger.info(
            "Reservation committed",
            product_id=product_id,
            reservation_id=reservation_id,
            reserved=reservation.quantity.value,
            shipped=actual_quantity,
        )
        self._dispatch(product_id)
        return reservation

    # --- Direct adjustments ---------------------------------------------------

    def adjust_stock(
        self,
        product_id: str,
        delta: int,
        transaction_type: TransactionType,
        reason: str | None = None,
        user_id: str | None = None,
        reference_id: str | None = None,
    ) -> StockLedgerEntry:
        """Change on-hand stock outside the order flow.

        Raises WouldUnderflowError if on-hand would go negative or below
        what is already reserved.
        """
        transaction_type.check_sign(delta)

        def _adjust() -> StockLedgerEntry:
            entry = self.get_stock(product_id)
            old_stock = entry.current_stock
            now = self._clock()
            entry.apply_delta(
                delta,
                restocked=transaction_type in _RESTOCK_TYPES,
                at=now,
            )
            self._ledger_repo.save(entry)
            self._transaction_repo.append(
                TransactionRecord(
                    product_id=product_id,
                    transaction_type=transaction_type,
                    quantity=delta,
                    reference_id=reference_id,
                    notes=reason,
                    created_at=now,
                )
            )
            if user_id:
                self._audit(
                    product_id,
                    user_id,
                    AuditAction.UPDATE_STOCK,
                    old_value=str(old_stock),
                    new_value=str(entry.current_stock),
                    reason=reason,
                    at=now,
                )
            self._alert_engine.evaluate(entry)
            return entry

        entry = self._locks.run(product_id, _adjust)
        logger.info(
            "Stock adjusted",
            product_id=product_id,
            delta=delta,
            transaction_type=transaction_type.value,
            current_stock=entry.current_stock,
            user_id=user_id,
        )
        self._dispatch(product_id)
        return entry

    # --- History --------------------------------------------------------------

    def list_transactions(
        self,
        product_id: str,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[TransactionRecord]:
        return self._transaction_repo.list_for_product(product_id, since, until)

    def list_audit_log(self, product_id: str) -> list[InventoryAuditLogEntry]:
        return self._audit_repo.list_for_product(product_id)

    def reconcile(self, product_id: str) -> ReconciliationReport:
        """Rebuild on-hand and reserved from history and compare with the ledger."""
        with self._locks.hold(product_id):
            entry = self.get_stock(product_id)
            records = self._transaction_repo.list_for_product(product_id)
            active = self._reservation_repo.list_active(product_id)

        report = ReconciliationReport(
            product_id=product_id,
            recorded_current=entry.current_stock,
            derived_current=entry.initial_stock + fold_on_hand(records),
            recorded_reserved=entry.reserved_stock,
            derived_reserved=sum(r.quantity.value for r in active),
        )
        if not report.is_consistent:
            logger.error(
                "Ledger drift detected",
                product_id=product_id,
                recorded_current=report.recorded_current,
                derived_current=report.derived_current,
                recorded_reserved=report.recorded_reserved,
                derived_reserved=report.derived_reserved,
            )
        return report

    # --- Internal helpers -----------------------------------------------------

    def _find_reservation(self, reservation_id: str) -> Reservation:
        reservation = self._reservation_repo.get_by_id(reservation_id)
        if reservation is None:
            raise EntityNotFoundError(f"Reservation '{reservation_id}' not found")
        return reservation

    def _audit(
        self,
        product_id: str,
        user_id: str,
        action: AuditAction,
        old_value: str | None,
        new_value: str | None,
        reason: str | None,
        at: datetime,
    ) -> None:
        self._audit_repo.append(
            InventoryAuditLogEntry(
                product_id=product_id,
                user_id=user_id,
                action=action,
                old_value=old_value,
                new_value=new_value,
                reason=reason,
                created_at=at,
            )
        )

    def _dispatch(self, product_id: str) -> None:
        """Deliver pending alerts once the mutation has been committed.

        Failures here are logged only: the stock change already happened and
        the alert stays pending for ``ire alert dispatch``.
        """
        if self._dispatcher is None:
            return
        try:
            self._dispatcher.dispatch_pending(product_id)
        except Exception as exc:
            logger.warning(
                "Alert dispatch failed after stock change",
                product_id=product_id,
                error=str(exc),
            )
