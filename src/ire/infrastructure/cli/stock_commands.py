"""CLI commands for the stock ledger."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from ire.application.adjust_stock import AdjustStockHandler
from ire.application.initialize_stock import InitializeStockHandler
from ire.application.reconcile_stock import ReconcileStockHandler
from ire.application.remove_tracking import RemoveTrackingHandler
from ire.application.set_threshold import SetThresholdHandler
from ire.application.show_history import ShowAuditLogHandler, ShowTransactionsHandler
from ire.application.show_stock import ShowStockHandler
from ire.domain.exceptions import DomainException
from ire.domain.model.value_objects import TransactionType
from ire.infrastructure.bootstrap import Container

_ADJUSTMENT_TYPES = [t.value for t in TransactionType if t.affects_on_hand]


def _utc(value: datetime | None) -> datetime | None:
    return value.replace(tzinfo=timezone.utc) if value else None


@click.command("init")
@click.option("--product", required=True, help="Product ID.")
@click.option("--stock", "initial_stock", required=True, type=int, help="Units on hand.")
@click.option("--threshold", required=True, type=int, help="Alert when available drops below this.")
@click.option("--reorder", required=True, type=int, help="Units to order when restocking.")
@click.option("--seller", default=None, help="Seller to notify on low stock.")
@click.option("--user", default=None, help="Acting user, recorded in the audit log.")
@click.pass_obj
def stock_init(
    container: Container,
    product: str,
    initial_stock: int,
    threshold: int,
    reorder: int,
    seller: str | None,
    user: str | None,
) -> None:
    """Start tracking stock for a product."""
    handler = InitializeStockHandler(container.reservations)
    try:
        dto = handler.handle(
            product_id=product,
            initial_stock=initial_stock,
            minimum_threshold=threshold,
            reorder_quantity=reorder,
            seller_id=seller,
            user_id=user,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Tracking '{dto.product_id}': {dto.current_stock} on hand ({dto.status})")


@click.command("adjust")
@click.option("--product", required=True, help="Product ID.")
@click.option("--delta", required=True, type=int, help="Signed change to on-hand stock.")
@click.option(
    "--type",
    "transaction_type",
    required=True,
    type=click.Choice(_ADJUSTMENT_TYPES),
    help="Kind of stock movement.",
)
@click.option("--reason", default=None, help="Why the stock changed.")
@click.option("--user", default=None, help="Acting user, recorded in the audit log.")
@click.option("--reference", default=None, help="External reference, e.g. a PO number.")
@click.pass_obj
def stock_adjust(
    container: Container,
    product: str,
    delta: int,
    transaction_type: str,
    reason: str | None,
    user: str | None,
    reference: str | None,
) -> None:
    """Change on-hand stock outside the order flow."""
    handler = AdjustStockHandler(container.reservations)
    try:
        dto = handler.handle(
            product_id=product,
            delta=delta,
            transaction_type=transaction_type,
            reason=reason,
            user_id=user,
            reference_id=reference,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"'{dto.product_id}' now {dto.current_stock} on hand, "
        f"{dto.available_stock} available ({dto.status})"
    )


@click.command("threshold")
@click.option("--product", required=True, help="Product ID.")
@click.option("--minimum", required=True, type=int, help="New minimum threshold.")
@click.option("--reorder", default=None, type=int, help="New reorder quantity.")
@click.option("--user", default=None, help="Acting user, recorded in the audit log.")
@click.option("--reason", default=None, help="Why the threshold changed.")
@click.pass_obj
def stock_threshold(
    container: Container,
    product: str,
    minimum: int,
    reorder: int | None,
    user: str | None,
    reason: str | None,
) -> None:
    """Change the low-stock threshold of a product."""
    handler = SetThresholdHandler(container.reservations)
    try:
        dto = handler.handle(
            product_id=product,
            minimum_threshold=minimum,
            reorder_quantity=reorder,
            user_id=user,
            reason=reason,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"'{dto.product_id}' threshold set to {dto.minimum_threshold} "
        f"(reorder {dto.reorder_quantity})"
    )


@click.command("remove")
@click.option("--product", required=True, help="Product ID.")
@click.option("--user", required=True, help="Acting user, recorded in the audit log.")
@click.option("--reason", default=None, help="Why tracking stopped.")
@click.pass_obj
def stock_remove(container: Container, product: str, user: str, reason: str | None) -> None:
    """Stop tracking a product. History is kept."""
    handler = RemoveTrackingHandler(container.reservations)
    try:
        handler.handle(product, user_id=user, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stopped tracking '{product}'")


@click.command("show")
@click.option("--product", default=None, help="Product ID. Omit to list all.")
@click.option("--low", is_flag=True, help="Only products below their threshold.")
@click.pass_obj
def stock_show(container: Container, product: str | None, low: bool) -> None:
    """Show current stock levels."""
    handler = ShowStockHandler(container.reservations)
    try:
        lines = handler.handle(product, low_only=low)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(
        f"{'Product':<20} {'On hand':>8} {'Reserved':>10} {'Available':>10} "
        f"{'Min':>6}  {'Status':<12}"
    )
    click.echo("-" * 72)
    for line in lines:
        click.echo(
            f"{line.product_id:<20} {line.current_stock:>8} {line.reserved_stock:>10} "
            f"{line.available_stock:>10} {line.minimum_threshold:>6}  {line.status:<12}"
        )


@click.command("history")
@click.option("--product", required=True, help="Product ID.")
@click.option("--since", default=None, type=click.DateTime(), help="Earliest record (UTC).")
@click.option("--until", default=None, type=click.DateTime(), help="Latest record (UTC).")
@click.pass_obj
def stock_history(
    container: Container,
    product: str,
    since: datetime | None,
    until: datetime | None,
) -> None:
    """Show the transaction history of a product."""
    handler = ShowTransactionsHandler(container.reservations)
    try:
        lines = handler.handle(product, since=_utc(since), until=_utc(until))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No transactions found.")
        return

    click.echo(f"{'When':<22} {'Type':<20} {'Qty':>6}  Notes")
    click.echo("-" * 72)
    for line in lines:
        click.echo(
            f"{line.created_at:<22} {line.transaction_type:<20} {line.quantity:>6}  "
            f"{line.notes or ''}"
        )


@click.command("audit")
@click.option("--product", required=True, help="Product ID.")
@click.pass_obj
def stock_audit(container: Container, product: str) -> None:
    """Show who changed a product's stock settings, and why."""
    lines = ShowAuditLogHandler(container.reservations).handle(product)

    if not lines:
        click.echo("No audit entries found.")
        return

    for line in lines:
        click.echo(
            f"{line.created_at}  {line.user_id:<12} {line.action:<18} "
            f"{line.old_value or '-'} -> {line.new_value or '-'}"
            + (f"  ({line.reason})" if line.reason else "")
        )


@click.command("reconcile")
@click.option("--product", default=None, help="Product ID. Omit to check all.")
@click.pass_obj
def stock_reconcile(container: Container, product: str | None) -> None:
    """Compare ledger values with what the history says they should be."""
    handler = ReconcileStockHandler(container.reservations)
    try:
        reports = handler.handle(product)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    drifted = [r for r in reports if not r.consistent]
    for report in reports:
        marker = "ok" if report.consistent else "DRIFT"
        click.echo(
            f"{report.product_id:<20} on hand {report.recorded_current}/{report.derived_current}  "
            f"reserved {report.recorded_reserved}/{report.derived_reserved}  {marker}"
        )
    if drifted:
        raise click.ClickException(f"{len(drifted)} product(s) out of balance")
