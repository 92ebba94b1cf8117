"""CLI commands for low-stock alerts."""

from __future__ import annotations

import click

from ire.application.acknowledge_alert import AcknowledgeAlertHandler
from ire.application.configure_alerts import ConfigureAlertsHandler
from ire.application.dispatch_alerts import DispatchAlertsHandler
from ire.application.list_alerts import ListAlertsHandler
from ire.domain.exceptions import DomainException
from ire.infrastructure.bootstrap import Container


@click.command("list")
@click.option("--product", default=None, help="Show every alert of one product.")
@click.option("--seller", default=None, help="Only open alerts for this seller.")
@click.pass_obj
def alert_list(container: Container, product: str | None, seller: str | None) -> None:
    """List open alerts, or the alert history of one product."""
    lines = ListAlertsHandler(container.alerts).handle(product_id=product, seller_id=seller)

    if not lines:
        click.echo("No alerts found.")
        return

    click.echo(
        f"{'Alert':<34} {'Product':<16} {'Type':<14} {'Avail':>6} {'Min':>5}  State"
    )
    click.echo("-" * 90)
    for line in lines:
        state = f"ack by {line.acknowledged_by}" if line.acknowledged else "open"
        click.echo(
            f"{line.id:<34} {line.product_id:<16} {line.alert_type:<14} "
            f"{line.available_stock:>6} {line.minimum_threshold:>5}  {state}"
        )


@click.command("ack")
@click.argument("alert_id")
@click.option("--user", required=True, help="Acknowledging user.")
@click.option("--reason", default=None, help="Note for the audit log.")
@click.pass_obj
def alert_ack(container: Container, alert_id: str, user: str, reason: str | None) -> None:
    """Acknowledge an open alert."""
    handler = AcknowledgeAlertHandler(container.alerts)
    try:
        dto = handler.handle(alert_id, user_id=user, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Alert {dto.id} for '{dto.product_id}' acknowledged by {dto.acknowledged_by}")


@click.command("configure")
@click.option("--product", required=True, help="Product ID.")
@click.option("--frequency", default=None, type=int, help="Hours between alerts.")
@click.option("--active/--inactive", default=None, help="Turn alerts on or off.")
@click.option("--seller", default=None, help="Seller to notify.")
@click.pass_obj
def alert_configure(
    container: Container,
    product: str,
    frequency: int | None,
    active: bool | None,
    seller: str | None,
) -> None:
    """Set how often, and whether, a product raises alerts."""
    handler = ConfigureAlertsHandler(container.reservations, container.alerts)
    try:
        dto = handler.handle(
            product,
            alert_frequency_hours=frequency,
            is_active=active,
            seller_id=seller,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    state = "active" if dto.is_active else "inactive"
    click.echo(
        f"Alerts for '{dto.product_id}' {state}, "
        f"at most every {dto.alert_frequency_hours}h"
    )


@click.command("dispatch")
@click.option("--product", default=None, help="Only this product.")
@click.pass_obj
def alert_dispatch(container: Container, product: str | None) -> None:
    """Deliver alerts that are still pending."""
    delivered = DispatchAlertsHandler(container.dispatcher).handle(product)
    click.echo(f"{delivered} alert(s) delivered")
