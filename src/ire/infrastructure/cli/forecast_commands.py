"""CLI commands for demand forecasting."""

from __future__ import annotations

from datetime import datetime

import click

from ire.application.run_forecast import RunForecastHandler
from ire.application.show_forecast import ShowForecastHandler, ShowReplenishmentHandler
from ire.domain.exceptions import DomainException
from ire.domain.model.value_objects import ForecastMethod
from ire.infrastructure.bootstrap import Container

_DAY = click.DateTime(formats=["%Y-%m-%d"])


@click.command("run")
@click.option("--product", default=None, help="Product ID. Omit to forecast all.")
@click.option(
    "--method",
    default=None,
    type=click.Choice([m.value for m in ForecastMethod]),
    help="Projection method. Defaults to the configured one.",
)
@click.pass_obj
def forecast_run(container: Container, product: str | None, method: str | None) -> None:
    """Recompute stock forecasts from recent sales."""
    handler = RunForecastHandler(container.forecasts)
    try:
        written = handler.handle(product_id=product, method=method)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not written:
        click.echo("No tracked products.")
        return
    for product_id, rows in sorted(written.items()):
        outcome = f"{rows} day(s) forecast" if rows else "skipped, no sales history"
        click.echo(f"{product_id:<20} {outcome}")


@click.command("show")
@click.option("--product", required=True, help="Product ID.")
@click.option("--since", default=None, type=_DAY, help="First day (YYYY-MM-DD).")
@click.option("--until", default=None, type=_DAY, help="Last day (YYYY-MM-DD).")
@click.pass_obj
def forecast_show(
    container: Container,
    product: str,
    since: datetime | None,
    until: datetime | None,
) -> None:
    """Show stored forecast rows for a product."""
    lines = ShowForecastHandler(container.forecasts).handle(
        product,
        since=since.date() if since else None,
        until=until.date() if until else None,
    )

    if not lines:
        click.echo("No forecast found.")
        return

    click.echo(f"{'Date':<12} {'Stock':>10} {'Sales':>8}  {'Method':<16} {'Conf':>4}")
    click.echo("-" * 56)
    for line in lines:
        click.echo(
            f"{line.forecast_date:<12} {line.projected_stock:>10.2f} "
            f"{line.projected_sales:>8.2f}  {line.method:<16} {line.confidence:>4}"
        )


@click.command("advise")
@click.option("--product", required=True, help="Product ID.")
@click.option("--lead-time", default=None, type=int, help="Supplier lead time in days.")
@click.pass_obj
def forecast_advise(container: Container, product: str, lead_time: int | None) -> None:
    """Show sales velocity and how much to reorder."""
    if lead_time is None:
        lead_time = container.settings.lead_time_days
    handler = ShowReplenishmentHandler(container.forecasts)
    try:
        dto = handler.handle(product, lead_time_days=lead_time)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product:            {dto.product_id}")
    click.echo(f"On hand:            {dto.current_stock}")
    click.echo(
        f"Sales per day:      {dto.daily_average}  (week {dto.weekly_average}, "
        f"month {dto.monthly_average}, {dto.trend})"
    )
    days = "-" if dto.days_until_stockout is None else dto.days_until_stockout
    click.echo(f"Days until empty:   {days}")
    click.echo(f"Stockout date:      {dto.forecasted_stockout}")
    click.echo(
        f"Reorder:            {dto.recommended_reorder_quantity} "
        f"(lead time {dto.lead_time_days}d)"
    )
