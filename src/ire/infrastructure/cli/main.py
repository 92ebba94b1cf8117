import click

from ire.infrastructure.bootstrap import build_container
from ire.infrastructure.cli.alert_commands import (
    alert_ack,
    alert_configure,
    alert_dispatch,
    alert_list,
)
from ire.infrastructure.cli.forecast_commands import (
    forecast_advise,
    forecast_run,
    forecast_show,
)
from ire.infrastructure.cli.reservation_commands import (
    reservation_commit,
    reservation_create,
    reservation_release,
)
from ire.infrastructure.cli.stock_commands import (
    stock_adjust,
    stock_audit,
    stock_history,
    stock_init,
    stock_reconcile,
    stock_remove,
    stock_show,
    stock_threshold,
)
from ire.infrastructure.config import get_settings
from ire.infrastructure.logging_config import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """IRE — Inventory Reservation & Alerting Engine"""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    ctx.obj = build_container(settings)


@cli.group()
def stock() -> None:
    """Manage tracked stock."""


@cli.group()
def reservation() -> None:
    """Reserve, release and commit stock for orders."""


@cli.group()
def alert() -> None:
    """Manage low-stock alerts."""


@cli.group()
def forecast() -> None:
    """Forecast demand and stockouts."""


# Register subcommands
stock.add_command(stock_adjust)
stock.add_command(stock_audit)
stock.add_command(stock_history)
stock.add_command(stock_init)
stock.add_command(stock_reconcile)
stock.add_command(stock_remove)
stock.add_command(stock_show)
stock.add_command(stock_threshold)
reservation.add_command(reservation_commit)
reservation.add_command(reservation_create)
reservation.add_command(reservation_release)
alert.add_command(alert_ack)
alert.add_command(alert_configure)
alert.add_command(alert_dispatch)
alert.add_command(alert_list)
forecast.add_command(forecast_advise)
forecast.add_command(forecast_run)
forecast.add_command(forecast_show)
