"""CLI commands for reservations: the order pipeline's hold on stock."""

from __future__ import annotations

import click

from ire.application.commit_reservation import CommitReservationHandler
from ire.application.release_reservation import ReleaseReservationHandler
from ire.application.reserve_stock import ReserveStockHandler
from ire.domain.exceptions import DomainException
from ire.infrastructure.bootstrap import Container


@click.command("create")
@click.option("--product", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to hold.")
@click.option("--key", "idempotency_key", default=None, help="Idempotency key, e.g. the order ID.")
@click.option("--reference", default=None, help="Order reference.")
@click.pass_obj
def reservation_create(
    container: Container,
    product: str,
    quantity: int,
    idempotency_key: str | None,
    reference: str | None,
) -> None:
    """Hold stock for an order."""
    handler = ReserveStockHandler(container.reservations)
    try:
        dto = handler.handle(
            product_id=product,
            quantity=quantity,
            idempotency_key=idempotency_key,
            reference_id=reference,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {dto.id}: {dto.quantity} x '{dto.product_id}' ({dto.status})")


@click.command("release")
@click.argument("reservation_id")
@click.pass_obj
def reservation_release(container: Container, reservation_id: str) -> None:
    """Cancel a reservation and return its stock."""
    handler = ReleaseReservationHandler(container.reservations)
    try:
        dto = handler.handle(reservation_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {dto.id} {dto.status}")


@click.command("commit")
@click.argument("reservation_id")
@click.option("--quantity", default=None, type=int, help="Units shipped. Defaults to the reserved amount.")
@click.option("--allow-overage", is_flag=True, help="Permit shipping more than reserved.")
@click.option("--reference", default=None, help="Shipment reference.")
@click.pass_obj
def reservation_commit(
    container: Container,
    reservation_id: str,
    quantity: int | None,
    allow_overage: bool,
    reference: str | None,
) -> None:
    """Fulfill a reservation, taking the stock off the shelf."""
    handler = CommitReservationHandler(container.reservations)
    try:
        dto = handler.handle(
            reservation_id,
            actual_quantity=quantity,
            allow_overage=allow_overage,
            reference_id=reference,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Reservation {dto.id} {dto.status}: shipped {dto.committed_quantity} "
        f"of {dto.quantity}"
    )
