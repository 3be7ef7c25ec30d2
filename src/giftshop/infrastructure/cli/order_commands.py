"""CLI commands for the Order aggregate."""

from __future__ import annotations

from pathlib import Path

import click

from giftshop.application.dto import (
    CartLineSpec,
    OrderDTO,
    PaymentConfirmationRequest,
    PlaceOrderRequest,
)
from giftshop.application.invoices import ExportInvoiceHandler, ResendInvoiceHandler
from giftshop.application.list_orders import ListOrdersHandler
from giftshop.application.place_order import PlaceOrderHandler
from giftshop.application.show_order import ShowOrderHandler
from giftshop.application.update_order_status import UpdateOrderStatusHandler
from giftshop.domain.exceptions import DomainException
from giftshop.domain.model.value_objects import Money, PaymentMethod, ShippingAddress
from giftshop.infrastructure.bootstrap import (
    catalog_repository,
    notification_dispatcher,
    order_repository,
    payment_gateway,
    user_repository,
)
from giftshop.infrastructure.cli.common import as_option, parse_pairs, resolve_caller
from giftshop.infrastructure.config import Settings
from giftshop.infrastructure.notification.background import BackgroundNotificationDispatcher
from giftshop.infrastructure.notification.invoice_pdf import render_invoice


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.order_number}  (id={dto.id}, status={dto.status})")
    click.echo(f"Customer: {dto.customer_name} <{dto.customer_email}>")
    click.echo(f"Placed:   {dto.placed_at}")
    click.echo(f"Payment:  {dto.payment_method}")
    click.echo()
    click.echo(f"  {'Gift card':<24} {'Price':>12} {'Key':>22}")
    click.echo(f"  {'-'*60}")
    for item in dto.items:
        click.echo(f"  {item.name:<24} {item.unit_price:>12} {item.gift_card_key:>22}")
    click.echo(f"  {'-'*60}")
    click.echo(f"  {'Order Total':<24} {dto.total:>12}")


def _display_order_rows(dtos: list[OrderDTO]) -> None:
    if not dtos:
        click.echo("No orders found.")
        return
    click.echo(f"{'Order':<22} {'Placed':<22} {'Status':<10} {'Items':>5} {'Total':>14}")
    click.echo("-" * 77)
    for dto in dtos:
        click.echo(
            f"{dto.order_number:<22} {dto.placed_at:<22} {dto.status:<10} "
            f"{len(dto.items):>5} {dto.total:>14}"
        )


@click.command("place")
@as_option
@click.option("--items", required=True, help="Items as 'ProductID:Qty,ProductID:Qty'.")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--email", required=True, help="Where the invoice and keys are sent.")
@click.option("--address", required=True)
@click.option("--city", required=True)
@click.option("--zip", "zip_code", required=True)
@click.option("--state", default="")
@click.option("--card-brand", required=True, help="Card brand shown on the invoice.")
@click.option("--last-four", required=True, help="Last four digits of the card.")
@click.option("--total", default=None, help="Total the shopper was shown, e.g. 20.00.")
@click.option("--client-secret", default=None, help="Payment intent client secret to confirm.")
@click.option("--payment-method-id", default=None, help="Payment method token to confirm with.")
@click.pass_obj
def order_place(
    settings: Settings,
    acting_user: str,
    items: str,
    first_name: str,
    last_name: str,
    email: str,
    address: str,
    city: str,
    zip_code: str,
    state: str,
    card_brand: str,
    last_four: str,
    total: str | None,
    client_secret: str | None,
    payment_method_id: str | None,
) -> None:
    """Check out a cart: reserve stock, take payment and issue keys."""
    if bool(client_secret) != bool(payment_method_id):
        raise click.UsageError("--client-secret and --payment-method-id go together")

    caller = resolve_caller(settings, acting_user)
    lines = [CartLineSpec(sku_id, qty) for sku_id, qty in parse_pairs(items)]
    orders = order_repository(settings)
    notifier = BackgroundNotificationDispatcher(notification_dispatcher(settings))

    try:
        request = PlaceOrderRequest(
            lines=lines,
            shipping_address=ShippingAddress(
                first_name=first_name,
                last_name=last_name,
                email=email,
                address=address,
                city=city,
                zip_code=zip_code,
                state=state,
            ),
            payment_method=PaymentMethod(card_brand=card_brand, last_four=last_four),
            total=total,
            payment_confirmation=(
                PaymentConfirmationRequest(client_secret, payment_method_id)
                if client_secret else None
            ),
        )
        handler = PlaceOrderHandler(
            catalog_repo=catalog_repository(settings),
            order_repo=orders,
            user_repo=user_repository(settings),
            payment_gateway=payment_gateway(settings),
            notifier=notifier,
        )
        order_id = handler.handle(caller, request)
        dto = ShowOrderHandler(orders).handle(caller, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    finally:
        notifier.close()

    _display_order(dto)


@click.command("create-intent")
@click.option("--amount", required=True, help="Amount to charge, e.g. 20.00.")
@click.option("--email", "receipt_email", default="", help="Receipt email.")
@click.pass_obj
def order_create_intent(settings: Settings, amount: str, receipt_email: str) -> None:
    """Create a payment intent and print its client secret."""
    try:
        intent = payment_gateway(settings).create_intent(
            Money.of(amount, settings.currency), receipt_email
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Intent:        {intent.intent_id}")
    click.echo(f"Client secret: {intent.client_secret}")
    click.echo(f"Amount:        {intent.amount}")


@click.command("show")
@as_option
@click.option("--id", "order_id", required=True, help="Order ID to display.")
@click.pass_obj
def order_show(settings: Settings, acting_user: str, order_id: str) -> None:
    """Show details of an existing order."""
    caller = resolve_caller(settings, acting_user)
    handler = ShowOrderHandler(order_repo=order_repository(settings))

    try:
        dto = handler.handle(caller, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@as_option
@click.option("--user", "user_id", default=None, help="Another user's orders (admins only).")
@click.pass_obj
def order_list(settings: Settings, acting_user: str, user_id: str | None) -> None:
    """List your orders, newest first."""
    caller = resolve_caller(settings, acting_user)
    handler = ListOrdersHandler(order_repo=order_repository(settings))

    try:
        dtos = handler.for_user(caller, user_id) if user_id else handler.for_caller(caller)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order_rows(dtos)


@click.command("list-all")
@as_option
@click.option("--limit", type=int, default=100, show_default=True)
@click.pass_obj
def order_list_all(settings: Settings, acting_user: str, limit: int) -> None:
    """List the most recent orders across the store (admins only)."""
    caller = resolve_caller(settings, acting_user)
    handler = ListOrdersHandler(order_repo=order_repository(settings))

    try:
        dtos = handler.all(caller, limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order_rows(dtos)


@click.command("set-status")
@as_option
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", required=True, help="pending, completed or failed.")
@click.pass_obj
def order_set_status(settings: Settings, acting_user: str, order_id: str, status: str) -> None:
    """Relabel an order's status (admins only)."""
    caller = resolve_caller(settings, acting_user)
    handler = UpdateOrderStatusHandler(order_repo=order_repository(settings))

    try:
        handler.handle(caller, order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {order_id} marked {status}.")


@click.command("invoice")
@as_option
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory to write the PDF into.",
)
@click.pass_obj
def order_invoice(settings: Settings, acting_user: str, order_id: str, out_dir: Path) -> None:
    """Download an order's PDF invoice."""
    caller = resolve_caller(settings, acting_user)
    handler = ExportInvoiceHandler(order_repo=order_repository(settings), render=render_invoice)

    try:
        filename, pdf = handler.handle(caller, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / filename
    path.write_bytes(pdf)
    click.echo(f"Invoice written to {path}")


@click.command("resend-invoice")
@as_option
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.pass_obj
def order_resend_invoice(settings: Settings, acting_user: str, order_id: str) -> None:
    """Send the confirmation email with the invoice again."""
    caller = resolve_caller(settings, acting_user)
    handler = ResendInvoiceHandler(
        order_repo=order_repository(settings),
        notifier=notification_dispatcher(settings),
    )

    try:
        email = handler.handle(caller, order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Invoice for order {order_id} sent to {email}.")
