"""SMTP implementation of the NotificationDispatcher port.

Sends the order confirmation as an HTML email with the PDF invoice
attached.  Any SMTP or socket problem is reported as
``NotificationFailedError``; deciding whether that matters is up to the
caller.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from pathlib import Path

from giftshop.application.invoices import InvoiceRenderer
from giftshop.domain.exceptions import NotificationFailedError
from giftshop.domain.model.order import Order
from giftshop.domain.ports.notification_dispatcher import NotificationDispatcher
from giftshop.infrastructure.notification.invoice_pdf import render_invoice

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    sender: str = ""
    use_tls: bool = True
    timeout: float = 10.0


def build_confirmation_email(order: Order, sender: str, render: InvoiceRenderer = render_invoice) -> EmailMessage:
    filename, pdf = render(order)
    date = order.placed_at.strftime("%B %d, %Y")
    keys = "".join(
        f"<li>{escape(item.name)}: <code>{escape(item.gift_card_key)}</code></li>"
        for item in order.items
    )

    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = order.customer_email
    msg["Subject"] = f"Your Invoice #INV-{order.order_number} for Order #{order.order_number}"
    msg.set_content(
        f"Dear {order.shipping_address.full_name},\n\n"
        f"Thank you for your purchase. Your invoice for order {order.order_number} "
        f"({date}, total {order.total}) is attached.\n\n"
        + "\n".join(f"{item.name}: {item.gift_card_key}" for item in order.items)
        + "\n"
    )
    msg.add_alternative(
        f"""\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #4338ca;">Your Invoice</h1>
  <p>Order #{escape(order.order_number)} | {date}</p>
  <p>Dear {escape(order.shipping_address.full_name)},</p>
  <p>Thank you for your purchase. Please find attached your invoice.</p>
  <p><strong>Total Amount:</strong> {escape(str(order.total))}</p>
  <h2 style="font-size: 18px;">Your gift card keys</h2>
  <ul>{keys}</ul>
  <p style="font-size: 12px; color: #6b7280;">This is an automated email, please do not reply.</p>
</div>
""",
        subtype="html",
    )
    msg.add_attachment(pdf, maintype="application", subtype="pdf", filename=filename)
    return msg


class SmtpInvoiceDispatcher(NotificationDispatcher):

    def __init__(self, settings: SmtpSettings, render: InvoiceRenderer = render_invoice) -> None:
        self._settings = settings
        self._render = render

    def send_order_confirmation(self, order: Order) -> None:
        s = self._settings
        if not order.customer_email:
            raise NotificationFailedError(f"Order {order.id} has no customer email")
        msg = build_confirmation_email(order, s.sender or s.username, self._render)

        try:
            with smtplib.SMTP(s.host, s.port, timeout=s.timeout) as smtp:
                if s.use_tls:
                    smtp.starttls()
                if s.username:
                    smtp.login(s.username, s.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationFailedError(
                f"Could not email order {order.id} to {order.customer_email}: {exc}"
            ) from exc

        logger.info("Confirmation for order %s sent to %s", order.id, order.customer_email)


class OutboxInvoiceDispatcher(NotificationDispatcher):
    """Writes confirmations as ``.eml`` files instead of sending them.

    Used when no SMTP host is configured, e.g. on a developer machine.
    """

    def __init__(self, outbox_dir: Path, sender: str = "", render: InvoiceRenderer = render_invoice) -> None:
        self._outbox_dir = outbox_dir
        self._sender = sender or "noreply@localhost"
        self._render = render

    def send_order_confirmation(self, order: Order) -> None:
        msg = build_confirmation_email(order, self._sender, self._render)
        path = self._outbox_dir / f"{order.order_number}.eml"
        try:
            self._outbox_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(msg.as_bytes())
        except OSError as exc:
            raise NotificationFailedError(f"Could not write {path}: {exc}") from exc
        logger.info("Confirmation for order %s written to %s", order.id, path)
