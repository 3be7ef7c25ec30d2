"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from giftshop.domain.ports.notification_dispatcher import NotificationDispatcher
from giftshop.domain.ports.payment_gateway import PaymentGateway
from giftshop.infrastructure.config import Settings
from giftshop.infrastructure.notification.email_dispatcher import (
    OutboxInvoiceDispatcher,
    SmtpInvoiceDispatcher,
    SmtpSettings,
)
from giftshop.infrastructure.payment.stripe_gateway import StripePaymentGateway
from giftshop.infrastructure.payment.unconfigured_gateway import UnconfiguredPaymentGateway
from giftshop.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from giftshop.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from giftshop.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)


def catalog_repository(settings: Settings) -> JsonCatalogRepository:
    return JsonCatalogRepository(settings.catalog_file)


def order_repository(settings: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(settings.orders_file)


def user_repository(settings: Settings) -> JsonUserRepository:
    return JsonUserRepository(settings.users_file)


def payment_gateway(settings: Settings) -> PaymentGateway:
    if not settings.stripe_secret_key:
        return UnconfiguredPaymentGateway()
    return StripePaymentGateway(
        secret_key=settings.stripe_secret_key, api_base=settings.stripe_api_base
    )


def notification_dispatcher(settings: Settings) -> NotificationDispatcher:
    """SMTP when a host is configured, otherwise ``.eml`` files in the outbox."""
    if not settings.smtp_host:
        return OutboxInvoiceDispatcher(settings.outbox_dir, sender=settings.mail_from)
    return SmtpInvoiceDispatcher(
        SmtpSettings(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.mail_from,
            use_tls=settings.smtp_use_tls,
        )
    )
