"""Stand-in gateway used when no processor credentials are configured."""

from __future__ import annotations

from giftshop.domain.exceptions import PaymentFailedError
from giftshop.domain.model.value_objects import Money
from giftshop.domain.ports.payment_gateway import (
    PaymentConfirmation,
    PaymentGateway,
    PaymentIntent,
)


class UnconfiguredPaymentGateway(PaymentGateway):

    def create_intent(self, amount: Money, receipt_email: str = "") -> PaymentIntent:
        raise PaymentFailedError("Payments are not configured (set STRIPE_SECRET_KEY)")

    def confirm(self, client_secret: str, payment_method_id: str) -> PaymentConfirmation:
        raise PaymentFailedError("Payments are not configured (set STRIPE_SECRET_KEY)")
