"""Port for the hosted payment processor.

Payment intents are created up front (amount known, card not yet
attached); checkout later confirms the intent against the payment-method
token the browser collected.  Raw card data never reaches this code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from giftshop.domain.model.value_objects import Money


@dataclass(frozen=True)
class PaymentIntent:
    intent_id: str
    client_secret: str
    amount: Money


@dataclass(frozen=True)
class PaymentConfirmation:
    intent_id: str
    status: str


class PaymentGateway(ABC):

    @abstractmethod
    def create_intent(self, amount: Money, receipt_email: str = "") -> PaymentIntent:
        """Open a payment intent for *amount*."""

    @abstractmethod
    def confirm(self, client_secret: str, payment_method_id: str) -> PaymentConfirmation:
        """Confirm a previously created intent with a payment-method token.

        Raises PaymentFailedError with a user-facing reason when the
        processor declines or cannot be reached.
        """
