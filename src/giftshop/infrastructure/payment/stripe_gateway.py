"""Stripe implementation of the PaymentGateway port over its REST API.

Uses ``httpx`` directly instead of the Stripe SDK.  Both calls carry an
``Idempotency-Key`` so transport errors and 5xx responses can be retried
with exponential backoff without double-charging.  Business outcomes
(declines, authentication required) are not retried and surface as
``PaymentFailedError`` with Stripe's user-facing message.
"""

from __future__ import annotations

import logging
import time
import uuid

import httpx

from giftshop.domain.exceptions import PaymentFailedError, ValidationError
from giftshop.domain.model.value_objects import Money
from giftshop.domain.ports.payment_gateway import (
    PaymentConfirmation,
    PaymentGateway,
    PaymentIntent,
)

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.stripe.com"
SUCCESS_STATUSES = frozenset({"succeeded", "processing", "requires_capture"})


def intent_id_from_secret(client_secret: str) -> str:
    """``pi_123_secret_abc`` -> ``pi_123``."""
    intent_id, sep, _ = client_secret.partition("_secret_")
    if not sep or not intent_id:
        raise ValidationError("Malformed payment client secret")
    return intent_id


class StripePaymentGateway(PaymentGateway):

    def __init__(
        self,
        secret_key: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = 10.0,
        max_retries: int = 2,
        backoff: float = 0.5,
        client: httpx.Client | None = None,
    ) -> None:
        if not secret_key:
            raise ValidationError("Stripe secret key is missing")
        self._max_retries = max_retries
        self._backoff = backoff
        self._client = client or httpx.Client(
            base_url=api_base,
            timeout=httpx.Timeout(timeout),
        )
        self._auth_headers = {"Authorization": f"Bearer {secret_key}"}

    def close(self) -> None:
        self._client.close()

    # --- PaymentGateway interface ---------------------------------------------

    def create_intent(self, amount: Money, receipt_email: str = "") -> PaymentIntent:
        form = {
            "amount": str(amount.to_minor_units()),
            "currency": amount.currency.lower(),
            "payment_method_types[]": "card",
        }
        if receipt_email:
            form["receipt_email"] = receipt_email

        data = self._post("/v1/payment_intents", form)
        logger.info("Payment intent %s created for %s", data["id"], amount)
        return PaymentIntent(
            intent_id=data["id"],
            client_secret=data["client_secret"],
            amount=amount,
        )

    def confirm(self, client_secret: str, payment_method_id: str) -> PaymentConfirmation:
        intent_id = intent_id_from_secret(client_secret)
        data = self._post(
            f"/v1/payment_intents/{intent_id}/confirm",
            {"payment_method": payment_method_id, "setup_future_usage": "off_session"},
        )
        status = data.get("status", "")
        if status not in SUCCESS_STATUSES:
            if status == "requires_action":
                raise PaymentFailedError("Payment requires additional authentication")
            error = data.get("last_payment_error") or {}
            raise PaymentFailedError(error.get("message") or f"payment status is {status!r}")
        return PaymentConfirmation(intent_id=data.get("id", intent_id), status=status)

    # --- HTTP -----------------------------------------------------------------

    def _post(self, path: str, form: dict[str, str]) -> dict:
        headers = {**self._auth_headers, "Idempotency-Key": uuid.uuid4().hex}
        attempt = 0
        while True:
            try:
                resp = self._client.post(path, data=form, headers=headers)
            except httpx.RequestError as exc:
                if attempt >= self._max_retries:
                    logger.error("Stripe unreachable at %s: %s", path, exc)
                    raise PaymentFailedError("Payment service is not responding") from exc
            else:
                if resp.status_code < 500:
                    return self._parse(resp)
                if attempt >= self._max_retries:
                    logger.error("Stripe returned %d for %s", resp.status_code, path)
                    raise PaymentFailedError(self._error_message(resp))

            attempt += 1
            time.sleep(self._backoff * (2 ** (attempt - 1)))

    def _parse(self, resp: httpx.Response) -> dict:
        if resp.is_success:
            try:
                data = resp.json()
            except ValueError as exc:
                logger.error("Stripe returned an unreadable body (%d)", resp.status_code)
                raise PaymentFailedError("Payment service returned an unreadable response") from exc
            if not isinstance(data, dict):
                raise PaymentFailedError("Payment service returned an unreadable response")
            return data
        logger.warning("Stripe rejected request (%d): %s", resp.status_code, self._error_message(resp))
        raise PaymentFailedError(self._error_message(resp))

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            message = resp.json().get("error", {}).get("message")
        except ValueError:
            message = None
        return message or f"payment processor returned HTTP {resp.status_code}"
