"""Application service: Place Order use case.

Coordinates one checkout attempt across the catalog, the payment
processor, the order store and the notifier.  Steps run strictly in
sequence; each depends on the previous one succeeding:

  1. caller check            (hard failure, no side effects)
  2. stock reservation       (hard failure, all or nothing)
  3. total check + payment   (hard failure, reserved stock is given back)
  4. key issuance + order write
  5. confirmation email      (soft failure, logged only)
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from giftshop.application.access import require_active_user
from giftshop.application.dto import PlaceOrderRequest
from giftshop.domain.exceptions import (
    DomainException,
    OrderWriteFailedError,
    PaymentFailedError,
    ValidationError,
)
from giftshop.domain.model.order import Order, OrderItem, OrderStatus
from giftshop.domain.model.user import CallerContext
from giftshop.domain.model.value_objects import Money
from giftshop.domain.ports.notification_dispatcher import NotificationDispatcher
from giftshop.domain.ports.payment_gateway import PaymentGateway
from giftshop.domain.repository.catalog_repository import CatalogRepository
from giftshop.domain.repository.order_repository import OrderRepository
from giftshop.domain.repository.user_repository import UserRepository
from giftshop.domain.service.gift_card_keys import GiftCardKeyIssuer
from giftshop.domain.service.stock_reservation_service import (
    Reservation,
    StockReservationService,
)

logger = logging.getLogger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        order_repo: OrderRepository,
        user_repo: UserRepository,
        payment_gateway: PaymentGateway,
        notifier: NotificationDispatcher,
        key_issuer: GiftCardKeyIssuer | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._user_repo = user_repo
        self._payment_gateway = payment_gateway
        self._notifier = notifier
        self._reservations = StockReservationService(catalog_repo)
        self._key_issuer = key_issuer or GiftCardKeyIssuer(order_repo)

    def handle(self, caller: CallerContext, request: PlaceOrderRequest) -> str:
        """Place an order and return its ID.

        Raises UnauthorizedError, ValidationError, NoValidItemsError,
        InsufficientStockError, TransactionAbortedError, PaymentFailedError
        or OrderWriteFailedError.  Notification problems never surface.
        """
        # 1. Caller and input
        user_id = require_active_user(caller, self._user_repo)
        if not request.lines:
            raise ValidationError("Cart is empty")
        cart = [spec.to_domain() for spec in request.lines]

        logger.info("Placing order for user %s (%d cart line(s))", user_id, len(cart))

        # 2. Stock
        reservation = self._reservations.reserve_stock(cart)

        # 3. Price check and payment; give the stock back if either fails
        try:
            expected_total = self._priced_total(reservation)
            self._check_total(request.total, expected_total)
            if request.payment_confirmation is not None:
                confirmation = self._payment_gateway.confirm(
                    request.payment_confirmation.client_secret,
                    request.payment_confirmation.payment_method_id,
                )
                logger.info("Payment %s confirmed for user %s", confirmation.intent_id, user_id)
        except (PaymentFailedError, ValidationError) as exc:
            logger.warning("Checkout for user %s failed after reservation: %s", user_id, exc)
            self._compensate(reservation)
            raise

        # 4. One item per unit, each with its own key.  Payment is taken by
        # now, so any failure here needs manual reconciliation.
        try:
            order = Order.place(
                user_id=user_id,
                items=self._expand(reservation),
                shipping_address=request.shipping_address,
                payment_method=request.payment_method,
                status=OrderStatus.COMPLETED,
            )
            order_id = self._order_repo.create(order)
        except Exception as exc:
            logger.critical(
                "Order write failed for user %s after payment; manual reconciliation needed",
                user_id, exc_info=True,
            )
            raise OrderWriteFailedError(f"Could not record order: {exc}") from exc

        logger.info(
            "Order %s (%s) created for user %s, total %s",
            order_id, order.order_number, user_id, order.total,
        )

        # 5. Best effort
        self._notify(order)
        return order_id

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _priced_total(reservation: Reservation) -> Money:
        total: Money | None = None
        for line in reservation.lines:
            line_total = line.entry.effective_price * line.quantity
            total = line_total if total is None else total + line_total
        return total  # type: ignore[return-value]

    @staticmethod
    def _check_total(shown: str | None, expected: Money) -> None:
        if shown is None:
            return
        try:
            amount = Decimal(str(shown))
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid order total: {shown!r}") from exc
        if amount != expected.amount:
            raise ValidationError(
                f"Order total {amount:.2f} does not match current prices ({expected})"
            )

    def _expand(self, reservation: Reservation) -> list[OrderItem]:
        units = [line.entry for line in reservation.lines for _ in range(line.quantity)]
        keys = self._key_issuer.issue(len(units))
        return [
            OrderItem(
                sku_id=entry.id,
                name=entry.name,
                brand=entry.brand,
                category=entry.category,
                region=entry.region,
                unit_price=entry.effective_price,
                gift_card_key=key,
                quantity=1,
                image_url=entry.image_url,
            )
            for entry, key in zip(units, keys)
        ]

    def _compensate(self, reservation: Reservation) -> None:
        try:
            self._reservations.release(reservation)
        except DomainException:
            logger.critical(
                "Could not restock %s after failed checkout",
                reservation.quantities, exc_info=True,
            )

    def _notify(self, order: Order) -> None:
        try:
            self._notifier.send_order_confirmation(order)
        except Exception:
            logger.error(
                "Confirmation for order %s to %s failed; order stands",
                order.id, order.customer_email, exc_info=True,
            )
