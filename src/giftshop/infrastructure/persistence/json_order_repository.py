"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from giftshop.domain.exceptions import EntityNotFoundError, ValidationError
from giftshop.domain.model.order import Order, OrderItem, OrderStatus
from giftshop.domain.model.value_objects import Money, PaymentMethod, ShippingAddress
from giftshop.domain.repository.order_repository import DEFAULT_LIST_LIMIT, OrderRepository
from giftshop.infrastructure.persistence.json_file import (
    ensure_file,
    load_raw,
    lock_for,
    persist_raw,
)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = lock_for(file_path)
        ensure_file(file_path, self._lock)

    # --- OrderRepository interface --------------------------------------------

    def create(self, order: Order) -> str:
        if order.id is not None:
            raise ValidationError(f"Order {order.id} already exists")
        raw = self._to_raw(order)
        self._to_domain(raw)  # reject anything we could not read back

        with self._lock:
            orders = load_raw(self._file_path)
            order.id = uuid.uuid4().hex
            raw["id"] = order.id
            orders.append(raw)
            persist_raw(self._file_path, orders)
        return order.id

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in load_raw(self._file_path):
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_for_user(self, user_id: str) -> list[Order]:
        orders = [self._to_domain(raw) for raw in load_raw(self._file_path) if raw["user_id"] == user_id]
        return self._newest_first(orders)

    def list_all(self, limit: int = DEFAULT_LIST_LIMIT) -> list[Order]:
        orders = [self._to_domain(raw) for raw in load_raw(self._file_path)]
        return self._newest_first(orders)[:limit]

    def update_status(self, order_id: str, status: OrderStatus) -> None:
        with self._lock:
            orders = load_raw(self._file_path)
            for raw in orders:
                if raw["id"] == order_id:
                    raw["status"] = status.value
                    persist_raw(self._file_path, orders)
                    return
        raise EntityNotFoundError(f"Order {order_id} not found")

    def gift_card_key_exists(self, key: str) -> bool:
        return any(
            item["gift_card_key"] == key
            for raw in load_raw(self._file_path)
            for item in raw["items"]
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _newest_first(orders: list[Order]) -> list[Order]:
        return sorted(orders, key=lambda o: o.placed_at, reverse=True)

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.shipping_address
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status": order.status.value,
            "placed_at": order.placed_at.isoformat(),
            "customer_email": order.customer_email,
            "total": str(order.total.amount),
            "currency": order.currency,
            "shipping_address": {
                "first_name": address.first_name,
                "last_name": address.last_name,
                "email": address.email,
                "address": address.address,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
            },
            "payment_method": {
                "card_brand": order.payment_method.card_brand,
                "last_four": order.payment_method.last_four,
            },
            "items": [
                {
                    "sku_id": item.sku_id,
                    "name": item.name,
                    "brand": item.brand,
                    "category": item.category,
                    "region": item.region,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "quantity": item.quantity,
                    "gift_card_key": item.gift_card_key,
                    "image_url": item.image_url,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        try:
            items = tuple(
                OrderItem(
                    sku_id=i["sku_id"],
                    name=i["name"],
                    brand=i.get("brand", ""),
                    category=i.get("category", ""),
                    region=i.get("region", ""),
                    unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                    gift_card_key=i["gift_card_key"],
                    quantity=i.get("quantity", 1),
                    image_url=i.get("image_url", ""),
                )
                for i in raw["items"]
            )
            order = Order(
                id=raw["id"],
                order_number=raw["order_number"],
                user_id=raw["user_id"],
                items=items,
                shipping_address=ShippingAddress(**raw["shipping_address"]),
                payment_method=PaymentMethod(**raw["payment_method"]),
                status=OrderStatus(raw["status"]),
                placed_at=datetime.fromisoformat(raw["placed_at"]),
            )
        except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
            raise ValidationError(f"Malformed order record {raw.get('id')!r}: {exc}") from exc

        if "total" in raw and Decimal(raw["total"]) != order.total.amount:
            raise ValidationError(
                f"Order {raw['id']} total {raw['total']} does not match its items ({order.total})"
            )
        return order
