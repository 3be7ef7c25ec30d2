"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from giftshop.domain.model.catalog import CatalogEntry
from giftshop.domain.model.order import Order
from giftshop.domain.model.user import UserProfile
from giftshop.domain.model.value_objects import CartLine, PaymentMethod, ShippingAddress


@dataclass(frozen=True)
class CartLineSpec:
    """Input: what the shopper put in the cart (product ID + quantity)."""

    sku_id: str
    quantity: int

    def to_domain(self) -> CartLine:
        return CartLine.of(self.sku_id, self.quantity)


@dataclass(frozen=True)
class PaymentConfirmationRequest:
    """Input: the intent to confirm and the token the browser collected."""

    client_secret: str
    payment_method_id: str


@dataclass(frozen=True)
class PlaceOrderRequest:
    """Input: one checkout attempt."""

    lines: list[CartLineSpec]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    total: str | None = None  # what the shopper was shown; None skips the check
    payment_confirmation: PaymentConfirmationRequest | None = None


@dataclass(frozen=True)
class ProductSpec:
    """Input: administrator's product form."""

    name: str
    brand: str
    category: str
    region: str
    price: str
    currency: str = "USD"
    stock: int = 0
    discount: int | None = None
    description: str = ""
    image_url: str = ""


@dataclass(frozen=True)
class OrderItemDTO:
    """Output: one delivered gift card."""

    sku_id: str
    name: str
    brand: str
    region: str
    quantity: int
    unit_price: str  # formatted, e.g. "USD 15.00"
    line_total: str
    gift_card_key: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    order_number: str
    user_id: str
    status: str
    items: list[OrderItemDTO]
    total: str
    customer_email: str
    customer_name: str
    payment_method: str
    placed_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            user_id=order.user_id,
            status=order.status.value,
            items=[
                OrderItemDTO(
                    sku_id=item.sku_id,
                    name=item.name,
                    brand=item.brand,
                    region=item.region,
                    quantity=item.quantity,
                    unit_price=str(item.unit_price),
                    line_total=str(item.line_total),
                    gift_card_key=item.gift_card_key,
                )
                for item in order.items
            ],
            total=str(order.total),
            customer_email=order.customer_email,
            customer_name=order.shipping_address.full_name,
            payment_method=str(order.payment_method),
            placed_at=order.placed_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class CatalogEntryDTO:
    """Output: a product as listed in the storefront."""

    id: str
    name: str
    brand: str
    category: str
    region: str
    price: str
    effective_price: str
    discount: int | None
    stock: int

    @staticmethod
    def from_entry(entry: CatalogEntry) -> CatalogEntryDTO:
        return CatalogEntryDTO(
            id=entry.id,
            name=entry.name,
            brand=entry.brand,
            category=entry.category,
            region=entry.region,
            price=str(entry.price),
            effective_price=str(entry.effective_price),
            discount=entry.discount,
            stock=entry.stock,
        )


@dataclass(frozen=True)
class CatalogPage:
    """Output: one page of a filtered catalog listing."""

    entries: list[CatalogEntryDTO]
    page: int
    total_pages: int
    total_matches: int
    brands: list[str] = field(default_factory=list)
    regions: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserDTO:
    id: str
    email: str
    role: str
    display_name: str
    is_blocked: bool

    @staticmethod
    def from_profile(profile: UserProfile) -> UserDTO:
        return UserDTO(
            id=profile.id,
            email=profile.email,
            role=profile.role.value,
            display_name=profile.display_name,
            is_blocked=profile.is_blocked,
        )
