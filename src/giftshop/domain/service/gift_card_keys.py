"""Gift-card redemption keys.

Keys look like ``AB3D-7F2K-QW9E-HN4M``: four groups of four symbols from
a 32-character alphabet without the worst look-alikes (no 0/O, 1/I).  They are
display codes handed to the buyer, not secrets guarding access.
"""

from __future__ import annotations

import random
import re

from giftshop.domain.exceptions import ValidationError
from giftshop.domain.repository.order_repository import OrderRepository

KEY_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
GROUPS = 4
GROUP_SIZE = 4
KEY_PATTERN = re.compile(r"^[A-Z2-9]{4}-[A-Z2-9]{4}-[A-Z2-9]{4}-[A-Z2-9]{4}$")

MAX_ISSUE_ATTEMPTS = 20


def generate_gift_card_key(rng: random.Random | None = None) -> str:
    """Return a fresh key; unique only by probability (32**16 space)."""
    rng = rng or random
    return "-".join(
        "".join(rng.choice(KEY_ALPHABET) for _ in range(GROUP_SIZE))
        for _ in range(GROUPS)
    )


def is_valid_gift_card_key(key: str) -> bool:
    return bool(KEY_PATTERN.match(key)) and all(
        ch in KEY_ALPHABET for ch in key.replace("-", "")
    )


class GiftCardKeyIssuer:
    """Hands out keys that are unique within an order and among stored orders."""

    def __init__(self, order_repo: OrderRepository, rng: random.Random | None = None) -> None:
        self._order_repo = order_repo
        self._rng = rng

    def issue(self, count: int) -> list[str]:
        keys: list[str] = []
        taken: set[str] = set()
        for _ in range(count):
            key = self._issue_one(taken)
            taken.add(key)
            keys.append(key)
        return keys

    def _issue_one(self, taken: set[str]) -> str:
        for _ in range(MAX_ISSUE_ATTEMPTS):
            key = generate_gift_card_key(self._rng)
            if key not in taken and not self._order_repo.gift_card_key_exists(key):
                return key
        raise ValidationError(
            f"Could not issue a unique gift card key after {MAX_ISSUE_ATTEMPTS} attempts"
        )
