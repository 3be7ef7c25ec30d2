"""Runtime settings, read from environment variables.

Every setting has a default that works on a developer machine: data in
``./data``, confirmations written to an outbox folder instead of being
mailed, and payment confirmation disabled until a Stripe key is set.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    stripe_secret_key: str = ""
    stripe_api_base: str = "https://api.stripe.com"
    currency: str = "USD"
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_use_tls: bool = True
    mail_from: str = ""
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def catalog_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"

    @property
    def users_file(self) -> Path:
        return self.data_dir / "users.json"

    @property
    def outbox_dir(self) -> Path:
        return self.data_dir / "outbox"

    @staticmethod
    def from_env() -> Settings:
        return Settings(
            data_dir=Path(os.environ.get("GIFTSHOP_DATA_DIR", "data")),
            stripe_secret_key=os.environ.get("STRIPE_SECRET_KEY", ""),
            stripe_api_base=os.environ.get("STRIPE_API_BASE", "https://api.stripe.com"),
            currency=os.environ.get("GIFTSHOP_CURRENCY", "USD").upper(),
            smtp_host=os.environ.get("SMTP_HOST", ""),
            smtp_port=int(os.environ.get("SMTP_PORT", "587")),
            smtp_user=os.environ.get("SMTP_USER", ""),
            smtp_password=os.environ.get("SMTP_PASSWORD", ""),
            smtp_use_tls=_env_bool("SMTP_USE_TLS", True),
            mail_from=os.environ.get("MAIL_FROM", ""),
            log_level=os.environ.get("GIFTSHOP_LOG_LEVEL", "INFO").upper(),
            log_json=_env_bool("GIFTSHOP_LOG_JSON"),
        )
