"""Centralised settings for the storefront backend.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_CATALOG_BASE_URL = "https://fakestoreapi.com"
HOSTED_CATALOG_BASE_URL = "https://dummyjson.com"
DEFAULT_JWT_SECRET = "dev_secret_change_me"


def resolve_catalog_base_url() -> str:
    """Pick the upstream catalog base URL.

    Priority: explicit ``CATALOG_BASE_URL`` (or the older
    ``FAKESTORE_BASE_URL`` name), then the hosted-platform heuristic, then the
    hardcoded default.  fakestoreapi.com refuses many datacenter clients, so
    a process running on Render talks to dummyjson.com instead.
    """
    override = os.environ.get("CATALOG_BASE_URL") or os.environ.get("FAKESTORE_BASE_URL")
    if override:
        return override.rstrip("/")
    if os.environ.get("RENDER"):
        return HOSTED_CATALOG_BASE_URL
    return DEFAULT_CATALOG_BASE_URL


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = field(default_factory=lambda: os.environ.get("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.environ.get("PORT") or "5001"))
    cors_origins: list[str] = field(
        default_factory=lambda: _split_origins(os.environ.get("CORS_ORIGINS", "*"))
    )
    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))

    # ------------------------------------------------------------------
    # Upstream catalog
    # ------------------------------------------------------------------
    catalog_base_url: str = field(default_factory=resolve_catalog_base_url)
    catalog_timeout: float = field(
        default_factory=lambda: float(os.environ.get("CATALOG_TIMEOUT", "15.0"))
    )

    # ------------------------------------------------------------------
    # Session tokens
    # ------------------------------------------------------------------
    # The default secret exists for local demos only.  Anything reachable
    # from the internet must set JWT_SECRET.
    jwt_secret: str = field(
        default_factory=lambda: os.environ.get("JWT_SECRET") or DEFAULT_JWT_SECRET
    )

    # ------------------------------------------------------------------
    # Payments (optional)
    # ------------------------------------------------------------------
    stripe_secret_key: str | None = field(
        default_factory=lambda: os.environ.get("STRIPE_SECRET_KEY") or None
    )
    payment_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PAYMENT_TIMEOUT", "20.0"))
    )
    checkout_currency: str = field(
        default_factory=lambda: os.environ.get("CHECKOUT_CURRENCY", "usd")
    )
    frontend_url: str = field(
        default_factory=lambda: os.environ.get("FRONTEND_URL", "http://localhost:5173").rstrip("/")
    )

    @property
    def payments_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET

    def describe(self) -> dict[str, object]:
        """Return the resolved configuration with secrets masked."""
        return {
            "host": self.host,
            "port": self.port,
            "catalog_base_url": self.catalog_base_url,
            "catalog_timeout": self.catalog_timeout,
            "frontend_url": self.frontend_url,
            "cors_origins": self.cors_origins,
            "jwt_secret": "default (change me)" if self.uses_default_secret else "***",
            "payments_configured": self.payments_configured,
            "payment_timeout": self.payment_timeout,
            "checkout_currency": self.checkout_currency,
            "log_level": self.log_level,
        }


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="[%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


# Module-level singleton — import this everywhere:
#   from backend.config import settings
settings = Settings()
