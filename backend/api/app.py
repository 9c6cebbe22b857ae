"""FastAPI application factory.

Lifespan
--------
On startup the app builds its services from :class:`~backend.config.Settings`
and stores them on ``app.state``:

    app.state.auth       AuthService over an in-memory credential store
    app.state.catalog    CatalogProxy sharing one httpx.AsyncClient
    app.state.checkout   CheckoutService (processor is None when Stripe is
                         not configured)

On shutdown the shared HTTP client is closed.

Routers
-------
    /health, /api/health   liveness
    /api/auth              register / login / me
    /api/products          catalog proxy
    /api/checkout          hosted checkout sessions

Errors
------
Service errors (:class:`~backend.errors.AppError`) are rendered as their JSON
envelope with the matching status.  Request-body validation failures become
400.  Anything else is logged and returned as a bare 500.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.auth.service import AuthService
from backend.auth.store import InMemoryCredentialStore
from backend.auth.tokens import TokenCodec
from backend.catalog.proxy import CatalogProxy
from backend.checkout.processor import PaymentProcessor, StripeCheckoutProcessor
from backend.checkout.service import CheckoutService
from backend.config import Settings, settings as default_settings
from backend.errors import AppError

from backend.api.routers import auth as auth_router
from backend.api.routers import checkout as checkout_router
from backend.api.routers import health as health_router
from backend.api.routers import products as products_router

logger = logging.getLogger(__name__)


def _build_processor(config: Settings) -> Optional[PaymentProcessor]:
    if not config.stripe_secret_key:
        return None
    return StripeCheckoutProcessor(config.stripe_secret_key, timeout=config.payment_timeout)


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": "Invalid request body"})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def create_app(
    config: Optional[Settings] = None,
    processor: Optional[PaymentProcessor] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance.

    Args:
        config: Settings to build services from.  Defaults to the
            module-level ``backend.config.settings``.
        processor: Payment processor override.  When omitted a Stripe
            processor is used if ``STRIPE_SECRET_KEY`` is set.
    """
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Build services on startup and close the HTTP client on shutdown."""
        if config.uses_default_secret:
            logger.warning("JWT_SECRET is not set; using the insecure demo default.")

        store = InMemoryCredentialStore()
        app.state.auth = AuthService(store, TokenCodec(config.jwt_secret))

        http_client = httpx.AsyncClient(timeout=config.catalog_timeout, follow_redirects=True)
        app.state.catalog = CatalogProxy(
            config.catalog_base_url, timeout=config.catalog_timeout, client=http_client
        )

        app.state.checkout = CheckoutService(
            processor if processor is not None else _build_processor(config),
            frontend_url=config.frontend_url,
            currency=config.checkout_currency,
            timeout=config.payment_timeout,
        )

        logger.info("Catalog upstream: %s", config.catalog_base_url)
        if not app.state.checkout.configured:
            logger.warning("STRIPE_SECRET_KEY missing; checkout is disabled.")
        try:
            yield
        finally:
            await http_client.aclose()

    app = FastAPI(
        title="Storefront BFF",
        description=(
            "Backend-for-frontend for the storefront client: proxies the product "
            "catalog, issues demo session tokens, and creates hosted checkout "
            "sessions."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(health_router.router, tags=["health"])
    app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
    app.include_router(products_router.router, prefix="/api/products", tags=["products"])
    app.include_router(checkout_router.router, prefix="/api/checkout", tags=["checkout"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn backend.api.app:app --reload
app = create_app()
