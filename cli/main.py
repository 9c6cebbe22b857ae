"""Storefront CLI — entry-point for operating the backend.

Usage:
    storefront --help

Commands:
    serve         → run the HTTP API under uvicorn
    config        → show the resolved configuration (secrets masked)
    products      → fetch the catalog through the proxy
    decode-token  → verify a session token and print its claims
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import typer

from backend.auth.tokens import TokenCodec
from backend.catalog.proxy import CatalogProxy
from backend.config import configure_logging, settings
from backend.errors import InvalidToken, UpstreamError

logger = logging.getLogger("storefront")

app = typer.Typer(
    name="storefront",
    help="Storefront backend CLI.",
    no_args_is_help=True,
)


@app.command("serve")
def serve(
    host: str = typer.Option(settings.host, help="Interface to bind."),
    port: int = typer.Option(settings.port, help="Port to listen on."),
    reload: bool = typer.Option(False, help="Reload on code changes (development)."),
) -> None:
    """Run the API server."""
    import uvicorn

    configure_logging()
    logger.info("Backend starting on %s:%d", host, port)
    logger.info("Catalog base URL: %s", settings.catalog_base_url)
    try:
        uvicorn.run(
            "backend.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=settings.log_level.lower(),
        )
    except OSError as exc:
        logger.error("Server failed to start: %s", exc)
        raise typer.Exit(1) from exc
    except SystemExit as exc:
        # uvicorn calls sys.exit(1) when it cannot bind.
        if exc.code:
            logger.error("Server failed to start (exit code %s)", exc.code)
            raise typer.Exit(1) from exc
        raise


@app.command("config")
def show_config() -> None:
    """Print the resolved configuration."""
    typer.echo(json.dumps(settings.describe(), indent=2))


@app.command("products")
def products(
    product_id: Optional[str] = typer.Option(None, "--id", help="Fetch a single product."),
) -> None:
    """Fetch products from the configured upstream catalog."""
    proxy = CatalogProxy(settings.catalog_base_url, timeout=settings.catalog_timeout)
    typer.echo(f"[products] Upstream {proxy.base_url}")
    try:
        if product_id is not None:
            item = asyncio.run(proxy.get_product(product_id))
            typer.echo(json.dumps(item, indent=2))
            return
        items = asyncio.run(proxy.list_products())
    except UpstreamError as exc:
        typer.echo(f"[products] Failed: {json.dumps(exc.to_payload())}", err=True)
        raise typer.Exit(1) from exc

    typer.echo(f"[products] {len(items)} product(s)")
    for item in items:
        if isinstance(item, dict):
            typer.echo(f"  {item.get('id')}  {item.get('title', '')!r}")
        else:
            typer.echo(f"  {item!r}")


@app.command("decode-token")
def decode_token(token: str = typer.Argument(..., help="Session token to verify.")) -> None:
    """Verify a session token with the configured secret and print its claims."""
    codec = TokenCodec(settings.jwt_secret)
    try:
        claims = codec.verify(token)
    except InvalidToken as exc:
        typer.echo(f"[decode-token] {exc.message}", err=True)
        raise typer.Exit(1) from exc
    typer.echo(json.dumps(claims, indent=2))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
