"""Async proxy for the upstream product catalog.

Two upstream APIs are supported and they disagree on the list envelope:

    fakestoreapi.com   GET /products  ->  [{...}, {...}]
    dummyjson.com      GET /products  ->  {"products": [{...}], "total": ..}

:func:`unwrap_product_list` hides that difference so callers always receive a
plain list.  Every failure (network error, timeout, non-2xx, unreadable body)
is raised as :class:`~backend.errors.UpstreamError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote

import httpx

from backend.errors import UpstreamError

logger = logging.getLogger(__name__)

# Some upstreams reject the default httpx signature.
_BROWSER_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

_DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": _BROWSER_UA,
}


def unwrap_product_list(body: Any) -> Optional[list[Any]]:
    """Return the product list carried by *body*, or ``None`` if it has none.

    A bare JSON array is returned unchanged; an object exposing a ``products``
    array yields that array.
    """
    if isinstance(body, list):
        return body
    if isinstance(body, Mapping) and isinstance(body.get("products"), list):
        return body["products"]
    return None


class CatalogProxy:
    """Forwards list/detail reads to a single upstream base URL.

    Args:
        base_url: Upstream root, e.g. ``https://fakestoreapi.com``.
        timeout: Upper bound in seconds for one upstream call, body included.
        client: Shared ``httpx.AsyncClient``.  When omitted, a short-lived
            client is opened per call.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Any]:
        url = f"{self.base_url}/products"
        body, status = await self._get_json(url)
        products = unwrap_product_list(body)
        if products is None:
            error = UpstreamError(
                "Unexpected catalog response shape",
                url=url,
                upstream_status=status,
                code="UnexpectedShape",
            )
            self._log_failure(error)
            raise error
        return products

    async def get_product(self, product_id: str | int) -> Any:
        url = f"{self.base_url}/products/{quote(str(product_id), safe='')}"
        body, _ = await self._get_json(url)
        return body

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url, headers=_DEFAULT_HEADERS, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            return await client.get(url, headers=_DEFAULT_HEADERS)

    async def _get_json(self, url: str) -> tuple[Any, int]:
        try:
            response = await asyncio.wait_for(self._fetch(url), timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            error = UpstreamError(
                str(exc),
                url=url,
                upstream_status=exc.response.status_code,
                code=type(exc).__name__,
            )
        except httpx.HTTPError as exc:
            error = UpstreamError(
                str(exc) or type(exc).__name__,
                url=url,
                code=type(exc).__name__,
            )
        except asyncio.TimeoutError:
            error = UpstreamError(
                f"No response within {self.timeout:g}s",
                url=url,
                code="Timeout",
            )
        else:
            try:
                return response.json(), response.status_code
            except ValueError:
                error = UpstreamError(
                    "Upstream returned a non-JSON body",
                    url=url,
                    upstream_status=response.status_code,
                    code="InvalidJSON",
                )

        self._log_failure(error)
        raise error

    @staticmethod
    def _log_failure(error: UpstreamError) -> None:
        logger.error(
            "Upstream catalog call failed: url=%s status=%s code=%s message=%s",
            error.url,
            error.upstream_status,
            error.code,
            error.message,
        )
