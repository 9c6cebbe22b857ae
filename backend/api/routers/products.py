"""Catalog proxy endpoints.

Routes
------
GET /api/products         Product list, envelope unwrapped
GET /api/products/{id}    Single product, upstream body unchanged
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from backend.api.deps import get_catalog
from backend.catalog.proxy import CatalogProxy

router = APIRouter()


@router.get("")
async def list_products(catalog: CatalogProxy = Depends(get_catalog)) -> list[Any]:
    return await catalog.list_products()


@router.get("/{product_id}")
async def get_product(product_id: str, catalog: CatalogProxy = Depends(get_catalog)) -> Any:
    return await catalog.get_product(product_id)
