"""Upstream product catalog proxy."""

from backend.catalog.proxy import CatalogProxy, unwrap_product_list

__all__ = ["CatalogProxy", "unwrap_product_list"]
