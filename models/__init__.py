"""
Data models for the storefront backend.

This module contains immutable dataclasses for:
- Product / Category: snapshots of upstream catalogue data
- ProductPage: one page of the product listing plus pagination headers
- OrderRequest / OrderResponse: checkout payload and upstream answer

All dataclasses are frozen so they can be shared between request threads.
"""

from .product import (
    Product,
    ProductImage,
    ProductAttribute,
    CategoryRef,
    TagRef,
    Category,
    ProductPage,
    PAGINATION_HEADERS,
)
from .order import OrderRequest, OrderResponse, LineItem

__all__ = [
    # Catalogue models
    "Product",
    "ProductImage",
    "ProductAttribute",
    "CategoryRef",
    "TagRef",
    "Category",
    "ProductPage",
    "PAGINATION_HEADERS",
    # Order models
    "OrderRequest",
    "OrderResponse",
    "LineItem",
]
