"""
Product and category data models.

These models are immutable snapshots of upstream commerce data. The gateway
returns raw JSON bodies; routes and the layout helpers build these models
when they need typed access (card building, logging).

Thread Safety:
    - All models are frozen dataclasses
    - Safe to share between request threads
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Tuple


# Upstream pagination headers copied onto our responses as-is
PAGINATION_HEADERS = ("X-WP-Total", "X-WP-TotalPages", "Link")


@dataclass(frozen=True)
class ProductImage:
    """A product image as delivered by upstream."""

    src: str
    """Absolute image URL."""

    alt: str = ""
    """Alt text (often empty upstream)."""

    id: Optional[int] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ProductImage":
        return cls(
            src=data.get("src", ""),
            alt=data.get("alt", "") or "",
            id=data.get("id"),
        )


@dataclass(frozen=True)
class CategoryRef:
    """Category reference embedded in a product."""

    id: int
    name: str
    slug: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CategoryRef":
        return cls(
            id=data.get("id", 0),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
        )


@dataclass(frozen=True)
class TagRef:
    """Tag reference embedded in a product."""

    id: int
    name: str
    slug: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TagRef":
        return cls(
            id=data.get("id", 0),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
        )


@dataclass(frozen=True)
class ProductAttribute:
    """Attribute name with its option values (e.g. Color: Blue, Green)."""

    name: str
    options: Tuple[str, ...] = ()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ProductAttribute":
        return cls(
            name=data.get("name", ""),
            options=tuple(data.get("options", []) or []),
        )


@dataclass(frozen=True)
class Product:
    """
    A product snapshot from the upstream commerce API.

    Prices are kept as the strings upstream sends ("249", "199.50"); they
    are display values, not arithmetic inputs.
    """

    id: int
    name: str
    price: str
    """Effective price (sale price when on sale)."""

    regular_price: str = ""
    sale_price: str = ""
    description: str = ""
    short_description: str = ""
    images: Tuple[ProductImage, ...] = ()
    categories: Tuple[CategoryRef, ...] = ()
    variations: Tuple[int, ...] = ()
    attributes: Tuple[ProductAttribute, ...] = ()
    tags: Tuple[TagRef, ...] = ()

    @property
    def is_on_sale(self) -> bool:
        return bool(self.sale_price)

    @property
    def primary_image(self) -> Optional[ProductImage]:
        return self.images[0] if self.images else None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        """Create a Product from one element of the upstream products body."""
        price = data.get("price", "")
        return cls(
            id=data.get("id", 0),
            name=data.get("name", ""),
            price=str(price) if price is not None else "",
            regular_price=str(data.get("regular_price", "") or ""),
            sale_price=str(data.get("sale_price", "") or ""),
            description=data.get("description", "") or "",
            short_description=data.get("short_description", "") or "",
            images=tuple(ProductImage.from_api(i) for i in data.get("images", []) or []),
            categories=tuple(CategoryRef.from_api(c) for c in data.get("categories", []) or []),
            variations=tuple(data.get("variations", []) or []),
            attributes=tuple(ProductAttribute.from_api(a) for a in data.get("attributes", []) or []),
            tags=tuple(TagRef.from_api(t) for t in data.get("tags", []) or []),
        )


@dataclass(frozen=True)
class Category:
    """A product category from the upstream categories endpoint."""

    id: int
    name: str
    slug: str = ""
    parent: int = 0
    count: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=data.get("id", 0),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            parent=data.get("parent", 0) or 0,
            count=data.get("count", 0) or 0,
        )


@dataclass(frozen=True)
class ProductPage:
    """
    One page of the upstream product listing.

    ``products`` is the raw upstream body (a list of product dicts) and
    ``pagination`` holds the upstream pagination headers that were present,
    names and values unchanged.
    """

    products: List[Dict[str, Any]]
    pagination: Dict[str, str] = field(default_factory=dict)
    page: int = 1
    per_page: int = 12

    @property
    def total(self) -> Optional[int]:
        value = self.pagination.get("X-WP-Total")
        return int(value) if value and value.isdigit() else None

    @property
    def total_pages(self) -> Optional[int]:
        value = self.pagination.get("X-WP-TotalPages")
        return int(value) if value and value.isdigit() else None

    @classmethod
    def from_response(
        cls,
        body: List[Dict[str, Any]],
        headers,
        page: int,
        per_page: int,
    ) -> "ProductPage":
        """Build from the upstream body and a (case-insensitive) headers mapping."""
        pagination = {
            name: headers[name]
            for name in PAGINATION_HEADERS
            if headers.get(name) is not None
        }
        return cls(products=body, pagination=pagination, page=page, per_page=per_page)
