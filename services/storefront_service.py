"""
Storefront service: the routes' entry point to catalogue and order data.

This service sits between the Flask routes and the CommerceGateway. It
decides what is cached and under which key; the gateway itself always goes
upstream.

Cache keys (see core.gateway.cache_key):
    products:page=<n>:per_page=<n>   ProductPage for a listing page
    product:id=<n>                   single product body
    categories                       category list

Orders are never cached and never retried. Creating an order does not
invalidate anything: catalogue data and order data do not overlap.

Usage:
    service = StorefrontService(gateway)
    page = service.list_products(page=2, per_page=12)
    cards = service.list_product_cards(page=1, per_page=12)
    order = service.place_order(OrderRequest.from_dict(request_json))
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from core.gateway import CommerceGateway, cache_key
from models.order import OrderRequest, OrderResponse
from models.product import Category, Product, ProductPage
from modules.product_layout import build_product_card
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class StorefrontService:
    """
    Read-through cache over the commerce gateway.

    One instance per application; stateless apart from the gateway's cache.
    """

    def __init__(self, gateway: CommerceGateway):
        self._gateway = gateway

    @property
    def gateway(self) -> CommerceGateway:
        return self._gateway

    def list_products(self, page: int = 1, per_page: int = 12, use_cache: bool = True) -> ProductPage:
        """One page of products, from cache when fresh."""
        key = cache_key("products", page=page, per_page=per_page)

        if use_cache:
            cached = self._gateway.get_cached(key)
            if cached is not None:
                logger.debug(f"Cache hit: {key}")
                return cached

        product_page = self._gateway.get_products(page=page, per_page=per_page)
        self._gateway.set_cache(key, product_page)
        return product_page

    def get_product(self, product_id: int, use_cache: bool = True) -> Dict[str, Any]:
        key = cache_key("product", id=product_id)

        if use_cache:
            cached = self._gateway.get_cached(key)
            if cached is not None:
                logger.debug(f"Cache hit: {key}")
                return cached

        product = self._gateway.get_product_by_id(product_id)
        self._gateway.set_cache(key, product)
        return product

    def list_categories(self, use_cache: bool = True) -> List[Dict[str, Any]]:
        key = cache_key("categories")

        if use_cache:
            cached = self._gateway.get_cached(key)
            if cached is not None:
                logger.debug(f"Cache hit: {key}")
                return cached

        categories = self._gateway.get_product_categories()
        loaded = [Category.from_api(c) for c in categories]
        top_level = sum(1 for c in loaded if c.parent == 0)
        logger.info(f"Loaded {len(loaded)} categories ({top_level} top-level)")

        self._gateway.set_cache(key, categories)
        return categories

    def list_product_cards(
        self,
        page: int = 1,
        per_page: int = 12,
    ) -> Tuple[List[Dict[str, Any]], ProductPage]:
        """
        Grid cards for one listing page.

        Card indices are page-local (the first card of every page is
        featured), matching how the client renders each page.

        Returns:
            Tuple of (cards, the ProductPage they were built from)
        """
        product_page = self.list_products(page=page, per_page=per_page)
        cards = [
            build_product_card(Product.from_api(raw), index)
            for index, raw in enumerate(product_page.products)
        ]
        return cards, product_page

    def place_order(self, order_request: OrderRequest) -> Dict[str, Any]:
        """
        Forward a validated order upstream.

        Returns:
            The upstream order body, unmodified
        """
        logger.info(
            f"Placing order: {len(order_request.line_items)} line item(s), "
            f"{order_request.total_quantity} unit(s)"
        )
        body = self._gateway.create_order(order_request.raw)

        summary = OrderResponse.from_api(body)
        logger.info(f"Order {summary.id} created (status={summary.status or 'unknown'})")
        return body
