"""
Commerce gateway: authenticated client for the upstream commerce REST API.

This is the ONLY place where upstream HTTP calls are made. Every call:
    - carries HTTP Basic credentials (consumer key / consumer secret)
    - is bounded by a fixed timeout (30 s by default)
    - is issued exactly once; failures are never retried here
    - fails with GatewayError, whatever went wrong

The gateway also owns a ResponseCache. The cache is advisory: the gateway
itself never reads it on the request path. Callers (the storefront service)
decide what to cache, using cache_key() to build keys.

Usage:
    config = GatewayConfig.from_mapping(app.config)
    gateway = CommerceGateway(config)

    page = gateway.get_products(page=1, per_page=12)
    page.products     # raw upstream list
    page.pagination   # {"X-WP-Total": "31", "X-WP-TotalPages": "3"}

    product = gateway.get_product_by_id(42)
    order = gateway.create_order(order_request.raw)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests
from requests.auth import HTTPBasicAuth

from core.cache import ResponseCache, DEFAULT_TTL_SECONDS
from core.exceptions import ConfigurationError, GatewayError
from models.product import ProductPage
from logging_config import get_logger


DEFAULT_TIMEOUT_SECONDS = 30.0

# Field subset requested for product listings
PRODUCT_FIELDS = (
    "id,name,price,regular_price,sale_price,description,short_description,"
    "images,categories,variations,attributes,tags"
)


def cache_key(operation: str, **params: Any) -> str:
    """
    Build a cache key from an operation name and its parameters.

    Parameters are sorted by name so keyword order never matters.

    Example:
        >>> cache_key("products", per_page=12, page=1)
        'products:page=1:per_page=12'
        >>> cache_key("categories")
        'categories'
    """
    parts = [operation]
    parts.extend(f"{name}={params[name]}" for name in sorted(params))
    return ":".join(parts)


@dataclass(frozen=True)
class GatewayConfig:
    """Connection settings for the upstream commerce API."""

    api_url: str
    consumer_key: str
    consumer_secret: str
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    cache_ttl_seconds: float = DEFAULT_TTL_SECONDS

    @property
    def base_url(self) -> str:
        """API URL without trailing slash."""
        return self.api_url.rstrip("/")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "GatewayConfig":
        """
        Build from a Flask config (or any mapping with the same keys).

        Raises:
            ConfigurationError: If URL, key or secret is missing
        """
        required = ("WOOCOMMERCE_API_URL", "WOOCOMMERCE_CONSUMER_KEY", "WOOCOMMERCE_CONSUMER_SECRET")
        missing = [name for name in required if not mapping.get(name)]
        if missing:
            raise ConfigurationError(missing)

        return cls(
            api_url=mapping["WOOCOMMERCE_API_URL"],
            consumer_key=mapping["WOOCOMMERCE_CONSUMER_KEY"],
            consumer_secret=mapping["WOOCOMMERCE_CONSUMER_SECRET"],
            timeout_seconds=float(mapping.get("UPSTREAM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
            cache_ttl_seconds=float(mapping.get("CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS)),
        )


class CommerceGateway:
    """
    Client for the upstream commerce API.

    One instance is created per application and shared by all request
    threads. It holds a requests.Session (connection pooling) and the
    response cache.

    Attributes:
        config: Connection settings
        cache: Advisory response cache (TTL from config)
    """

    def __init__(
        self,
        config: GatewayConfig,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the gateway.

        Args:
            config: Upstream URL, credentials and timeouts
            session: HTTP session (a new requests.Session if not provided)
            cache: Response cache (a new one with config.cache_ttl_seconds
                if not provided)
            logger: Logger instance (module logger if not provided)
        """
        self.config = config
        self.cache = cache if cache is not None else ResponseCache(ttl_seconds=config.cache_ttl_seconds)
        self._session = session if session is not None else requests.Session()
        self._logger = logger if logger is not None else get_logger(__name__)

        self._logger.debug(f"CommerceGateway initialized for {config.base_url}")

    def close(self) -> None:
        """Release pooled upstream connections."""
        self._session.close()

    # =========================================================================
    # CACHE
    # =========================================================================

    def set_cache(self, key: str, value: Any) -> None:
        """Store value under key with the configured TTL, overwriting."""
        self.cache.set(key, value)

    def get_cached(self, key: str) -> Optional[Any]:
        """Return the cached value for key, or None when absent or expired."""
        return self.cache.get(key)

    # =========================================================================
    # UPSTREAM OPERATIONS
    # =========================================================================

    def get_products(self, page: int = 1, per_page: int = 12) -> ProductPage:
        """
        Fetch one page of products.

        Args:
            page: 1-based page number
            per_page: Products per page

        Returns:
            ProductPage with the raw product list and pagination headers

        Raises:
            ValueError: If page or per_page is below 1
            GatewayError: On timeout, unreachable upstream, non-2xx status
                or malformed body
        """
        if page < 1:
            raise ValueError("page must be >= 1")
        if per_page < 1:
            raise ValueError("per_page must be >= 1")

        params = {
            "page": page,
            "per_page": per_page,
            "_fields": PRODUCT_FIELDS,
        }

        start = time.monotonic()
        response = self._request("GET", "products", operation="get_products", params=params)

        body = self._parse_json(response, "get_products")
        if not isinstance(body, list):
            raise GatewayError(
                "Product listing response is not a list",
                operation="get_products",
                reason=GatewayError.MALFORMED_RESPONSE,
                status_code=response.status_code,
            )

        duration_ms = (time.monotonic() - start) * 1000
        self._logger.info(f"Commerce API call (page {page}) took {duration_ms:.0f}ms")

        return ProductPage.from_response(body, response.headers, page=page, per_page=per_page)

    def get_product_by_id(self, product_id: int) -> Dict[str, Any]:
        """
        Fetch a single product.

        Raises:
            ValueError: If product_id is not a positive integer
            GatewayError: is_not_found is True when upstream returns 404
        """
        if isinstance(product_id, bool) or not isinstance(product_id, int) or product_id < 1:
            raise ValueError("product_id must be a positive integer")

        response = self._request("GET", f"products/{product_id}", operation="get_product_by_id")
        return self._parse_json(response, "get_product_by_id")

    def get_product_categories(self) -> List[Dict[str, Any]]:
        """Fetch the category collection."""
        response = self._request("GET", "products/categories", operation="get_product_categories")
        return self._parse_json(response, "get_product_categories")

    def create_order(self, order_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create an order upstream.

        The payload is sent as-is and the upstream body is returned as-is.
        Not retried: a second attempt could create a duplicate order.

        Raises:
            GatewayError: On upstream validation/payment rejection or
                transport failure
        """
        response = self._request("POST", "orders", operation="create_order", json=order_data)
        return self._parse_json(response, "create_order")

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _get_auth_config(self) -> Dict[str, Any]:
        """
        Keyword arguments carrying credentials and timeout.

        Single call site for credential handling.
        """
        return {
            "auth": HTTPBasicAuth(self.config.consumer_key, self.config.consumer_secret),
            "timeout": self.config.timeout_seconds,
        }

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """Issue one authenticated request and fail on anything but 2xx."""
        url = f"{self.config.base_url}/{path}"

        kwargs = self._get_auth_config()
        if params is not None:
            kwargs["params"] = params
        if json is not None:
            kwargs["json"] = json

        try:
            response = self._session.request(method, url, **kwargs)
        except requests.Timeout as e:
            self._logger.error(
                f"{operation}: upstream timed out after {self.config.timeout_seconds:.0f}s"
            )
            raise GatewayError(
                f"Commerce API did not respond within {self.config.timeout_seconds:.0f}s",
                operation=operation,
                reason=GatewayError.TIMEOUT,
            ) from e
        except requests.RequestException as e:
            self._logger.error(f"{operation}: upstream unreachable: {e}")
            raise GatewayError(
                f"Commerce API unreachable: {e}",
                operation=operation,
                reason=GatewayError.UNREACHABLE,
            ) from e

        if not 200 <= response.status_code < 300:
            raise self._status_error(response, operation)

        return response

    def _status_error(self, response: requests.Response, operation: str) -> GatewayError:
        """Build a GatewayError from a non-2xx upstream response."""
        message = f"Commerce API returned {response.status_code}"
        upstream_code = None

        # Upstream error bodies look like {"code": ..., "message": ..., "data": {...}}
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            upstream_code = body.get("code")
            if body.get("message"):
                message = f"{message}: {body['message']}"

        log = self._logger.warning if response.status_code == 404 else self._logger.error
        log(f"{operation}: {message}")

        return GatewayError(
            message,
            operation=operation,
            reason=GatewayError.UPSTREAM_STATUS,
            status_code=response.status_code,
            upstream_code=upstream_code,
        )

    def _parse_json(self, response: requests.Response, operation: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            # requests' JSONDecodeError subclasses ValueError
            self._logger.error(f"{operation}: upstream body is not JSON: {e}")
            raise GatewayError(
                "Commerce API returned a malformed response",
                operation=operation,
                reason=GatewayError.MALFORMED_RESPONSE,
                status_code=response.status_code,
            ) from e
