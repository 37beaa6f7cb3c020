"""
Core module for the storefront backend.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- cache: TTL response cache
- gateway: Authenticated client for the upstream commerce API
"""

from .exceptions import (
    StorefrontError,
    ConfigurationError,
    InvalidRequestError,
    GatewayError,
)
from .cache import ResponseCache, CacheEntry
from .gateway import CommerceGateway, GatewayConfig, cache_key

__all__ = [
    "StorefrontError",
    "ConfigurationError",
    "InvalidRequestError",
    "GatewayError",
    "ResponseCache",
    "CacheEntry",
    "CommerceGateway",
    "GatewayConfig",
    "cache_key",
]
