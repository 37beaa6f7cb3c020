"""
Services layer for the storefront backend.

This module contains the business logic services:
- StorefrontService: catalogue reads (with response caching) and order
  placement on top of the CommerceGateway
"""

from .storefront_service import StorefrontService

__all__ = [
    "StorefrontService",
]
