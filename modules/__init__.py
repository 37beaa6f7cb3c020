"""Helper modules for the storefront backend."""

__all__ = [
    "product_layout",
]
