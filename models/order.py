"""
Order data models.

An order flows: frontend JSON -> OrderRequest (validated) -> gateway ->
upstream -> OrderResponse. The gateway forwards OrderRequest.raw exactly
as the frontend sent it; the typed fields exist only for validation and
logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Tuple

from core.exceptions import InvalidRequestError


def _positive_int(value: Any, field_name: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidRequestError(f"{field_name} must be a positive integer", field=field_name)
    return value


@dataclass(frozen=True)
class LineItem:
    """One product line in an order."""

    product_id: int
    quantity: int
    variation_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], position: int) -> "LineItem":
        if not isinstance(data, dict):
            raise InvalidRequestError(
                f"line_items[{position}] must be an object", field="line_items"
            )
        variation_id = data.get("variation_id")
        return cls(
            product_id=_positive_int(data.get("product_id"), f"line_items[{position}].product_id"),
            quantity=_positive_int(data.get("quantity"), f"line_items[{position}].quantity"),
            variation_id=(
                _positive_int(variation_id, f"line_items[{position}].variation_id")
                if variation_id not in (None, 0) else None
            ),
        )


@dataclass(frozen=True)
class OrderRequest:
    """
    An order as submitted by the storefront checkout.

    Construct with from_dict(); ``raw`` is the untouched request body and
    is what gets sent upstream.
    """

    line_items: Tuple[LineItem, ...]
    billing: Dict[str, Any] = field(default_factory=dict)
    shipping: Dict[str, Any] = field(default_factory=dict)
    payment_method: str = ""
    customer_note: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.line_items)

    @classmethod
    def from_dict(cls, data: Any) -> "OrderRequest":
        """
        Validate and wrap a checkout request body.

        Raises:
            InvalidRequestError: If the body is not an object or has no
                usable line items
        """
        if not isinstance(data, dict):
            raise InvalidRequestError("Order body must be a JSON object")

        items = data.get("line_items")
        if not isinstance(items, list) or not items:
            raise InvalidRequestError("Order must contain at least one line item", field="line_items")

        billing = data.get("billing") or {}
        shipping = data.get("shipping") or {}
        if not isinstance(billing, dict):
            raise InvalidRequestError("billing must be an object", field="billing")
        if not isinstance(shipping, dict):
            raise InvalidRequestError("shipping must be an object", field="shipping")

        return cls(
            line_items=tuple(LineItem.from_dict(item, i) for i, item in enumerate(items)),
            billing=billing,
            shipping=shipping,
            payment_method=data.get("payment_method", "") or "",
            customer_note=data.get("customer_note", "") or "",
            raw=data,
        )


@dataclass(frozen=True)
class OrderResponse:
    """The parts of the upstream order body the backend cares about."""

    id: int
    status: str = ""
    order_key: str = ""
    checkout_url: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "OrderResponse":
        return cls(
            id=data.get("id", 0),
            status=data.get("status", ""),
            order_key=data.get("order_key", ""),
            checkout_url=data.get("payment_url", "") or data.get("checkout_url", ""),
        )
