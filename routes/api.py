"""
Store API routes (JSON endpoints consumed by the React client).

Handles:
- GET  /api/products        - Product listing (pagination headers forwarded)
- GET  /api/products/cards  - Product listing shaped as grid cards
- GET  /api/products/<id>   - Single product
- GET  /api/categories      - Category list
- POST /api/orders          - Create an order upstream

GatewayError and InvalidRequestError propagate to the app-level error
handlers, which turn them into JSON error responses.
"""

from flask import (
    Blueprint,
    current_app,
    jsonify,
    request,
)

from core.exceptions import InvalidRequestError
from models.order import OrderRequest
from models.product import ProductPage
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 12


def _service():
    return current_app.config["STOREFRONT_SERVICE"]


def _positive_int_arg(name: str, default: int) -> int:
    """Read a positive integer query parameter, 400 on anything else."""
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise InvalidRequestError(f"{name} must be an integer", field=name)
    if value < 1:
        raise InvalidRequestError(f"{name} must be >= 1", field=name)
    return value


def _with_pagination(response, product_page: ProductPage):
    """Copy upstream pagination headers onto our response."""
    for name, value in product_page.pagination.items():
        response.headers[name] = value
    return response


@api_bp.route("/products", methods=["GET"])
def list_products():
    page = _positive_int_arg("page", DEFAULT_PAGE)
    per_page = _positive_int_arg("per_page", DEFAULT_PER_PAGE)

    product_page = _service().list_products(page=page, per_page=per_page)
    return _with_pagination(jsonify(product_page.products), product_page)


@api_bp.route("/products/cards", methods=["GET"])
def list_product_cards():
    """
    Product listing pre-shaped for the grid.

    Each card carries the layout classes for its page-local index, the
    display name, the image and the formatted prices.
    """
    page = _positive_int_arg("page", DEFAULT_PAGE)
    per_page = _positive_int_arg("per_page", DEFAULT_PER_PAGE)

    cards, product_page = _service().list_product_cards(page=page, per_page=per_page)
    return _with_pagination(jsonify(cards), product_page)


@api_bp.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id: int):
    if product_id < 1:
        raise InvalidRequestError("product id must be a positive integer", field="id")
    return jsonify(_service().get_product(product_id))


@api_bp.route("/categories", methods=["GET"])
def list_categories():
    return jsonify(_service().list_categories())


@api_bp.route("/orders", methods=["POST"])
def create_order():
    """
    Create an order upstream.

    The body is validated, then forwarded exactly as received. Returns the
    upstream order body (id, payment_url, ...) with 201.
    """
    payload = request.get_json(silent=True)
    if payload is None:
        raise InvalidRequestError("Request body must be JSON")

    order_request = OrderRequest.from_dict(payload)
    body = _service().place_order(order_request)
    return jsonify(body), 201
