"""Shared fixtures: stub upstream session, fake clock, gateway and Flask app."""

import json
from unittest.mock import MagicMock

import pytest
from requests.structures import CaseInsensitiveDict

from app import create_app
from core.cache import ResponseCache
from core.gateway import CommerceGateway, GatewayConfig


API_URL = "https://shop.test/wp-json/wc/v3/"


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(status_code=200, body=None, headers=None, malformed=False):
    """Build a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = CaseInsensitiveDict(headers or {})
    if malformed:
        response.json.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)
    else:
        response.json.return_value = body
    return response


def sample_product(product_id, name="vase", price="249", sale_price="", images=None):
    """Product body shaped like the upstream listing."""
    if images is None:
        images = [{"id": product_id * 10, "src": f"https://cdn.test/{product_id}.jpg", "alt": name}]
    return {
        "id": product_id,
        "name": name,
        "price": sale_price or price,
        "regular_price": price,
        "sale_price": sale_price,
        "description": "<p>Handmade</p>",
        "short_description": "",
        "images": images,
        "categories": [{"id": 15, "name": "Vases", "slug": "vases"}],
        "variations": [],
        "attributes": [{"id": 1, "name": "Color", "options": ["Blue", "Green"]}],
        "tags": [{"id": 3, "name": "new", "slug": "new"}],
    }


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gateway_config():
    return GatewayConfig(
        api_url=API_URL,
        consumer_key="ck_test",
        consumer_secret="cs_test",
    )


@pytest.fixture
def session():
    """Stub upstream: tests set session.request.return_value / side_effect."""
    return MagicMock()


@pytest.fixture
def gateway_logger():
    return MagicMock()


@pytest.fixture
def gateway(gateway_config, session, clock, gateway_logger):
    return CommerceGateway(
        gateway_config,
        session=session,
        cache=ResponseCache(ttl_seconds=300, clock=clock),
        logger=gateway_logger,
    )


@pytest.fixture
def app(gateway):
    return create_app("config.TestingConfig", gateway=gateway)


@pytest.fixture
def client(app):
    return app.test_client()
