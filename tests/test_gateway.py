"""
Unit tests for the commerce gateway.

Upstream is a MagicMock session; every test inspects what would have gone
over the wire and how failures surface.
"""

from unittest.mock import MagicMock

import pytest
import requests
from requests.auth import HTTPBasicAuth

from core.cache import ResponseCache
from core.exceptions import ConfigurationError, GatewayError
from core.gateway import CommerceGateway, GatewayConfig, PRODUCT_FIELDS, cache_key
from models.product import ProductPage

from conftest import make_response, sample_product


PRODUCTS_URL = "https://shop.test/wp-json/wc/v3/products"


# Tests for GatewayConfig

class TestGatewayConfig:

    def test_from_mapping(self):
        config = GatewayConfig.from_mapping({
            "WOOCOMMERCE_API_URL": "https://shop.test/wp-json/wc/v3/",
            "WOOCOMMERCE_CONSUMER_KEY": "ck",
            "WOOCOMMERCE_CONSUMER_SECRET": "cs",
            "UPSTREAM_TIMEOUT_SECONDS": 10,
        })

        assert config.base_url == "https://shop.test/wp-json/wc/v3"
        assert config.timeout_seconds == 10.0
        assert config.cache_ttl_seconds == 300.0

    def test_from_mapping_reports_missing_values(self):
        with pytest.raises(ConfigurationError) as exc_info:
            GatewayConfig.from_mapping({"WOOCOMMERCE_API_URL": "https://shop.test/"})

        assert exc_info.value.missing == [
            "WOOCOMMERCE_CONSUMER_KEY",
            "WOOCOMMERCE_CONSUMER_SECRET",
        ]

    def test_default_cache_uses_configured_ttl(self, session):
        config = GatewayConfig("https://shop.test/", "ck", "cs", cache_ttl_seconds=60)
        gateway = CommerceGateway(config, session=session)
        assert gateway.cache.ttl_seconds == 60

    def test_keeps_injected_empty_cache(self, gateway_config, session, gateway_logger, clock):
        injected = ResponseCache(ttl_seconds=300, clock=clock)
        assert len(injected) == 0

        gateway = CommerceGateway(gateway_config, session=session, cache=injected, logger=gateway_logger)

        assert gateway.cache is injected
        gateway.set_cache("categories", [{"id": 1}])
        clock.advance(300)
        assert gateway.get_cached("categories") is None

    def test_keeps_injected_session_and_logger(self, gateway_config, gateway_logger):
        session = MagicMock()
        session.__len__.return_value = 0
        session.__bool__.return_value = False
        session.request.return_value = make_response(body=[])
        gateway = CommerceGateway(gateway_config, session=session, logger=gateway_logger)

        gateway.get_products()

        session.request.assert_called_once()
        gateway_logger.info.assert_called_once()


class TestCacheKey:

    def test_operation_only(self):
        assert cache_key("categories") == "categories"

    def test_params_sorted_by_name(self):
        assert cache_key("products", per_page=12, page=1) == "products:page=1:per_page=12"
        assert cache_key("products", page=1, per_page=12) == "products:page=1:per_page=12"


# Tests for get_products

class TestGetProducts:

    def test_request_shape(self, gateway, session):
        session.request.return_value = make_response(body=[])

        gateway.get_products(page=3, per_page=24)

        session.request.assert_called_once()
        args, kwargs = session.request.call_args
        assert args == ("GET", PRODUCTS_URL)
        assert kwargs["params"] == {"page": 3, "per_page": 24, "_fields": PRODUCT_FIELDS}
        assert kwargs["timeout"] == 30.0

    def test_defaults(self, gateway, session):
        session.request.return_value = make_response(body=[])

        page = gateway.get_products()

        params = session.request.call_args.kwargs["params"]
        assert params["page"] == 1
        assert params["per_page"] == 12
        assert page.page == 1 and page.per_page == 12

    def test_basic_auth_credentials(self, gateway, session):
        session.request.return_value = make_response(body=[])

        gateway.get_products()

        auth = session.request.call_args.kwargs["auth"]
        assert isinstance(auth, HTTPBasicAuth)
        assert auth.username == "ck_test"
        assert auth.password == "cs_test"

    def test_fixed_field_list(self):
        assert PRODUCT_FIELDS.split(",") == [
            "id", "name", "price", "regular_price", "sale_price", "description",
            "short_description", "images", "categories", "variations",
            "attributes", "tags",
        ]

    def test_returns_products_and_pagination_headers(self, gateway, session):
        products = [sample_product(1), sample_product(2), sample_product(3)]
        session.request.return_value = make_response(
            body=products,
            headers={
                "X-WP-Total": "3",
                "X-WP-TotalPages": "1",
                "Content-Type": "application/json",
            },
        )

        page = gateway.get_products(1, 12)

        assert isinstance(page, ProductPage)
        assert page.products == products
        assert page.pagination == {"X-WP-Total": "3", "X-WP-TotalPages": "1"}
        assert page.total == 3
        assert page.total_pages == 1

    def test_each_call_goes_upstream(self, gateway, session):
        session.request.return_value = make_response(body=[])

        gateway.get_products(1, 12)
        gateway.get_products(1, 12)

        assert session.request.call_count == 2

    @pytest.mark.parametrize("page,per_page", [(0, 12), (1, 0), (-1, 5)])
    def test_rejects_out_of_range_arguments(self, gateway, session, page, per_page):
        with pytest.raises(ValueError):
            gateway.get_products(page, per_page)

        session.request.assert_not_called()

    def test_logs_latency(self, gateway, session, gateway_logger):
        session.request.return_value = make_response(body=[])

        gateway.get_products(page=2)

        messages = [call.args[0] for call in gateway_logger.info.call_args_list]
        assert any("page 2" in m and "ms" in m for m in messages)

    def test_non_list_body_is_malformed(self, gateway, session):
        session.request.return_value = make_response(body={"oops": True})

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_products()

        assert exc_info.value.reason == GatewayError.MALFORMED_RESPONSE

    @pytest.mark.parametrize("response", [
        make_response(body={"oops": True}),
        make_response(malformed=True),
    ])
    def test_no_latency_logged_for_rejected_body(self, gateway, session, gateway_logger, response):
        session.request.return_value = response

        with pytest.raises(GatewayError):
            gateway.get_products(page=2)

        messages = [call.args[0] for call in gateway_logger.info.call_args_list]
        assert not any("took" in m for m in messages)


# Tests for failure mapping

class TestGatewayFailures:

    def test_timeout_not_retried(self, gateway, session):
        session.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_products()

        assert exc_info.value.reason == GatewayError.TIMEOUT
        assert exc_info.value.is_timeout
        assert exc_info.value.status_code is None
        assert session.request.call_count == 1

    def test_connection_error_is_unreachable(self, gateway, session):
        session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_product_categories()

        assert exc_info.value.reason == GatewayError.UNREACHABLE
        assert exc_info.value.operation == "get_product_categories"

    def test_server_error_status(self, gateway, session):
        session.request.return_value = make_response(
            status_code=500,
            body={"code": "internal_server_error", "message": "Database down"},
        )

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_products()

        error = exc_info.value
        assert error.reason == GatewayError.UPSTREAM_STATUS
        assert error.status_code == 500
        assert error.upstream_code == "internal_server_error"
        assert "Database down" in error.message
        assert not error.is_not_found
        assert session.request.call_count == 1

    def test_error_status_with_html_body(self, gateway, session):
        session.request.return_value = make_response(status_code=503, malformed=True)

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_product_categories()

        assert exc_info.value.status_code == 503
        assert exc_info.value.reason == GatewayError.UPSTREAM_STATUS

    def test_malformed_success_body(self, gateway, session):
        session.request.return_value = make_response(status_code=200, malformed=True)

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_product_by_id(7)

        assert exc_info.value.reason == GatewayError.MALFORMED_RESPONSE


# Tests for single resources

class TestGetProductById:

    def test_fetches_product(self, gateway, session):
        product = sample_product(42)
        session.request.return_value = make_response(body=product)

        result = gateway.get_product_by_id(42)

        assert result == product
        args, kwargs = session.request.call_args
        assert args == ("GET", f"{PRODUCTS_URL}/42")
        assert "params" not in kwargs

    def test_not_found(self, gateway, session):
        session.request.return_value = make_response(
            status_code=404,
            body={
                "code": "woocommerce_rest_product_invalid_id",
                "message": "Invalid ID.",
                "data": {"status": 404},
            },
        )

        with pytest.raises(GatewayError) as exc_info:
            gateway.get_product_by_id(99999)

        assert exc_info.value.is_not_found
        assert exc_info.value.status_code == 404
        assert exc_info.value.upstream_code == "woocommerce_rest_product_invalid_id"

    @pytest.mark.parametrize("bad_id", [0, -3, True, "5"])
    def test_rejects_invalid_id(self, gateway, session, bad_id):
        with pytest.raises(ValueError):
            gateway.get_product_by_id(bad_id)

        session.request.assert_not_called()


class TestGetProductCategories:

    def test_fetches_categories(self, gateway, session):
        categories = [{"id": 15, "name": "Vases"}, {"id": 16, "name": "Bowls"}]
        session.request.return_value = make_response(body=categories)

        assert gateway.get_product_categories() == categories
        args, _ = session.request.call_args
        assert args == ("GET", f"{PRODUCTS_URL}/categories")


class TestCreateOrder:

    def test_forwards_payload_verbatim(self, gateway, session):
        payload = {
            "payment_method": "stripe",
            "billing": {"first_name": "Ada", "email": "ada@example.com"},
            "line_items": [{"product_id": 12, "quantity": 2}],
            "meta_data": [{"key": "source", "value": "storefront"}],
        }
        upstream_body = {
            "id": 727,
            "status": "pending",
            "order_key": "wc_order_abc",
            "payment_url": "https://shop.test/checkout/order-pay/727/?key=wc_order_abc",
        }
        session.request.return_value = make_response(status_code=201, body=upstream_body)

        result = gateway.create_order(payload)

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://shop.test/wp-json/wc/v3/orders")
        assert kwargs["json"] is payload
        assert kwargs["json"] == {
            "payment_method": "stripe",
            "billing": {"first_name": "Ada", "email": "ada@example.com"},
            "line_items": [{"product_id": 12, "quantity": 2}],
            "meta_data": [{"key": "source", "value": "storefront"}],
        }
        assert result == upstream_body

    def test_upstream_rejection(self, gateway, session):
        session.request.return_value = make_response(
            status_code=400,
            body={"code": "rest_invalid_param", "message": "Invalid parameter(s): line_items"},
        )

        with pytest.raises(GatewayError) as exc_info:
            gateway.create_order({"line_items": []})

        assert exc_info.value.status_code == 400
        assert exc_info.value.operation == "create_order"
        assert session.request.call_count == 1


# Tests for the gateway-owned cache

class TestGatewayCache:

    def test_set_then_read(self, gateway):
        gateway.set_cache("categories", [{"id": 1}])
        assert gateway.get_cached("categories") == [{"id": 1}]

    def test_expires_after_ttl(self, gateway, clock):
        gateway.set_cache("categories", [{"id": 1}])
        clock.advance(301)
        assert gateway.get_cached("categories") is None

    def test_overwrite(self, gateway):
        gateway.set_cache("k", 1)
        gateway.set_cache("k", 2)
        assert gateway.get_cached("k") == 2

    def test_gateway_calls_do_not_read_cache(self, gateway, session):
        gateway.set_cache(cache_key("products", page=1, per_page=12), "stale")
        session.request.return_value = make_response(body=[])

        page = gateway.get_products(1, 12)

        assert page.products == []
        session.request.assert_called_once()
