"""
Storefront backend - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (fail-fast when commerce API credentials are missing)
2. Creates the commerce gateway and the storefront service
3. Enables CORS for the configured client origins
4. Registers route blueprints
5. Sets up JSON error handlers

ARCHITECTURE:
    Flask request threads
    └── routes -> StorefrontService -> CommerceGateway -> upstream commerce API

    One gateway per app: shared HTTP session and response cache.
"""

from __future__ import annotations

import atexit
import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.exceptions import ConfigurationError, GatewayError, InvalidRequestError
from core.gateway import CommerceGateway, GatewayConfig
from models.product import PAGINATION_HEADERS
from services.storefront_service import StorefrontService
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def gateway_error_status(error: GatewayError) -> int:
    """
    HTTP status to report for a gateway failure.

    Upstream 4xx answers (not found, order validation, payment rejection)
    are the client's problem and keep their status. Everything else means
    the upstream let us down: 504 for timeouts, 502 otherwise.
    """
    if error.reason == GatewayError.TIMEOUT:
        return 504
    if error.status_code is not None and 400 <= error.status_code < 500:
        return error.status_code
    return 502


def create_app(config_object="config.Config", gateway: CommerceGateway = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    Args:
        config_object: Import path or class passed to app.config.from_object
        gateway: Pre-built gateway (tests inject one wired to a stub session);
            built from app.config when omitted

    Returns:
        Configured Flask application

    Raises:
        ConfigurationError: If commerce API URL or credentials are missing
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting storefront backend in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # CORE INITIALIZATION (FAIL-FAST)
    # =========================================================================

    if gateway is None:
        try:
            gateway_config = GatewayConfig.from_mapping(app.config)
        except ConfigurationError as e:
            logger.error(f"FATAL: Cannot start application - {e}")
            raise

        gateway = CommerceGateway(gateway_config)
        atexit.register(gateway.close)
        logger.info(f"Commerce gateway ready ({gateway_config.base_url})")

    app.config["COMMERCE_GATEWAY"] = gateway
    app.config["STOREFRONT_SERVICE"] = StorefrontService(gateway)

    # =========================================================================
    # CORS
    # =========================================================================

    CORS(
        app,
        origins=app.config.get("CORS_ORIGINS", []),
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=list(PAGINATION_HEADERS),
        supports_credentials=True,
    )

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(GatewayError)
    def handle_gateway_error(e: GatewayError):
        status = gateway_error_status(e)
        return jsonify({
            "error": "Not Found" if e.is_not_found else "Gateway Error",
            "message": e.message,
            "details": e.details,
        }), status

    @app.errorhandler(InvalidRequestError)
    def handle_invalid_request(e: InvalidRequestError):
        return jsonify({
            "error": "Bad Request",
            "message": e.message,
            "details": e.details,
        }), 400

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({
            "error": "Not Found",
            "message": f"Route {request.full_path.rstrip('?')} does not exist",
        }), 404

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({
            "error": e.name,
            "message": e.description,
        }), e.code

    @app.errorhandler(Exception)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return jsonify({
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
        }), 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(port=app.config.get("PORT", 5000), debug=debug_mode)
