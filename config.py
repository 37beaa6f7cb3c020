"""
Configuration for the storefront backend.

The commerce API credentials are required. The application will fail fast
at startup if they are missing (see GatewayConfig.from_mapping).
"""

import os

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)


DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:3000"


def parse_origins(value: str) -> list:
    """Split a comma-separated origin list, dropping blanks."""
    return [origin.strip() for origin in value.split(",") if origin.strip()]


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    PORT = int(os.environ.get("PORT", "5000"))

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Upstream commerce API
    # ==========================================================================
    # Base URL of the REST API, e.g. https://shop.example.com/wp-json/wc/v3/
    # Consumer key/secret are generated in the shop admin (REST API keys)
    # and sent as HTTP Basic credentials on every call.
    # ==========================================================================
    WOOCOMMERCE_API_URL = os.environ.get("WOOCOMMERCE_API_URL", "")
    WOOCOMMERCE_CONSUMER_KEY = os.environ.get("WOOCOMMERCE_CONSUMER_KEY", "")
    WOOCOMMERCE_CONSUMER_SECRET = os.environ.get("WOOCOMMERCE_CONSUMER_SECRET", "")

    UPSTREAM_TIMEOUT_SECONDS = float(os.environ.get("UPSTREAM_TIMEOUT_SECONDS", "30"))
    CACHE_TTL_SECONDS = float(os.environ.get("CACHE_TTL_SECONDS", "300"))

    # CORS: comma-separated list of allowed browser origins
    CORS_ORIGINS = parse_origins(os.environ.get("CORS_ORIGIN", DEFAULT_CORS_ORIGINS))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "production"


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    WOOCOMMERCE_API_URL = "https://shop.test/wp-json/wc/v3/"
    WOOCOMMERCE_CONSUMER_KEY = "ck_test"
    WOOCOMMERCE_CONSUMER_SECRET = "cs_test"
    UPSTREAM_TIMEOUT_SECONDS = 30.0
    CACHE_TTL_SECONDS = 300.0
    CORS_ORIGINS = parse_origins(DEFAULT_CORS_ORIGINS)
