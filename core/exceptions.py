"""
Custom exceptions for the storefront backend.

Exception Hierarchy:
    StorefrontError (base)
    ├── ConfigurationError  - Upstream credentials missing (startup failure)
    ├── InvalidRequestError - Client sent malformed input (runtime, 400)
    └── GatewayError        - Upstream commerce API call failed (runtime)

Usage:
    Startup errors (ConfigurationError) cause the app to fail fast.
    Runtime errors are mapped to JSON responses by the Flask error handlers.
"""

from typing import Optional, Dict, Any


class StorefrontError(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# STARTUP ERRORS - Application will not start if these occur
# =============================================================================

class ConfigurationError(StorefrontError):
    """
    Required upstream configuration is missing.

    This is a FATAL error - the gateway cannot authenticate without the
    commerce API URL and consumer credentials.

    Typical causes:
    - WOOCOMMERCE_API_URL not set in .env
    - Consumer key/secret not generated in the shop admin
    """

    def __init__(self, missing: list):
        message = f"Missing commerce API configuration: {', '.join(missing)}"
        details = {
            "missing": list(missing),
            "resolution": "Set the WOOCOMMERCE_* variables in .env"
        }
        super().__init__(message, details)
        self.missing = list(missing)


# =============================================================================
# RUNTIME ERRORS - Request fails, application keeps serving
# =============================================================================

class InvalidRequestError(StorefrontError):
    """
    The client request could not be accepted.

    Raised for bad query parameters or an order body that does not contain
    usable line items. Mapped to HTTP 400.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, details)
        self.field = field


class GatewayError(StorefrontError):
    """
    A call to the upstream commerce API failed.

    Covers every way the upstream can let us down: timeout, unreachable
    host, non-2xx status, or a body that is not JSON. It is deliberately a
    single type; callers inspect ``reason`` and ``status_code`` instead of
    catching subclasses.

    Reasons:
        timeout            - no answer within the configured timeout
        unreachable        - connection refused, DNS failure, other I/O
        upstream_status    - upstream answered with a non-2xx status
        malformed_response - upstream answered 2xx but the body is not JSON

    Gateway errors are never retried locally.
    """

    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    UPSTREAM_STATUS = "upstream_status"
    MALFORMED_RESPONSE = "malformed_response"

    def __init__(
        self,
        message: str,
        operation: str,
        reason: str,
        status_code: Optional[int] = None,
        upstream_code: Optional[str] = None,
    ):
        details: Dict[str, Any] = {
            "operation": operation,
            "reason": reason,
        }
        if status_code is not None:
            details["status_code"] = status_code
        if upstream_code:
            details["upstream_code"] = upstream_code
        super().__init__(message, details)
        self.operation = operation
        self.reason = reason
        self.status_code = status_code
        self.upstream_code = upstream_code

    @property
    def is_not_found(self) -> bool:
        """True when upstream reported the resource does not exist."""
        return self.reason == self.UPSTREAM_STATUS and self.status_code == 404

    @property
    def is_timeout(self) -> bool:
        return self.reason == self.TIMEOUT
