"""Error handlers and error response helpers for the application.

Every error body has the shape ``{"error": str, "details"?: str}``.

Upstream error text is passed through in ``details`` for 500 responses so
the front-end can show what Kratos said. This exposes upstream internals to
API clients and is flagged for security review.
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException

from identity_admin.core.kratos import InvalidArgumentError, KratosError, NotFoundError
from identity_admin.core.tokens import AuthenticationError
from identity_admin.core.validators import ValidationError


def error_response(status: int, error: str, details: str = None):
    """Build a JSON error response tuple."""
    body = {"error": error}
    if details:
        body["details"] = details
    return jsonify(body), status


def gateway_error_response(exc: KratosError, error: str, not_found: str = None):
    """Map a gateway exception to a status code.

    Args:
        exc: Exception raised by a Kratos service
        error: Message used for 500 responses (e.g., "Failed to fetch identities")
        not_found: Message used for 404 responses; falls back to ``error``
    """
    if isinstance(exc, InvalidArgumentError):
        return error_response(400, "Invalid request", str(exc))
    if isinstance(exc, NotFoundError):
        return error_response(404, not_found or error, str(exc))
    return error_response(500, error, str(exc))


def register_error_handlers(app):
    """Register JSON error handlers with the Flask app."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        return error_response(400, error.message, error.details)

    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(error: AuthenticationError):
        return error_response(401, str(error) or "Unauthorized")

    @app.errorhandler(KratosError)
    def handle_kratos_error(error: KratosError):
        app.logger.error("Unhandled gateway error: %s", error)
        return gateway_error_response(error, "Upstream request failed")

    @app.errorhandler(400)
    def bad_request(error):
        return error_response(400, "Bad Request", getattr(error, "description", None))

    @app.errorhandler(401)
    def unauthorized(error):
        return error_response(401, "Unauthorized", "Authentication required")

    @app.errorhandler(404)
    def not_found(error):
        return error_response(404, "Not Found", "Resource not found")

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response(405, "Method Not Allowed")

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.error("Internal error: %s", error, exc_info=True)
        return error_response(500, "Internal Server Error", "An unexpected error occurred")

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        if isinstance(error, HTTPException):
            return error

        app.logger.error("Unhandled exception: %s", error, exc_info=True)
        return error_response(500, "Internal Server Error", "An unexpected error occurred")
