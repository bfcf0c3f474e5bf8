"""
Flask decorators and accessors for authentication.

Protected routes require ``Authorization: Bearer <token>`` where the token was
issued by ``POST /api/auth/login``. Validation is local (HS256 signature and
expiry); no upstream call is made.
"""

import logging
from functools import wraps

from flask import current_app, g, jsonify, request

from identity_admin.core.kratos import KratosGateway
from identity_admin.core.tokens import TokenService, TokenValidationError, token_fingerprint

logger = logging.getLogger(__name__)

GATEWAY_EXTENSION = "kratos_gateway"
TOKEN_SERVICE_EXTENSION = "token_service"


def get_gateway() -> KratosGateway:
    """Return the Kratos gateway registered by ``create_app``."""
    return current_app.extensions[GATEWAY_EXTENSION]


def get_token_service() -> TokenService:
    """Return the token service registered by ``create_app``."""
    return current_app.extensions[TOKEN_SERVICE_EXTENSION]


def _unauthorized(message: str, details: str = None):
    body = {"error": message}
    if details:
        body["details"] = details
    response = jsonify(body)
    response.status_code = 401
    response.headers["WWW-Authenticate"] = 'Bearer realm="identity-admin"'
    return response


def require_admin_token(fn):
    """
    Decorator to require a valid admin bearer token.

    Returns 401 when the header is missing, not a Bearer token, empty,
    tampered with, or expired. On success the subject is stored on
    ``g.auth_subject``.

    Example:
        @bp.route("/api/stats")
        @require_admin_token
        def stats():
            ...
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header:
            logger.warning("Request to %s missing Authorization header", request.path)
            return _unauthorized("Authorization header required")

        if not auth_header.startswith("Bearer "):
            logger.warning("Request to %s with invalid Authorization format", request.path)
            return _unauthorized("Invalid authorization header format")

        token = auth_header[7:].strip()
        if not token:
            return _unauthorized("Invalid authorization header format")

        try:
            subject = get_token_service().validate(token)
        except TokenValidationError as e:
            logger.warning("Token rejected (token_hash=%s): %s", token_fingerprint(token), e)
            return _unauthorized("Invalid or expired token", str(e))

        g.auth_subject = subject
        return fn(*args, **kwargs)

    return wrapper
