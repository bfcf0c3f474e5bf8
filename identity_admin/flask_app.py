"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with all blueprints, middleware, and configuration.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask, request

from identity_admin.config import AppConfig, load_settings
from identity_admin.core.kratos import KratosGateway
from identity_admin.core.tokens import TokenService

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Origin, Content-Type, Authorization"
CORS_EXPOSE_HEADERS = "Content-Length"
CORS_MAX_AGE = "43200"


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(cfg: Optional[AppConfig] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Prebuilt configuration; loaded from the environment when omitted

    Raises:
        ConfigurationError: If required settings are missing
    """
    if cfg is None:
        cfg = load_settings()

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg
    app.json.sort_keys = False

    # Stateless collaborators shared by every request
    app.extensions["kratos_gateway"] = KratosGateway.from_config(cfg)
    app.extensions["token_service"] = TokenService.from_config(cfg)

    from identity_admin.api import auth, errors, health, identities, schemas, sessions, stats

    app.register_blueprint(health.bp)
    app.register_blueprint(auth.bp)
    app.register_blueprint(identities.bp)
    app.register_blueprint(sessions.bp)
    app.register_blueprint(schemas.bp)
    app.register_blueprint(stats.bp)

    errors.register_error_handlers(app)
    _register_cors(app, cfg)

    logger.info("Identity admin API ready (kratos_admin=%s)", cfg.kratos_admin_url)
    return app


def _register_cors(app: Flask, cfg: AppConfig):
    """Answer preflight requests and attach CORS headers for allowed origins.

    Credentials are allowed, so the request origin is echoed back instead of
    a literal "*".
    """

    def _origin_allowed(origin: str) -> bool:
        return cfg.allows_any_origin or origin in cfg.cors_origins

    @app.before_request
    def handle_preflight():
        if request.method == "OPTIONS":
            return app.response_class(status=204)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if not origin or not _origin_allowed(origin):
            return response

        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Expose-Headers"] = CORS_EXPOSE_HEADERS
        response.vary.add("Origin")
        if request.method == "OPTIONS":
            response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
            response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
            response.headers["Access-Control-Max-Age"] = CORS_MAX_AGE
        return response
