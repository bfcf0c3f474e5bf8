"""Admin login route.

A single administrator signs in with the static ``ADMIN_PASSWORD`` and
receives a bearer token valid for 24 hours.
"""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from identity_admin.api.decorators import get_token_service
from identity_admin.api.errors import error_response
from identity_admin.core.tokens import InvalidCredentialsError

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.route("/login", methods=["POST"])
def login():
    """Exchange ``{"password": ...}`` for ``{"token", "expires_at"}``.

    ``expires_at`` is a unix timestamp in seconds.
    """
    payload = request.get_json(silent=True)
    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str) or not password:
        return error_response(400, "Invalid request body")

    try:
        issued = get_token_service().issue(password)
    except InvalidCredentialsError:
        return error_response(401, "Invalid password")

    return jsonify({"token": issued.token, "expires_at": issued.expires_at_unix}), 200
