"""Session listing and revocation endpoints."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from identity_admin.api.decorators import get_gateway, require_admin_token
from identity_admin.api.errors import gateway_error_response
from identity_admin.core.kratos import KratosError
from identity_admin.core.validators import parse_pagination

bp = Blueprint("sessions", __name__, url_prefix="/api/sessions")


@bp.route("", methods=["GET"])
@require_admin_token
def list_sessions():
    """Return ``{data, page, per_page}``; Kratos gives no session total."""
    page, per_page = parse_pagination(request.args)
    try:
        sessions = get_gateway().sessions.list_sessions(page, per_page)
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch sessions")

    return jsonify({"data": sessions, "page": page, "per_page": per_page}), 200


@bp.route("/<session_id>", methods=["DELETE"])
@require_admin_token
def revoke_session(session_id: str):
    try:
        get_gateway().sessions.revoke_session(session_id)
    except KratosError as e:
        return gateway_error_response(e, "Failed to revoke session", not_found="Session not found")
    return "", 204
