"""Dashboard statistics endpoint."""
from flask import Blueprint, jsonify

from identity_admin.api.decorators import get_gateway, require_admin_token
from identity_admin.api.errors import gateway_error_response
from identity_admin.core.kratos import KratosError

bp = Blueprint("stats", __name__, url_prefix="/api/stats")


@bp.route("", methods=["GET"])
@require_admin_token
def get_stats():
    """Return ``{active_identities, active_sessions}``.

    Two sequential upstream calls; the first failure aborts the request.
    """
    gateway = get_gateway()

    try:
        active_identities = gateway.identities.get_active_identity_count()
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch active identity count")

    try:
        active_sessions = gateway.sessions.get_session_count()
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch session count")

    return jsonify({
        "active_identities": active_identities,
        "active_sessions": active_sessions,
    }), 200
