"""Identity schema endpoint."""
from flask import Blueprint, jsonify

from identity_admin.api.decorators import get_gateway, require_admin_token
from identity_admin.api.errors import gateway_error_response
from identity_admin.core.kratos import KratosError

bp = Blueprint("schemas", __name__, url_prefix="/api/schemas")


@bp.route("", methods=["GET"])
@require_admin_token
def list_schemas():
    try:
        schemas = get_gateway().schemas.list_identity_schemas()
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch schemas")
    return jsonify({"data": schemas}), 200
