"""Identity management endpoints.

Architecture:
    /api/identities/* -> identity_admin.core.kratos.IdentityService -> Kratos admin API
"""
from __future__ import annotations
import logging

from flask import Blueprint, jsonify, request

from identity_admin.api.decorators import get_gateway, require_admin_token
from identity_admin.api.errors import gateway_error_response
from identity_admin.core.kratos import KratosError
from identity_admin.core.validators import (
    ValidationError,
    parse_bool,
    parse_pagination,
    validate_credential_type,
    validate_identity_payload,
    validate_password_payload,
)

bp = Blueprint("identities", __name__, url_prefix="/api/identities")

logger = logging.getLogger(__name__)


def _json_body():
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Invalid request body", "request body must be valid JSON")
    return payload


@bp.route("", methods=["GET"])
@require_admin_token
def list_identities():
    """Return ``{data, page, per_page, total}``."""
    page, per_page = parse_pagination(request.args)
    try:
        result = get_gateway().identities.list_identities(page, per_page)
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch identities")

    return jsonify({
        "data": result.identities,
        "page": page,
        "per_page": per_page,
        "total": result.total,
    }), 200


@bp.route("/<identity_id>", methods=["GET"])
@require_admin_token
def get_identity(identity_id: str):
    """Return one identity; ``?include_credentials=true`` adds credential metadata."""
    identities = get_gateway().identities
    try:
        if parse_bool(request.args.get("include_credentials")):
            identity = identities.get_identity_with_credentials(identity_id)
        else:
            identity = identities.get_identity(identity_id)
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch identity", not_found="Identity not found")
    return jsonify(identity), 200


@bp.route("", methods=["POST"])
@require_admin_token
def create_identity():
    schema_id, traits, state = validate_identity_payload(_json_body())
    try:
        identity = get_gateway().identities.create_identity(schema_id, traits, state)
    except KratosError as e:
        return gateway_error_response(e, "Failed to create identity")
    return jsonify(identity), 201


@bp.route("/<identity_id>", methods=["PUT"])
@require_admin_token
def update_identity(identity_id: str):
    """Full replace: the body must carry the complete desired schema_id and traits."""
    schema_id, traits, state = validate_identity_payload(_json_body())
    try:
        identity = get_gateway().identities.update_identity(identity_id, schema_id, traits, state)
    except KratosError as e:
        return gateway_error_response(e, "Failed to update identity", not_found="Identity not found")
    return jsonify(identity), 200


@bp.route("/<identity_id>", methods=["DELETE"])
@require_admin_token
def delete_identity(identity_id: str):
    try:
        get_gateway().identities.delete_identity(identity_id)
    except KratosError as e:
        return gateway_error_response(e, "Failed to delete identity", not_found="Identity not found")
    return "", 204


@bp.route("/<identity_id>/sessions", methods=["GET"])
@require_admin_token
def get_identity_sessions(identity_id: str):
    try:
        sessions = get_gateway().identities.get_identity_sessions(identity_id)
    except KratosError as e:
        return gateway_error_response(e, "Failed to fetch sessions", not_found="Identity not found")
    return jsonify({"data": sessions}), 200


@bp.route("/<identity_id>/reset-password", methods=["POST"])
@require_admin_token
def reset_password(identity_id: str):
    password = validate_password_payload(_json_body())
    try:
        get_gateway().identities.reset_password(identity_id, password)
    except KratosError as e:
        return gateway_error_response(e, "Failed to reset password", not_found="Identity not found")
    return "", 204


@bp.route("/<identity_id>/credentials/<credential_type>", methods=["DELETE"])
@require_admin_token
def delete_credential(identity_id: str, credential_type: str):
    validate_credential_type(credential_type)
    try:
        get_gateway().identities.delete_credential(identity_id, credential_type)
    except KratosError as e:
        return gateway_error_response(
            e, f"Failed to delete {credential_type} credentials", not_found="Identity not found"
        )
    return "", 204
