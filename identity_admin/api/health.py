"""Health check endpoint."""
from flask import Blueprint, jsonify

bp = Blueprint("health", __name__, url_prefix="/api")


@bp.route("/health")
def health_check():
    """Liveness probe; never touches Kratos and needs no token."""
    return jsonify({"status": "ok"}), 200
