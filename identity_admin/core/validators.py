"""Input validation helpers for request payloads."""
from __future__ import annotations
from typing import Any, Optional

from .kratos.identities import DELETABLE_CREDENTIAL_TYPES, IDENTITY_STATES, MIN_PASSWORD_LENGTH

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 1000


class ValidationError(ValueError):
    """Malformed or missing input.

    Attributes:
        message: Short error label for the response ``error`` field
        details: Optional human-readable explanation
    """

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(f"{message}: {details}" if details else message)


def parse_positive_int(raw: Optional[str], field: str, default: int, maximum: Optional[int] = None) -> int:
    """Parse a query parameter as an integer >= 1.

    Raises:
        ValidationError: If the value is not an integer, < 1, or above maximum
    """
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("Invalid query parameter", f"{field} must be an integer")
    if value < 1:
        raise ValidationError("Invalid query parameter", f"{field} must be >= 1")
    if maximum is not None and value > maximum:
        raise ValidationError("Invalid query parameter", f"{field} must be <= {maximum}")
    return value


def parse_pagination(args) -> tuple[int, int]:
    """Read ``page`` and ``per_page`` from request args."""
    page = parse_positive_int(args.get("page"), "page", DEFAULT_PAGE)
    per_page = parse_positive_int(args.get("per_page"), "per_page", DEFAULT_PER_PAGE, MAX_PER_PAGE)
    return page, per_page


def parse_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in {"1", "true", "yes"}


def validate_identity_payload(payload: Any) -> tuple[str, dict, Optional[str]]:
    """Validate a create/update identity body.

    Args:
        payload: Decoded JSON body

    Returns:
        (schema_id, traits, state) with state None when omitted or empty

    Raises:
        ValidationError: If schema_id or traits are missing or mistyped
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body", "request body must be a JSON object")

    schema_id = payload.get("schema_id")
    if not isinstance(schema_id, str) or not schema_id.strip():
        raise ValidationError("Invalid request body", "schema_id is required")

    traits = payload.get("traits")
    if not isinstance(traits, dict):
        raise ValidationError("Invalid request body", "traits is required and must be a JSON object")

    state = payload.get("state") or None
    if state is not None and (not isinstance(state, str) or state not in IDENTITY_STATES):
        raise ValidationError(
            "Invalid request body",
            f"state must be one of: {', '.join(sorted(IDENTITY_STATES))}",
        )

    return schema_id, traits, state


def validate_password_payload(payload: Any) -> str:
    """Validate a reset-password body and return the new password."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body", "request body must be a JSON object")
    password = payload.get("password")
    if not isinstance(password, str) or not password:
        raise ValidationError("Invalid request body", "password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            "Invalid request body",
            f"password must be at least {MIN_PASSWORD_LENGTH} characters",
        )
    return password


def validate_credential_type(credential_type: str) -> str:
    if credential_type not in DELETABLE_CREDENTIAL_TYPES:
        raise ValidationError(
            "Invalid credential type",
            f"credential type must be one of: {', '.join(sorted(DELETABLE_CREDENTIAL_TYPES))}",
        )
    return credential_type
