"""Kratos identity management operations."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .client import KratosClient, decode_json, decode_json_list, path_segment
from .exceptions import InvalidArgumentError, InvalidStateError

logger = logging.getLogger(__name__)

# Kratos has no count endpoint; list/count fetch everything up to this cap
IDENTITY_FETCH_LIMIT = 10000

IDENTITY_STATES = frozenset({"active", "inactive"})
CREDENTIAL_TYPES = ("totp", "password", "oidc", "webauthn", "lookup_secret")
DELETABLE_CREDENTIAL_TYPES = frozenset({"totp", "webauthn", "lookup_secret"})
MIN_PASSWORD_LENGTH = 8


@dataclass
class IdentityPage:
    """One page of identities plus the total seen upstream."""
    identities: List[Dict[str, Any]]
    total: int


def paginate(items: List[Any], page: int, per_page: int) -> List[Any]:
    """Return the ``page``-th slice of ``items``; empty past the end."""
    if page < 1 or per_page < 1:
        raise InvalidArgumentError("page and per_page must be >= 1")
    offset = (page - 1) * per_page
    if offset >= len(items):
        return []
    return items[offset:min(offset + per_page, len(items))]


def _identity_body(schema_id: str, traits: Dict[str, Any], state: Optional[str]) -> Dict[str, Any]:
    if state is not None and (not isinstance(state, str) or state not in IDENTITY_STATES):
        raise InvalidArgumentError(f"state must be one of {sorted(IDENTITY_STATES)}")
    body: Dict[str, Any] = {"schema_id": schema_id, "traits": traits}
    if state is not None:
        body["state"] = state
    return body


class IdentityService:
    """Service for managing Kratos identities."""

    def __init__(self, client: KratosClient, fetch_limit: int = IDENTITY_FETCH_LIMIT):
        """Initialize identity service.

        Args:
            client: Kratos client
            fetch_limit: Maximum identities fetched for list/count operations
        """
        self.client = client
        self.fetch_limit = fetch_limit

    def _fetch_all(self, operation: str, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        resp = self.client.get(
            "/admin/identities",
            operation=operation,
            params={"per_page": self.fetch_limit},
            timeout=timeout,
        )
        identities = decode_json_list(resp, operation)
        if len(identities) >= self.fetch_limit:
            logger.warning("%s hit the identity fetch cap (%d); results are truncated", operation, self.fetch_limit)
        return identities

    def list_identities(self, page: int, per_page: int, timeout: Optional[float] = None) -> IdentityPage:
        """Return one page of identities and the total count.

        Kratos offers no paging-with-count, so the full set (up to the fetch
        cap) is fetched once and sliced locally. Identity sets larger than the
        cap are silently truncated.
        """
        identities = self._fetch_all("list_identities", timeout)
        return IdentityPage(identities=paginate(identities, page, per_page), total=len(identities))

    def get_identity(self, identity_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Return a single identity.

        Raises:
            NotFoundError: If Kratos answers 404
        """
        resp = self.client.get(
            f"/admin/identities/{path_segment(identity_id)}",
            operation="get_identity",
            identifier=identity_id,
            timeout=timeout,
        )
        return decode_json(resp, "get_identity", identity_id)

    def get_identity_with_credentials(self, identity_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Return a single identity including metadata for every credential type."""
        resp = self.client.get(
            f"/admin/identities/{path_segment(identity_id)}",
            operation="get_identity_with_credentials",
            identifier=identity_id,
            params={"include_credential": list(CREDENTIAL_TYPES)},
            timeout=timeout,
        )
        return decode_json(resp, "get_identity_with_credentials", identity_id)

    def create_identity(self, schema_id: str, traits: Dict[str, Any], state: Optional[str] = None,
                        timeout: Optional[float] = None) -> Dict[str, Any]:
        """Create an identity; omitting ``state`` lets Kratos apply its default."""
        body = _identity_body(schema_id, traits, state)
        resp = self.client.post("/admin/identities", operation="create_identity", json=body, timeout=timeout)
        identity = decode_json(resp, "create_identity")
        logger.info("Created identity %s (schema=%s)", identity.get("id"), schema_id)
        return identity

    def update_identity(self, identity_id: str, schema_id: str, traits: Dict[str, Any],
                        state: Optional[str] = None, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Replace an identity (PUT semantics: the caller supplies the full state)."""
        body = _identity_body(schema_id, traits, state)
        resp = self.client.put(
            f"/admin/identities/{path_segment(identity_id)}",
            operation="update_identity",
            identifier=identity_id,
            json=body,
            timeout=timeout,
        )
        return decode_json(resp, "update_identity", identity_id)

    def delete_identity(self, identity_id: str, timeout: Optional[float] = None) -> None:
        self.client.delete(
            f"/admin/identities/{path_segment(identity_id)}",
            operation="delete_identity",
            identifier=identity_id,
            timeout=timeout,
        )
        logger.info("Deleted identity %s", identity_id)

    def reset_password(self, identity_id: str, new_password: str, timeout: Optional[float] = None) -> None:
        """Set a new password on an identity.

        Read-modify-write: the identity is fetched, then replaced with the same
        schema, state and traits plus a password credential. A concurrent
        update between the two calls is overwritten.

        Raises:
            InvalidArgumentError: If the password is shorter than 8 characters
            InvalidStateError: If the stored traits are not a JSON object
        """
        if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LENGTH:
            raise InvalidArgumentError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

        identity = self.get_identity(identity_id, timeout=timeout)
        traits = identity.get("traits")
        if not isinstance(traits, dict):
            raise InvalidStateError(f"identity {identity_id} traits are not a JSON object")

        body: Dict[str, Any] = {
            "schema_id": identity.get("schema_id"),
            "traits": traits,
            "credentials": {"password": {"config": {"password": new_password}}},
        }
        if identity.get("state"):
            body["state"] = identity["state"]

        self.client.put(
            f"/admin/identities/{path_segment(identity_id)}",
            operation="reset_password",
            identifier=identity_id,
            json=body,
            timeout=timeout,
        )
        logger.info("Password reset for identity %s", identity_id)

    def delete_credential(self, identity_id: str, credential_type: str, timeout: Optional[float] = None) -> None:
        """Remove one credential type from an identity.

        Raises:
            InvalidArgumentError: If the type is not totp, webauthn or lookup_secret
        """
        if credential_type not in DELETABLE_CREDENTIAL_TYPES:
            raise InvalidArgumentError(
                f"credential type must be one of {', '.join(sorted(DELETABLE_CREDENTIAL_TYPES))}"
            )
        self.client.delete(
            f"/admin/identities/{path_segment(identity_id)}/credentials/{credential_type}",
            operation="delete_credential",
            identifier=identity_id,
            timeout=timeout,
        )
        logger.info("Deleted %s credentials for identity %s", credential_type, identity_id)

    def get_identity_sessions(self, identity_id: str, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        resp = self.client.get(
            f"/admin/identities/{path_segment(identity_id)}/sessions",
            operation="get_identity_sessions",
            identifier=identity_id,
            timeout=timeout,
        )
        return decode_json_list(resp, "get_identity_sessions", identity_id)

    def get_identity_count(self, timeout: Optional[float] = None) -> int:
        return len(self._fetch_all("get_identity_count", timeout))

    def get_active_identity_count(self, timeout: Optional[float] = None) -> int:
        """Count identities whose state is "active" (subject to the fetch cap)."""
        identities = self._fetch_all("get_active_identity_count", timeout)
        return sum(1 for identity in identities if identity.get("state") == "active")
