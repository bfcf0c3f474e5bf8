"""Kratos session management operations."""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from .client import KratosClient, decode_json_list, path_segment
from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class SessionService:
    """Service for listing and revoking Kratos sessions."""

    def __init__(self, client: KratosClient):
        self.client = client

    def list_sessions(self, page: int, per_page: int, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        """List sessions, one upstream page of ``per_page`` entries.

        Kratos pages sessions by page size and an opaque token, so ``page`` is
        validated and echoed back by the handler but not forwarded, and no
        total is available.
        """
        if page < 1 or per_page < 1:
            raise InvalidArgumentError("page and per_page must be >= 1")
        resp = self.client.get(
            "/admin/sessions",
            operation="list_sessions",
            params={"page_size": per_page},
            timeout=timeout,
        )
        return decode_json_list(resp, "list_sessions")

    def revoke_session(self, session_id: str, timeout: Optional[float] = None) -> None:
        """Disable a session; there is no way back to active."""
        self.client.delete(
            f"/admin/sessions/{path_segment(session_id)}",
            operation="revoke_session",
            identifier=session_id,
            timeout=timeout,
        )
        logger.info("Revoked session %s", session_id)

    def get_session_count(self, timeout: Optional[float] = None) -> int:
        """Count active sessions using the upstream active filter."""
        resp = self.client.get(
            "/admin/sessions",
            operation="get_session_count",
            params={"active": "true"},
            timeout=timeout,
        )
        return len(decode_json_list(resp, "get_session_count"))
