"""Kratos identity schema listing."""
from __future__ import annotations
from typing import Any, Dict, List, Optional

from .client import KratosClient, decode_json
from .exceptions import UpstreamAPIError, UpstreamError


class SchemaService:
    """Read-only access to identity schemas.

    Uses the public ``/schemas`` endpoint: it is the only one that returns
    the full schema documents inline.
    """

    def __init__(self, client: KratosClient):
        self.client = client

    def list_identity_schemas(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        """Return ``[{"id": ..., "schema": {...}}, ...]``.

        Raises:
            UpstreamUnavailableError: If the public URL is not configured
            UpstreamError: On non-200 status or a malformed body
        """
        try:
            resp = self.client.get_public("/schemas", operation="list_identity_schemas", timeout=timeout)
        except UpstreamAPIError as exc:
            # Every non-2xx answer, 404 included, is an upstream failure here
            raise UpstreamError("list_identity_schemas", f"unexpected status code: {exc.status_code}") from exc
        if resp.status_code != 200:
            raise UpstreamError("list_identity_schemas", f"unexpected status code: {resp.status_code}")

        payload = decode_json(resp, "list_identity_schemas")
        if not isinstance(payload, list):
            raise UpstreamError("list_identity_schemas", "failed to decode schemas: expected a JSON array")

        schemas = []
        for entry in payload:
            if not isinstance(entry, dict) or "id" not in entry:
                raise UpstreamError("list_identity_schemas", "failed to decode schemas: entry without id")
            schemas.append({"id": entry["id"], "schema": entry.get("schema")})
        return schemas
