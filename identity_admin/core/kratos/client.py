"""Low-level HTTP client for the Kratos admin and public APIs.

Handles base URLs, timeouts, and error translation.
"""
from __future__ import annotations
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from .exceptions import NotFoundError, UpstreamAPIError, UpstreamError, UpstreamUnavailableError

REQUEST_TIMEOUT = 5


class KratosClient:
    """HTTP client for Kratos with centralized error handling.

    Every call is tagged with the gateway operation name (and the target id
    where there is one) so failures surface with their context.

    Usage:
        client = KratosClient("http://kratos:4434", "http://kratos:4433")
        response = client.get("/admin/identities/abc", operation="get_identity", identifier="abc")
    """

    def __init__(self, admin_url: str, public_url: Optional[str] = None, timeout: float = REQUEST_TIMEOUT):
        """Initialize Kratos client.

        Args:
            admin_url: Kratos admin API base URL (privileged operations)
            public_url: Kratos public API base URL (schema listing); empty disables it
            timeout: Default per-request timeout in seconds
        """
        self.admin_url = admin_url.rstrip("/")
        self.public_url = (public_url or "").rstrip("/")
        self.timeout = timeout

    def get(self, path: str, operation: str, identifier: Optional[str] = None,
            params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> requests.Response:
        """Execute GET request against the admin API.

        Raises:
            NotFoundError: On HTTP 404
            UpstreamAPIError: On any other HTTP error
            UpstreamError: On transport failure
        """
        url = f"{self.admin_url}{path}"
        return self._send(requests.get, url, operation, identifier, timeout, params=params)

    def post(self, path: str, operation: str, identifier: Optional[str] = None,
             json: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> requests.Response:
        """Execute POST request against the admin API."""
        url = f"{self.admin_url}{path}"
        return self._send(requests.post, url, operation, identifier, timeout, json=json)

    def put(self, path: str, operation: str, identifier: Optional[str] = None,
            json: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> requests.Response:
        """Execute PUT request against the admin API."""
        url = f"{self.admin_url}{path}"
        return self._send(requests.put, url, operation, identifier, timeout, json=json)

    def delete(self, path: str, operation: str, identifier: Optional[str] = None,
               timeout: Optional[float] = None) -> requests.Response:
        """Execute DELETE request against the admin API."""
        url = f"{self.admin_url}{path}"
        return self._send(requests.delete, url, operation, identifier, timeout)

    def get_public(self, path: str, operation: str, timeout: Optional[float] = None) -> requests.Response:
        """Execute GET request against the public API.

        Raises:
            UpstreamUnavailableError: If no public URL is configured
        """
        if not self.public_url:
            raise UpstreamUnavailableError(operation, "public URL not configured")
        url = f"{self.public_url}{path}"
        return self._send(requests.get, url, operation, None, timeout)

    def _send(self, method, url: str, operation: str, identifier: Optional[str],
              timeout: Optional[float], **kwargs) -> requests.Response:
        try:
            resp = method(url, timeout=timeout or self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise UpstreamError(operation, str(exc), identifier) from exc
        self._handle_error(resp, operation, identifier)
        return resp

    def _handle_error(self, resp: requests.Response, operation: str, identifier: Optional[str]) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            NotFoundError: If response status is 404
            UpstreamAPIError: If response status indicates any other error
        """
        if resp.status_code == 404:
            raise NotFoundError(operation, resp.status_code, resp.text, resp.url, identifier)
        if resp.status_code >= 400:
            raise UpstreamAPIError(operation, resp.status_code, resp.text, resp.url, identifier)


def decode_json(resp: requests.Response, operation: str, identifier: Optional[str] = None) -> Any:
    """Decode a JSON body, turning malformed payloads into UpstreamError."""
    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamError(operation, f"malformed JSON response: {exc}", identifier) from exc


def decode_json_list(resp: requests.Response, operation: str, identifier: Optional[str] = None) -> list:
    """Decode a JSON array body; ``null`` reads as an empty list."""
    payload = decode_json(resp, operation, identifier)
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise UpstreamError(operation, "expected a JSON array", identifier)
    return payload


def path_segment(value: str) -> str:
    """Percent-encode an id so it stays a single URL path segment."""
    return quote(value, safe="")
