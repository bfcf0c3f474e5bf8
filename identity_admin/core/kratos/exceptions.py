"""Kratos-specific exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class KratosError(Exception):
    """Base exception for all Kratos gateway operations."""
    pass


class InvalidArgumentError(KratosError):
    """Caller input rejected before any upstream call was made."""
    pass


class InvalidStateError(KratosError):
    """Upstream data is not in the shape an operation requires."""
    pass


class UpstreamError(KratosError):
    """Upstream call failed (transport error or unexpected response).

    Attributes:
        operation: Gateway operation name (e.g., "get_identity")
        identifier: Identity/session id the operation targeted, if any
        message: Underlying error text
    """

    def __init__(self, operation: str, message: str, identifier: Optional[str] = None):
        self.operation = operation
        self.identifier = identifier
        self.message = message
        context = f"{operation}({identifier})" if identifier else operation
        super().__init__(f"{context}: {message}")


class UpstreamUnavailableError(UpstreamError):
    """Upstream endpoint is not configured."""
    pass


class UpstreamAPIError(UpstreamError):
    """HTTP error from the Kratos API.

    Attributes:
        status_code: HTTP status code
        endpoint: API endpoint that failed
    """

    def __init__(self, operation: str, status_code: int, message: str, endpoint: str,
                 identifier: Optional[str] = None):
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(operation, f"[{status_code}] {endpoint}: {message}", identifier)


class NotFoundError(UpstreamAPIError):
    """Upstream returned 404 for the requested resource."""
    pass
