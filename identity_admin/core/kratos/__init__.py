"""Ory Kratos API client library.

This package provides a modular, testable interface to the Kratos admin and
public APIs.

Architecture:
- client.py: HTTP client with base URLs, timeouts and error translation
- identities.py: Identity CRUD, password reset, credentials, counts
- sessions.py: Session listing, revocation and counting
- schemas.py: Identity schema listing (public API)
- gateway.py: One object holding all services, built from AppConfig
- exceptions.py: Typed exceptions for error handling

Usage:
    from identity_admin.core.kratos import KratosClient, IdentityService

    client = KratosClient("http://kratos:4434", "http://kratos:4433")
    identity = IdentityService(client).get_identity("9f7c...")
"""
from .client import KratosClient, REQUEST_TIMEOUT
from .exceptions import (
    KratosError,
    InvalidArgumentError,
    InvalidStateError,
    UpstreamError,
    UpstreamUnavailableError,
    UpstreamAPIError,
    NotFoundError,
)
from .gateway import KratosGateway
from .identities import (
    IdentityService,
    IdentityPage,
    paginate,
    IDENTITY_FETCH_LIMIT,
    IDENTITY_STATES,
    CREDENTIAL_TYPES,
    DELETABLE_CREDENTIAL_TYPES,
    MIN_PASSWORD_LENGTH,
)
from .schemas import SchemaService
from .sessions import SessionService

__all__ = [
    # Client
    "KratosClient",
    "REQUEST_TIMEOUT",
    "KratosGateway",

    # Exceptions
    "KratosError",
    "InvalidArgumentError",
    "InvalidStateError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "UpstreamAPIError",
    "NotFoundError",

    # Services
    "IdentityService",
    "SessionService",
    "SchemaService",

    # Identity helpers
    "IdentityPage",
    "paginate",
    "IDENTITY_FETCH_LIMIT",
    "IDENTITY_STATES",
    "CREDENTIAL_TYPES",
    "DELETABLE_CREDENTIAL_TYPES",
    "MIN_PASSWORD_LENGTH",
]
