"""Bundle of Kratos services built from application config."""
from __future__ import annotations

from .client import KratosClient
from .identities import IdentityService
from .schemas import SchemaService
from .sessions import SessionService


class KratosGateway:
    """Stateless entry point to every Kratos operation the API exposes.

    Usage:
        gateway = KratosGateway.from_config(cfg)
        page = gateway.identities.list_identities(page=1, per_page=20)
        gateway.sessions.revoke_session("sess-1")
    """

    def __init__(self, client: KratosClient, fetch_limit: int):
        self.client = client
        self.identities = IdentityService(client, fetch_limit=fetch_limit)
        self.sessions = SessionService(client)
        self.schemas = SchemaService(client)

    @classmethod
    def from_config(cls, cfg) -> "KratosGateway":
        client = KratosClient(cfg.kratos_admin_url, cfg.kratos_public_url, timeout=cfg.upstream_timeout)
        return cls(client, fetch_limit=cfg.identity_fetch_limit)
