"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_KRATOS_ADMIN_URL = "http://localhost:4434"
DEFAULT_KRATOS_PUBLIC_URL = "http://localhost:4433"
DEFAULT_PORT = 8080
DEFAULT_UPSTREAM_TIMEOUT = 5.0
DEFAULT_IDENTITY_FETCH_LIMIT = 10000
DEFAULT_TOKEN_TTL_HOURS = 24


class ConfigurationError(RuntimeError):
    """Required configuration is missing or malformed; the process must not start."""


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] ✓ Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            print(f"[settings] ✗ Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.environ.get(env_var)
        if secret_value:
            return secret_value

    return None


def parse_cors_origins(raw: Optional[str]) -> tuple[str, ...]:
    """Split a comma-separated origin list; empty input means allow all ("*")."""
    if not raw:
        return ("*",)
    origins = tuple(part.strip() for part in raw.split(",") if part.strip())
    return origins or ("*",)


def _env_number(var_name: str, default, cast):
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{var_name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{var_name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class AppConfig:
    """Application configuration container.

    Built once by :func:`load_settings` and handed to ``create_app``; never
    mutated afterwards.
    """
    # Single admin principal
    admin_password: str
    jwt_secret: str

    # Kratos
    kratos_admin_url: str = DEFAULT_KRATOS_ADMIN_URL
    kratos_public_url: str = DEFAULT_KRATOS_PUBLIC_URL
    upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT
    identity_fetch_limit: int = DEFAULT_IDENTITY_FETCH_LIMIT

    # HTTP
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))

    # Tokens
    token_ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS

    @property
    def allows_any_origin(self) -> bool:
        return "*" in self.cors_origins


def load_settings(dotenv: bool = True) -> AppConfig:
    """Load application settings from environment, .env, and /run/secrets.

    Raises:
        ConfigurationError: If ADMIN_PASSWORD or JWT_SECRET is missing
    """
    if dotenv and not load_dotenv():
        print("[settings] No .env values loaded, using process environment")

    admin_password = _load_secret_from_file("admin_password", "ADMIN_PASSWORD")
    if not admin_password:
        raise ConfigurationError("ADMIN_PASSWORD environment variable is required")

    jwt_secret = _load_secret_from_file("jwt_secret", "JWT_SECRET")
    if not jwt_secret:
        raise ConfigurationError("JWT_SECRET environment variable is required")

    kratos_admin_url = (os.environ.get("KRATOS_ADMIN_URL") or DEFAULT_KRATOS_ADMIN_URL).rstrip("/")
    # An explicitly empty KRATOS_PUBLIC_URL disables schema listing
    kratos_public_url = os.environ.get("KRATOS_PUBLIC_URL", DEFAULT_KRATOS_PUBLIC_URL).strip().rstrip("/")

    cfg = AppConfig(
        admin_password=admin_password,
        jwt_secret=jwt_secret,
        kratos_admin_url=kratos_admin_url,
        kratos_public_url=kratos_public_url,
        upstream_timeout=_env_number("UPSTREAM_TIMEOUT", DEFAULT_UPSTREAM_TIMEOUT, float),
        identity_fetch_limit=_env_number("IDENTITY_FETCH_LIMIT", DEFAULT_IDENTITY_FETCH_LIMIT, int),
        port=_env_number("PORT", DEFAULT_PORT, int),
        cors_origins=parse_cors_origins(os.environ.get("CORS_ORIGINS")),
        token_ttl_hours=_env_number("TOKEN_TTL_HOURS", DEFAULT_TOKEN_TTL_HOURS, int),
    )

    print(f"[settings] kratos_admin={cfg.kratos_admin_url}; kratos_public={cfg.kratos_public_url or '(disabled)'}")
    print(f"[settings] CORS allowed origins: {', '.join(cfg.cors_origins)}")

    return cfg
