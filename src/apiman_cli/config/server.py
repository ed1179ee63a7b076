"""Management API server configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from apiman_cli.domain.model.enums import ServerVersion

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

DEFAULT_SERVER_ADDRESS = "http://localhost:8080/apiman"
DEFAULT_SERVER_VERSION = ServerVersion.V12X
SERVER_TIMEOUT_SECONDS = 30.0

SERVER_ADDRESS_ENV = "APIMAN_SERVER"
SERVER_USERNAME_ENV = "APIMAN_SERVER_USERNAME"
SERVER_PASSWORD_ENV = "APIMAN_SERVER_PASSWORD"  # noqa: S105
SERVER_VERSION_ENV = "APIMAN_SERVER_VERSION"
SERVER_RATE_LIMIT_ENV = "APIMAN_SERVER_RATE_LIMIT"


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Connection settings for one apiman management API."""

    address: str
    username: str
    password: str
    version: ServerVersion
    resilience: ResilienceConfig


def parse_server_version(value: str) -> ServerVersion:
    try:
        return ServerVersion(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(version.value for version in ServerVersion)
        raise ConfigurationError(
            f"Unsupported server version: {value} (expected one of: {choices})"
        ) from exc


def parse_rate_limit(value: str) -> RateLimit:
    """Parse ``CALLS`` or ``CALLS/SECONDS``, e.g. ``10/1`` for ten requests per second."""

    calls, _, seconds = value.strip().partition("/")
    try:
        rate_limit = RateLimit(max_calls=int(calls), per_seconds=float(seconds or 1))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid rate limit: {value} (expected CALLS[/SECONDS])") from exc
    if rate_limit.max_calls <= 0 or rate_limit.per_seconds <= 0:
        raise ConfigurationError(f"Invalid rate limit: {value} (values must be positive)")
    return rate_limit


def get_server_config(
    *,
    address: str | None = None,
    username: str | None = None,
    password: str | None = None,
    version: ServerVersion | str | None = None,
    rate_limit: RateLimit | str | None = None,
) -> ServerConfig:
    """Resolve server settings from explicit values, falling back to the environment."""

    resolved_address = address or optional_env_var(SERVER_ADDRESS_ENV) or DEFAULT_SERVER_ADDRESS

    missing_credentials = [
        name
        for name, value in ((SERVER_USERNAME_ENV, username), (SERVER_PASSWORD_ENV, password))
        if value is None
    ]
    values = require_env_vars(missing_credentials) if missing_credentials else {}
    resolved_username = username if username is not None else values[SERVER_USERNAME_ENV]
    resolved_password = password if password is not None else values[SERVER_PASSWORD_ENV]

    raw_version = version if version is not None else optional_env_var(SERVER_VERSION_ENV)
    if raw_version is None:
        resolved_version = DEFAULT_SERVER_VERSION
    elif isinstance(raw_version, ServerVersion):
        resolved_version = raw_version
    else:
        resolved_version = parse_server_version(raw_version)

    raw_rate_limit = (
        rate_limit if rate_limit is not None else optional_env_var(SERVER_RATE_LIMIT_ENV)
    )
    resolved_rate_limit = (
        parse_rate_limit(raw_rate_limit) if isinstance(raw_rate_limit, str) else raw_rate_limit
    )

    base_url = resolved_address.rstrip("/") + "/"
    return ServerConfig(
        address=resolved_address,
        username=resolved_username,
        password=resolved_password,
        version=resolved_version,
        resilience=ResilienceConfig(
            name="apiman",
            base_url=base_url,
            timeout_seconds=SERVER_TIMEOUT_SECONDS,
            retry=RetryPolicy(),
            ratelimit=resolved_rate_limit,
            default_headers={"Accept": "application/json"},
            basic_auth=(resolved_username, resolved_password),
        ),
    )
