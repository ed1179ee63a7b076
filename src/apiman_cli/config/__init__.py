"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .server import (
    DEFAULT_SERVER_ADDRESS,
    DEFAULT_SERVER_VERSION,
    ServerConfig,
    get_server_config,
    parse_rate_limit,
    parse_server_version,
)

__all__ = [
    "DEFAULT_SERVER_ADDRESS",
    "DEFAULT_SERVER_VERSION",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "ServerConfig",
    "configure_logging",
    "get_server_config",
    "optional_env_var",
    "parse_rate_limit",
    "parse_server_version",
    "require_env_vars",
]
