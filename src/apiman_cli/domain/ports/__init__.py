"""Domain port definitions for adapters."""

from __future__ import annotations

from .errors import ManagementAPIError, ResourceNotFoundError
from .management import (
    ActionPort,
    ApiPort,
    GatewayPort,
    ManagementPorts,
    OrgPort,
    PluginPort,
)

__all__ = [
    "ActionPort",
    "ApiPort",
    "GatewayPort",
    "ManagementAPIError",
    "ManagementPorts",
    "OrgPort",
    "PluginPort",
    "ResourceNotFoundError",
]
