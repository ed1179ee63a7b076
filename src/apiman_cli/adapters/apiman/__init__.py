"""apiman management API adapter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from apiman_cli.domain.ports.management import ManagementPorts
from apiman_cli.domain.reconciliation.versions import strategy_for

from .client import (
    ActionClient,
    ApiClient,
    GatewayClient,
    ManagementClient,
    OrgClient,
    PluginClient,
)

if TYPE_CHECKING:
    from apiman_cli.config.server import ServerConfig

    from .client import ClientFactory


def build_management_ports(
    config: ServerConfig,
    *,
    client_factory: ClientFactory | None = None,
) -> ManagementPorts:
    """Build one accessor per resource kind, bound to the configured server revision."""

    http = ManagementClient(resilience=config.resilience, client_factory=client_factory)
    strategy = strategy_for(config.version)
    return ManagementPorts(
        orgs=OrgClient(http),
        gateways=GatewayClient(http),
        plugins=PluginClient(http),
        apis=ApiClient(http, strategy=strategy),
        actions=ActionClient(http, strategy=strategy),
    )


__all__ = [
    "ActionClient",
    "ApiClient",
    "GatewayClient",
    "ManagementClient",
    "OrgClient",
    "PluginClient",
    "build_management_ports",
]
