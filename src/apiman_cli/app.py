"""Application orchestration entry points."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from apiman_cli.adapters.apiman import build_management_ports
from apiman_cli.adapters.declaration import load_declaration
from apiman_cli.config import get_server_config
from apiman_cli.domain.model import Api, ApiPolicy
from apiman_cli.domain.reconciliation import (
    ApiPublisher,
    ApplyResult,
    DeclarationReconciler,
    DeclarativeError,
    policy_configuration,
    strategy_for,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from apiman_cli.config import ServerConfig
    from apiman_cli.domain.model import ApiSummary
    from apiman_cli.domain.ports.management import ManagementPorts


log = getLogger(__name__)


def _connect(
    server_config: ServerConfig | None, ports: ManagementPorts | None
) -> tuple[ServerConfig, ManagementPorts]:
    effective_config = server_config or get_server_config()
    return effective_config, ports or build_management_ports(effective_config)


def apply_declaration_file(
    path: Path,
    *,
    properties: Mapping[str, str] | None = None,
    server_config: ServerConfig | None = None,
    ports: ManagementPorts | None = None,
) -> ApplyResult:
    """Load a declaration file and apply it to the configured management API."""

    declaration = load_declaration(path, properties=properties)

    effective_config, effective_ports = _connect(server_config, ports)
    log.info(
        "Applying declaration to %s (server version %s)",
        effective_config.address,
        effective_config.version,
    )

    reconciler = DeclarationReconciler(
        ports=effective_ports,
        strategy=strategy_for(effective_config.version),
    )
    result = reconciler.apply(declaration)

    log.info(
        f"Finished apply: gateways={len(result.created_gateways)}, "
        f"plugins={len(result.installed_plugins)}, orgs={len(result.created_orgs)}, "
        f"apis={len(result.created_apis)}, configured={len(result.configured_apis)}, "
        f"policies_added={len(result.added_policies)}, "
        f"policies_updated={len(result.updated_policies)}, "
        f"published={len(result.published_apis)}"
    )
    return result


def create_api(
    org_name: str,
    *,
    name: str,
    initial_version: str,
    endpoint: str | None = None,
    public: bool = False,
    description: str | None = None,
    server_config: ServerConfig | None = None,
    ports: ManagementPorts | None = None,
) -> None:
    """Create one API in ``org_name`` without checking whether it exists."""

    _, effective_ports = _connect(server_config, ports)
    log.info("Creating API: %s", name)
    effective_ports.apis.create(
        org_name,
        Api(
            name=name,
            description=description,
            initial_version=initial_version,
            endpoint=endpoint,
            public_api=public,
        ),
    )


def add_api_policy(
    org_name: str,
    api_name: str,
    version: str,
    *,
    policy_name: str,
    config_file: Path | None = None,
    server_config: ServerConfig | None = None,
    ports: ManagementPorts | None = None,
) -> None:
    """Attach a policy to an API version; its configuration is read from a JSON file."""

    configuration = policy_configuration(_read_policy_config(config_file))
    _, effective_ports = _connect(server_config, ports)
    log.info("Adding policy '%s' to API: %s", policy_name, api_name)
    effective_ports.apis.add_policy(
        org_name,
        api_name,
        version,
        ApiPolicy(definition_id=policy_name, configuration=configuration),
    )


def _read_policy_config(config_file: Path | None) -> Mapping[str, object]:
    if config_file is None:
        return {}
    try:
        document = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise DeclarativeError(f"Unable to read policy configuration: {config_file}") from exc
    if not isinstance(document, dict):
        raise DeclarativeError(f"Policy configuration must be a JSON object: {config_file}")
    return document  # pyright: ignore[reportUnknownVariableType]


def publish_api(
    org_name: str,
    api_name: str,
    version: str,
    *,
    server_config: ServerConfig | None = None,
    ports: ManagementPorts | None = None,
) -> bool:
    """Publish an API version if its current state allows it."""

    effective_config, effective_ports = _connect(server_config, ports)
    publisher = ApiPublisher(
        apis=effective_ports.apis,
        actions=effective_ports.actions,
        strategy=strategy_for(effective_config.version),
    )
    return publisher.publish(org_name, api_name, version)


def list_apis(
    org_name: str,
    *,
    server_config: ServerConfig | None = None,
    ports: ManagementPorts | None = None,
) -> Sequence[ApiSummary]:
    _, effective_ports = _connect(server_config, ports)
    apis = effective_ports.apis.list_apis(org_name)
    log.info("Found %d APIs in org: %s", len(apis), org_name)
    return apis
