"""Apply a declaration to the management API.

Reconciliation is additive: missing resources are created, existing ones are
left alone (policy configuration and, depending on the server revision, API
configuration excepted) and nothing is ever deleted. Stages run in a fixed
order and are not rolled back when a later one fails; re-applying the same
declaration is the way to recover.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from apiman_cli.domain.model import Api, ApiPolicy, ApiStatus, Gateway, Org, Plugin

from .errors import DeclarativeError, ReconciliationError
from .probe import Absent, Present, check_exists
from .publish import ApiPublisher, fetch_current_status

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from apiman_cli.domain.model import (
        Declaration,
        DeclaredApi,
        DeclaredGateway,
        DeclaredOrg,
        DeclaredPlugin,
    )
    from apiman_cli.domain.ports.management import ManagementPorts

    from .versions import VersionStrategy

log = getLogger(__name__)


@dataclass(slots=True)
class ApplyResult:
    """Corrective calls issued while applying a declaration."""

    created_gateways: list[str] = field(default_factory=list[str])
    installed_plugins: list[str] = field(default_factory=list[str])
    created_orgs: list[str] = field(default_factory=list[str])
    created_apis: list[str] = field(default_factory=list[str])
    configured_apis: list[str] = field(default_factory=list[str])
    added_policies: list[str] = field(default_factory=list[str])
    updated_policies: list[str] = field(default_factory=list[str])
    published_apis: list[str] = field(default_factory=list[str])

    @property
    def changed(self) -> bool:
        return any(
            (
                self.created_gateways,
                self.installed_plugins,
                self.created_orgs,
                self.created_apis,
                self.configured_apis,
                self.added_policies,
                self.updated_policies,
                self.published_apis,
            )
        )


@dataclass(slots=True)
class DeclarationReconciler:
    """Bring the management API in line with a declaration."""

    ports: ManagementPorts
    strategy: VersionStrategy

    def apply(self, declaration: Declaration) -> ApplyResult:
        """Apply ``declaration``: gateways, plugins, then the org and its APIs."""

        log.debug("Applying declaration")
        result = ApplyResult()
        try:
            self._apply_gateways(declaration.system.gateways, result)
            self._apply_plugins(declaration.system.plugins, result)
            if declaration.org is not None:
                self._apply_org(declaration.org, result)
        except Exception as exc:
            raise ReconciliationError(
                "Error applying declaration", partial_result=result
            ) from exc

        log.info("Applied declaration")
        return result

    def _apply_gateways(self, gateways: Sequence[DeclaredGateway], result: ApplyResult) -> None:
        if not gateways:
            return
        log.debug("Applying gateways")

        client = self.ports.gateways
        for declared in gateways:
            gateway_name = declared.name
            match check_exists(
                lambda: client.fetch(gateway_name), description=f"gateway '{gateway_name}'"
            ):
                case Present():
                    log.info("Gateway already exists: %s", gateway_name)
                case Absent():
                    log.info("Adding gateway: %s", gateway_name)
                    client.create(_to_gateway(declared))
                    result.created_gateways.append(gateway_name)

    def _apply_plugins(self, plugins: Sequence[DeclaredPlugin], result: ApplyResult) -> None:
        if not plugins:
            return
        log.debug("Applying plugins")

        for declared in plugins:
            if self._is_plugin_installed(declared):
                log.info("Plugin already installed: %s", declared.label)
            else:
                log.info("Installing plugin: %s", declared.label)
                self.ports.plugins.create(_to_plugin(declared))
                result.installed_plugins.append(declared.label)

    def _is_plugin_installed(self, declared: DeclaredPlugin) -> bool:
        client = self.ports.plugins
        match check_exists(client.list, description="installed plugins"):
            case Present(value=installed):
                return any(plugin.key == declared.key for plugin in installed)
            case Absent():
                return False

    def _apply_org(self, declared: DeclaredOrg, result: ApplyResult) -> None:
        org_name = declared.name
        client = self.ports.orgs
        match check_exists(lambda: client.fetch(org_name), description=f"org '{org_name}'"):
            case Present():
                log.info("Org already exists: %s", org_name)
            case Absent():
                log.info("Adding org: %s", org_name)
                client.create(Org(name=org_name, description=declared.description))
                result.created_orgs.append(org_name)

        if declared.apis:
            log.debug("Applying APIs")
        for declared_api in declared.apis:
            self._apply_declared_api(declared_api, org_name, result)

    def _apply_declared_api(
        self, declared: DeclaredApi, org_name: str, result: ApplyResult
    ) -> None:
        api_name = declared.name
        version = declared.initial_version

        self._apply_api(declared, org_name, api_name, version, result)
        self._apply_policies(declared, org_name, api_name, version, result)

        if declared.published:
            publisher = ApiPublisher(
                apis=self.ports.apis, actions=self.ports.actions, strategy=self.strategy
            )
            if publisher.publish(org_name, api_name, version):
                result.published_apis.append(_api_label(org_name, api_name, version))

    def _apply_api(
        self,
        declared: DeclaredApi,
        org_name: str,
        api_name: str,
        version: str,
        result: ApplyResult,
    ) -> None:
        log.debug("Applying API: %s", api_name)
        client = self.ports.apis

        match check_exists(
            lambda: client.fetch(org_name, api_name, version),
            description=f"API '{api_name}' version {version}",
        ):
            case Present():
                log.info("API already exists: %s", api_name)
            case Absent():
                log.info("Adding API: %s", api_name)
                client.create(org_name, _to_api(declared))
                result.created_apis.append(_api_label(org_name, api_name, version))
                if not self.strategy.allows_repeated_configure():
                    # only one configure call per API is accepted on this revision
                    self._configure_api(declared, org_name, api_name, version, result)

        if self.strategy.allows_repeated_configure():
            status = fetch_current_status(client, org_name, api_name, version)
            if ApiStatus.matches(status, ApiStatus.RETIRED):
                log.warning("API '%s' is retired - skipping configuration", api_name)
            else:
                self._configure_api(declared, org_name, api_name, version, result)

    def _configure_api(
        self,
        declared: DeclaredApi,
        org_name: str,
        api_name: str,
        version: str,
        result: ApplyResult,
    ) -> None:
        log.info("Configuring API: %s", api_name)
        config: Mapping[str, object] = declared.config or {}
        self.ports.apis.configure(org_name, api_name, version, config)
        result.configured_apis.append(_api_label(org_name, api_name, version))

    def _apply_policies(
        self,
        declared: DeclaredApi,
        org_name: str,
        api_name: str,
        version: str,
        result: ApplyResult,
    ) -> None:
        if not declared.policies:
            return
        log.debug("Applying policies to API: %s", api_name)

        client = self.ports.apis
        # fetched once; not refreshed after adds
        existing_policies = client.fetch_policies(org_name, api_name, version)

        for declared_policy in declared.policies:
            policy_name = declared_policy.name
            configuration = policy_configuration(declared_policy.config)
            existing = next(
                (
                    policy
                    for policy in existing_policies
                    if policy.policy_definition_id == policy_name
                ),
                None,
            )

            if existing is None:
                log.info("Adding policy '%s' to API: %s", policy_name, api_name)
                client.add_policy(
                    org_name,
                    api_name,
                    version,
                    ApiPolicy(definition_id=policy_name, configuration=configuration),
                )
                result.added_policies.append(f"{api_name}:{policy_name}")
            elif self.strategy.allows_repeated_policy_update():
                if existing.id is None:
                    raise DeclarativeError(
                        f"Policy '{policy_name}' on API '{api_name}' has no instance id"
                    )
                log.info(
                    "Updating existing policy '%s' configuration for API: %s",
                    policy_name,
                    api_name,
                )
                client.configure_policy(
                    org_name,
                    api_name,
                    version,
                    existing.id,
                    ApiPolicy(configuration=configuration),
                )
                result.updated_policies.append(f"{api_name}:{policy_name}")
            else:
                log.info(
                    "Policy '%s' already exists for API '%s' - skipping configuration update",
                    policy_name,
                    api_name,
                )


def policy_configuration(config: Mapping[str, object]) -> str:
    """Serialise a declared policy configuration the way the server stores it."""

    return json.dumps(config, separators=(",", ":"))


def _api_label(org_name: str, api_name: str, version: str) -> str:
    return f"{org_name}/{api_name}/{version}"


def _to_gateway(declared: DeclaredGateway) -> Gateway:
    configuration = (
        json.dumps(declared.config.model_dump(exclude_none=True), separators=(",", ":"))
        if declared.config is not None
        else None
    )
    return Gateway(
        name=declared.name,
        description=declared.description,
        type=declared.type,
        configuration=configuration,
    )


def _to_plugin(declared: DeclaredPlugin) -> Plugin:
    return Plugin(
        group_id=declared.group_id,
        artifact_id=declared.artifact_id,
        version=declared.version,
        classifier=declared.classifier,
        name=declared.name,
    )


def _to_api(declared: DeclaredApi) -> Api:
    return Api(
        name=declared.name,
        description=declared.description,
        initial_version=declared.initial_version,
        endpoint=declared.endpoint,
        public_api=declared.public,
    )
