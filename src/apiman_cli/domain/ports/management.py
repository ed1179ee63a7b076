"""Ports for reading and mutating the remote management API.

Fetch operations raise the adapter's not-found error when the resource is
absent; the reconciliation engine turns that into an explicit ``Absent`` probe
result rather than handling exceptions itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from apiman_cli.domain.model import Api, ApiPolicy, ApiSummary, Gateway, Org, Plugin


@runtime_checkable
class OrgPort(Protocol):
    def fetch(self, name: str) -> Org: ...

    def create(self, org: Org) -> None: ...


@runtime_checkable
class GatewayPort(Protocol):
    def fetch(self, name: str) -> Gateway: ...

    def create(self, gateway: Gateway) -> None: ...


@runtime_checkable
class PluginPort(Protocol):
    def list(self) -> Sequence[Plugin]: ...

    def create(self, plugin: Plugin) -> None: ...


@runtime_checkable
class ApiPort(Protocol):
    """API versions and their policies, bound to one server revision."""

    def list_apis(self, org_name: str) -> Sequence[ApiSummary]: ...

    def fetch(self, org_name: str, api_name: str, version: str) -> Api: ...

    def create(self, org_name: str, api: Api) -> None: ...

    def configure(
        self,
        org_name: str,
        api_name: str,
        version: str,
        config: Mapping[str, object],
    ) -> None: ...

    def fetch_policies(
        self, org_name: str, api_name: str, version: str
    ) -> Sequence[ApiPolicy]: ...

    def add_policy(
        self,
        org_name: str,
        api_name: str,
        version: str,
        policy: ApiPolicy,
    ) -> None: ...

    def configure_policy(
        self,
        org_name: str,
        api_name: str,
        version: str,
        policy_id: int,
        policy: ApiPolicy,
    ) -> None: ...


@runtime_checkable
class ActionPort(Protocol):
    def publish(self, org_name: str, api_name: str, version: str) -> None: ...


@dataclass(slots=True, frozen=True)
class ManagementPorts:
    """One accessor per remote resource kind."""

    orgs: OrgPort
    gateways: GatewayPort
    plugins: PluginPort
    apis: ApiPort
    actions: ActionPort
