"""HTTP client for the apiman management API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Protocol
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from apiman_cli.adapters.http_resilience import ResilientClient, build_limiter
from apiman_cli.domain.model import (
    Api,
    ApiPolicy,
    ApiSummary,
    Gateway,
    Org,
    Plugin,
    ServerAction,
)
from apiman_cli.domain.ports.errors import ManagementAPIError, ResourceNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from aiolimiter import AsyncLimiter

    from apiman_cli.config.http_resilience import ResilienceConfig
    from apiman_cli.domain.reconciliation.versions import VersionStrategy

log = getLogger(__name__)


class ClientFactory(Protocol):
    def __call__(
        self, config: ResilienceConfig, /, *, limiter: AsyncLimiter | None = None
    ) -> ResilientClient: ...


def _segment(value: str) -> str:
    return quote(value, safe="")


class ManagementClient:
    """Low-level HTTP client for the management REST API.

    Every call opens a fresh connection and reads the server's current state.
    """

    def __init__(
        self,
        *,
        resilience: ResilienceConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._resilience = resilience
        self._client_factory: ClientFactory = client_factory or ResilientClient
        # one limiter for the lifetime of this client; each request opens its own connection
        self._limiter = build_limiter(resilience)

    def get(self, path: str) -> object:
        return asyncio.run(self._request_async("GET", path))

    def post(self, path: str, *, payload: object) -> object:
        return asyncio.run(self._request_async("POST", path, payload=payload))

    def put(self, path: str, *, payload: object) -> object:
        return asyncio.run(self._request_async("PUT", path, payload=payload))

    async def _request_async(
        self,
        method: str,
        path: str,
        *,
        payload: object = None,
    ) -> object:
        if self._resilience.base_url is None:
            raise ManagementAPIError("Missing management API base_url in resilience configuration")

        log.debug("%s %s", method, path)
        async with self._client_factory(self._resilience, limiter=self._limiter) as client:
            try:
                if payload is None:
                    response = await client.request(method, path)
                else:
                    response = await client.request(method, path, json=payload)
            except httpx.HTTPError as exc:
                raise ManagementAPIError(
                    f"{method} {path} failed: {exc}", method=method, path=path
                ) from exc

        return _decode_response(response, method=method, path=path)


def _decode_response(response: httpx.Response, *, method: str, path: str) -> object:
    status = response.status_code
    if status == httpx.codes.NOT_FOUND:
        raise ResourceNotFoundError(
            f"{method} {path} returned HTTP 404", status_code=status, method=method, path=path
        )
    if response.is_error:
        raise ManagementAPIError(
            f"{method} {path} returned HTTP {status}: {response.text}",
            status_code=status,
            method=method,
            path=path,
        )
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ManagementAPIError(
            f"{method} {path} returned a malformed response body",
            status_code=status,
            method=method,
            path=path,
        ) from exc


def _parse[M: BaseModel](model: type[M], payload: object, *, path: str) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ManagementAPIError(
            f"Unexpected {model.__name__} payload from {path}", path=path
        ) from exc


def _parse_list[M: BaseModel](model: type[M], payload: object, *, path: str) -> list[M]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ManagementAPIError(f"Expected a list of {model.__name__} from {path}", path=path)
    items: list[object] = payload  # pyright: ignore[reportUnknownVariableType]
    return [_parse(model, item, path=path) for item in items]


class OrgClient:
    def __init__(self, http: ManagementClient) -> None:
        self._http = http

    def fetch(self, name: str) -> Org:
        path = f"organizations/{_segment(name)}"
        return _parse(Org, self._http.get(path), path=path)

    def create(self, org: Org) -> None:
        self._http.post("organizations", payload=org.to_payload())


class GatewayClient:
    def __init__(self, http: ManagementClient) -> None:
        self._http = http

    def fetch(self, name: str) -> Gateway:
        path = f"gateways/{_segment(name)}"
        return _parse(Gateway, self._http.get(path), path=path)

    def create(self, gateway: Gateway) -> None:
        self._http.post("gateways", payload=gateway.to_payload())


class PluginClient:
    def __init__(self, http: ManagementClient) -> None:
        self._http = http

    def list(self) -> Sequence[Plugin]:
        return _parse_list(Plugin, self._http.get("plugins"), path="plugins")

    def create(self, plugin: Plugin) -> None:
        self._http.post("plugins", payload=plugin.to_payload())


class ApiClient:
    """API versions and policies; paths follow the bound server revision."""

    def __init__(self, http: ManagementClient, *, strategy: VersionStrategy) -> None:
        self._http = http
        self._strategy = strategy

    def _collection(self, org_name: str) -> str:
        return f"organizations/{_segment(org_name)}/{self._strategy.api_resource}"

    def _version_path(self, org_name: str, api_name: str, version: str) -> str:
        return (
            f"{self._collection(org_name)}/{_segment(api_name)}/versions/{_segment(version)}"
        )

    def list_apis(self, org_name: str) -> Sequence[ApiSummary]:
        path = self._collection(org_name)
        return _parse_list(ApiSummary, self._http.get(path), path=path)

    def fetch(self, org_name: str, api_name: str, version: str) -> Api:
        path = self._version_path(org_name, api_name, version)
        return _parse(Api, self._http.get(path), path=path)

    def create(self, org_name: str, api: Api) -> None:
        self._http.post(self._collection(org_name), payload=api.to_payload())

    def configure(
        self,
        org_name: str,
        api_name: str,
        version: str,
        config: Mapping[str, object],
    ) -> None:
        self._http.put(self._version_path(org_name, api_name, version), payload=dict(config))

    def fetch_policies(self, org_name: str, api_name: str, version: str) -> list[ApiPolicy]:
        path = f"{self._version_path(org_name, api_name, version)}/policies"
        return _parse_list(ApiPolicy, self._http.get(path), path=path)

    def add_policy(
        self,
        org_name: str,
        api_name: str,
        version: str,
        policy: ApiPolicy,
    ) -> None:
        path = f"{self._version_path(org_name, api_name, version)}/policies"
        self._http.post(path, payload=policy.to_payload())

    def configure_policy(
        self,
        org_name: str,
        api_name: str,
        version: str,
        policy_id: int,
        policy: ApiPolicy,
    ) -> None:
        path = f"{self._version_path(org_name, api_name, version)}/policies/{policy_id}"
        self._http.put(path, payload=policy.to_payload())


class ActionClient:
    def __init__(self, http: ManagementClient, *, strategy: VersionStrategy) -> None:
        self._http = http
        self._strategy = strategy

    def publish(self, org_name: str, api_name: str, version: str) -> None:
        action = ServerAction(
            type=self._strategy.publish_action_type,
            organization_id=org_name,
            entity_id=api_name,
            entity_version=version,
        )
        self._http.post("actions", payload=action.to_payload())
