"""Server-side resources of the apiman management API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .declaration import PluginKey  # noqa: TC001


class ManagementBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Org(ManagementBaseModel):
    name: str
    description: str | None = None


class Gateway(ManagementBaseModel):
    name: str
    description: str | None = None
    type: str | None = None
    # the server expects the gateway settings as a JSON-encoded string
    configuration: str | None = None


class Plugin(ManagementBaseModel):
    id: int | None = None
    group_id: str = Field(alias="groupId")
    artifact_id: str = Field(alias="artifactId")
    version: str
    classifier: str | None = None
    name: str | None = None

    @property
    def key(self) -> PluginKey:
        return (self.group_id, self.artifact_id, self.version, self.classifier)


class Api(ManagementBaseModel):
    id: int | None = None
    name: str | None = None
    description: str | None = None
    initial_version: str | None = Field(default=None, alias="initialVersion")
    version: str | None = None
    endpoint: str | None = None
    public_api: bool | None = Field(default=None, alias="publicAPI")
    status: str | None = None


class ApiPolicy(ManagementBaseModel):
    id: int | None = None
    policy_definition_id: str | None = Field(default=None, alias="policyDefinitionId")
    definition_id: str | None = Field(default=None, alias="definitionId")
    name: str | None = None
    configuration: str | None = None


class ServerAction(ManagementBaseModel):
    type: str
    organization_id: str = Field(alias="organizationId")
    entity_id: str = Field(alias="entityId")
    entity_version: str = Field(alias="entityVersion")


class ApiSummary(ManagementBaseModel):
    """One entry of an organization's API listing."""

    id: str | None = None
    name: str | None = None
    description: str | None = None
    organization_name: str | None = Field(default=None, alias="organizationName")
