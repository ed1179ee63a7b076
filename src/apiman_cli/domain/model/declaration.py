"""Declared (desired) state, as read from a declaration file.

Declared models are immutable once loaded. Identities are derived from names,
never from server-assigned ids.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

type PluginKey = tuple[str, str, str, str | None]


class DeclarationBaseModel(BaseModel):
    # unquoted YAML scalars such as `initialVersion: 1.0` arrive as numbers
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, frozen=True, coerce_numbers_to_str=True
    )


# an empty YAML key (`policies:`) loads as None and means "nothing declared"
EmptyListIfNone = BeforeValidator(lambda value: [] if value is None else value)
EmptyMappingIfNone = BeforeValidator(lambda value: {} if value is None else value)


class GatewayConfig(DeclarationBaseModel):
    endpoint: str
    username: str | None = None
    password: str | None = None


class DeclaredGateway(DeclarationBaseModel):
    name: str
    description: str | None = None
    type: str = "REST"
    config: GatewayConfig | None = None


class DeclaredPlugin(DeclarationBaseModel):
    group_id: str = Field(alias="groupId")
    artifact_id: str = Field(alias="artifactId")
    version: str
    classifier: str | None = None
    name: str | None = None

    @property
    def key(self) -> PluginKey:
        return (self.group_id, self.artifact_id, self.version, self.classifier)

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        coordinates = f"{self.group_id}:{self.artifact_id}:{self.version}"
        return f"{coordinates}:{self.classifier}" if self.classifier else coordinates


class DeclaredPolicy(DeclarationBaseModel):
    name: str
    config: Annotated[dict[str, object], EmptyMappingIfNone] = Field(
        default_factory=dict
    )


class DeclaredApi(DeclarationBaseModel):
    name: str
    description: str | None = None
    initial_version: str = Field(alias="initialVersion")
    endpoint: str | None = None
    public: bool = False
    published: bool = False
    config: dict[str, object] | None = None
    policies: Annotated[list[DeclaredPolicy], EmptyListIfNone] = Field(
        default_factory=list["DeclaredPolicy"]
    )


class DeclaredOrg(DeclarationBaseModel):
    name: str
    description: str | None = None
    apis: Annotated[list[DeclaredApi], EmptyListIfNone] = Field(default_factory=list["DeclaredApi"])


class DeclaredSystem(DeclarationBaseModel):
    gateways: Annotated[list[DeclaredGateway], EmptyListIfNone] = Field(
        default_factory=list["DeclaredGateway"]
    )
    plugins: Annotated[list[DeclaredPlugin], EmptyListIfNone] = Field(
        default_factory=list["DeclaredPlugin"]
    )


class Declaration(DeclarationBaseModel):
    """Root of a declaration document."""

    system: DeclaredSystem = Field(default_factory=DeclaredSystem)
    org: DeclaredOrg | None = None
