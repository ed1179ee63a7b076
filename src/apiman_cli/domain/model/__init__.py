"""Declared and remote models used by the reconciliation engine."""

from __future__ import annotations

from .declaration import (
    Declaration,
    DeclaredApi,
    DeclaredGateway,
    DeclaredOrg,
    DeclaredPlugin,
    DeclaredPolicy,
    DeclaredSystem,
    GatewayConfig,
    PluginKey,
)
from .enums import ApiStatus, PublishDecision, ServerVersion
from .management import Api, ApiPolicy, ApiSummary, Gateway, Org, Plugin, ServerAction

__all__ = [
    "Api",
    "ApiPolicy",
    "ApiStatus",
    "ApiSummary",
    "Declaration",
    "DeclaredApi",
    "DeclaredGateway",
    "DeclaredOrg",
    "DeclaredPlugin",
    "DeclaredPolicy",
    "DeclaredSystem",
    "Gateway",
    "GatewayConfig",
    "Org",
    "Plugin",
    "PluginKey",
    "PublishDecision",
    "ServerAction",
    "ServerVersion",
]
