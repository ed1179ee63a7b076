"""Reconciliation of declared state against the management API.

Flow for one declaration:
1) gateways, probed by name and created when absent
2) plugins, matched against the installed list by coordinates
3) the org, then each of its APIs: create/configure, policies, publish
"""

from __future__ import annotations

from .engine import ApplyResult, DeclarationReconciler, policy_configuration
from .errors import DeclarationLoadError, DeclarativeError, ReconciliationError
from .probe import Absent, Present, Probe, check_exists
from .publish import ApiPublisher, decide_publish, fetch_current_status
from .versions import (
    CurrentVersionStrategy,
    LegacyVersionStrategy,
    VersionStrategy,
    strategy_for,
)

__all__ = [
    "Absent",
    "ApiPublisher",
    "ApplyResult",
    "CurrentVersionStrategy",
    "DeclarationLoadError",
    "DeclarationReconciler",
    "DeclarativeError",
    "LegacyVersionStrategy",
    "Present",
    "Probe",
    "ReconciliationError",
    "VersionStrategy",
    "check_exists",
    "decide_publish",
    "fetch_current_status",
    "policy_configuration",
    "strategy_for",
]
