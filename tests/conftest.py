from __future__ import annotations

import pytest

from apiman_cli.domain.reconciliation import (
    CurrentVersionStrategy,
    DeclarationReconciler,
    LegacyVersionStrategy,
)
from tests.support.control_plane import FakeControlPlane


@pytest.fixture
def control_plane() -> FakeControlPlane:
    return FakeControlPlane()


@pytest.fixture
def legacy_control_plane() -> FakeControlPlane:
    return FakeControlPlane(configure_once=True)


@pytest.fixture
def current_reconciler(control_plane: FakeControlPlane) -> DeclarationReconciler:
    return DeclarationReconciler(ports=control_plane.ports(), strategy=CurrentVersionStrategy())


@pytest.fixture
def legacy_reconciler(legacy_control_plane: FakeControlPlane) -> DeclarationReconciler:
    return DeclarationReconciler(
        ports=legacy_control_plane.ports(), strategy=LegacyVersionStrategy()
    )
