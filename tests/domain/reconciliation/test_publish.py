from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from apiman_cli.domain.reconciliation import (
    ApiPublisher,
    CurrentVersionStrategy,
    DeclarativeError,
    LegacyVersionStrategy,
)

if TYPE_CHECKING:
    from apiman_cli.domain.reconciliation import VersionStrategy
    from tests.support.control_plane import FakeControlPlane


def _publisher(plane: FakeControlPlane, strategy: VersionStrategy) -> ApiPublisher:
    ports = plane.ports()
    return ApiPublisher(apis=ports.apis, actions=ports.actions, strategy=strategy)


@pytest.mark.parametrize("strategy", [LegacyVersionStrategy(), CurrentVersionStrategy()])
def test_ready_api_is_published_once(
    control_plane: FakeControlPlane, strategy: VersionStrategy
) -> None:
    control_plane.add_api("acme", "widgets", "1.0", status="Ready")

    published = _publisher(control_plane, strategy).publish("acme", "widgets", "1.0")

    assert published is True
    assert control_plane.calls_named("action.publish") == [
        ("action.publish", "acme", "widgets", "1.0")
    ]


def test_published_api_is_not_republished_on_legacy(control_plane: FakeControlPlane) -> None:
    control_plane.add_api("acme", "widgets", "1.0", status="Published")

    published = _publisher(control_plane, LegacyVersionStrategy()).publish(
        "acme", "widgets", "1.0"
    )

    assert published is False
    assert control_plane.calls_named("action.publish") == []


def test_published_api_is_republished_on_current(control_plane: FakeControlPlane) -> None:
    control_plane.add_api("acme", "widgets", "1.0", status="Published")

    published = _publisher(control_plane, CurrentVersionStrategy()).publish(
        "acme", "widgets", "1.0"
    )

    assert published is True
    assert len(control_plane.calls_named("action.publish")) == 1


@pytest.mark.parametrize("status", ["Retired", "Created", "Bogus"])
@pytest.mark.parametrize("strategy", [LegacyVersionStrategy(), CurrentVersionStrategy()])
def test_unpublishable_state_fails_without_publishing(
    control_plane: FakeControlPlane, strategy: VersionStrategy, status: str
) -> None:
    control_plane.add_api("acme", "widgets", "1.0", status=status)

    expected = f"Unable to publish API 'widgets' in state: {status}"
    with pytest.raises(DeclarativeError, match=expected):
        _publisher(control_plane, strategy).publish("acme", "widgets", "1.0")

    assert control_plane.calls_named("action.publish") == []


def test_status_is_read_fresh_before_deciding(control_plane: FakeControlPlane) -> None:
    entry = control_plane.add_api("acme", "widgets", "1.0", status="Created")
    publisher = _publisher(control_plane, CurrentVersionStrategy())
    entry.status = "Ready"

    assert publisher.publish("acme", "widgets", "1.0") is True
    assert control_plane.call_names() == ["api.fetch", "action.publish"]
