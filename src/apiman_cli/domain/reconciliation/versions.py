"""Behavioural differences between management API revisions.

Each revision is one strategy object; the engine asks it what is allowed
instead of branching on the version itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol

from apiman_cli.domain.model.enums import PublishDecision, ServerVersion

from .publish import decide_publish

if TYPE_CHECKING:
    from collections.abc import Mapping


class VersionStrategy(Protocol):
    version: ServerVersion
    api_resource: str
    publish_action_type: str

    def allows_repeated_configure(self) -> bool: ...

    def allows_repeated_policy_update(self) -> bool: ...

    def publish_policy(self, current_status: str) -> PublishDecision: ...


class LegacyVersionStrategy:
    """apiman 1.1.x, where APIs are still called services.

    An API may be configured only once (a second call is rejected with a 409),
    existing policies cannot be reconfigured and publishing twice is avoided.
    """

    version = ServerVersion.V11X
    api_resource = "services"
    publish_action_type = "publishService"

    def allows_repeated_configure(self) -> bool:
        return False

    def allows_repeated_policy_update(self) -> bool:
        return False

    def publish_policy(self, current_status: str) -> PublishDecision:
        return decide_publish(current_status, allow_republish=False)


class CurrentVersionStrategy:
    """apiman 1.2.x: configuration and republishing allowed until retired."""

    version = ServerVersion.V12X
    api_resource = "apis"
    publish_action_type = "publishAPI"

    def allows_repeated_configure(self) -> bool:
        return True

    def allows_repeated_policy_update(self) -> bool:
        return True

    def publish_policy(self, current_status: str) -> PublishDecision:
        return decide_publish(current_status, allow_republish=True)


_STRATEGIES: Final[Mapping[ServerVersion, VersionStrategy]] = {
    ServerVersion.V11X: LegacyVersionStrategy(),
    ServerVersion.V12X: CurrentVersionStrategy(),
}


def strategy_for(version: ServerVersion) -> VersionStrategy:
    return _STRATEGIES[version]
