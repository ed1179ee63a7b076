"""Publish lifecycle decisions for declared APIs."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from apiman_cli.domain.model.enums import ApiStatus, PublishDecision

from .errors import DeclarativeError

if TYPE_CHECKING:
    from apiman_cli.domain.ports.management import ActionPort, ApiPort

    from .versions import VersionStrategy

log = getLogger(__name__)


def fetch_current_status(apis: ApiPort, org_name: str, api_name: str, version: str) -> str:
    """Read the API's lifecycle status from the server, never from a local copy."""

    status = apis.fetch(org_name, api_name, version).status or ""
    log.debug("API '%s' state: %s", api_name, status)
    return status


def decide_publish(status: str | None, *, allow_republish: bool) -> PublishDecision:
    if ApiStatus.matches(status, ApiStatus.READY):
        return PublishDecision.PUBLISH
    if ApiStatus.matches(status, ApiStatus.PUBLISHED):
        return PublishDecision.PUBLISH if allow_republish else PublishDecision.SKIP
    return PublishDecision.FAIL


@dataclass(slots=True)
class ApiPublisher:
    """Trigger the publish action for APIs whose current state allows it."""

    apis: ApiPort
    actions: ActionPort
    strategy: VersionStrategy

    def publish(self, org_name: str, api_name: str, version: str) -> bool:
        """Publish the API if its state allows; return whether a publish was triggered."""

        log.debug("Attempting to publish API: %s", api_name)
        status = fetch_current_status(self.apis, org_name, api_name, version)

        match self.strategy.publish_policy(status):
            case PublishDecision.PUBLISH:
                if ApiStatus.matches(status, ApiStatus.PUBLISHED):
                    log.info("Republishing API: %s", api_name)
                else:
                    log.info("Publishing API: %s", api_name)
                self.actions.publish(org_name, api_name, version)
                return True
            case PublishDecision.SKIP:
                log.info("API '%s' already published - skipping republish", api_name)
                return False
            case PublishDecision.FAIL:
                raise DeclarativeError(f"Unable to publish API '{api_name}' in state: {status}")
