"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ServerVersion(StrEnum):
    """Supported revisions of the apiman management API."""

    V11X = "v11x"
    V12X = "v12x"


class ApiStatus(StrEnum):
    """Lifecycle states reported on an API version."""

    CREATED = "CREATED"
    READY = "READY"
    PUBLISHED = "PUBLISHED"
    RETIRED = "RETIRED"

    @classmethod
    def matches(cls, status: str | None, expected: ApiStatus) -> bool:
        return (status or "").upper() == expected.value


class PublishDecision(StrEnum):
    """What to do with an API whose publication was requested."""

    PUBLISH = "publish"
    SKIP = "skip"
    FAIL = "fail"
