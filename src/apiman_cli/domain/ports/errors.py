"""Failure signals raised by management API adapters."""

from __future__ import annotations


class ManagementAPIError(RuntimeError):
    """Raised when a management API call fails for any reason other than absence."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        method: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.path = path


class ResourceNotFoundError(ManagementAPIError):
    """Raised when the requested resource does not exist (HTTP 404)."""
