"""Errors raised while loading or applying a declaration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from .engine import ApplyResult


class DeclarativeError(RuntimeError):
    """Raised when a declaration cannot be applied as written."""


class DeclarationLoadError(DeclarativeError):
    """Raised when a declaration file cannot be read or parsed."""

    def __init__(self, message: str, *, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class ReconciliationError(RuntimeError):
    """Raised when applying a declaration aborts; the cause is chained.

    ``partial_result`` records what was already changed remotely before the
    failure, since completed steps are not rolled back.
    """

    def __init__(self, message: str, *, partial_result: ApplyResult | None = None) -> None:
        super().__init__(message)
        self.partial_result = partial_result
