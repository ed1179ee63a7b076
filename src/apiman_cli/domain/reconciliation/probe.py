"""Existence probes over remote reads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from apiman_cli.domain.ports.errors import ManagementAPIError, ResourceNotFoundError

from .errors import DeclarativeError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(slots=True, frozen=True)
class Present[T]:
    value: T


@dataclass(slots=True, frozen=True)
class Absent:
    pass


type Probe[T] = Present[T] | Absent


def check_exists[T](read: Callable[[], T | None], *, description: str = "item") -> Probe[T]:
    """Run ``read`` and report whether it found anything.

    A not-found failure means absence. Every other failure is fatal: it is
    never mistaken for absence.
    """

    try:
        value = read()
    except ResourceNotFoundError:
        return Absent()
    except ManagementAPIError as exc:
        raise DeclarativeError(f"Error checking for existence of {description}") from exc

    if value is None:
        return Absent()
    return Present(value)
