"""``${key}`` placeholder substitution over raw declaration text."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def parse_properties(properties: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` strings; later occurrences of a key win."""

    parsed: dict[str, str] = {}
    for item in properties:
        key, separator, value = item.partition("=")
        key = key.strip()
        if not separator or not key:
            raise ValueError(f"Invalid property (expected key=value): {item}")
        parsed[key] = value
    return parsed


def resolve_placeholders(text: str, properties: Mapping[str, str]) -> str:
    """Replace ``${key}`` tokens with property values; unknown keys are left as-is."""

    if not properties:
        return text

    def substitute(match: re.Match[str]) -> str:
        return properties.get(match.group(1), match.group(0))

    return _PLACEHOLDER.sub(substitute, text)
