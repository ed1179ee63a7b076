"""Declaration file adapter."""

from __future__ import annotations

from .loader import load_declaration
from .placeholders import parse_properties, resolve_placeholders

__all__ = ["load_declaration", "parse_properties", "resolve_placeholders"]
