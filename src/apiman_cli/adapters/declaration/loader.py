"""Load declaration files (JSON or YAML) into the declaration model."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

import yaml
from pydantic import ValidationError

from apiman_cli.domain.model import Declaration
from apiman_cli.domain.reconciliation.errors import DeclarationLoadError

from .placeholders import resolve_placeholders

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = getLogger(__name__)

JSON_EXTENSION = ".json"


def load_declaration(path: Path, *, properties: Mapping[str, str] | None = None) -> Declaration:
    """Read ``path``, resolve placeholders and parse it.

    Files ending in ``.json`` are parsed as JSON, anything else as YAML.
    """

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeclarationLoadError("Unable to read declaration", path=path) from exc
    log.debug("Declaration file raw: %s", raw_text)

    text = resolve_placeholders(raw_text, properties or {})
    log.debug("Declaration file after resolving placeholders: %s", text)

    try:
        if path.suffix.lower() == JSON_EXTENSION:
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DeclarationLoadError("Unable to parse declaration", path=path) from exc

    if document is None:
        document = {}
    try:
        declaration = Declaration.model_validate(document)
    except ValidationError as exc:
        raise DeclarationLoadError(
            f"Invalid declaration ({exc.error_count()} errors)", path=path
        ) from exc

    log.info("Loaded declaration: %s", path)
    log.debug("Declaration loaded: %s", declaration.model_dump_json(by_alias=True))
    return declaration
