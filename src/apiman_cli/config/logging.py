"""Logging setup for the apiman-cli entry points."""

from __future__ import annotations

import logging

# httpx logs every request at INFO; apply output should only show reconciliation steps
_CHATTY_LOGGERS = ("httpx", "httpcore")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Configure the root logger with the terse CLI format.

    ``force=True`` replaces existing handlers, which ``--debug`` relies on since
    logging is already configured by the time arguments are parsed. HTTP client
    request lines are only shown at DEBUG.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
