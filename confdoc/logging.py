"""Logging setup for confdoc builds.

Records may carry the ``file:line`` of the definition they concern through
``extra=at(location)``; the console appends it to the message and the log
file prints it after the logger name.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from .config import ConfDocConfig

_ROOT_LOGGER = "confdoc"
_CONSOLE_FORMAT = "[confdoc] %(levelname)s %(message)s%(where)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s%(where)s: %(message)s"


class _DefinitionLocation(logging.Filter):
    """Render the optional ``location`` extra as ``%(where)s``."""

    def __init__(self, template: str) -> None:
        super().__init__()
        self._template = template

    def filter(self, record: logging.LogRecord) -> bool:
        location = getattr(record, "location", None)
        record.where = self._template.format(location) if location else ""
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``confdoc.<name>``, or the package logger when no name is given."""
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}" if name else _ROOT_LOGGER)


def at(location: Optional[str]) -> Dict[str, Optional[str]]:
    """``extra`` mapping tying a record to a definition's source location."""
    return {"location": location}


def configure_logging(
    config: "ConfDocConfig | None" = None,
    *,
    verbose: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Attach console and optional file handlers to the ``confdoc`` logger.

    The console shows INFO (DEBUG with ``verbose``). The log file, taken from
    ``config.log_file`` unless ``log_file`` is given, always records DEBUG so
    deferred and skipped definitions can be traced after a quiet run.
    Calling this again replaces the handlers of the previous call.
    """
    if log_file is None and config is not None:
        log_file = config.log_file

    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.addFilter(_DefinitionLocation(" [{}]"))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.addFilter(_DefinitionLocation(" ({})"))
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(sink)

    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    return logger


__all__ = ["at", "configure_logging", "get_logger"]
