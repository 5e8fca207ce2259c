"""Logging for hookcheck: one ``hookcheck`` logger tree, tagged by component."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "hookcheck"


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the logger of one hookcheck component, e.g. ``get_logger("corpus")``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{component}" if component else _LOGGER_NAME)


class ComponentFormatter(logging.Formatter):
    """Prefixes console records with the component that emitted them.

    ``hookcheck.analyzers.doc_comments`` is shown as
    ``[hookcheck:analyzers.doc_comments]``; records of the root logger keep the
    bare ``[hookcheck]`` prefix.
    """

    def __init__(self) -> None:
        super().__init__("%(component_tag)s %(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        component = record.name[len(_LOGGER_NAME) + 1 :] if record.name.startswith(f"{_LOGGER_NAME}.") else ""
        record.component_tag = f"[{_LOGGER_NAME}:{component}]" if component else f"[{_LOGGER_NAME}]"
        return super().format(record)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send hookcheck records to stderr, and to ``log_file`` when given.

    Only warnings (skipped corpus files, unreadable sources) are shown unless
    ``verbose`` is set, in which case every discovered hook and dropped type
    is reported at debug level.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Each CLI invocation installs a fresh set of handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(ComponentFormatter())
    logger.addHandler(console)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ComponentFormatter", "configure_logging", "get_logger"]
