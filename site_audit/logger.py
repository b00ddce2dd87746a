# === FILE: site_audit/logger.py ===
"""Logging for **SiteAudit**.

Every module logs through a child of the ``SiteAudit`` logger::

      from site_audit.logger import get_logger
      logger = get_logger("discovery")      # -> "SiteAudit.discovery"
      logger.info("Sitemap found at %s", url)

Handlers live only on the root ``SiteAudit`` logger and are (re)built by
:func:`configure`. The console handler writes to stdout by default; the CLI
switches it to stderr so that JSON printed to stdout stays parseable.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, TextIO, Union

# --------------------------------------------------------------------------- #
# Constants                                                                   #
# --------------------------------------------------------------------------- #

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteAudit"
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


# --------------------------------------------------------------------------- #
# Handlers                                                                    #
# --------------------------------------------------------------------------- #


def _console_handler(stream: Optional[TextIO], fmt: str) -> logging.StreamHandler:
    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _file_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    path = Path(file)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Root project logger, or its child ``SiteAudit.<component>``."""
    name = f"{LOGGER_NAME}.{component}" if component else LOGGER_NAME
    return logging.getLogger(name)


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Rotating log file; *None* disables file output.
    log_format
        Format string shared by all handlers.
    stream
        Console stream; *None* means ``sys.stdout`` at call time.
    replace_handlers
        Drop previously installed handlers first.
    """
    root = get_logger()
    root.setLevel(level)

    if replace_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    root.addHandler(_console_handler(stream, log_format))
    if log_file is not None:
        root.addHandler(_file_handler(log_file, log_format))

    root.propagate = False
    return root


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Used by the CLI: replaces existing handlers."""
    return configure(level=level, log_file=log_file, log_format=log_format, stream=stream)


logger: logging.Logger = init_logging()

__all__ = ["logger", "get_logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
