"""
Logging setup for the ``envhub`` CLI and the ``envhub-launcher`` process.

Both read the same variables:

    ENVHUB_LOG_LEVEL       console level on stderr (default WARNING)
    ENVHUB_LOG_FILE        also append records to this file
    ENVHUB_LOG_FILE_LEVEL  level for the file (default: the console level)

The CLI's ``--debug/--verbose/--quiet`` flags take precedence over
ENVHUB_LOG_LEVEL.  The launcher has no flags of its own, because every
argument after the alias belongs to the target, so the environment is all
it reads.

For the launcher, logging is a side channel.  A log file that cannot be
opened is reported once and skipped, and handler failures at emit time are
swallowed, so neither can stop the hand-off to the target.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

logger = logging.getLogger(__name__)

LEVEL_ENV = "ENVHUB_LOG_LEVEL"
FILE_ENV = "ENVHUB_LOG_FILE"
FILE_LEVEL_ENV = "ENVHUB_LOG_FILE_LEVEL"

DEFAULT_LEVEL = logging.WARNING

# Console detail grows as the level drops
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)

# CLI and launcher runs can share one file; the pid separates them
_FILE_FORMAT = "%(asctime)s %(process)d %(levelname)-5s %(name)s:%(lineno)d: %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so a second setup replaces only those
_OWNED_ATTR = "_envhub_owned"


def parse_level(name: str | int | None, default: int = DEFAULT_LEVEL) -> int:
    """Numeric level for ``name``.  Empty or unknown names give ``default``."""
    if isinstance(name, int):
        return name
    if not name or not name.strip():
        return default
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else default


def owned_handlers(root: logging.Logger | None = None) -> list[logging.Handler]:
    root = root or logging.getLogger()
    return [h for h in root.handlers if getattr(h, _OWNED_ATTR, False)]


def _console_formatter(level: int) -> logging.Formatter:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter("%(message)s")


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    setattr(handler, _OWNED_ATTR, True)
    root.addHandler(handler)


def setup_logging(
    level: str | int | None = DEFAULT_LEVEL,
    log_file: str | None = None,
    log_file_level: str | int | None = None,
) -> None:
    """Configure the root logger for this process.

    Calling it again replaces the handlers an earlier call attached and
    leaves handlers installed by anyone else alone.

    Args:
        level: Console level, as a name or number.
        log_file: Optional file that also receives records.
        log_file_level: Level for ``log_file``; defaults to ``level``.
    """
    console_level = parse_level(level)
    root = logging.getLogger()

    for handler in owned_handlers(root):
        root.removeHandler(handler)
        handler.close()

    _attach(root, logging.StreamHandler(sys.stderr), console_level, _console_formatter(console_level))
    root.setLevel(console_level)
    logging.raiseExceptions = False

    if not log_file:
        return

    file_level = parse_level(log_file_level, default=console_level)
    try:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        logger.warning("Cannot open log file %s: %s", log_file, e)
        return

    _attach(root, file_handler, file_level, logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    root.setLevel(min(console_level, file_level))


def setup_logging_from_env(environ: Mapping[str, str], level: str | int | None = None) -> None:
    """Configure logging from the ENVHUB_* variables in ``environ``.

    An explicit ``level`` (from a CLI flag) overrides ENVHUB_LOG_LEVEL.
    """
    setup_logging(
        level=level if level is not None else environ.get(LEVEL_ENV),
        log_file=environ.get(FILE_ENV) or None,
        log_file_level=environ.get(FILE_LEVEL_ENV),
    )
