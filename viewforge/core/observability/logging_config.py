"""
Logging configuration — set up once by the CLI at startup.

Modules log through ``logging.getLogger(__name__)`` and inherit this
configuration.

Level precedence:
    --debug / --verbose / --quiet  >  VIEWFORGE_LOG_LEVEL  >  WARNING

VIEWFORGE_LOG_FILE and VIEWFORGE_LOG_FILE_LEVEL add an optional file log.

Every recorded gap is echoed as a WARNING by the gap log. Setting
VIEWFORGE_LOG_GAPS=0 keeps those echoes off the console; the gap log
file and any VIEWFORGE_LOG_FILE still receive them.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "VIEWFORGE_LOG_LEVEL"
ENV_FILE = "VIEWFORGE_LOG_FILE"
ENV_FILE_LEVEL = "VIEWFORGE_LOG_FILE_LEVEL"
ENV_GAPS = "VIEWFORGE_LOG_GAPS"

GAP_LOGGER = "viewforge.core.persistence.gap_log"

_FMT_MINIMAL = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_CONSOLE = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Kept at WARNING unless running at DEBUG; the web command's request log
_NOISY_LOGGERS = ("werkzeug",)

_FALSE_VALUES = ("0", "false", "no", "off")


class GapEchoFilter(logging.Filter):
    """Drop gap-log warnings; errors from the gap log still pass."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True
        return not (record.name == GAP_LOGGER or record.name.startswith(GAP_LOGGER + "."))


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def gaps_on_console() -> bool:
    """Whether VIEWFORGE_LOG_GAPS allows gap echoes on the console (default yes)."""
    return os.environ.get(ENV_GAPS, "1").strip().lower() not in _FALSE_VALUES


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
    echo_gaps: bool = True,
) -> None:
    """Configure the root logger for the process.

    Args:
        level: Console level (a name such as INFO, or a number).
        log_file: Optional path of a log file.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Keep werkzeug at WARNING unless ``level`` is DEBUG.
        echo_gaps: Show gap-log warnings on the console.
    """
    numeric_level = parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_CONSOLE
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_CONSOLE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    if not echo_gaps:
        console.addFilter(GapEchoFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def parse_level(level: str | int | None) -> int:
    """Level name or number to its numeric value; anything unknown means WARNING."""
    if level is None or level == "":
        return logging.WARNING
    if isinstance(level, int):
        return level
    text = level.strip()
    if text.isdigit():
        return int(text)
    numeric = logging.getLevelName(text.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
