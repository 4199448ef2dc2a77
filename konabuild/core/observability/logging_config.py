"""
Logging for konabuild — configured once by the CLI entrypoint.

Modules log through ``logger = logging.getLogger(__name__)``.

Console level, highest precedence first:
    --debug  >  --verbose  >  --quiet  >  KONA_LOG_LEVEL  >  WARNING

KONA_LOG_FILE adds a file handler; KONA_LOG_FILE_LEVEL sets its level
(default: the console level).

Every handler carries a ``SecretRedactionFilter``: signer password
arguments and password properties are masked before a record is
written anywhere.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Mapping

LOG_LEVEL_ENV = "KONA_LOG_LEVEL"
LOG_FILE_ENV = "KONA_LOG_FILE"
LOG_FILE_LEVEL_ENV = "KONA_LOG_FILE_LEVEL"

REDACTED = "******"

# -storepass <v>, -keypass <v>, ks.storepass=<v>, ks.keypass=<v>, ossrhPassword=<v>
_SECRET_PATTERNS = (
    re.compile(r"(-(?:storepass|keypass)\s+)(?:'[^']*'|\"[^\"]*\"|\S+)"),
    re.compile(r"((?:ks\.storepass|ks\.keypass|ossrhPassword)\s*[=:]\s*)(?:'[^']*'|\"[^\"]*\"|\S+)"),
)

# Console format by threshold: the first entry at or above the level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def redact(text: str) -> str:
    """Mask password values in ``text``."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: m.group(1) + REDACTED, text)
    return text


class SecretRedactionFilter(logging.Filter):
    """Rewrite each record's message with password values masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = redact(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LOG_LEVEL_ENV) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root handlers with a redacting console (and file) handler.

    The root logger is set to the lowest handler level so a verbose log
    file still receives records the console hides.
    """
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        handlers.append(fh)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        handler.addFilter(SecretRedactionFilter())
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    logging.raiseExceptions = False


def setup_from_env(level: str, environ: Mapping[str, str] | None = None) -> None:
    """``setup_logging`` with the file settings taken from KONA_LOG_FILE*."""
    env = os.environ if environ is None else environ
    setup_logging(
        level=level,
        log_file=env.get(LOG_FILE_ENV),
        log_file_level=env.get(LOG_FILE_LEVEL_ENV),
    )


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next((f, d) for threshold, f, d in _CONSOLE_FORMATS if level <= threshold)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
