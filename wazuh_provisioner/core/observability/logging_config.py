"""
Logging setup for the provisioner CLI.

Log records go to stderr so that ``--json`` output on stdout stays
parseable; user-facing messages go through ``click.echo``. Provisioning
often runs unattended, so a second handler can append to a file.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  WAP_LOG_LEVEL  >  WARNING

File output: WAP_LOG_FILE, at WAP_LOG_FILE_LEVEL (default: console level).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping

LOG_LEVEL_ENV = "WAP_LOG_LEVEL"
LOG_FILE_ENV = "WAP_LOG_FILE"
LOG_FILE_LEVEL_ENV = "WAP_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"


def _console_formatter(level: int) -> logging.Formatter:
    # More context the lower the level: bare messages at WARNING,
    # module names at INFO, file:line at DEBUG.
    if level <= logging.DEBUG:
        return logging.Formatter(_DETAILED, datefmt="%H:%M:%S")
    if level <= logging.INFO:
        return logging.Formatter("%(asctime)s [%(name)s] %(message)s", datefmt="%H:%M:%S")
    return logging.Formatter("%(message)s")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> int:
    """Replace the root logger's handlers with the provisioner's.

    Returns:
        The root logger level (the lowest of the handler levels).
    """
    console_level = _parse_level(level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    handlers: list[logging.Handler] = [console]

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(_parse_level(log_file_level) if log_file_level else console_level)
        fh.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(fh)

    root = logging.getLogger()
    root.handlers[:] = handlers
    root.setLevel(min(h.level for h in handlers))
    return root.level


def level_from_flags(*, debug: bool, verbose: bool, quiet: bool, env_level: str | None) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return env_level or "WARNING"


def configure_cli_logging(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Set up logging for one CLI invocation from its flags and WAP_LOG_* vars."""
    env = os.environ if environ is None else environ
    return setup_logging(
        level=level_from_flags(
            debug=debug, verbose=verbose, quiet=quiet, env_level=env.get(LOG_LEVEL_ENV),
        ),
        log_file=env.get(LOG_FILE_ENV) or None,
        log_file_level=env.get(LOG_FILE_LEVEL_ENV),
    )


def _parse_level(level: str | None) -> int:
    """Level name or number ("info", "10") → numeric level; WARNING if unknown."""
    if not level:
        return logging.WARNING
    if level.isdigit():
        return int(level)
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING
