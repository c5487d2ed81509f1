"""
Command runner — the single place where ``subprocess.run`` is called.

Every adapter goes through ``run_command`` so that logging, timeouts
and spawn-failure handling are the same for all external tools.
It never raises: a missing binary, a timeout or a non-zero exit all
come back as a ``CommandResult``.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
import time

from wazuh_provisioner.adapters.base import CommandResult

logger = logging.getLogger(__name__)

# Keep the tail only; package tools can be chatty
_OUTPUT_TAIL = 2000


def _fmt_argv(argv: list[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_command(argv: list[str], *, timeout: int) -> CommandResult:
    """Run a command, capture its output, and report how it went.

    Args:
        argv: Command list. No shell is involved.
        timeout: Seconds before the process is killed.

    Returns:
        CommandResult. ``spawned`` is False if the binary could not be
        started; ``timed_out`` is True if the timeout fired.
    """
    logger.debug("CMD %s (timeout=%ss)", _fmt_argv(argv), timeout)
    start = time.monotonic()

    try:
        proc = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        logger.debug("Not found: %s (%s)", argv[0], e)
        return CommandResult(argv=argv, spawned=False, error=str(e))
    except PermissionError as e:
        logger.debug("Not executable: %s (%s)", argv[0], e)
        return CommandResult(argv=argv, spawned=False, error=str(e))
    except subprocess.TimeoutExpired:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.warning("Command timed out after %ss: %s", timeout, _fmt_argv(argv))
        return CommandResult(
            argv=argv,
            timed_out=True,
            elapsed_ms=elapsed_ms,
            error=f"timed out after {timeout}s",
        )
    except OSError as e:
        logger.debug("Spawn failed: %s (%s)", argv[0], e)
        return CommandResult(argv=argv, spawned=False, error=str(e))

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = proc.stdout[-_OUTPUT_TAIL:] if proc.stdout else ""
    stderr = proc.stderr[-_OUTPUT_TAIL:] if proc.stderr else ""

    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())
    logger.debug("EXIT %d in %dms: %s", proc.returncode, elapsed_ms, argv[0])

    return CommandResult(
        argv=argv,
        returncode=proc.returncode,
        stdout=stdout,
        stderr=stderr,
        elapsed_ms=elapsed_ms,
    )
