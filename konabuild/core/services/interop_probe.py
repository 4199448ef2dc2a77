"""
Interop tool probe — is BabaSSL installed and healthy on this host?

Runs ``<tool> version`` with a short deadline and looks only at the
exit status. A missing, broken, or hung tool is an expected outcome:
the probe reports it and returns, it never raises. The tool runs in its
own process group; if it overruns the deadline, or the wait is
interrupted, the whole group is killed and the tool reaped.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess

from konabuild.core.models.build import DEFAULT_INTEROP_TOOL
from konabuild.core.models.probe import ProbeResult, ProbeStatus

logger = logging.getLogger(__name__)

INTEROP_TOOL_NAME = "BabaSSL"
PROBE_ARGS = ("version",)
PROBE_TIMEOUT_SECONDS = 3.0


def resolve_executable(executable: str) -> str:
    """Absolute path of ``executable`` on PATH, or the input unchanged."""
    return shutil.which(executable) or executable


def probe(
    executable: str = DEFAULT_INTEROP_TOOL,
    timeout: float = PROBE_TIMEOUT_SECONDS,
) -> ProbeResult:
    """Check whether the interop tool answers its version command.

    Args:
        executable: Path or bare name of the tool.
        timeout: Seconds to wait for the tool to exit.

    Returns:
        ProbeResult — ``ok`` on exit 0 within the deadline, otherwise
        ``launch_failed``, ``non_zero_exit`` or ``timed_out``.
    """
    if not executable.strip():
        return _unavailable("launch_failed", executable, "no executable configured")

    resolved = resolve_executable(executable)

    cmd = [resolved, *PROBE_ARGS]
    logger.debug("Probing %s (timeout=%ss)", cmd, timeout)

    try:
        process = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=os.name != "nt",
        )
    except OSError as e:
        return _unavailable("launch_failed", resolved, f"cannot launch {executable}: {e}")

    try:
        exit_code = process.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_and_reap(process)
        return _unavailable(
            "timed_out",
            resolved,
            f"{executable} did not exit within {timeout:g}s",
        )
    except BaseException:
        _kill_and_reap(process)
        raise

    if exit_code != 0:
        return _unavailable(
            "non_zero_exit",
            resolved,
            f"{executable} exited with code {exit_code}",
            exit_code=exit_code,
        )

    logger.info("%s is available: %s", INTEROP_TOOL_NAME, resolved)
    return ProbeResult.ok(resolved)


def _kill_and_reap(process: subprocess.Popen) -> None:
    """Kill the tool and anything it spawned, then collect its exit status."""
    if os.name != "nt":
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            # group already exited (macOS reports EPERM for a zombie leader)
            pass
    process.kill()
    process.wait()


def _unavailable(
    status: ProbeStatus,
    resolved: str,
    cause: str,
    exit_code: int | None = None,
) -> ProbeResult:
    logger.info("%s is unavailable: %s", INTEROP_TOOL_NAME, cause)
    return ProbeResult.unavailable(status, resolved, cause, exit_code=exit_code)
