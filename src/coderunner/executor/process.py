"""
Child process execution with a wall-clock timeout.

:func:`run_process` is the single primitive both the build and the run
stage use.  It spawns the command, feeds the stdin payload in one go
and closes the stream, and collects stdout and stderr independently.
The wait is bounded by ``asyncio.wait_for``: whichever of process exit
or timeout happens first decides the outcome, and the other can no
longer fire.  On timeout the whole process group is killed, so helpers
that fork (``go run``, ``tsx``) do not leave orphans behind, and the
child is reaped before returning.  A descendant that escaped the group
with ``setsid()`` cannot hold the result back: if reaping stalls on its
open pipes they are closed after ``REAP_TIMEOUT_S``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

logger = logging.getLogger("coderunner.process")

_POSIX = os.name == "posix"

# How long a killed child may take to be reaped before its pipes are closed.
REAP_TIMEOUT_S = 0.5


@dataclass
class ProcessOutcome:
    """What happened to one child process.

    Attributes
    ----------
    stdout: str
        Captured standard output (empty on timeout or spawn failure).
    stderr: str
        Captured standard error.
    returncode: int | None
        Exit status, ``None`` if the process never started.  Negative
        values mean the process was ended by a signal.
    timed_out: bool
        Whether the timeout fired and the process was killed.
    spawn_error: str | None
        OS error text when the command could not be launched.
    duration_ms: int
        Wall-clock time from spawn to termination.
    """

    stdout: str = ""
    stderr: str = ""
    returncode: Optional[int] = None
    timed_out: bool = False
    spawn_error: Optional[str] = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out and self.spawn_error is None


def _decode(data: Optional[bytes]) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


async def _terminate(process: asyncio.subprocess.Process) -> None:
    try:
        if _POSIX:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        pass
    except PermissionError:
        # macOS refuses killpg on a group whose leader is already a zombie.
        process.kill()
    try:
        await asyncio.wait_for(process.wait(), timeout=REAP_TIMEOUT_S)
    except asyncio.TimeoutError:
        # wait() also waits for the pipes to close, and a descendant that
        # left the group with setsid() can still hold them open.
        logger.warning("Pipes of pid %s still open after kill, closing them", process.pid)
        transport = getattr(process, "_transport", None)
        if transport is not None:
            transport.close()


async def run_process(
    argv: Sequence[str],
    stdin_data: Optional[str] = None,
    timeout_ms: int = 10000,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[str] = None,
) -> ProcessOutcome:
    """Run ``argv`` to completion or until ``timeout_ms`` elapses.

    ``stdin_data`` of ``None`` attaches stdin to the null device; any string,
    including an empty one, is written to a pipe that is then closed.
    """
    # Unencodable text (lone surrogates) is replaced rather than failing after spawn.
    payload = stdin_data.encode("utf-8", errors="replace") if stdin_data is not None else None
    extra = {"start_new_session": True} if _POSIX else {}
    start = time.perf_counter()
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(env) if env is not None else None,
            cwd=cwd,
            **extra,
        )
    except OSError as exc:
        logger.warning("Failed to spawn %s: %s", argv[0], exc)
        return ProcessOutcome(spawn_error=str(exc))

    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(input=payload),
            timeout=timeout_ms / 1000,
        )
    except asyncio.TimeoutError:
        await _terminate(process)
        duration = int((time.perf_counter() - start) * 1000)
        logger.info("Process %s (pid %s) killed after %sms", argv[0], process.pid, duration)
        return ProcessOutcome(returncode=process.returncode, timed_out=True, duration_ms=duration)
    except asyncio.CancelledError:
        await _terminate(process)
        raise

    return ProcessOutcome(
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        returncode=process.returncode,
        duration_ms=int((time.perf_counter() - start) * 1000),
    )
