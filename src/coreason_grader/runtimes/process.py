# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_grader

import asyncio
import os
import signal
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from coreason_grader.models import Completed, ProcessOutcome, TimedOut
from coreason_grader.utils.logger import logger

_POSIX = sys.platform != "win32"


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill the process and everything it spawned."""
    try:
        if _POSIX:
            # The child leads its own group, so this reaches grandchildren
            # (e.g. the binary started by `cargo run`).
            os.killpg(proc.pid, signal.SIGKILL)
        else:
            proc.kill()  # pragma: no cover
    except ProcessLookupError:
        pass


async def run_process(command: Sequence[str], cwd: Path, timeout_ms: int) -> ProcessOutcome:
    """Run a command with a hard wall-clock budget.

    stdin is wired to the null device so the program can never block on
    interactive input.

    Args:
        command: Executable and arguments. Never passed through a shell.
        cwd: Working directory for the process.
        timeout_ms: Budget in milliseconds.

    Returns:
        ProcessOutcome: ``Completed`` with both streams drained, or
        ``TimedOut`` once the process has been killed and reaped.

    Raises:
        OSError: If the process cannot be spawned (e.g. executable not found).
    """
    start_time = time.monotonic()
    proc = await asyncio.create_subprocess_exec(
        *command,
        cwd=str(cwd),
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        start_new_session=_POSIX,
    )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_ms / 1000)
    except asyncio.TimeoutError:
        logger.warning(f"{command[0]} exceeded {timeout_ms}ms (pid {proc.pid}). Killing.")
        _kill(proc)
        await proc.wait()
        return TimedOut(timeout_ms=timeout_ms)
    except asyncio.CancelledError:
        _kill(proc)
        await proc.wait()
        raise

    duration = time.monotonic() - start_time
    exit_code = proc.returncode if proc.returncode is not None else -1
    logger.debug(f"{' '.join(command[:2])} exited with {exit_code} in {duration:.3f}s")
    return Completed(stdout=_decode(stdout), stderr=_decode(stderr), exit_code=exit_code)
