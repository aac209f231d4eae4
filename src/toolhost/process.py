"""Subprocess execution with timeout, output capture, and kill-on-timeout.

Used by the Bash and Grep handlers. Both output streams are read concurrently
while the process runs, so a chatty child cannot block on a full pipe, and
both are always drained before a result (or a timeout error) is reported.
"""

import asyncio
import logging
import os
import signal
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from toolhost.exceptions import ProcessSpawnError, ProcessTimeoutError

logger = logging.getLogger(__name__)

# Seconds to wait for pipes to close after the child has exited or been killed
DRAIN_TIMEOUT = 5.0


@dataclass(frozen=True)
class ProcessResult:
    """Captured outcome of a finished subprocess."""

    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Run commands as subprocesses with a hard timeout.

    Example:
        >>> runner = ProcessRunner()
        >>> result = await runner.run_shell("echo hi", timeout_ms=5000, cwd=Path("."))
        >>> result.stdout
        'hi\\n'
    """

    def __init__(self, shell_path: str | None = None):
        """Initialize ProcessRunner.

        Args:
            shell_path: Shell executable for run_shell (None = /bin/sh via asyncio)
        """
        self.shell_path = shell_path

    async def run_exec(
        self,
        argv: Sequence[str],
        *,
        timeout_ms: int,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Run an executable with an explicit argument vector (no shell).

        Raises:
            ProcessSpawnError: If the executable could not be started
            ProcessTimeoutError: If the process outlived timeout_ms and was killed
        """
        display = " ".join(argv)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(cwd),
                env=dict(env) if env is not None else None,
                start_new_session=os.name != "nt",
            )
        except OSError as e:
            logger.warning(f"Failed to spawn {argv[0]}: {e}")
            raise ProcessSpawnError(display, e) from e

        return await self._communicate(proc, display, timeout_ms)

    async def run_shell(
        self,
        command: str,
        *,
        timeout_ms: int,
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """Run a full command line through a shell.

        Raises:
            ProcessSpawnError: If the shell could not be started
            ProcessTimeoutError: If the process outlived timeout_ms and was killed
        """
        try:
            if self.shell_path:
                proc = await asyncio.create_subprocess_exec(
                    self.shell_path,
                    "-c",
                    command,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=str(cwd),
                    env=dict(env) if env is not None else None,
                    start_new_session=os.name != "nt",
                )
            else:
                proc = await asyncio.create_subprocess_shell(
                    command,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    cwd=str(cwd),
                    env=dict(env) if env is not None else None,
                    start_new_session=os.name != "nt",
                )
        except OSError as e:
            logger.warning(f"Failed to spawn shell for command: {e}")
            raise ProcessSpawnError(command, e) from e

        return await self._communicate(proc, command, timeout_ms)

    async def _communicate(
        self, proc: asyncio.subprocess.Process, display: str, timeout_ms: int
    ) -> ProcessResult:
        """Wait for proc, killing it on timeout, and collect both streams."""
        stdout_task = asyncio.ensure_future(proc.stdout.read())
        stderr_task = asyncio.ensure_future(proc.stderr.read())

        timed_out = False
        try:
            await asyncio.wait_for(proc.wait(), timeout=timeout_ms / 1000)
        except TimeoutError:
            timed_out = True
            logger.warning(f"Process {proc.pid} exceeded {timeout_ms}ms, killing: {display}")
            self._kill(proc)
            await proc.wait()

        stdout_bytes, stderr_bytes = await self._drain(stdout_task, stderr_task)
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = stderr_bytes.decode("utf-8", errors="replace")

        if timed_out:
            raise ProcessTimeoutError(display, timeout_ms, stdout=stdout, stderr=stderr)

        logger.debug(f"Process {proc.pid} exited with {proc.returncode}: {display}")
        return ProcessResult(stdout=stdout, stderr=stderr, exit_code=proc.returncode)

    @staticmethod
    def _kill(proc: asyncio.subprocess.Process) -> None:
        """Kill proc and, on POSIX, every process in its session."""
        try:
            if os.name != "nt":
                os.killpg(proc.pid, signal.SIGKILL)
            else:
                proc.kill()
        except ProcessLookupError:
            pass

    @staticmethod
    async def _drain(
        stdout_task: asyncio.Future, stderr_task: asyncio.Future
    ) -> tuple[bytes, bytes]:
        """Collect both stream readers, giving up after DRAIN_TIMEOUT."""
        done, pending = await asyncio.wait({stdout_task, stderr_task}, timeout=DRAIN_TIMEOUT)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning("Output streams did not close after process exit; output may be partial")

        stdout = stdout_task.result() if stdout_task in done else b""
        stderr = stderr_task.result() if stderr_task in done else b""
        return stdout, stderr
