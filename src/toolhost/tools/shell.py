"""Bash tool: run a shell command line with a timeout and a denylist screen."""

import logging
import os
from collections.abc import Callable
from typing import Annotated

from pydantic import Field

from toolhost.catalogue import ToolName
from toolhost.config.constants import DEFAULT_TIMEOUT_MS, TERMINAL_TYPE
from toolhost.config.schema import HostSettings
from toolhost.exceptions import ProcessSpawnError, ProcessTimeoutError
from toolhost.policy import is_dangerous_command, truncate_output, validate_timeout
from toolhost.process import ProcessRunner
from toolhost.tools.toolset import HostToolset

logger = logging.getLogger(__name__)


class ShellTools(HostToolset):
    """Shell command execution in the working directory.

    The denylist only blocks a handful of well-known catastrophic command
    lines. It is not a sandbox.
    """

    def __init__(self, settings: HostSettings, runner: ProcessRunner | None = None):
        """Initialize ShellTools.

        Args:
            settings: Host settings with working directory and shell_path
            runner: Process runner (default: new ProcessRunner)
        """
        super().__init__(settings)
        self.runner = runner or ProcessRunner(settings.shell_path)

    def get_tools(self) -> dict[ToolName, Callable]:
        """Get shell tools keyed by tool name."""
        return {ToolName.BASH: self.bash}

    async def bash(
        self,
        command: Annotated[str, Field(description="Full shell command line")],
        description: Annotated[
            str | None, Field(description="Short label prefixed to the output")
        ] = None,
        timeout: Annotated[
            int | None, Field(description="Timeout in milliseconds (max 600000)")
        ] = DEFAULT_TIMEOUT_MS,
    ) -> dict:
        """Run a command through the shell and return its output.

        stdout is returned when non-empty, otherwise stderr. A description is
        prefixed as ``[description] ``. Exit code 0 is success; any other exit
        code is an error carrying the same text.

        Args:
            command: Full shell command line
            description: Optional label for the output
            timeout: Timeout in milliseconds (default 120000, max 600000)

        Returns:
            Success response with the command output, or error response for
            rejected, failed, timed-out or unstartable commands.
        """
        if timeout is None:
            timeout = DEFAULT_TIMEOUT_MS

        if timeout_error := validate_timeout(timeout):
            return self._create_error_response(error="timeout_exceeded", message=timeout_error)

        if is_dangerous_command(command):
            logger.warning(f"Rejected dangerous command: {command}")
            return self._create_error_response(
                error="dangerous_command", message="Dangerous command detected"
            )

        env = dict(os.environ)
        env["TERM"] = TERMINAL_TYPE
        prefix = f"[{description}] " if description else ""

        try:
            result = await self.runner.run_shell(
                command, timeout_ms=timeout, cwd=self.working_directory, env=env
            )
        except ProcessSpawnError as e:
            return self._create_error_response(
                error="process_spawn_failed",
                message=f"Command execution error: {e.original_error}",
            )
        except ProcessTimeoutError as e:
            message = f"Command timed out after {e.timeout_ms}ms"
            partial = e.stdout or e.stderr
            if partial:
                message += f"\n{prefix}{truncate_output(partial)}"
            return self._create_error_response(error="timeout_exceeded", message=message)

        output = truncate_output(result.stdout or result.stderr)
        text = f"{prefix}{output}"

        if result.ok:
            return self._create_success_response(result=text, message="Command succeeded")

        logger.info(f"Command exited with {result.exit_code}: {command}")
        return self._create_error_response(error="non_zero_exit", message=text)
