"""Custom exceptions for toolhost errors.

Tool handlers report failures as structured error responses rather than
raising. The exceptions here cover the few places where raising is the
natural seam: configuration loading and the process runner, whose callers
translate them into error responses.
"""


class ToolHostError(Exception):
    """Base exception for all toolhost errors."""

    pass


class ConfigurationError(ToolHostError):
    """Raised when configuration loading, validation, or registry wiring fails."""

    pass


class ProcessError(ToolHostError):
    """Base class for subprocess execution failures.

    Attributes:
        command: Command line (or argv joined) that was being executed
    """

    def __init__(self, command: str, message: str):
        """Initialize ProcessError.

        Args:
            command: Command line that was being executed
            message: Human-readable failure description
        """
        self.command = command
        super().__init__(message)


class ProcessSpawnError(ProcessError):
    """Raised when a subprocess could not be started (e.g. executable not found).

    Attributes:
        command: Command line that failed to start
        original_error: OSError raised by the spawn call
    """

    def __init__(self, command: str, original_error: OSError):
        """Initialize ProcessSpawnError.

        Args:
            command: Command line that failed to start
            original_error: OSError raised by the spawn call
        """
        self.original_error = original_error
        super().__init__(command, str(original_error))


class ProcessTimeoutError(ProcessError):
    """Raised when a subprocess ran past its timeout and was killed.

    Attributes:
        command: Command line that timed out
        timeout_ms: Timeout that elapsed, in milliseconds
        stdout: Output captured before the kill
        stderr: Error output captured before the kill
    """

    def __init__(self, command: str, timeout_ms: int, stdout: str = "", stderr: str = ""):
        """Initialize ProcessTimeoutError.

        Args:
            command: Command line that timed out
            timeout_ms: Timeout that elapsed, in milliseconds
            stdout: Output captured before the kill
            stderr: Error output captured before the kill
        """
        self.timeout_ms = timeout_ms
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(command, f"Command timed out after {timeout_ms}ms")
