"""Custom exception hierarchy for flowcheck.

Content expectations that are not met raise the builtin ``AssertionError``
so pytest reports them as ordinary test failures. Everything else that can
go wrong while talking to the ``gh`` tool or loading configuration is one of
the errors below.

Exception Hierarchy:
    FlowcheckError (base)
    ├── ConfigurationError
    ├── ExternalToolError
    ├── MalformedResponseError
    └── PollTimeoutError

Example Usage:
    >>> from flowcheck.exceptions import ExternalToolError
    >>> try:
    ...     cli.run(["issue", "close", "42", "--repo", "owner/repo"])
    ... except ExternalToolError as e:
    ...     log.error("close_failed", returncode=e.returncode, stderr=e.stderr)
"""

from collections.abc import Sequence


class FlowcheckError(Exception):
    """Base exception for all flowcheck errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(FlowcheckError):
    """Configuration-related errors.

    Raised when configuration files are invalid, missing, or reference
    environment variables that are not set.
    """

    pass


class ExternalToolError(FlowcheckError):
    """An external command exited non-zero or could not be run.

    Attributes:
        command: The full argument vector that was executed
        returncode: Process exit code, or None if the process never completed
            (executable missing, timeout)
        stdout: Captured standard output
        stderr: Captured standard error
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            command: Argument vector of the failed command
            returncode: Exit code of the failed command
            stdout: Captured standard output
            stderr: Captured standard error
        """
        self.command = list(command) if command else []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        parts = [message]
        if self.command:
            parts.append(f"command: {' '.join(self.command)}")
        if returncode is not None:
            parts.append(f"exit code: {returncode}")

        full_message = message if len(parts) == 1 else f"{message} ({', '.join(parts[1:])})"
        if stderr.strip():
            full_message = f"{full_message}\n{stderr.strip()}"

        super().__init__(full_message)
        # Preserve original message
        self.message = message


class MalformedResponseError(FlowcheckError):
    """A payload returned by the external tool is missing a required field.

    Attributes:
        record: Name of the record being built (e.g. "RunRef")
        field: The missing or invalid field, if known
    """

    def __init__(
        self,
        message: str,
        record: str | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            record: Record type being parsed
            field: Field that was absent or invalid
        """
        self.record = record
        self.field = field

        full_message = message
        if record and field:
            full_message = f"{message} ({record}.{field})"
        elif record:
            full_message = f"{message} ({record})"

        super().__init__(full_message)
        self.message = message


class PollTimeoutError(FlowcheckError):
    """A bounded wait reached its deadline without the condition holding.

    Attributes:
        operation: Name of the operation that was awaited
        timeout_seconds: The timeout that was exceeded
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize exception.

        Args:
            message: Error message
            operation: Name of the awaited operation
            timeout_seconds: The timeout that was exceeded
        """
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        if timeout_seconds is not None and not any(word in message.lower() for word in ("timeout", "timed out")):
            message = f"{message} (timeout: {timeout_seconds}s)"
        super().__init__(message)
