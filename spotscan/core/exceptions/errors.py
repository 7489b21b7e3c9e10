"""Custom exception definitions for SpotScan."""

from typing import Any


class SpotScanError(Exception):
    """Base exception for all SpotScan errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Error message.
            details: Additional error details.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ConfigurationError(SpotScanError):
    """Exception raised for configuration errors."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error.

        Args:
            message: Error message.
            config_key: Configuration key that caused the error.
            details: Additional error details.
        """
        details = details or {}
        if config_key:
            details["config_key"] = config_key
        super().__init__(message, details)


class DiscoveryError(SpotScanError):
    """Exception raised when the repository tree cannot be walked.

    A partial discovery could silently skip projects, so this error always
    aborts the run.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if path:
            details["path"] = path
        super().__init__(message, details)


class NoCompatibleBuilderError(SpotScanError):
    """Exception raised when a directory has no recognized build file."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Cannot find compatible builder for project path: {path}")
        self.path = path


class SourcePathNotFoundError(SpotScanError):
    """Exception raised when a reported path matches no indexed source file.

    Callers treat this as "the file lives in a dependency archive" and drop
    the result.
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Couldn't find the relative path of file {path}")
        self.path = path


class CommandError(SpotScanError):
    """Exception raised when an external command fails."""

    def __init__(
        self,
        message: str,
        exit_code: int = 1,
        output: str = "",
        command: str | None = None,
    ) -> None:
        """Initialize command error.

        Args:
            message: Error message.
            exit_code: Exit status of the command.
            output: Combined stdout/stderr captured from the command.
            command: The command line that was executed.
        """
        details: dict[str, Any] = {"exit_code": exit_code}
        if command:
            details["command"] = command
        super().__init__(message, details)
        self.exit_code = exit_code
        self.output = output
        self.command = command


class BuildError(CommandError):
    """Exception raised when a project cannot be built."""

    def __init__(
        self,
        message: str,
        project_path: str,
        exit_code: int = 1,
        output: str = "",
        command: str | None = None,
    ) -> None:
        super().__init__(message, exit_code=exit_code, output=output, command=command)
        self.project_path = project_path
        self.details["project_path"] = project_path

    @classmethod
    def from_command_error(cls, error: CommandError, project_path: str) -> "BuildError":
        """Attach a project path to a failed build command."""
        return cls(
            error.message,
            project_path=project_path,
            exit_code=error.exit_code,
            output=error.output,
            command=error.command,
        )


class AnalysisError(SpotScanError):
    """Exception raised when SpotBugs fails or its report can't be used.

    Always fatal: skipping a project would produce false negatives.
    """

    def __init__(
        self,
        message: str,
        project_path: str | None = None,
        output: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if project_path:
            details["project_path"] = project_path
        super().__init__(message, details)
        self.project_path = project_path
        self.output = output
