"""Custom error hierarchy for dev-container."""

from __future__ import annotations


class DevContainerError(RuntimeError):
    """Base error for the CLI."""

    exit_code = 1


class NotInRepositoryError(DevContainerError):
    """Raised when no git repository encloses the working directory."""

    def __init__(self, message: str = "Not in a git repository"):
        super().__init__(message)


class MissingDockerfileError(DevContainerError):
    """Raised when the repository has no environment definition file."""


class ValidationError(DevContainerError):
    """Raised when user input fails validation."""


class WorktreeNotFoundError(DevContainerError):
    """Raised when no branch slot exists for the requested branch."""


class CommandError(DevContainerError):
    """Raised when an external command fails."""

    tool = "command"

    def __init__(self, command: list[str], returncode: int, stderr: str | None = None):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""
        message = f"{self.tool} command failed (exit {returncode}): {' '.join(command)}"
        if self.stderr.strip():
            message = f"{message}\n{self.stderr.strip()}"
        super().__init__(message)


class GitCommandError(CommandError):
    tool = "git"


class ContainerCommandError(CommandError):
    tool = "container"


class UserAbort(DevContainerError):
    """Raised when the user declines a confirmation or cancels a prompt."""

    exit_code = 0

    def __init__(self, message: str = "Aborted."):
        super().__init__(message)


__all__ = [
    "DevContainerError",
    "NotInRepositoryError",
    "MissingDockerfileError",
    "ValidationError",
    "WorktreeNotFoundError",
    "CommandError",
    "GitCommandError",
    "ContainerCommandError",
    "UserAbort",
]
