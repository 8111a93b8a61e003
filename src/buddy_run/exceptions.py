"""Buddy pipeline action exceptions."""

from __future__ import annotations


class BuddyError(Exception):
    """Base exception for the pipeline action."""


class MissingCredentialError(BuddyError):
    """Raised when a required credential environment variable is unset."""

    def __init__(self, env_var: str) -> None:
        self.env_var = env_var
        super().__init__(
            f"{env_var} is not set. "
            "Please use the buddy/login@v1 action before running pipelines."
        )


class MissingInputError(BuddyError):
    """Raised when a required action input is empty."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Input required and not supplied: {name}")


class ValidationError(BuddyError):
    """Raised when an action input fails validation."""

    def __init__(self, field: str, value: str, message: str) -> None:
        self.field = field
        self.value = value
        super().__init__(message)


class InvalidPriorityError(ValidationError):
    def __init__(self, value: str, allowed: list[str]) -> None:
        super().__init__(
            "priority",
            value,
            f'Invalid priority: "{value}". Must be one of: {", ".join(allowed)}',
        )


class InvalidRegionError(ValidationError):
    def __init__(self, value: str, allowed: list[str]) -> None:
        super().__init__(
            "region",
            value,
            f'Invalid region: "{value}". Must be one of: {", ".join(allowed)}',
        )


class InvalidWaitTimeError(ValidationError):
    """Raised when ``wait`` is not a non-negative integer."""

    def __init__(self, value: str, *, negative: bool = False) -> None:
        if negative:
            message = "Wait time cannot be negative"
        else:
            message = f'Invalid wait value: "{value}". Must be a number.'
        super().__init__("wait", value, message)


class InvalidVariableFormatError(ValidationError):
    """Raised when a variable entry is not in ``key:value`` form."""

    def __init__(self, value: str, variable_type: str) -> None:
        self.variable_type = variable_type
        field = "variable-masked" if variable_type == "masked variable" else "variable"
        super().__init__(
            field,
            value,
            f'Invalid {variable_type} format: "{value}". Must be in key:value format.',
        )


class InvalidConfigError(BuddyError):
    """Raised when a configuration environment variable has an unusable value."""

    def __init__(self, env_var: str, value: str, expected: str) -> None:
        self.env_var = env_var
        self.value = value
        super().__init__(f'Invalid {env_var}: "{value}". Must be {expected}.')


class CommandFailedError(BuddyError):
    """Raised when the external tool exits with a non-zero status."""

    def __init__(self, exit_code: int, stderr: str = "", command: list[str] | None = None) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = list(command or [])
        message = stderr
        if not message:
            message = f"Command failed with exit code {exit_code}: {' '.join(self.command)}"
        super().__init__(message)


class InstallError(BuddyError):
    """Raised when the bdy CLI cannot be downloaded or extracted."""

    def __init__(self, message: str, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class UnsupportedPlatformError(InstallError):
    """Raised when no bdy binary is published for the host platform."""

    def __init__(self, message: str, platform: str = "", architecture: str = "") -> None:
        self.platform = platform
        self.architecture = architecture
        super().__init__(message)


def normalize_error(error: BaseException) -> str:
    """Return a printable failure message for *error*."""
    message = str(error).strip()
    if message:
        return message
    return f"An unknown error occurred ({type(error).__name__})"
