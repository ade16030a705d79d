"""Error hierarchy for sshgrant."""

from __future__ import annotations

from typing import Any

__all__ = [
    "SshGrantError",
    "ValidationError",
    "ConfigNotFoundError",
    "ConfigError",
    "RequestFileError",
    "UnsupportedOperationError",
    "ErrorCodes",
]


class SshGrantError(Exception):
    """Base error for all sshgrant errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(SshGrantError):
    """Raised when an access request is not valid."""

    def __init__(
        self,
        message: str = "Invalid access request",
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            code="REQUEST_VALIDATION_ERROR",
            message=message,
            details={"errors": errors or []},
            **kwargs,
        )

    @property
    def errors(self) -> list[dict[str, Any]]:
        """Individual field errors, if any."""
        return self.details["errors"]


class ConfigNotFoundError(SshGrantError):
    """Raised when a configuration or request file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(SshGrantError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class RequestFileError(SshGrantError):
    """Raised when a request file has parse errors or a bad structure."""

    def __init__(self, *, file_path: str, reason: str, **kwargs: Any) -> None:
        super().__init__(
            code="REQUEST_FILE_INVALID",
            message=f"Invalid request file '{file_path}': {reason}",
            details={"file_path": file_path, "reason": reason},
            **kwargs,
        )


class UnsupportedOperationError(SshGrantError):
    """Raised when an applier receives an operation it cannot dispatch."""

    def __init__(self, operation: Any, **kwargs: Any) -> None:
        super().__init__(
            code="UNSUPPORTED_OPERATION",
            message=f"No collaborator for operation {type(operation).__name__}",
            details={"operation": type(operation).__name__},
            **kwargs,
        )


class ErrorCodes:
    """All sshgrant error codes as constants.

    Example:
        if error.code == ErrorCodes.REQUEST_VALIDATION_ERROR:
            reject_request()
    """

    REQUEST_VALIDATION_ERROR = "REQUEST_VALIDATION_ERROR"
    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    REQUEST_FILE_INVALID = "REQUEST_FILE_INVALID"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
