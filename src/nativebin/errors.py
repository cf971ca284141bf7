"""Typed error model with stable, machine-readable error codes and exit codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum

DRIVER_NOT_FOUND_EXIT = 127


class ErrorCode(StrEnum):
    """Stable error identifiers used across the CLI and log records."""

    TOOLING_UNAVAILABLE = "E_TOOLING_UNAVAILABLE"
    BUILD_FAILED = "E_BUILD_FAILED"
    ARTIFACT_CONTRACT = "E_ARTIFACT_CONTRACT"
    INSTALLATION_IO = "E_INSTALLATION_IO"
    VALIDATION_REJECTED = "E_VALIDATION_REJECTED"


class NativeBinError(Exception):
    """Base error class that carries code, exit code, optional hint, and context."""

    code: str
    exit_code: int
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        exit_code: int = 1,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.exit_code = exit_code
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "exit_code": self.exit_code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ToolingUnavailableError(NativeBinError):
    """The build driver could not be started or reported itself missing."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.TOOLING_UNAVAILABLE,
            exit_code=DRIVER_NOT_FOUND_EXIT,
            hint=hint,
            context=context,
        )


class BuildFailedError(NativeBinError):
    """The build driver ran and exited non-zero; its code is propagated."""

    def __init__(
        self,
        message: str,
        *,
        exit_code: int,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.BUILD_FAILED,
            exit_code=exit_code,
            hint=hint,
            context=context,
        )


class ArtifactContractViolationError(NativeBinError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.ARTIFACT_CONTRACT, hint=hint, context=context)


class InstallationIOError(NativeBinError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.INSTALLATION_IO, hint=hint, context=context)


class ValidationRejectedError(NativeBinError):
    """Soft failure: the installed artifact did not pass enough of the suite."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION_REJECTED, hint=hint, context=context)


__all__ = [
    "DRIVER_NOT_FOUND_EXIT",
    "ArtifactContractViolationError",
    "BuildFailedError",
    "ErrorCode",
    "InstallationIOError",
    "NativeBinError",
    "ToolingUnavailableError",
    "ValidationRejectedError",
]
