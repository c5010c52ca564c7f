"""
Errors — typed build failures with stable, machine-readable codes.

Fatal errors short-circuit the build before the executor runs; non-fatal
ones (post-processing, cleanup) are logged and never flip the result.
See policy/verdict.py for the fatal/non-fatal classification.
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error identifiers, shared by logs and result files."""

    CONFIGURATION = "E_CONFIGURATION"
    UNKNOWN_TARGET = "E_UNKNOWN_TARGET"
    NO_BUILD_UNITS = "E_NO_BUILD_UNITS"
    EXECUTOR = "E_EXECUTOR"
    POST_PROCESSING = "E_POST_PROCESSING"
    CLEANUP = "E_CLEANUP"


class AubBuildError(Exception):
    """Base error carrying a code, an optional hint and string context."""

    code: ErrorCode
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.hint = hint
        self.context = dict(context or {})

    @property
    def message(self) -> str:
        return self.args[0] if self.args else ""

    def __str__(self) -> str:
        parts = [self.message]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for k, v in self.context.items():
            if v:
                parts.append(f"  {k}: {v}")
        return "\n".join(parts)


class ConfigurationError(AubBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CONFIGURATION, hint=hint, context=context)


class UnknownTargetError(AubBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.UNKNOWN_TARGET, hint=hint, context=context)


class NoBuildUnitsError(AubBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.NO_BUILD_UNITS, hint=hint, context=context)


class ExecutorFailure(AubBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.EXECUTOR, hint=hint, context=context)


class PostProcessingFailure(AubBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.POST_PROCESSING, hint=hint, context=context)


class CleanupFailure(AubBuildError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.CLEANUP, hint=hint, context=context)


__all__ = [
    "AubBuildError",
    "CleanupFailure",
    "ConfigurationError",
    "ErrorCode",
    "ExecutorFailure",
    "NoBuildUnitsError",
    "PostProcessingFailure",
    "UnknownTargetError",
]
