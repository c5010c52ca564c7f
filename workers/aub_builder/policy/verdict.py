"""
Verdict — build outcome classification and exit codes.

Every invocation ends in exactly one of two terminal states.  Error
codes are split into fatal (the build result is a failure) and
non-fatal (logged, the result stands).
"""
from __future__ import annotations

from enum import Enum

from aub_builder.errors import ErrorCode


class BuildOutcome(str, Enum):
    """Terminal state of one build invocation."""

    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


EXIT_SUCCESS = 0
EXIT_FAILURE = 1

FATAL_CODES = frozenset({
    ErrorCode.CONFIGURATION,
    ErrorCode.UNKNOWN_TARGET,
    ErrorCode.NO_BUILD_UNITS,
    ErrorCode.EXECUTOR,
})


def is_fatal(code: ErrorCode) -> bool:
    """True if an error with *code* must turn the build into a failure."""
    return code in FATAL_CODES


def exit_code_for(outcome: BuildOutcome) -> int:
    """0 on success, 1 on any validation, resolution or build failure."""
    return EXIT_SUCCESS if outcome == BuildOutcome.SUCCEEDED else EXIT_FAILURE
