"""
test_errors — error codes, rendering and fatal/non-fatal classification.
"""
import pytest

from aub_builder.errors import (
    AubBuildError,
    CleanupFailure,
    ConfigurationError,
    ErrorCode,
    ExecutorFailure,
    NoBuildUnitsError,
    PostProcessingFailure,
    UnknownTargetError,
)
from aub_builder.policy.verdict import (
    EXIT_FAILURE,
    EXIT_SUCCESS,
    BuildOutcome,
    exit_code_for,
    is_fatal,
)


class TestErrorCodes:

    @pytest.mark.parametrize("cls,code", [
        (ConfigurationError, "E_CONFIGURATION"),
        (UnknownTargetError, "E_UNKNOWN_TARGET"),
        (NoBuildUnitsError, "E_NO_BUILD_UNITS"),
        (ExecutorFailure, "E_EXECUTOR"),
        (PostProcessingFailure, "E_POST_PROCESSING"),
        (CleanupFailure, "E_CLEANUP"),
    ])
    def test_stable_codes(self, cls, code):
        err = cls("boom")
        assert isinstance(err, AubBuildError)
        assert err.code.value == code

    def test_str_includes_hint_and_context(self):
        err = NoBuildUnitsError(
            "No scenes.",
            hint="Enable a scene.",
            context={"project": "/p", "empty": ""},
        )
        text = str(err)
        assert text.startswith("No scenes.")
        assert "Hint: Enable a scene." in text
        assert "project: /p" in text
        assert "empty" not in text

    def test_message_excludes_hint_and_context(self):
        err = ExecutorFailure("Build failed", hint="Check the log.", context={"target": "WebGL"})
        assert err.message == "Build failed"
        assert err.context == {"target": "WebGL"}


class TestVerdict:

    @pytest.mark.parametrize("code", [
        ErrorCode.CONFIGURATION,
        ErrorCode.UNKNOWN_TARGET,
        ErrorCode.NO_BUILD_UNITS,
        ErrorCode.EXECUTOR,
    ])
    def test_fatal(self, code):
        assert is_fatal(code) is True

    @pytest.mark.parametrize("code", [ErrorCode.POST_PROCESSING, ErrorCode.CLEANUP])
    def test_non_fatal(self, code):
        assert is_fatal(code) is False

    def test_exit_codes(self):
        assert exit_code_for(BuildOutcome.SUCCEEDED) == EXIT_SUCCESS == 0
        assert exit_code_for(BuildOutcome.FAILED) == EXIT_FAILURE == 1
