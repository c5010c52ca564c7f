"""
test_config — environment → BuildConfiguration.

Tests verify:
  - Missing BUILD_TARGET / OUTPUT_DIR → invalid config naming the variable.
  - Optional variables default to empty / false, never None.
  - DEFINES parsing trims, drops empties and de-duplicates in order.
  - The AUB_-prefixed spelling is accepted and wins over the plain one.
"""
import dataclasses

import pytest

from aub_builder.config import BuildConfiguration, load, parse_defines


class TestRequiredVariables:

    def test_missing_target_is_invalid(self, build_env):
        build_env(OUTPUT_DIR="/tmp/out")
        config = load()

        assert config.is_valid is False
        assert "BUILD_TARGET" in config.error

    def test_missing_output_dir_is_invalid(self, build_env):
        build_env(BUILD_TARGET="Win64")
        config = load()

        assert config.is_valid is False
        assert "OUTPUT_DIR" in config.error
        assert "BUILD_TARGET" not in config.error

    def test_empty_string_counts_as_missing(self, build_env):
        build_env(BUILD_TARGET="", OUTPUT_DIR="/tmp/out")
        config = load()

        assert config.is_valid is False
        assert "BUILD_TARGET" in config.error

    def test_both_present_is_valid(self, build_env):
        build_env(BUILD_TARGET="Win64", OUTPUT_DIR="/tmp/out")
        config = load()

        assert config.is_valid is True
        assert config.error == ""
        assert config.build_target == "Win64"
        assert config.output_dir == "/tmp/out"


class TestOptionalVariables:

    def test_defaults_are_empty_not_none(self, build_env):
        build_env(BUILD_TARGET="Linux64", OUTPUT_DIR="/tmp/out")
        config = load()

        assert config.server_build is False
        assert config.defines == ()
        for name in (
            "build_id", "commit_hash", "branch", "build_profile",
            "codesign_identity", "notarize_profile",
        ):
            assert getattr(config, name) == ""

    def test_all_optional_values_read(self, build_env):
        build_env(
            BUILD_TARGET="OSX",
            OUTPUT_DIR="/tmp/out",
            SERVER_BUILD="true",
            DEFINES="STEAM;DEBUG_MODE",
            BUILD_ID="42",
            COMMIT_HASH="abc123",
            BRANCH="main",
            BUILD_PROFILE="Assets/Profiles/Release.asset",
            CODESIGN_IDENTITY="Developer ID Application: Example",
            NOTARIZE_PROFILE="notary",
        )
        config = load()

        assert config.is_valid is True
        assert config.server_build is True
        assert config.defines == ("STEAM", "DEBUG_MODE")
        assert config.build_id == "42"
        assert config.commit_hash == "abc123"
        assert config.branch == "main"
        assert config.build_profile == "Assets/Profiles/Release.asset"
        assert config.codesign_identity == "Developer ID Application: Example"
        assert config.notarize_profile == "notary"

    @pytest.mark.parametrize("raw", ["TRUE", "1", "yes", "false", ""])
    def test_server_build_requires_literal_true(self, build_env, raw):
        build_env(BUILD_TARGET="Linux64", OUTPUT_DIR="/tmp/out", SERVER_BUILD=raw)
        assert load().server_build is False

    def test_prefixed_variable_wins(self, build_env, monkeypatch):
        build_env(BUILD_TARGET="Win64", OUTPUT_DIR="/tmp/out")
        monkeypatch.setenv("AUB_BUILD_TARGET", "Linux64")

        assert load().build_target == "Linux64"

    def test_prefixed_only(self, build_env, monkeypatch):
        monkeypatch.setenv("AUB_BUILD_TARGET", "WebGL")
        monkeypatch.setenv("AUB_OUTPUT_DIR", "/tmp/web")
        config = load()

        assert config.is_valid is True
        assert config.build_target == "WebGL"


class TestParseDefines:

    def test_trims_and_drops_empties(self):
        assert parse_defines(" A ; ;B;; C ") == ("A", "B", "C")

    def test_deduplicates_keeping_first_order(self):
        assert parse_defines("B;A;B;C;A") == ("B", "A", "C")

    def test_empty(self):
        assert parse_defines("") == ()


class TestBuildConfiguration:

    def test_is_immutable(self):
        config = BuildConfiguration(build_target="Win64", output_dir="/o", is_valid=True)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.build_target = "Linux64"  # type: ignore[misc]

    def test_wants_stamp(self):
        assert BuildConfiguration().wants_stamp is False
        assert BuildConfiguration(build_id="7").wants_stamp is True
        assert BuildConfiguration(commit_hash="abc").wants_stamp is True
        assert BuildConfiguration(branch="main").wants_stamp is False

    def test_describe_mentions_target_and_defines(self):
        config = BuildConfiguration(
            build_target="Win64", output_dir="/o", defines=("A", "B"), is_valid=True,
        )
        line = config.describe()
        assert "target=Win64" in line
        assert "defines=A;B" in line
