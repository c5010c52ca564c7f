"""
Configuration — build request read from environment variables.

The runner process sets one variable per knob before launching the
build.  Every variable is accepted both plain (``BUILD_TARGET``) and
with the runner prefix (``AUB_BUILD_TARGET``); the prefixed form wins.

``load()`` never raises: a missing required variable yields a
configuration flagged invalid, and the caller must check ``is_valid``
before doing anything else.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFINES_SEPARATOR = ";"


def _env(name: str):
    return Field("", validation_alias=AliasChoices(f"AUB_{name}", name))


class BuildEnvironment(BaseSettings):
    """Raw string view of the build environment variables."""

    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    BUILD_TARGET: str = _env("BUILD_TARGET")
    OUTPUT_DIR: str = _env("OUTPUT_DIR")
    SERVER_BUILD: str = _env("SERVER_BUILD")
    DEFINES: str = _env("DEFINES")
    BUILD_ID: str = _env("BUILD_ID")
    COMMIT_HASH: str = _env("COMMIT_HASH")
    BRANCH: str = _env("BRANCH")
    BUILD_PROFILE: str = _env("BUILD_PROFILE")
    CODESIGN_IDENTITY: str = _env("CODESIGN_IDENTITY")
    NOTARIZE_PROFILE: str = _env("NOTARIZE_PROFILE")


class BuilderSettings(BaseSettings):
    """Host-side settings for the CLI (project location, executor, logging)."""

    model_config = SettingsConfigDict(
        env_prefix="AUB_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_ROOT: str = "."
    EXECUTOR: str = ""
    LOG_LEVEL: str = "INFO"

    @property
    def project_path(self) -> Path:
        return Path(self.PROJECT_ROOT).resolve()


@dataclass(frozen=True)
class BuildConfiguration:
    """Validated, immutable build request for one invocation."""

    build_target: str = ""
    output_dir: str = ""
    server_build: bool = False
    defines: Tuple[str, ...] = ()
    build_id: str = ""
    commit_hash: str = ""
    branch: str = ""
    build_profile: str = ""
    codesign_identity: str = ""
    notarize_profile: str = ""
    is_valid: bool = False
    error: str = ""

    @property
    def wants_stamp(self) -> bool:
        return bool(self.build_id or self.commit_hash)

    def describe(self) -> str:
        return (
            f"BuildConfiguration(target={self.build_target}, output={self.output_dir}, "
            f"server={self.server_build}, defines={DEFINES_SEPARATOR.join(self.defines)}, "
            f"buildId={self.build_id}, commit={self.commit_hash})"
        )


def parse_defines(raw: str) -> Tuple[str, ...]:
    """Split a ``;``-separated symbol list: trimmed, non-empty, first-seen order."""
    seen: dict[str, None] = {}
    for part in raw.split(DEFINES_SEPARATOR):
        symbol = part.strip()
        if symbol:
            seen.setdefault(symbol, None)
    return tuple(seen)


def load() -> BuildConfiguration:
    """Read the build configuration from the process environment."""
    env = BuildEnvironment()

    values = dict(
        build_target=env.BUILD_TARGET.strip(),
        output_dir=env.OUTPUT_DIR.strip(),
        server_build=env.SERVER_BUILD == "true",
        defines=parse_defines(env.DEFINES),
        build_id=env.BUILD_ID,
        commit_hash=env.COMMIT_HASH,
        branch=env.BRANCH,
        build_profile=env.BUILD_PROFILE,
        codesign_identity=env.CODESIGN_IDENTITY,
        notarize_profile=env.NOTARIZE_PROFILE,
    )

    for required in ("BUILD_TARGET", "OUTPUT_DIR"):
        if not values[required.lower()]:
            return BuildConfiguration(
                **values,
                is_valid=False,
                error=f"{required} environment variable is required but not set.",
            )

    return BuildConfiguration(**values, is_valid=True)
