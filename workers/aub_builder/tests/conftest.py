"""
Shared pytest fixtures for aub_builder tests.

Provides an in-memory editor host that records every call (target
switches, define writes, executor invocations), a scripted process
runner standing in for codesign / xcrun / ditto, and environment
isolation for the build variables.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from aub_builder.core.executor import (
    BuildPlayerOptions,
    ExecutorResult,
    ExecutorSummary,
    SceneEntry,
)
from aub_builder.core.process import ProcessOutcome
from aub_builder.policy.profile import TargetGroup

BUILD_VARIABLES = (
    "BUILD_TARGET",
    "OUTPUT_DIR",
    "SERVER_BUILD",
    "DEFINES",
    "BUILD_ID",
    "COMMIT_HASH",
    "BRANCH",
    "BUILD_PROFILE",
    "CODESIGN_IDENTITY",
    "NOTARIZE_PROFILE",
)


class FakeHost:
    """Editor host held entirely in memory."""

    def __init__(
        self,
        project_root: Path,
        *,
        version: str = "2022.3.10f1",
        active: str = "StandaloneWindows64",
        defines: Optional[Dict[TargetGroup, str]] = None,
        scenes: Sequence[SceneEntry] = (SceneEntry("Assets/Scenes/Main.unity"),),
        summary: Optional[ExecutorSummary] = None,
        on_build: Optional[Callable[[BuildPlayerOptions], None]] = None,
    ):
        self.project_root = project_root
        self.version = version
        self.active = active
        self.defines: Dict[TargetGroup, str] = dict(defines or {})
        self.scenes = list(scenes)
        self.summary = summary or ExecutorSummary(result=ExecutorResult.SUCCEEDED)
        self.on_build = on_build

        self.switch_calls: List[Tuple[TargetGroup, str]] = []
        self.define_writes: List[Tuple[TargetGroup, str]] = []
        self.build_calls: List[BuildPlayerOptions] = []
        self.imports: List[Path] = []
        self.refreshes = 0
        self.server_subtarget = False
        self.fail_set_defines_after: Optional[int] = None

    def active_target(self) -> str:
        return self.active

    def switch_active_target(self, group: TargetGroup, target: str) -> None:
        self.switch_calls.append((group, target))
        self.active = target

    def get_defines(self, group: TargetGroup) -> str:
        return self.defines.get(group, "")

    def set_defines(self, group: TargetGroup, symbols: str) -> None:
        if (
            self.fail_set_defines_after is not None
            and len(self.define_writes) >= self.fail_set_defines_after
        ):
            raise RuntimeError("PlayerSettings is read-only")
        self.define_writes.append((group, symbols))
        self.defines[group] = symbols

    def enabled_scenes(self) -> List[SceneEntry]:
        return list(self.scenes)

    def set_server_subtarget(self, enabled: bool) -> None:
        self.server_subtarget = enabled

    def refresh_assets(self) -> None:
        self.refreshes += 1

    def import_asset(self, path: Path) -> None:
        self.imports.append(path)

    def build_player(self, options: BuildPlayerOptions) -> ExecutorSummary:
        self.build_calls.append(options)
        if self.on_build is not None:
            self.on_build(options)
        return self.summary


class FakeRunner:
    """Process runner returning scripted exit codes per (command, first arg)."""

    def __init__(self, exit_codes: Optional[Dict[str, int]] = None):
        self.exit_codes = dict(exit_codes or {})
        self.calls: List[Tuple[str, List[str]]] = []

    def run(self, command: str, args: Sequence[str]) -> ProcessOutcome:
        self.calls.append((command, list(args)))
        key = f"{command} {args[0]}" if command == "xcrun" and args else command
        code = self.exit_codes.get(key, 0)
        return ProcessOutcome(stdout="", stderr="boom" if code else "", exit_code=code)

    def commands(self) -> List[str]:
        return [
            f"{command} {args[0]}" if command == "xcrun" else command
            for command, args in self.calls
        ]


@pytest.fixture
def host(tmp_path: Path) -> FakeHost:
    project = tmp_path / "project"
    project.mkdir()
    return FakeHost(project)


@pytest.fixture
def build_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Clear every build variable, then set the given ones (plain names)."""
    for name in BUILD_VARIABLES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"AUB_{name}", raising=False)

    def _set(**values: str) -> None:
        for name, value in values.items():
            monkeypatch.setenv(name, value)

    return _set
