"""
File-backed editor host for a project directory.

Host state that the builder reads and mutates lives in JSON files under
``ProjectSettings/``:

    ProjectVersion.txt          m_EditorVersion: <host version>
    EditorBuildSettings.json    {"scenes": [{"path": ..., "enabled": ...}]}
    AUBHostState.json           active target, per-group defines, server flag

The player build itself is delegated to an external executor command
(``AUB_EXECUTOR``).  It is called with ``--target --group --output
--scenes [--server] [--build-profile]``; exit code 0 means success and
output lines starting with ``error`` / ``warning`` become diagnostics.
"""
from __future__ import annotations

import json
import logging
import shlex
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from aub_builder.core.executor import (
    BuildPlayerOptions,
    BuildStep,
    ExecutorResult,
    ExecutorSummary,
    MessageType,
    SceneEntry,
    StepMessage,
)
from aub_builder.core.process import ProcessRunner, SubprocessRunner
from aub_builder.policy.profile import TargetGroup

logger = logging.getLogger(__name__)

SETTINGS_DIR = Path("ProjectSettings")
VERSION_FILE = SETTINGS_DIR / "ProjectVersion.txt"
SCENES_FILE = SETTINGS_DIR / "EditorBuildSettings.json"
STATE_FILE = SETTINGS_DIR / "AUBHostState.json"


class HostState(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    active_target: str = ""
    defines: Dict[str, str] = Field(default_factory=dict)
    server_subtarget: bool = False


class ProjectHost:
    """Editor host backed by files in *project_root*."""

    def __init__(
        self,
        project_root: Union[str, Path],
        executor: str = "",
        runner: Optional[ProcessRunner] = None,
    ):
        self.project_root = Path(project_root)
        self.executor = executor
        self.runner = runner or SubprocessRunner()
        self.version = self._read_version()

    # -----------------------------------------------------------------
    # State
    # -----------------------------------------------------------------

    def _read_version(self) -> str:
        path = self.project_root / VERSION_FILE
        if not path.is_file():
            return "unknown"
        for line in path.read_text(encoding="utf-8").splitlines():
            key, _, value = line.partition(":")
            if key.strip() == "m_EditorVersion" and value.strip():
                return value.strip()
        return "unknown"

    def _load_state(self) -> HostState:
        path = self.project_root / STATE_FILE
        if not path.is_file():
            return HostState()
        return HostState.model_validate(json.loads(path.read_text(encoding="utf-8")))

    def _save_state(self, state: HostState) -> None:
        path = self.project_root / STATE_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(state.model_dump(mode="json", by_alias=True), indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )

    def active_target(self) -> str:
        return self._load_state().active_target

    def switch_active_target(self, group: TargetGroup, target: str) -> None:
        state = self._load_state()
        state.active_target = target
        self._save_state(state)

    def get_defines(self, group: TargetGroup) -> str:
        return self._load_state().defines.get(group.value, "")

    def set_defines(self, group: TargetGroup, symbols: str) -> None:
        state = self._load_state()
        state.defines[group.value] = symbols
        self._save_state(state)

    def set_server_subtarget(self, enabled: bool) -> None:
        state = self._load_state()
        state.server_subtarget = enabled
        self._save_state(state)

    def enabled_scenes(self) -> List[SceneEntry]:
        path = self.project_root / SCENES_FILE
        if not path.is_file():
            return []
        data = json.loads(path.read_text(encoding="utf-8"))
        return [
            SceneEntry(path=str(s.get("path", "")), enabled=bool(s.get("enabled", True)))
            for s in data.get("scenes", [])
        ]

    # A plain directory has no import pipeline; files are picked up as-is.
    def refresh_assets(self) -> None:
        logger.debug("Asset refresh requested for %s", self.project_root)

    def import_asset(self, path: Path) -> None:
        logger.debug("Asset import requested: %s", path)

    # -----------------------------------------------------------------
    # Build executor
    # -----------------------------------------------------------------

    def build_player(self, options: BuildPlayerOptions) -> ExecutorSummary:
        if not self.executor.strip():
            return ExecutorSummary(
                result=ExecutorResult.FAILED,
                total_errors=1,
                steps=[BuildStep(
                    name="executor",
                    messages=[StepMessage(
                        MessageType.ERROR,
                        "No build executor configured (set AUB_EXECUTOR).",
                    )],
                )],
            )

        command, *base_args = shlex.split(self.executor)
        args = [
            *base_args,
            "--target", options.target,
            "--group", options.group.value,
            "--output", options.location,
            "--scenes", ";".join(options.scenes),
        ]
        if options.server:
            args.append("--server")
        if options.build_profile:
            args.extend(["--build-profile", options.build_profile])

        outcome = self.runner.run(command, args)
        step = BuildStep(name="executor", messages=_classify(outcome.stdout + "\n" + outcome.stderr))

        result = ExecutorResult.SUCCEEDED if outcome.ok else ExecutorResult.FAILED
        if not outcome.ok and not any(m.type == MessageType.ERROR for m in step.messages):
            step.messages.append(StepMessage(
                MessageType.ERROR,
                f"Executor exited with code {outcome.exit_code}",
            ))

        return ExecutorSummary(
            result=result,
            total_warnings=sum(1 for m in step.messages if m.type == MessageType.WARNING),
            total_errors=sum(1 for m in step.messages if m.type == MessageType.ERROR),
            steps=[step],
        )


def _classify(output: str) -> List[StepMessage]:
    messages: List[StepMessage] = []
    for line in output.splitlines():
        text = line.strip()
        lowered = text.lower()
        if lowered.startswith("error"):
            messages.append(StepMessage(MessageType.ERROR, text))
        elif lowered.startswith("warning"):
            messages.append(StepMessage(MessageType.WARNING, text))
    return messages
