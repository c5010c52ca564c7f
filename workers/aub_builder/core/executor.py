"""
Build executor adapter — invoke the host's player build, normalize its summary.

The executor itself is opaque: it takes a set of content units and an
output location and hands back a summary (result code, size, counts and
per-step diagnostics).  This module owns the request/summary shapes and
the small amount of interpretation the orchestrator needs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

from aub_builder.errors import NoBuildUnitsError
from aub_builder.policy.profile import TargetGroup

if TYPE_CHECKING:
    from aub_builder.host.base import EditorHost

logger = logging.getLogger(__name__)


class ExecutorResult(str, Enum):
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    UNKNOWN = "Unknown"


class MessageType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class SceneEntry:
    """One content unit as declared in the host's build settings."""

    path: str
    enabled: bool = True


@dataclass(frozen=True)
class StepMessage:
    type: MessageType
    content: str


@dataclass
class BuildStep:
    name: str
    messages: List[StepMessage] = field(default_factory=list)


@dataclass
class ExecutorSummary:
    """What the executor reports back after a build."""

    result: ExecutorResult
    total_size: int = 0
    total_warnings: int = 0
    total_errors: int = 0
    steps: List[BuildStep] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.result == ExecutorResult.SUCCEEDED

    def error_messages(self) -> List[str]:
        """Error-level diagnostics across all steps, in step order."""
        return [
            msg.content
            for step in self.steps
            for msg in step.messages
            if msg.type == MessageType.ERROR
        ]


@dataclass(frozen=True)
class BuildPlayerOptions:
    """Everything the executor needs for one player build."""

    scenes: Tuple[str, ...]
    location: str
    target: str
    group: TargetGroup
    server: bool = False
    build_profile: Optional[str] = None


def collect_scenes(host: "EditorHost") -> Tuple[str, ...]:
    """Enabled scenes with a non-empty path, in build-settings order.

    Raises NoBuildUnitsError when nothing is left; the executor must not
    be invoked with an empty scene list.
    """
    scenes = tuple(
        entry.path
        for entry in host.enabled_scenes()
        if entry.enabled and entry.path.strip()
    )
    if not scenes:
        raise NoBuildUnitsError(
            "No scenes found in Build Settings. Add at least one scene.",
            hint="Enable at least one scene in the project's build settings.",
            context={"project": str(host.project_root)},
        )
    return scenes


def execute(host: "EditorHost", options: BuildPlayerOptions) -> ExecutorSummary:
    """Run the host's build executor and normalize what it returns.

    Blocks until the executor finishes.  Negative sizes or counts from
    the executor are clamped to zero.
    """
    logger.info(
        "Building %d scene(s) for %s -> %s",
        len(options.scenes), options.target, options.location,
    )
    summary = host.build_player(options)
    return ExecutorSummary(
        result=summary.result,
        total_size=max(summary.total_size, 0),
        total_warnings=max(summary.total_warnings, 0),
        total_errors=max(summary.total_errors, 0),
        steps=list(summary.steps),
    )
