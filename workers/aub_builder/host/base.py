"""Protocol for the editor host the builder drives."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from aub_builder.core.executor import BuildPlayerOptions, ExecutorSummary, SceneEntry
from aub_builder.policy.profile import TargetGroup


class EditorHost(Protocol):
    version: str
    project_root: Path

    def active_target(self) -> str:
        """Canonical name of the currently active build target."""

    def switch_active_target(self, group: TargetGroup, target: str) -> None:
        """Make *target* active; may block while assets reimport."""

    def get_defines(self, group: TargetGroup) -> str:
        """Serialized (``;``-joined) scripting symbols for *group*."""

    def set_defines(self, group: TargetGroup, symbols: str) -> None:
        """Persist *symbols* as the scripting symbols for *group*."""

    def enabled_scenes(self) -> Sequence[SceneEntry]:
        """Content units declared in build settings, in order."""

    def set_server_subtarget(self, enabled: bool) -> None:
        """Toggle the dedicated-server standalone subtarget."""

    def refresh_assets(self) -> None:
        """Rescan the asset tree after files were created outside the host."""

    def import_asset(self, path: Path) -> None:
        """Import a single file written into the asset tree."""

    def build_player(self, options: BuildPlayerOptions) -> ExecutorSummary:
        """Run the opaque build executor."""
