"""
Define injection — temporarily add scripting symbols for one build.

The host's per-group symbol string is persistent project state, so any
mutation must be undone.  ``inject`` captures the exact prior string in
a ``DefineSnapshot`` and returns it; ``restore`` writes it back and
invalidates it.  ``scoped`` pairs the two so that restoration runs on
every exit path, including a failing injection.

Only the first injection per group is authoritative: injecting again
before restoring merges into the host but keeps the first snapshot.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Sequence

from aub_builder.config import DEFINES_SEPARATOR, parse_defines
from aub_builder.errors import CleanupFailure
from aub_builder.policy.profile import TargetGroup

if TYPE_CHECKING:
    from aub_builder.host.base import EditorHost

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DefineSnapshot:
    """Prior symbol string of one group; valid until restored once."""

    group: TargetGroup
    symbols: str
    live: bool = field(default=True)


def merge_defines(existing: str, additional: Sequence[str]) -> str:
    """Union of *existing* and *additional*: trimmed, de-duplicated, order kept."""
    merged = parse_defines(existing)
    extra = parse_defines(DEFINES_SEPARATOR.join(additional))
    return DEFINES_SEPARATOR.join(merged + tuple(s for s in extra if s not in merged))


class DefineInjector:
    """Owns the define snapshots of a single build invocation."""

    def __init__(self, host: "EditorHost"):
        self.host = host
        self._snapshots: Dict[TargetGroup, DefineSnapshot] = {}

    def inject(
        self,
        group: TargetGroup,
        defines: Sequence[str],
    ) -> Optional[DefineSnapshot]:
        """Merge *defines* into *group*'s symbols. No-op (None) when empty."""
        if not defines:
            return None

        snapshot = self._snapshots.get(group)
        if snapshot is None:
            snapshot = DefineSnapshot(group=group, symbols=self.host.get_defines(group))
            self._snapshots[group] = snapshot

        current = self.host.get_defines(group)
        existing = parse_defines(current)
        merged = merge_defines(current, defines)
        self.host.set_defines(group, merged)

        added = [d for d in parse_defines(DEFINES_SEPARATOR.join(defines)) if d not in existing]
        if added:
            logger.info("Injected scripting defines: %s", ", ".join(added))
        return snapshot

    def restore(self, snapshot: Optional[DefineSnapshot] = None) -> None:
        """Write back *snapshot*, or every live snapshot when None.

        Restoring an already-restored snapshot does nothing.  A host
        failure is logged and leaves the snapshot live; it never raises.
        """
        if snapshot is None:
            targets = list(self._snapshots.values())
        else:
            targets = [snapshot]

        for snap in targets:
            if not snap.live:
                continue
            try:
                self.host.set_defines(snap.group, snap.symbols)
            except Exception as e:
                failure = CleanupFailure(
                    "Failed to restore scripting defines.",
                    context={"group": snap.group.value, "reason": str(e)},
                )
                logger.error("%s", failure, exc_info=True)
                continue
            snap.live = False
            if self._snapshots.get(snap.group) is snap:
                del self._snapshots[snap.group]
            logger.info("Restored original scripting defines (group: %s).", snap.group.value)

    @contextmanager
    def scoped(
        self,
        group: TargetGroup,
        defines: Sequence[str],
    ) -> Iterator[Optional[DefineSnapshot]]:
        """Inject for the duration of the block; always restore on exit."""
        try:
            yield self.inject(group, defines)
        finally:
            self.restore()
