"""
Target resolution — identifier string → canonical platform descriptor.

Lookup is case-insensitive and accepts every alias in the capability
table, so ``"windows"``, ``"Win64"`` and ``"StandaloneWindows64"`` all
resolve to the same descriptor.  An unknown identifier is reported as
``found=False``; callers treat that as a fatal configuration error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Optional, Tuple, Union

from aub_builder.policy.profile import BuildTarget, Feature, TargetGroup, TargetProfile

if TYPE_CHECKING:
    from aub_builder.host.base import EditorHost

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = TargetProfile.v1()


@dataclass(frozen=True)
class PlatformDescriptor:
    """Canonical target, its family, default artifact name and features."""

    target: Union[BuildTarget, str]
    group: TargetGroup
    output_name: str
    features: FrozenSet[Feature] = frozenset()

    @property
    def label(self) -> str:
        return self.target.value if isinstance(self.target, BuildTarget) else str(self.target)

    def supports(self, feature: Feature) -> bool:
        return feature in self.features


def resolve(
    identifier: str,
    profile: TargetProfile | None = None,
) -> Tuple[Optional[PlatformDescriptor], bool]:
    """Resolve *identifier* against *profile*; returns ``(descriptor, found)``."""
    profile = profile or DEFAULT_PROFILE
    entry = profile.lookup_table().get(identifier.strip().casefold())
    if entry is None:
        return None, False
    return (
        PlatformDescriptor(
            target=entry.target,
            group=entry.group,
            output_name=entry.output_name,
            features=entry.features,
        ),
        True,
    )


def target_group_of(descriptor: PlatformDescriptor) -> TargetGroup:
    """Family of *descriptor*'s target; UNKNOWN for targets outside the table."""
    for entry in DEFAULT_PROFILE.entries:
        if entry.target == descriptor.target:
            return entry.group
    return TargetGroup.UNKNOWN


def default_output_name(descriptor: PlatformDescriptor) -> str:
    """File or directory name the build is written to inside the output dir."""
    for entry in DEFAULT_PROFILE.entries:
        if entry.target == descriptor.target:
            return entry.output_name
    return DEFAULT_PROFILE.fallback_output_name


def switch_if_needed(host: "EditorHost", descriptor: PlatformDescriptor) -> bool:
    """Make *descriptor* the host's active target.

    Returns False without touching the host when it is already active.
    Switching may block for a long time while the host reimports assets.
    """
    current = host.active_target()
    if current == descriptor.label:
        return False

    group = target_group_of(descriptor)
    logger.info(
        "Switching build target: %s -> %s (group: %s)",
        current or "<none>", descriptor.label, group.value,
    )
    host.switch_active_target(group, descriptor.label)
    return True
