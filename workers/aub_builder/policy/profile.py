"""
Profile — versioned capability table for build targets.

Every supported target lives in one table: canonical name, accepted
aliases, target group, default output name, and feature flags.  Entries
and features may require a minimum host version; ``for_host`` filters
the table down to what a given host can actually build.

Adding a target or gating a feature on a newer host is a table change,
not a code change.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

HostVersion = Tuple[int, ...]

_VERSION_PART = re.compile(r"\d+")


class BuildTarget(str, Enum):
    """Canonical build targets."""

    STANDALONE_WINDOWS64 = "StandaloneWindows64"
    STANDALONE_WINDOWS = "StandaloneWindows"
    STANDALONE_LINUX64 = "StandaloneLinux64"
    STANDALONE_OSX = "StandaloneOSX"
    WEBGL = "WebGL"
    ANDROID = "Android"
    IOS = "iOS"
    SWITCH = "Switch"


class TargetGroup(str, Enum):
    """Target families; defines and switching are scoped per group."""

    STANDALONE = "Standalone"
    WEBGL = "WebGL"
    ANDROID = "Android"
    IOS = "iOS"
    SWITCH = "Switch"
    UNKNOWN = "Unknown"


class Feature(str, Enum):
    SERVER_SUBTARGET = "server_subtarget"
    CODE_SIGNING = "code_signing"


def parse_host_version(raw: str) -> Optional[HostVersion]:
    """``"2022.3.10f1"`` → ``(2022, 3, 10)``; None when nothing numeric leads."""
    parts: list[int] = []
    for chunk in raw.strip().split("."):
        match = _VERSION_PART.match(chunk)
        if match is None:
            break
        parts.append(int(match.group()))
    return tuple(parts) or None


@dataclass(frozen=True)
class TargetEntry:
    """One row of the capability table."""

    target: BuildTarget
    group: TargetGroup
    output_name: str
    aliases: Tuple[str, ...] = ()
    features: FrozenSet[Feature] = frozenset()
    min_host: HostVersion = ()


@dataclass(frozen=True)
class TargetProfile:
    """The capability table plus per-feature host requirements."""

    profile_id: str
    entries: Tuple[TargetEntry, ...]
    feature_min_host: Dict[Feature, HostVersion] = field(default_factory=dict)
    fallback_output_name: str = "build"

    @classmethod
    def v1(cls) -> "TargetProfile":
        """The full target table, unfiltered by host version."""
        standalone_features = frozenset({Feature.SERVER_SUBTARGET})
        return cls(
            profile_id="aub-targets-v1",
            entries=(
                TargetEntry(
                    BuildTarget.STANDALONE_WINDOWS64, TargetGroup.STANDALONE, "game.exe",
                    aliases=("Win64", "windows"),
                    features=standalone_features,
                ),
                TargetEntry(
                    BuildTarget.STANDALONE_WINDOWS, TargetGroup.STANDALONE, "game.exe",
                    aliases=("Win",),
                    features=standalone_features,
                ),
                TargetEntry(
                    BuildTarget.STANDALONE_LINUX64, TargetGroup.STANDALONE, "game.x86_64",
                    aliases=("Linux64", "linux"),
                    features=standalone_features,
                ),
                TargetEntry(
                    BuildTarget.STANDALONE_OSX, TargetGroup.STANDALONE, "game.app",
                    aliases=("OSX", "macos"),
                    features=standalone_features | {Feature.CODE_SIGNING},
                ),
                TargetEntry(
                    BuildTarget.WEBGL, TargetGroup.WEBGL, "webgl",
                    aliases=("webgl",),
                ),
                TargetEntry(
                    BuildTarget.ANDROID, TargetGroup.ANDROID, "game.apk",
                    aliases=("android",),
                ),
                TargetEntry(
                    BuildTarget.IOS, TargetGroup.IOS, "ios-build",
                    aliases=("ios",),
                ),
                TargetEntry(
                    BuildTarget.SWITCH, TargetGroup.SWITCH, "build",
                    aliases=("switch",),
                    min_host=(2021, 2),
                ),
            ),
            feature_min_host={Feature.SERVER_SUBTARGET: (2021, 2)},
        )

    def for_host(self, version: str) -> "TargetProfile":
        """Drop entries and features the host at *version* cannot support.

        An unparseable version keeps the full table.
        """
        parsed = parse_host_version(version)
        if parsed is None:
            return self

        entries = []
        for entry in self.entries:
            if entry.min_host and parsed < entry.min_host:
                continue
            features = frozenset(
                f for f in entry.features
                if parsed >= self.feature_min_host.get(f, ())
            )
            entries.append(TargetEntry(
                entry.target, entry.group, entry.output_name,
                aliases=entry.aliases,
                features=features,
                min_host=entry.min_host,
            ))

        return TargetProfile(
            profile_id=self.profile_id,
            entries=tuple(entries),
            feature_min_host=dict(self.feature_min_host),
            fallback_output_name=self.fallback_output_name,
        )

    def lookup_table(self) -> Dict[str, TargetEntry]:
        """Case-folded identifier → entry, covering canonical names and aliases."""
        table: Dict[str, TargetEntry] = {}
        for entry in self.entries:
            for name in (entry.target.value, *entry.aliases):
                table[name.casefold()] = entry
        return table
