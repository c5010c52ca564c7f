"""
Schema — Pydantic models for the builder's JSON outputs.

Two files are produced:
  1. build-result.json   — the one authoritative outcome of an invocation,
                           written to the output directory.
  2. AUBBuildInfo.json   — version stamp written into the asset tree and
                           read by the built player at runtime.

Keys are camelCase on disk.  ``error`` only appears on failure and
``outputPath`` only on success.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from aub_builder import STAMPER_VERSION


def now_iso() -> str:
    """Current UTC time as ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BuildResult(_CamelModel):
    """Outcome of one build invocation."""

    success: bool
    target: str
    output_path: Optional[str] = None
    total_size: int = 0
    duration: float = 0.0
    warnings: int = 0
    errors: int = 0
    scenes: List[str] = Field(default_factory=list)
    error: Optional[str] = None
    host_version: str = "unknown"
    timestamp: str = Field(default_factory=now_iso)

    @classmethod
    def succeeded(
        cls,
        *,
        target: str,
        output_path: str,
        total_size: int,
        duration: float,
        warnings: int,
        errors: int,
        scenes: Sequence[str],
        host_version: str,
    ) -> "BuildResult":
        return cls(
            success=True,
            target=target,
            output_path=output_path,
            total_size=total_size,
            duration=round(max(duration, 0.0), 3),
            warnings=warnings,
            errors=errors,
            scenes=list(scenes),
            host_version=host_version,
        )

    @classmethod
    def failed(
        cls,
        *,
        target: str,
        error: str,
        duration: float,
        host_version: str,
        warnings: int = 0,
        errors: int = 0,
        scenes: Sequence[str] = (),
    ) -> "BuildResult":
        return cls(
            success=False,
            target=target or "unknown",
            error=error,
            duration=round(max(duration, 0.0), 3),
            warnings=warnings,
            errors=errors,
            scenes=list(scenes),
            host_version=host_version,
        )


class VersionStamp(_CamelModel):
    """Build identity baked into the player."""

    build_id: str = ""
    commit_hash: str = ""
    branch: str = ""
    build_target: str = ""
    timestamp: str = Field(default_factory=now_iso)
    stamper_version: str = STAMPER_VERSION
