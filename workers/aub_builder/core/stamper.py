"""
Version stamping — write build identity into the project's asset tree.

The stamp lands in ``Assets/Resources/AUBBuildInfo.json`` so the built
player can load it at runtime.  Writing the file is not enough on its
own: the host must be told to import it before the build starts.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from aub_builder.io.schema import VersionStamp
from aub_builder.io.writer import write_stamp

if TYPE_CHECKING:
    from aub_builder.config import BuildConfiguration
    from aub_builder.host.base import EditorHost

logger = logging.getLogger(__name__)

RESOURCES_DIR = Path("Assets") / "Resources"
BUILD_INFO_FILE = RESOURCES_DIR / "AUBBuildInfo.json"


def stamp(host: "EditorHost", config: "BuildConfiguration", target_label: str) -> Path:
    """Write (or overwrite) the version stamp and import it into the host."""
    resources = host.project_root / RESOURCES_DIR
    if not resources.is_dir():
        resources.mkdir(parents=True, exist_ok=True)
        host.refresh_assets()

    info = VersionStamp(
        build_id=config.build_id,
        commit_hash=config.commit_hash,
        branch=config.branch,
        build_target=target_label,
    )
    path = write_stamp(info, host.project_root / BUILD_INFO_FILE)
    host.import_asset(BUILD_INFO_FILE)

    logger.info(
        "Version stamped: commit=%s, build=%s, target=%s",
        config.commit_hash, config.build_id, target_label,
    )
    return path


def remove_stamp(host: "EditorHost") -> bool:
    """Delete the stamp and its ``.meta`` sidecar. Returns True if anything was removed."""
    path = host.project_root / BUILD_INFO_FILE
    if not path.exists():
        return False

    path.unlink()
    meta = path.with_name(path.name + ".meta")
    if meta.exists():
        meta.unlink()
    host.refresh_assets()
    return True
