"""
Cache cleaning — delete the host's incremental build caches.

Run from inside the host process so that no external process holds
locks on the directories while they are removed.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Union

from aub_builder.errors import CleanupFailure

logger = logging.getLogger(__name__)

CACHE_DIRS = (
    Path("Library") / "Bee",
    Path("Library") / "BuildCache",
)


class CleanStatus(str, Enum):
    DELETED = "deleted"
    MISSING = "missing"
    FAILED = "failed"


@dataclass(frozen=True)
class CleanEntry:
    path: Path
    status: CleanStatus
    reason: str = ""


def clean(project_root: Union[str, Path]) -> List[CleanEntry]:
    """Delete every known cache directory under *project_root*.

    Missing directories are skipped and a failure on one directory does
    not stop the others.  Safe to call repeatedly.
    """
    root = Path(project_root)
    report = [_clean_dir(root / rel) for rel in CACHE_DIRS]
    if all(entry.status != CleanStatus.FAILED for entry in report):
        logger.info("Build cache cleaned successfully.")
    return report


def _clean_dir(path: Path) -> CleanEntry:
    if not path.is_dir():
        logger.info("Cache directory does not exist, skipping: %s", path)
        return CleanEntry(path=path, status=CleanStatus.MISSING)

    try:
        shutil.rmtree(path)
    except OSError as e:
        failure = CleanupFailure(
            "Failed to delete cache directory.",
            context={"path": str(path), "reason": str(e)},
        )
        logger.warning("%s", failure)
        return CleanEntry(path=path, status=CleanStatus.FAILED, reason=str(e))

    logger.info("Deleted cache directory: %s", path)
    return CleanEntry(path=path, status=CleanStatus.DELETED)
