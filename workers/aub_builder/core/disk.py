"""
Disk telemetry — on-disk size of a build output.

The executor's reported size may cover only the primary artifact, so
the on-disk walk is preferred whenever it finds anything.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def calculate_dir_size(path: Union[str, Path]) -> int:
    """Total bytes under *path*.

    A file path returns its own length, a missing path returns 0.
    Files that cannot be stat'ed contribute 0 instead of aborting.
    """
    path = Path(path)
    if path.is_file():
        try:
            return path.stat().st_size
        except OSError:
            return 0
    if not path.is_dir():
        return 0

    total = 0
    for root, _dirs, files in os.walk(path):
        for filename in files:
            try:
                total += (Path(root) / filename).stat().st_size
            except OSError:
                logger.debug("Skipping inaccessible file: %s", Path(root) / filename)
    return total


def resolve_total_size(disk_size: int, reported_size: int) -> int:
    """Disk walk when nonzero, otherwise the executor-reported size."""
    if disk_size > 0:
        return disk_size
    return max(reported_size, 0)
