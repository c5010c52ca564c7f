"""
Writer — serialize builder outputs to JSON files.

Filesystem layout:
    <OUTPUT_DIR>/build-result.json
    <project>/Assets/Resources/AUBBuildInfo.json

Both files are overwritten unconditionally; there is exactly one writer
per invocation.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict

from aub_builder import RESULT_FILENAME
from aub_builder.io.schema import BuildResult, VersionStamp

logger = logging.getLogger(__name__)


def _write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.write_text(
        json.dumps(payload, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )


def write_result(result: BuildResult, directory: Path) -> Path:
    """
    Write build-result.json into *directory*.

    Creates *directory* if it does not exist.
    Returns the path of the written file.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / RESULT_FILENAME
    _write_json(path, result.to_json_dict())
    logger.info("Build result written to: %s", path)
    return path


def read_result(directory: Path) -> BuildResult:
    """Load build-result.json from *directory*."""
    path = Path(directory) / RESULT_FILENAME
    return BuildResult.model_validate(json.loads(path.read_text(encoding="utf-8")))


def write_stamp(stamp: VersionStamp, path: Path) -> Path:
    """Write the version stamp to *path* (parent must exist)."""
    _write_json(Path(path), stamp.to_json_dict())
    return Path(path)
