"""
External processes — the one seam through which tools are launched.

Signing, archiving and notarization all go through a ``ProcessRunner``
so the orchestration can be exercised with a fake in tests.
"""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessOutcome:
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner(Protocol):
    def run(self, command: str, args: Sequence[str]) -> ProcessOutcome:
        """Run *command* with *args* to completion and return its outcome."""


class SubprocessRunner:
    """Runs tools synchronously, draining stdout and stderr before returning.

    No timeout is applied; the caller's runner owns wall-clock limits.
    """

    def run(self, command: str, args: Sequence[str]) -> ProcessOutcome:
        argv = [command, *args]
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            logger.error("Failed to launch %s: %s", command, e)
            return ProcessOutcome(stdout="", stderr=str(e), exit_code=-1)

        if result.stdout:
            logger.info("%s: %s", command, result.stdout.rstrip())
        if result.stderr and result.returncode != 0:
            logger.error("%s stderr: %s", command, result.stderr.rstrip())
        return ProcessOutcome(
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_code=result.returncode,
        )
