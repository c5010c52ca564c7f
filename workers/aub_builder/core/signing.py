"""
Code signing — macOS signing and notarization of a built .app bundle.

Best effort: every failure here is logged and reported as False, and
never turns a successful build into a failed one.  Only available on a
macOS host.

Notarization requires a keychain profile created beforehand with
``xcrun notarytool store-credentials``.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, Union

from aub_builder.core.process import ProcessRunner, SubprocessRunner
from aub_builder.errors import PostProcessingFailure

logger = logging.getLogger(__name__)


class CodeSigner:
    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        platform: Optional[str] = None,
    ):
        self.runner = runner or SubprocessRunner()
        self.platform = platform if platform is not None else sys.platform

    @property
    def available(self) -> bool:
        return self.platform == "darwin"

    def sign(self, artifact: Union[str, Path], identity: str) -> bool:
        """Sign *artifact* with *identity* using hardened runtime."""
        if not self.available:
            logger.warning("Code signing is only available on macOS.")
            return False

        logger.info("Signing %s with identity: %s", artifact, identity)
        outcome = self.runner.run(
            "codesign",
            ["--force", "--deep", "--sign", identity, "--options", "runtime", str(artifact)],
        )
        if not outcome.ok:
            failure = PostProcessingFailure(
                f"Code signing failed with exit code {outcome.exit_code}",
                context={"artifact": str(artifact), "stderr": outcome.stderr[:2000]},
            )
            logger.error("%s", failure)
            return False

        logger.info("Code signing succeeded.")
        return True

    def notarize(self, artifact: Union[str, Path], profile: str) -> bool:
        """Zip, submit (blocking until Apple answers), then staple *artifact*.

        A stapling failure is only a warning: the notarization verdict
        has already been recorded by then.
        """
        if not self.available:
            logger.warning("Notarization is only available on macOS.")
            return False

        logger.info("Submitting %s for notarization (profile: %s)", artifact, profile)
        archive = Path(f"{artifact}.zip")

        zipped = self.runner.run(
            "ditto", ["-c", "-k", "--keepParent", str(artifact), str(archive)],
        )
        if not zipped.ok:
            logger.error(
                "Failed to create zip for notarization (exit code %d)", zipped.exit_code,
            )
            return False

        submitted = self.runner.run(
            "xcrun",
            ["notarytool", "submit", str(archive), "--keychain-profile", profile, "--wait"],
        )

        try:
            archive.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove notarization archive %s: %s", archive, e)

        if not submitted.ok:
            failure = PostProcessingFailure(
                f"Notarization failed with exit code {submitted.exit_code}",
                context={"artifact": str(artifact), "stderr": submitted.stderr[:2000]},
            )
            logger.error("%s", failure)
            return False

        stapled = self.runner.run("xcrun", ["stapler", "staple", str(artifact)])
        if not stapled.ok:
            logger.warning(
                "Stapling failed (exit code %d), but notarization succeeded.",
                stapled.exit_code,
            )
        else:
            logger.info("Notarization and stapling succeeded.")
        return True
