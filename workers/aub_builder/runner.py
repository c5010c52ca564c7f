"""
Build runner — top-level orchestration: environment → player build → result.

This module ties configuration, target resolution, define injection,
the executor adapter and result reporting together into a single
``run_build`` function, plus the ``aub-builder`` CLI.

Exactly one build-result.json is written per invocation (when the
output directory is known), and the returned exit code is 0 only for a
successful build.  Scripting defines are restored on every exit path.
"""
import argparse
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from aub_builder.config import BuilderSettings, BuildConfiguration, load
from aub_builder.core.cache import clean
from aub_builder.core.defines import DefineInjector
from aub_builder.core.disk import calculate_dir_size, resolve_total_size
from aub_builder.core.executor import BuildPlayerOptions, collect_scenes, execute
from aub_builder.core.signing import CodeSigner
from aub_builder.core.stamper import remove_stamp, stamp
from aub_builder.core.targets import (
    DEFAULT_PROFILE,
    PlatformDescriptor,
    default_output_name,
    resolve,
    switch_if_needed,
    target_group_of,
)
from aub_builder.errors import (
    AubBuildError,
    ConfigurationError,
    ExecutorFailure,
    NoBuildUnitsError,
    PostProcessingFailure,
    UnknownTargetError,
)
from aub_builder.host.base import EditorHost
from aub_builder.host.project import ProjectHost
from aub_builder.io.schema import BuildResult
from aub_builder.io.writer import write_result
from aub_builder.policy.profile import Feature, TargetProfile
from aub_builder.policy.verdict import BuildOutcome, exit_code_for, is_fatal

logger = logging.getLogger(__name__)

BANNER = "═" * 43

Clock = Callable[[], float]


@dataclass
class BuildRun:
    """What one invocation produced."""

    result: BuildResult
    exit_code: int
    result_path: Optional[Path] = None

    @property
    def outcome(self) -> BuildOutcome:
        return BuildOutcome.SUCCEEDED if self.exit_code == 0 else BuildOutcome.FAILED


def run_build(
    host: EditorHost,
    config: Optional[BuildConfiguration] = None,
    *,
    profile: Optional[TargetProfile] = None,
    signer: Optional[CodeSigner] = None,
    clock: Clock = time.monotonic,
) -> BuildRun:
    """
    Run one player build against *host*.

    Parameters
    ----------
    host : EditorHost
        The host whose project is built.
    config : BuildConfiguration, optional
        Defaults to ``load()`` from the environment.
    profile : TargetProfile, optional
        Capability table.  Defaults to the v1 table, filtered for the
        host version.
    signer : CodeSigner, optional
        Post-processing adapter used for signing-eligible targets.

    Returns
    -------
    BuildRun
    """
    start = clock()
    logger.info(BANNER)
    logger.info("AUB Builder starting...")

    # ── Step 1: configuration ────────────────────────────────────────
    if config is None:
        config = load()
    if not config.is_valid:
        error = ConfigurationError(
            f"Configuration error: {config.error}",
            hint="Both BUILD_TARGET and OUTPUT_DIR must be set (plain or AUB_-prefixed).",
        )
        return _fail(host, config, error, start, clock)
    logger.info("Config: %s", config.describe())

    # ── Step 2: resolve target ───────────────────────────────────────
    table = (profile or DEFAULT_PROFILE).for_host(host.version)
    descriptor, found = resolve(config.build_target, table)
    if not found or descriptor is None:
        error = UnknownTargetError(
            f"Unknown build target: '{config.build_target}'",
            context={"host_version": host.version},
        )
        return _fail(host, config, error, start, clock)

    # ── Step 3: stamp, switch, inject ────────────────────────────────
    if config.wants_stamp:
        try:
            stamp(host, config, config.build_target)
        except Exception as e:
            logger.warning("Version stamp could not be written: %s", e, exc_info=True)

    injector = DefineInjector(host)
    try:
        switch_if_needed(host, descriptor)
        with injector.scoped(target_group_of(descriptor), config.defines):
            return _build_player(host, config, descriptor, start, clock, signer)
    except Exception as e:
        error = ExecutorFailure(
            f"Build aborted: {e}",
            context={"exception": type(e).__name__},
        )
        return _fail(host, config, error, start, clock, exc_info=True)


def _build_player(
    host: EditorHost,
    config: BuildConfiguration,
    descriptor: PlatformDescriptor,
    start: float,
    clock: Clock,
    signer: Optional[CodeSigner],
) -> BuildRun:
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / default_output_name(descriptor)

    # ── Step 4: content units ────────────────────────────────────────
    try:
        scenes = collect_scenes(host)
    except NoBuildUnitsError as e:
        return _fail(host, config, e, start, clock)

    server = False
    if config.server_build:
        if descriptor.supports(Feature.SERVER_SUBTARGET):
            host.set_server_subtarget(True)
            server = True
            logger.info("Server build subtarget enabled.")
        else:
            logger.warning(
                "Server subtarget is not supported for %s on host %s; building the default subtarget.",
                descriptor.label, host.version,
            )

    # ── Step 5: executor ─────────────────────────────────────────────
    options = BuildPlayerOptions(
        scenes=scenes,
        location=str(output_path),
        target=descriptor.label,
        group=target_group_of(descriptor),
        server=server,
        build_profile=config.build_profile or None,
    )
    summary = execute(host, options)

    # ── Step 6/7: report ─────────────────────────────────────────────
    if not summary.succeeded:
        for message in summary.error_messages():
            logger.error("Build error: %s", message)
        failure = ExecutorFailure(
            f"Build failed with result: {summary.result.value}",
            context={"target": descriptor.label},
        )
        return _fail(
            host, config, failure, start, clock,
            warnings=summary.total_warnings,
            errors=summary.total_errors,
            scenes=scenes,
        )

    total_size = resolve_total_size(calculate_dir_size(output_path), summary.total_size)
    duration = clock() - start
    logger.info("Build succeeded in %.1fs", duration)
    logger.info("Output: %s", output_path)
    logger.info("Size: %s bytes", f"{total_size:,}")
    logger.info("Warnings: %d, Errors: %d", summary.total_warnings, summary.total_errors)

    result = BuildResult.succeeded(
        target=config.build_target,
        output_path=str(output_path),
        total_size=total_size,
        duration=duration,
        warnings=summary.total_warnings,
        errors=summary.total_errors,
        scenes=scenes,
        host_version=host.version,
    )
    result_path = _write(result, output_dir)
    if result_path is None:
        # A run without a result file is a failed run.
        unwritten = BuildResult.failed(
            target=config.build_target,
            error=f"Build result could not be written to {output_dir}",
            duration=duration,
            host_version=host.version,
            warnings=summary.total_warnings,
            errors=summary.total_errors,
            scenes=scenes,
        )
        logger.info(BANNER)
        logger.info("BUILD FAILED")
        return BuildRun(result=unwritten, exit_code=exit_code_for(BuildOutcome.FAILED))

    _post_process(config, descriptor, output_path, signer)

    logger.info(BANNER)
    logger.info("BUILD SUCCEEDED")
    return BuildRun(
        result=result,
        exit_code=exit_code_for(BuildOutcome.SUCCEEDED),
        result_path=result_path,
    )


def _post_process(
    config: BuildConfiguration,
    descriptor: PlatformDescriptor,
    artifact: Path,
    signer: Optional[CodeSigner],
) -> None:
    """Sign (and notarize) signing-eligible builds. Never affects the result."""
    if not descriptor.supports(Feature.CODE_SIGNING) or not config.codesign_identity:
        return

    signer = signer or CodeSigner()
    context = {"artifact": str(artifact)}
    try:
        if not signer.sign(artifact, config.codesign_identity):
            _report(PostProcessingFailure(
                "Artifact left unsigned; notarization skipped.", context=context,
            ))
            return
        if config.notarize_profile and not signer.notarize(artifact, config.notarize_profile):
            _report(PostProcessingFailure("Artifact is not notarized.", context=context))
    except Exception as e:
        _report(
            PostProcessingFailure(f"Post-processing failed: {e}", context=context),
            exc_info=True,
        )


def _report(error: AubBuildError, *, exc_info: bool = False) -> None:
    """Log *error* at ERROR when its code is fatal, WARNING otherwise."""
    level = logging.ERROR if is_fatal(error.code) else logging.WARNING
    logger.log(level, "[%s] %s", error.code.value, error, exc_info=exc_info)


def _fail(
    host: EditorHost,
    config: BuildConfiguration,
    error: AubBuildError,
    start: float,
    clock: Clock,
    *,
    exc_info: bool = False,
    **counts,
) -> BuildRun:
    _report(error, exc_info=exc_info)
    result = BuildResult.failed(
        target=config.build_target,
        error=error.message,
        duration=clock() - start,
        host_version=host.version,
        **counts,
    )
    result_path = _write(result, Path(config.output_dir)) if config.output_dir else None

    logger.info(BANNER)
    logger.info("BUILD FAILED")
    return BuildRun(
        result=result,
        exit_code=exit_code_for(BuildOutcome.FAILED),
        result_path=result_path,
    )


def _write(result: BuildResult, directory: Path) -> Optional[Path]:
    try:
        return write_result(result, directory)
    except OSError as e:
        logger.error("Could not write build result to %s: %s", directory, e)
        return None


def main(argv: Optional[list] = None) -> None:
    """CLI entry point for aub-builder."""
    parser = argparse.ArgumentParser(
        prog="aub-builder",
        description="aub_builder — headless player build driven by environment variables",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, help_text in (
        ("build", "Build the player described by BUILD_TARGET / OUTPUT_DIR"),
        ("clean-cache", "Delete the project's incremental build caches"),
        ("remove-stamp", "Delete Assets/Resources/AUBBuildInfo.json left by a stamped build"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--project",
            type=Path,
            default=None,
            help="Project root (defaults to AUB_PROJECT_ROOT or the current directory)",
        )
        sub.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Enable verbose logging",
        )
    args = parser.parse_args(argv)

    settings = BuilderSettings()
    level = logging.DEBUG if args.verbose else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    project = args.project.resolve() if args.project else settings.project_path

    if args.command == "clean-cache":
        logger.info("Cleaning build cache...")
        clean(project)
        sys.exit(0)

    host = ProjectHost(project, executor=settings.EXECUTOR)

    if args.command == "remove-stamp":
        if remove_stamp(host):
            logger.info("Version stamp removed.")
        else:
            logger.info("No version stamp to remove.")
        sys.exit(0)

    run = run_build(host)
    sys.exit(run.exit_code)


if __name__ == "__main__":
    main()
