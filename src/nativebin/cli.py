"""Process entry point: resolve, validate, or rebuild the native artifact.

Usage:
    nativebin [-f|--force] [--debug] [--target_arch=<arch>] [driver args...]

Every token except ``-f``/``--force`` is forwarded to ``<driver> rebuild``.
Set ``NATIVEBIN_SKIP_TESTS=1`` to skip validation entirely.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from nativebin.args import parse_args
from nativebin.errors import NativeBinError
from nativebin.observability import StructuredLogger
from nativebin.orchestrator import Orchestrator
from nativebin.pipeline import BuildPipeline
from nativebin.platform import host_defaults
from nativebin.settings import Settings
from nativebin.validate import PytestSuiteRunner, Validator


def build_orchestrator(
    argv: Sequence[str],
    settings: Settings,
    logger: StructuredLogger,
) -> Orchestrator:
    config = parse_args(argv, host_defaults())
    layout = settings.layout()
    return Orchestrator(
        config=config,
        layout=layout,
        validator=Validator(
            layout=layout,
            runner=PytestSuiteRunner(suite=settings.test_suite_path),
            logger=logger,
        ),
        pipeline=BuildPipeline(
            layout=layout,
            cwd=settings.project_root,
            driver=settings.driver,
            logger=logger,
        ),
        skip_validation=settings.skip_validation,
        logger=logger,
    )


def main(argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    settings = Settings.from_env(os.environ if environ is None else environ)
    logger = StructuredLogger(echo=True)
    orchestrator = build_orchestrator(sys.argv[1:] if argv is None else argv, settings, logger)
    exit_code = 0
    try:
        orchestrator.run()
    except NativeBinError as exc:
        logger.log(
            operation="run",
            platform_key=orchestrator.config.platform_key,
            phase=None,
            message=str(exc),
            level="error",
            extra=exc.to_dict(),
        )
        exit_code = exc.exit_code
    finally:
        if settings.log_file is not None:
            _export_log(logger, settings.log_file)
    return exit_code


def _export_log(logger: StructuredLogger, path: Path) -> None:
    # The run's exit status takes precedence over a failed log export.
    try:
        logger.to_json_lines(path)
    except OSError as exc:
        print(f"Could not write log file `{path}`: {exc}", file=sys.stderr, flush=True)


if __name__ == "__main__":  # pragma: no cover - exercised via __main__
    sys.exit(main())
