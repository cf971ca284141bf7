"""Compile-from-source pipeline driven by an external build driver.

Runs ``<driver> rebuild [args...]`` with the parent's standard streams so
build output is visible live, then moves the artifact the driver produced
into the platform-keyed install location. Every failure is terminal; nothing
is retried.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from nativebin.errors import (
    DRIVER_NOT_FOUND_EXIT,
    ArtifactContractViolationError,
    BuildFailedError,
    InstallationIOError,
    ToolingUnavailableError,
)
from nativebin.layout import ArtifactLayout
from nativebin.models import BuildConfig, BuildReport, PipelineState
from nativebin.observability import StructuredLogger

DEFAULT_DRIVER = "node-gyp"


def driver_executable(operating_system: str, driver: str = DEFAULT_DRIVER) -> str:
    """Windows ships the driver as a ``.cmd`` shim."""
    if operating_system == "win32":
        return f"{driver}.cmd"
    return driver


def process_exit_status(returncode: int) -> int:
    """Map a driver return code to the status this process exits with.

    A driver killed by signal N reports ``-N``; shells report that as ``128 + N``.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


@dataclass(slots=True)
class BuildPipeline:
    layout: ArtifactLayout
    cwd: Path
    driver: str = DEFAULT_DRIVER
    logger: StructuredLogger | None = None
    state: PipelineState = PipelineState.NOT_STARTED

    def build(self, config: BuildConfig) -> BuildReport:
        key = config.platform_key
        command = (
            driver_executable(config.operating_system, self.driver),
            "rebuild",
            *config.passthrough_args,
        )
        self.state = PipelineState.RUNNING
        self._log(key, "build", f"Running `{' '.join(command)}`")

        returncode = self._run_driver(command, key)
        if returncode == DRIVER_NOT_FOUND_EXIT:
            self._fail(PipelineState.FAILED_TOOL_MISSING)
            raise _driver_missing(command, key, returncode=str(returncode))
        if returncode != 0:
            self._fail(PipelineState.FAILED_NON_ZERO_EXIT)
            raise BuildFailedError(
                "Build failed",
                exit_code=process_exit_status(returncode),
                hint=f"Check the {self.driver} output above for the first error.",
                context={
                    "platform_key": key,
                    "returncode": str(returncode),
                    "command": " ".join(command),
                },
            )

        return self._install(config, command)

    def _run_driver(self, command: tuple[str, ...], key: str) -> int:
        try:
            result = subprocess.run(list(command), cwd=str(self.cwd), check=False)
        except FileNotFoundError as exc:
            self._fail(PipelineState.FAILED_TOOL_MISSING)
            raise _driver_missing(command, key, returncode="") from exc
        return result.returncode

    def _install(self, config: BuildConfig, command: tuple[str, ...]) -> BuildReport:
        key = config.platform_key
        install_dir = self.layout.install_dir(key)
        try:
            install_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self._fail(PipelineState.FAILED_RELOCATION)
            raise InstallationIOError(
                f"Could not create install directory: {exc.strerror or exc}",
                context={"platform_key": key, "path": str(install_dir)},
            ) from exc

        target = self.layout.build_output_path(debug=config.debug)
        if not target.is_file():
            self._fail(PipelineState.FAILED_ARTIFACT_MISSING)
            raise ArtifactContractViolationError(
                "Build succeeded but target not found",
                hint=f"{self.driver} exited 0 without producing the expected artifact.",
                context={"platform_key": key, "expected": str(target)},
            )

        installed = self.layout.installed_path(key)
        try:
            os.replace(target, installed)
        except OSError as exc:
            self._fail(PipelineState.FAILED_RELOCATION)
            raise InstallationIOError(
                str(exc),
                context={"platform_key": key, "source": str(target), "destination": str(installed)},
            ) from exc

        self.state = PipelineState.SUCCEEDED
        self._log(key, "install", f"Installed in `{installed}`")
        return BuildReport(
            platform_key=key,
            installed_path=installed,
            build_output_path=target,
            command=command,
        )

    def _fail(self, state: PipelineState) -> None:
        self.state = state

    def _log(self, key: str, phase: str, message: str) -> None:
        if self.logger is not None:
            self.logger.log(operation="build", platform_key=key, phase=phase, message=message)


def _driver_missing(command: tuple[str, ...], key: str, *, returncode: str) -> ToolingUnavailableError:
    return ToolingUnavailableError(
        f"{command[0]} not found!",
        hint=f"Install or upgrade {command[0]} and make sure it is on PATH.",
        context={"platform_key": key, "command": " ".join(command), "returncode": returncode},
    )
