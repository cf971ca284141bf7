"""Core typed dataclasses for build configuration, validation, and outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Literal

from nativebin.platform import resolve_key

BuildMode = Literal["Debug", "Release"]


@dataclass(frozen=True, slots=True)
class BuildConfig:
    architecture: str
    operating_system: str
    abi_version: str
    debug: bool = False
    force_rebuild: bool = False
    passthrough_args: tuple[str, ...] = ()

    @property
    def platform_key(self) -> str:
        return resolve_key(self.operating_system, self.architecture, self.abi_version)

    @property
    def build_mode(self) -> BuildMode:
        return "Debug" if self.debug else "Release"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Aggregate outcome of one behavioural suite run."""

    total_cases: int
    failed_cases: int

    def __post_init__(self) -> None:
        if self.total_cases < 0:
            raise ValueError(f"total_cases must be >= 0, got {self.total_cases}")
        if not 0 <= self.failed_cases <= self.total_cases:
            raise ValueError(
                f"failed_cases must be within [0, {self.total_cases}], got {self.failed_cases}"
            )

    @property
    def passed_cases(self) -> int:
        return self.total_cases - self.failed_cases

    @property
    def pass_rate(self) -> float | None:
        """Percentage of passing cases, or ``None`` for an empty suite."""
        if self.total_cases == 0:
            return None
        return self.passed_cases * 100 / self.total_cases


class PipelineState(StrEnum):
    NOT_STARTED = "NotStarted"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED_TOOL_MISSING = "FailedToolMissing"
    FAILED_NON_ZERO_EXIT = "FailedNonZeroExit"
    FAILED_ARTIFACT_MISSING = "FailedArtifactMissing"
    FAILED_RELOCATION = "FailedRelocation"


@dataclass(frozen=True, slots=True)
class BuildReport:
    platform_key: str
    installed_path: Path
    build_output_path: Path
    command: tuple[str, ...]


class Decision(StrEnum):
    BUILD_FORCED = "build_forced"
    SKIP = "skip"
    BUILD_MISSING = "build_missing"
    VALIDATE = "validate"


OutcomeKind = Literal[
    "built_forced",
    "skipped",
    "built_missing",
    "accepted",
    "built_after_rejection",
]


@dataclass(frozen=True, slots=True)
class Outcome:
    kind: OutcomeKind
    platform_key: str
    validation: ValidationResult | None = None
    build: BuildReport | None = None
