"""Public package entrypoint for nativebin."""

from .args import parse_args
from .errors import (
    ArtifactContractViolationError,
    BuildFailedError,
    ErrorCode,
    InstallationIOError,
    NativeBinError,
    ToolingUnavailableError,
    ValidationRejectedError,
)
from .layout import ArtifactLayout
from .models import (
    BuildConfig,
    BuildReport,
    Decision,
    Outcome,
    PipelineState,
    ValidationResult,
)
from .orchestrator import Orchestrator, decide
from .pipeline import BuildPipeline, driver_executable
from .platform import PlatformDefaults, host_defaults, resolve_key
from .settings import Settings
from .validate import ACCEPTANCE_THRESHOLD, PytestSuiteRunner, Validator, accepts

__all__ = [
    "ACCEPTANCE_THRESHOLD",
    "ArtifactContractViolationError",
    "ArtifactLayout",
    "BuildConfig",
    "BuildFailedError",
    "BuildPipeline",
    "BuildReport",
    "Decision",
    "ErrorCode",
    "InstallationIOError",
    "NativeBinError",
    "Orchestrator",
    "Outcome",
    "PipelineState",
    "PlatformDefaults",
    "PytestSuiteRunner",
    "Settings",
    "ToolingUnavailableError",
    "ValidationRejectedError",
    "ValidationResult",
    "Validator",
    "accepts",
    "decide",
    "driver_executable",
    "host_defaults",
    "parse_args",
    "resolve_key",
]
