"""Decide between reusing, validating, and rebuilding the platform artifact."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from nativebin.errors import ValidationRejectedError
from nativebin.layout import ArtifactLayout
from nativebin.models import BuildConfig, Decision, Outcome, OutcomeKind
from nativebin.observability import StructuredLogger
from nativebin.pipeline import BuildPipeline
from nativebin.validate import Validator, accepts


def decide(
    config: BuildConfig,
    *,
    skip_validation: bool,
    artifact_exists: Callable[[], bool],
) -> Decision:
    """Pick the next action.

    *artifact_exists* is only consulted when neither a forced rebuild nor a
    skipped validation short-circuits the flow.
    """
    if config.force_rebuild:
        return Decision.BUILD_FORCED
    if skip_validation:
        return Decision.SKIP
    if not artifact_exists():
        return Decision.BUILD_MISSING
    return Decision.VALIDATE


@dataclass(slots=True)
class Orchestrator:
    config: BuildConfig
    layout: ArtifactLayout
    validator: Validator
    pipeline: BuildPipeline
    skip_validation: bool = False
    logger: StructuredLogger = field(default_factory=StructuredLogger)

    def run(self) -> Outcome:
        key = self.config.platform_key
        decision = decide(
            self.config,
            skip_validation=self.skip_validation,
            artifact_exists=lambda: self.layout.exists(key),
        )
        self.logger.log(
            operation="run",
            platform_key=key,
            phase="resolve",
            message=f"Resolved `{key}`: {decision}",
            level="debug",
            extra={"decision": decision.value},
        )

        if decision is Decision.BUILD_FORCED:
            return self._build("built_forced")
        if decision is Decision.SKIP:
            return Outcome(kind="skipped", platform_key=key)
        if decision is Decision.BUILD_MISSING:
            return self._build("built_missing")

        self.logger.log(
            operation="run",
            platform_key=key,
            phase="validate",
            message=f"`{key}` exists; testing",
        )
        result = self.validator.validate(key)
        if accepts(result):
            self.logger.log(
                operation="run",
                platform_key=key,
                phase="validate",
                message="Binary is fine; exiting",
            )
            return Outcome(kind="accepted", platform_key=key, validation=result)

        rejection = ValidationRejectedError(
            "\n".join(
                [
                    f"Problem with the binary: {result.failed_cases} of {result.total_cases} "
                    "tests are failing.",
                    "Manual build incoming.",
                    "Please consider contributing the release binary for distribution.",
                ]
            ),
            context={
                "platform_key": key,
                "total_cases": str(result.total_cases),
                "failed_cases": str(result.failed_cases),
            },
        )
        self.logger.log(
            operation="run",
            platform_key=key,
            phase="validate",
            message=rejection.args[0],
            level="warning",
            extra={"code": rejection.code},
        )
        return Outcome(
            kind="built_after_rejection",
            platform_key=key,
            validation=result,
            build=self.pipeline.build(self.config),
        )

    def _build(self, kind: OutcomeKind) -> Outcome:
        return Outcome(
            kind=kind,
            platform_key=self.config.platform_key,
            build=self.pipeline.build(self.config),
        )
