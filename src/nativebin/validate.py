"""Behavioural validation of an installed artifact.

The suite is run once per invocation, in-process, through pytest. A small
collector plugin tallies outcomes per test item; the acceptance policy is a
fixed 90 % pass-rate threshold.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import pytest

from nativebin import testing
from nativebin.layout import ArtifactLayout
from nativebin.models import ValidationResult
from nativebin.observability import StructuredLogger

ACCEPTANCE_THRESHOLD = 90
PYTEST_ADDOPTS_ENV = "PYTEST_ADDOPTS"


def accepts(result: ValidationResult) -> bool:
    """Return whether at least 90 % of the suite passed.

    An empty suite is rejected: it exercised nothing, so it cannot vouch for
    the artifact.
    """
    if result.total_cases == 0:
        return False
    return result.passed_cases * 100 >= ACCEPTANCE_THRESHOLD * result.total_cases


class SuiteRunner(Protocol):
    def run(self, artifact: Path) -> ValidationResult:
        """Execute the behavioural suite against *artifact* and tally outcomes."""


@dataclass(slots=True)
class OutcomeCollector:
    """Pytest plugin counting test items and failures across a whole session."""

    counted: set[str] = field(default_factory=set)
    failed: set[str] = field(default_factory=set)
    collection_errors: int = 0

    def pytest_collectreport(self, report: Any) -> None:
        if report.failed:
            self.collection_errors += 1

    def pytest_runtest_logreport(self, report: Any) -> None:
        if report.failed:
            self.counted.add(report.nodeid)
            self.failed.add(report.nodeid)
        elif report.when == "call" and report.passed:
            self.counted.add(report.nodeid)

    def result(self) -> ValidationResult:
        return ValidationResult(
            total_cases=len(self.counted) + self.collection_errors,
            failed_cases=len(self.failed) + self.collection_errors,
        )


@dataclass(slots=True)
class PytestSuiteRunner:
    suite: Path
    extra_args: tuple[str, ...] = ()
    last_exit_code: int | None = None

    def run(self, artifact: Path) -> ValidationResult:
        collector = OutcomeCollector()
        args = [
            str(self.suite),
            "-q",
            "-p",
            "no:cacheprovider",
            "--import-mode=importlib",
            "--continue-on-collection-errors",
            # The whole suite must run regardless of the host project's pytest config.
            "-o",
            "addopts=",
            "--maxfail=0",
            *self.extra_args,
        ]
        with _artifact_env(artifact):
            exit_code = pytest.main(args, plugins=[collector, testing])
        self.last_exit_code = int(exit_code)
        return collector.result()


@dataclass(slots=True)
class Validator:
    layout: ArtifactLayout
    runner: SuiteRunner
    logger: StructuredLogger | None = None

    def validate(self, platform_key: str) -> ValidationResult:
        artifact = self.layout.installed_path(platform_key)
        result = self.runner.run(artifact)
        if self.logger is not None:
            self.logger.log(
                operation="validate",
                platform_key=platform_key,
                phase="validate",
                message=f"{result.failed_cases} of {result.total_cases} tests failed.",
                extra={
                    "total_cases": result.total_cases,
                    "failed_cases": result.failed_cases,
                    "accepted": accepts(result),
                },
            )
        return result


@contextmanager
def _artifact_env(artifact: Path) -> Iterator[None]:
    overrides: dict[str, str | None] = {
        testing.ARTIFACT_ENV: str(artifact),
        PYTEST_ADDOPTS_ENV: None,
    }
    previous = {name: os.environ.get(name) for name in overrides}
    for name, value in overrides.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value
    try:
        yield
    finally:
        for name, value in previous.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
