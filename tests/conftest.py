"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from nativebin.layout import ArtifactLayout
from nativebin.models import ValidationResult


@dataclass(slots=True)
class FakeRunner:
    """Suite runner returning a fixed tally without invoking pytest."""

    result: ValidationResult
    calls: list[Path] = field(default_factory=list)

    def run(self, artifact: Path) -> ValidationResult:
        self.calls.append(artifact)
        return self.result


@dataclass(slots=True)
class FakeDriver:
    """Stand-in for ``subprocess.run`` that mimics the build driver."""

    returncode: int = 0
    produce: Path | None = None
    payload: bytes = b"fresh-binary"
    calls: list[list[str]] = field(default_factory=list)

    def __call__(self, cmd: list[str], **kwargs: object) -> subprocess.CompletedProcess[bytes]:
        self.calls.append(list(cmd))
        if self.returncode == 0 and self.produce is not None:
            self.produce.parent.mkdir(parents=True, exist_ok=True)
            self.produce.write_bytes(self.payload)
        return subprocess.CompletedProcess(args=cmd, returncode=self.returncode)


@pytest.fixture
def layout(tmp_path: Path) -> ArtifactLayout:
    return ArtifactLayout(install_root=tmp_path / "bin", build_root=tmp_path / "build")


@pytest.fixture
def install_fake_driver(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[..., FakeDriver]:
    """Patch the pipeline's subprocess call with a configurable fake driver."""

    def _install(**kwargs: object) -> FakeDriver:
        driver = FakeDriver(**kwargs)  # type: ignore[arg-type]
        monkeypatch.setattr("nativebin.pipeline.subprocess.run", driver)
        return driver

    return _install


@pytest.fixture
def install_artifact(layout: ArtifactLayout) -> Callable[..., Path]:
    """Place a previously installed artifact for a platform key."""

    def _install(key: str, payload: bytes = b"old-binary") -> Path:
        path = layout.installed_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        return path

    return _install


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    def _make(total: int, failed: int) -> FakeRunner:
        return FakeRunner(result=ValidationResult(total_cases=total, failed_cases=failed))

    return _make
