"""Process-wide configuration read once from the environment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from nativebin.layout import DEFAULT_ARTIFACT_NAME, ArtifactLayout

SKIP_TESTS_ENV = "NATIVEBIN_SKIP_TESTS"

_FALSY = frozenset({"", "0", "false", "no", "off"})


@dataclass(frozen=True, slots=True)
class Settings:
    project_root: Path
    install_dir: str = "bin"
    build_dir: str = "build"
    artifact_name: str = DEFAULT_ARTIFACT_NAME
    driver: str = "node-gyp"
    test_suite: str = "tests/test_api.py"
    skip_validation: bool = False
    log_file: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str], *, root: str | Path | None = None) -> Settings:
        project_root = Path(root if root is not None else environ.get("NATIVEBIN_ROOT", "."))
        log_file = environ.get("NATIVEBIN_LOG_FILE")
        return cls(
            project_root=project_root.resolve(),
            install_dir=environ.get("NATIVEBIN_INSTALL_DIR", "bin"),
            build_dir=environ.get("NATIVEBIN_BUILD_DIR", "build"),
            artifact_name=environ.get("NATIVEBIN_ARTIFACT_NAME", DEFAULT_ARTIFACT_NAME),
            driver=environ.get("NATIVEBIN_BUILD_DRIVER", "node-gyp"),
            test_suite=environ.get("NATIVEBIN_TEST_SUITE", "tests/test_api.py"),
            skip_validation=is_set(environ.get(SKIP_TESTS_ENV)),
            log_file=Path(log_file) if log_file else None,
        )

    def layout(self) -> ArtifactLayout:
        return ArtifactLayout(
            install_root=self.project_root / self.install_dir,
            build_root=self.project_root / self.build_dir,
            artifact_name=self.artifact_name,
        )

    @property
    def test_suite_path(self) -> Path:
        return self.project_root / self.test_suite


def is_set(value: str | None) -> bool:
    """Interpret a boolean-like environment value."""
    if value is None:
        return False
    return value.strip().lower() not in _FALSY
