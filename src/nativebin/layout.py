"""Artifact locations: build output written by the driver, installed copies per platform key.

Two paths matter:

- ``<build-root>/<Debug|Release>/<artifact>`` is where the build driver leaves
  a freshly compiled artifact.
- ``<install-root>/<platform-key>/<artifact>`` is the durable, platform-scoped
  location the application loads from.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_ARTIFACT_NAME = "binding.node"


@dataclass(frozen=True, slots=True)
class ArtifactLayout:
    install_root: Path
    build_root: Path
    artifact_name: str = DEFAULT_ARTIFACT_NAME

    def install_dir(self, platform_key: str) -> Path:
        return self.install_root / platform_key

    def installed_path(self, platform_key: str) -> Path:
        return self.install_dir(platform_key) / self.artifact_name

    def build_output_path(self, *, debug: bool) -> Path:
        folder = "Debug" if debug else "Release"
        return self.build_root / folder / self.artifact_name

    def exists(self, platform_key: str) -> bool:
        """Return whether an artifact is installed for *platform_key*.

        Never raises; a present but corrupt artifact still counts as present.
        """
        try:
            return self.installed_path(platform_key).exists()
        except OSError:
            return False
