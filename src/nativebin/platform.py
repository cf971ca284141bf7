"""Platform key derivation for namespacing installed artifacts."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass

# Short architecture names used when distributing prebuilt binaries.
_ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "ia32",
    "i686": "ia32",
    "x86": "ia32",
    "armv7l": "arm",
}


@dataclass(frozen=True, slots=True)
class PlatformDefaults:
    architecture: str
    operating_system: str
    abi_version: str


def resolve_key(operating_system: str, architecture: str, abi_version: str) -> str:
    """Return the ``{os}-{arch}-abi-{abi}`` key that names an installed artifact.

    The layout is a compatibility contract: any loader looking for a
    previously installed artifact must derive the identical key.
    """
    return f"{operating_system}-{architecture}-abi-{abi_version}"


def normalize_arch(machine: str) -> str:
    lowered = machine.lower()
    return _ARCH_ALIASES.get(lowered, lowered)


def host_defaults() -> PlatformDefaults:
    """Describe the running host as a (os, arch, abi) triple."""
    return PlatformDefaults(
        architecture=normalize_arch(platform.machine()),
        operating_system=sys.platform,
        abi_version=f"{sys.version_info.major}.{sys.version_info.minor}",
    )
