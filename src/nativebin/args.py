"""Invocation argument interpretation."""

from __future__ import annotations

from collections.abc import Sequence

from nativebin.models import BuildConfig
from nativebin.platform import PlatformDefaults

FORCE_FLAGS = frozenset({"-f", "--force"})
TARGET_ARCH_PREFIX = "--target_arch"
DEBUG_FLAG = "--debug"


def parse_args(args: Sequence[str], defaults: PlatformDefaults) -> BuildConfig:
    """Build a :class:`BuildConfig` from raw process arguments.

    Tokens are read left to right. ``-f``/``--force`` is consumed; every other
    token, including ``--debug`` and ``--target_arch=<arch>``, is forwarded
    verbatim and in order to the build driver. Flag values are not validated.
    """
    architecture = defaults.architecture
    debug = False
    force_rebuild = False
    passthrough: list[str] = []

    for arg in args:
        if arg in FORCE_FLAGS:
            force_rebuild = True
            continue
        if arg.startswith(TARGET_ARCH_PREFIX):
            _, _, architecture = arg.partition("=")
        elif arg == DEBUG_FLAG:
            debug = True
        passthrough.append(arg)

    return BuildConfig(
        architecture=architecture,
        operating_system=defaults.operating_system,
        abi_version=defaults.abi_version,
        debug=debug,
        force_rebuild=force_rebuild,
        passthrough_args=tuple(passthrough),
    )
