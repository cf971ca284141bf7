"""Pytest plugin exposing the artifact under validation to behavioural suites."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

ARTIFACT_ENV = "NATIVEBIN_ARTIFACT"


@pytest.fixture
def native_artifact() -> Path:
    """Path of the installed artifact the suite is validating."""
    value = os.environ.get(ARTIFACT_ENV)
    if not value:
        pytest.skip(f"{ARTIFACT_ENV} is not set; no artifact under validation.")
    return Path(value)
