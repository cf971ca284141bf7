import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from nativebin.cli import build_orchestrator, main
from nativebin.models import ValidationResult
from nativebin.observability import StructuredLogger
from nativebin.platform import PlatformDefaults
from nativebin.settings import Settings

LINUX_X64 = PlatformDefaults(architecture="x64", operating_system="linux", abi_version="7.4")
KEY = "linux-x64-abi-7.4"


@pytest.fixture(autouse=True)
def pinned_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("nativebin.cli.host_defaults", lambda: LINUX_X64)


def _environ(root: Path, **extra: str) -> dict[str, str]:
    return {"NATIVEBIN_ROOT": str(root), **extra}


def test_fresh_install_builds_and_relocates(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    driver = install_fake_driver(produce=tmp_path / "build" / "Release" / "binding.node")

    exit_code = main([], _environ(tmp_path))

    installed = tmp_path / "bin" / KEY / "binding.node"
    assert exit_code == 0
    assert installed.read_bytes() == b"fresh-binary"
    assert driver.calls == [["node-gyp", "rebuild"]]
    assert f"Installed in `{installed}`" in capsys.readouterr().out


def test_force_rebuild_overwrites_accepted_artifact(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    installed = tmp_path / "bin" / KEY / "binding.node"
    installed.parent.mkdir(parents=True)
    installed.write_bytes(b"previously-accepted")

    def _suite_must_not_run(self: object, artifact: Path) -> ValidationResult:
        raise AssertionError("validation must be skipped when forced")

    monkeypatch.setattr("nativebin.validate.PytestSuiteRunner.run", _suite_must_not_run)
    driver = install_fake_driver(produce=tmp_path / "build" / "Release" / "binding.node")

    exit_code = main(["--force", "--jobs=2"], _environ(tmp_path))

    assert exit_code == 0
    assert driver.calls == [["node-gyp", "rebuild", "--jobs=2"]]
    assert installed.read_bytes() == b"fresh-binary"


def test_missing_driver_exits_127(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    install_fake_driver(returncode=127)

    exit_code = main([], _environ(tmp_path))

    assert exit_code == 127
    assert "node-gyp not found!" in capsys.readouterr().err
    assert not (tmp_path / "bin").exists()


def test_build_failure_exit_code_is_propagated(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
) -> None:
    install_fake_driver(returncode=3)

    assert main([], _environ(tmp_path)) == 3


def test_contract_violation_exits_1(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    install_fake_driver(returncode=0, produce=None)

    exit_code = main([], _environ(tmp_path))

    assert exit_code == 1
    assert "Build succeeded but target not found" in capsys.readouterr().err


def test_skip_signal_does_nothing(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
) -> None:
    driver = install_fake_driver()

    exit_code = main([], _environ(tmp_path, NATIVEBIN_SKIP_TESTS="true"))

    assert exit_code == 0
    assert driver.calls == []


def test_installed_artifact_is_validated_with_suite(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    installed = tmp_path / "bin" / KEY / "binding.node"
    installed.parent.mkdir(parents=True)
    installed.write_bytes(b"good-binary")
    suite = tmp_path / "tests" / "test_api.py"
    suite.parent.mkdir()
    suite.write_text(
        "def test_loads(native_artifact):\n"
        "    assert native_artifact.read_bytes() == b'good-binary'\n",
        encoding="utf-8",
    )
    driver = install_fake_driver()

    exit_code = main([], _environ(tmp_path))

    assert exit_code == 0
    assert driver.calls == []
    assert "Binary is fine; exiting" in capsys.readouterr().out


def test_log_file_receives_structured_records(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
) -> None:
    install_fake_driver(produce=tmp_path / "build" / "Release" / "binding.node")
    log_file = tmp_path / "logs" / "nativebin.jsonl"

    main([], _environ(tmp_path, NATIVEBIN_LOG_FILE=str(log_file)))

    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert {record["phase"] for record in records} >= {"resolve", "build", "install"}
    assert all(record["platform_key"] == KEY for record in records)


def test_unwritable_log_file_keeps_run_exit_code(
    tmp_path: Path,
    install_fake_driver: Callable[..., Any],
    capsys: pytest.CaptureFixture[str],
) -> None:
    install_fake_driver(returncode=127)
    # A regular file in the parent position makes the export fail.
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    log_file = blocker / "nativebin.jsonl"

    exit_code = main([], _environ(tmp_path, NATIVEBIN_LOG_FILE=str(log_file)))

    assert exit_code == 127
    err = capsys.readouterr().err
    assert "node-gyp not found!" in err
    assert f"Could not write log file `{log_file}`" in err
    assert not log_file.exists()


def test_build_orchestrator_wires_settings(tmp_path: Path) -> None:
    settings = Settings.from_env(_environ(tmp_path, NATIVEBIN_BUILD_DRIVER="cmake-js"))

    orchestrator = build_orchestrator(["--debug", "-f"], settings, StructuredLogger())

    assert orchestrator.config.debug is True
    assert orchestrator.config.force_rebuild is True
    assert orchestrator.config.passthrough_args == ("--debug",)
    assert orchestrator.pipeline.driver == "cmake-js"
    assert orchestrator.pipeline.cwd == tmp_path.resolve()
    assert orchestrator.layout == settings.layout()
