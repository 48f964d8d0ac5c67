import subprocess
from pathlib import Path

import pytest

from editor_profile.wiring import (
    LAZY_URL,
    BootstrapError,
    ensure_plugin_manager,
    plugin_manager_path,
)


class FakeRunner:
    def __init__(self, returncode: int = 0, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.calls = []

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        return subprocess.CompletedProcess(argv, self.returncode, "", self.stderr)


def test_clones_when_checkout_is_missing(tmp_path: Path) -> None:
    runner = FakeRunner()

    target = ensure_plugin_manager(tmp_path, runner=runner)

    assert target == tmp_path / "lazy" / "lazy.nvim"
    argv, kwargs = runner.calls[0]
    assert argv == ["git", "clone", "--filter=blob:none", LAZY_URL, str(target)]
    assert kwargs["check"] is False


def test_existing_checkout_is_left_alone(tmp_path: Path) -> None:
    plugin_manager_path(tmp_path).mkdir(parents=True)
    runner = FakeRunner()

    ensure_plugin_manager(tmp_path, runner=runner)

    assert runner.calls == []


def test_failed_clone_raises(tmp_path: Path) -> None:
    runner = FakeRunner(returncode=128, stderr="fatal: unable to access")

    with pytest.raises(BootstrapError) as excinfo:
        ensure_plugin_manager(tmp_path, runner=runner)

    assert excinfo.value.returncode == 128
    assert "unable to access" in str(excinfo.value)


def test_missing_git_is_wrapped(tmp_path: Path) -> None:
    def runner(argv, **kwargs):
        raise FileNotFoundError("git")

    with pytest.raises(BootstrapError):
        ensure_plugin_manager(tmp_path, runner=runner, git="no-such-git")


def test_dry_run_does_not_touch_disk(tmp_path: Path) -> None:
    runner = FakeRunner()

    target = ensure_plugin_manager(tmp_path / "data", runner=runner, dry_run=True)

    assert runner.calls == []
    assert not target.parent.exists()
