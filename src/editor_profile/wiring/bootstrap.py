"""First-run bootstrap of the plugin manager checkout."""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from editor_profile.runtime.telemetry import record_event

LAZY_URL = "https://github.com/folke/lazy.nvim.git"

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class BootstrapError(RuntimeError):
    """Raised when the plugin manager checkout cannot be created."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        super().__init__(
            f"Command failed ({returncode}): {shlex.join(list(argv))}\n{stderr}".rstrip()
        )
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr


def plugin_manager_path(data_dir: Path | str) -> Path:
    return Path(data_dir).expanduser() / "lazy" / "lazy.nvim"


def clone_command(url: str, target: Path) -> list[str]:
    return ["git", "clone", "--filter=blob:none", url, str(target)]


def ensure_plugin_manager(
    data_dir: Path | str,
    *,
    runner: Runner = subprocess.run,
    url: str = LAZY_URL,
    git: str = "git",
    dry_run: bool = False,
) -> Path:
    """Clone the plugin manager under ``data_dir`` unless it is present.

    Returns the checkout path. Running it again once the checkout exists
    does nothing.
    """

    target = plugin_manager_path(data_dir)
    if target.exists():
        record_event("bootstrap.present", level="debug", data={"path": str(target)})
        return target

    argv = clone_command(url, target)
    argv[0] = git
    record_event(
        "bootstrap.clone",
        level="info",
        data={"command": shlex.join(argv), "dry_run": dry_run},
    )
    if dry_run:
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    try:
        completed = runner(argv, text=True, capture_output=True, check=False)
    except OSError as exc:
        raise BootstrapError(argv, -1, str(exc)) from exc
    if completed.returncode != 0:
        raise BootstrapError(argv, completed.returncode, completed.stderr or "")
    return target


__all__ = [
    "LAZY_URL",
    "BootstrapError",
    "clone_command",
    "ensure_plugin_manager",
    "plugin_manager_path",
]
