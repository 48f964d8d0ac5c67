import json

import pytest

from editor_profile import cli
from editor_profile.runtime import telemetry


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    monkeypatch.setenv("EDITOR_PROFILE_SNIPPET_PATHS", str(tmp_path / "none"))
    monkeypatch.setenv("EDITOR_PROFILE_DISABLE_CONSOLE", "1")
    telemetry.configure()
    yield
    monkeypatch.delenv("EDITOR_PROFILE_DISABLE_CONSOLE")
    telemetry.configure()


def test_plan_lists_colorscheme_first(capsys) -> None:
    assert cli.main(["plan"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(" 1. folke/tokyonight.nvim")
    assert "priority=1000" in lines[0]
    assert len(lines) == 18


def test_expand_prints_text_and_stops(capsys) -> None:
    assert cli.main(["expand", "ff"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["\\frac{}{}", "$1 [6, 6)", "$2 [8, 8)"]


def test_expand_unknown_trigger(capsys) -> None:
    assert cli.main(["expand", "nope"]) == 1
    assert "no snippet 'nope'" in capsys.readouterr().out


def test_snippets_lists_defaults_and_skips(capsys) -> None:
    assert cli.main(["snippets", "--filetype", "tex"]) == 0

    out = capsys.readouterr().out
    assert "ff" in out and "auto" in out
    assert "skipped #" in out


def test_apply_json_summary(capsys) -> None:
    code = cli.main(["apply", "--json"])

    summary = json.loads(capsys.readouterr().out)
    assert code == 0
    assert summary["colorscheme"] == "tokyonight-night"
    assert summary["language_servers"] == ["lua_ls", "pyright", "ruff"]
    assert summary["user_commands"] == ["PythonRun"]
    assert summary["snippets"] == ["ff", "eq", "tbb", "tii"]


def test_bootstrap_dry_run(capsys, tmp_path) -> None:
    assert cli.main(["bootstrap", "--data-dir", str(tmp_path), "--dry-run"]) == 0
    assert capsys.readouterr().out.strip().endswith("lazy/lazy.nvim")
