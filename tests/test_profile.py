import os

import pytest

from editor_profile.actions import LspMethod, LspRequest
from editor_profile.keymaps import KeymapResolver
from editor_profile.profile import (
    EditorSettings,
    SnippetSettings,
    apply_profile,
    load_settings,
    server_configs,
)
from editor_profile.profile.lsp import OMNIFUNC, RUFF_ARGS
from editor_profile.snippets import RegistryFrozenError, Snippet, Text
from editor_profile.wiring import RecordingHost


def make_settings(**overrides) -> EditorSettings:
    overrides.setdefault("snippets", SnippetSettings(paths=()))
    return EditorSettings(**overrides)


def make_host(**kwargs) -> RecordingHost:
    kwargs.setdefault("colorschemes", ("default", "tokyonight-night"))
    return RecordingHost(**kwargs)


def test_options_and_leaders_are_applied() -> None:
    host = make_host()

    apply_profile(host, make_settings())

    assert host.options["tabstop"] == 4
    assert host.options["expandtab"] is True
    assert host.options["signcolumn"] == "yes"
    assert host.globals["mapleader"] == " "
    assert host.globals["maplocalleader"] == " "


def test_all_plugins_load_with_colorscheme_first() -> None:
    host = make_host()

    report = apply_profile(host, make_settings())

    assert report.plugins.ok
    assert report.plugins.order[0] == "folke/tokyonight.nvim"
    assert len(report.plugins.loaded) == len(report.plugins.order)
    assert host.active_colorscheme == "tokyonight-night"
    assert host.builds == [":TSUpdate"]
    assert host.plugin_setups["ibl"]["exclude"]["filetypes"][-1] == "lazy"
    assert host.plugin_setups["luasnip"]["enable_autosnippets"] is True


def test_vimtex_globals_use_configured_viewer() -> None:
    host = make_host()
    settings = load_settings({"EDITOR_PROFILE_PDF_VIEWER": "zathura"}, base=make_settings())

    apply_profile(host, settings)

    assert host.globals["vimtex_view_method"] == "zathura"
    assert host.globals["tex_flavor"] == "latex"
    assert host.globals["vimtex_compiler_method"] == "latexmk"


def test_missing_colorscheme_falls_back() -> None:
    host = RecordingHost()

    report = apply_profile(host, make_settings())

    assert report.plugins.ok
    assert host.active_colorscheme == "default"
    assert [n.level for n in host.notifications] == ["warn"]


def test_language_servers_follow_install_list() -> None:
    settings = make_settings()

    configs = server_configs(settings)

    assert [config.name for config in configs] == ["ruff", "lua_ls", "pyright"]
    assert tuple(configs[0].settings["args"]) == RUFF_ARGS
    assert configs[1].filetypes == ()
    completion = configs[2].capabilities["textDocument"]["completion"]
    assert completion["completionItem"]["snippetSupport"] is True


def test_attach_creates_buffer_local_bindings() -> None:
    host = make_host()
    apply_profile(host, make_settings())

    host.attach_language_server("pyright", buffer=3)

    local = [b for b in host.keymaps.iter_bindings("normal") if b.buffer == 3]
    assert len(local) == 11
    assert host.buffer_options[3]["omnifunc"] == OMNIFUNC
    resolver = KeymapResolver(host.keymaps)
    assert resolver.resolve("normal", ["g", "d"], buffer=3).match.id == "lsp.3.gd"
    format_keys = resolver.resolve("normal", ["SPACE", "f"], buffer=3)
    assert format_keys.ambiguous
    assert format_keys.match.action == LspRequest(LspMethod.FORMAT, asynchronous=True)
    assert resolver.resolve("normal", ["g", "d"], buffer=4).status == "miss"


def test_picker_and_tree_bindings() -> None:
    host = make_host()
    apply_profile(host, make_settings())
    resolver = KeymapResolver(host.keymaps)

    grep = resolver.resolve("normal", ["SPACE", "f", "g"])
    tree = resolver.resolve("normal", ["SPACE", "e"])

    assert grep.match.id == "telescope.live_grep"
    assert tree.match.id == "tree.toggle"


def test_python_run_sends_current_file_to_terminal() -> None:
    host = make_host(current_file="/work/main.py")
    apply_profile(host, make_settings())

    host.execute(host.keymaps.get_binding("terminal.run").action)

    assert host.terminal_open
    assert host.terminal_lines == ["python /work/main.py"]


def test_autocommands_match_python_files() -> None:
    host = make_host()
    apply_profile(host, make_settings())

    assert host.fire_autocmd("BufWritePre", "src/app.py") == 1
    assert host.fire_autocmd("BufWritePre", "notes.tex") == 0
    assert host.calls_named("lsp_request")[-1].args == ("format", {"async": True})
    assert host.fire_autocmd("TextYankPost") == 1


def test_snippet_bindings_and_frozen_registry() -> None:
    host = make_host()

    report = apply_profile(host, make_settings())

    assert report.bindings == ["snippet.expand_or_jump", "snippet.jump_next"]
    assert host.keymaps.get_binding("snippet.jump_next").mode == "select"
    assert report.snippets.triggers == ("ff", "eq", "tbb", "tii")
    assert len(report.snippets.skipped) == 1
    with pytest.raises(RegistryFrozenError):
        report.registry.register(Snippet("late", (Text("x"),), filetype="tex"))


def test_failing_plugin_does_not_stop_profile(monkeypatch) -> None:
    host = make_host()

    def broken_setup(module, options):
        if module == "lualine":
            raise RuntimeError("lualine missing")
        host.plugin_setups[module] = dict(options)

    monkeypatch.setattr(host, "setup_plugin", broken_setup)
    report = apply_profile(host, make_settings())

    assert report.plugins.failed("nvim-lualine/lualine.nvim")
    assert "toggleterm" in host.plugin_setups
    assert host.notifications[-1].level == "error"


def test_load_settings_reads_environment() -> None:
    env = {
        "EDITOR_PROFILE_LEADER": ",",
        "EDITOR_PROFILE_INTERPRETER": "python3",
        "EDITOR_PROFILE_AUTOSNIPPETS": "off",
        "EDITOR_PROFILE_SNIPPET_PATHS": os.pathsep.join(["/a", "/b"]),
    }

    settings = load_settings(env)

    assert settings.leader == ","
    assert settings.tools.interpreter == "python3"
    assert settings.snippets.enable_autosnippets is False
    assert settings.snippets.paths == ("/a", "/b")
    assert settings.colorscheme == "tokyonight-night"


def test_load_settings_rejects_bad_flag() -> None:
    with pytest.raises(ValueError):
        load_settings({"EDITOR_PROFILE_AUTOSNIPPETS": "maybe"})
