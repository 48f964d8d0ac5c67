import pytest

from editor_profile.profile import EditorSettings
from editor_profile.wiring import (
    PluginConfigError,
    PluginManager,
    PluginSpec,
    RecordingHost,
)


def make_manager(*, strict: bool = False, **host_kwargs):
    host = RecordingHost(**host_kwargs)
    return PluginManager(host, EditorSettings(), strict=strict), host


def test_config_runs_once_after_install() -> None:
    manager, host = make_manager()
    seen = []

    def config(context) -> None:
        seen.append((context.spec.id, context.spec.id in host.installed))

    spec = PluginSpec("a/app", dependencies=("b/lib",), config=config)
    report = manager.load([spec])
    again = manager.load([spec])

    assert seen == [("a/app", True)]
    assert report.order == ("b/lib", "a/app")
    assert report.loaded == ["b/lib", "a/app"]
    assert report.installed == ["b/lib", "a/app"]
    assert again.skipped == ["b/lib", "a/app"]
    assert manager.is_configured("a/app")


def test_init_hooks_run_before_any_install() -> None:
    manager, host = make_manager()
    installed_at_init = []

    def init(context) -> None:
        installed_at_init.append(sorted(host.installed))
        context.host.set_global("vimtex_view_method", "skim")

    manager.load([PluginSpec("a/first"), PluginSpec("b/tex", init=init)])

    assert installed_at_init == [[]]
    assert host.globals["vimtex_view_method"] == "skim"


def test_failing_config_is_reported_and_loading_continues() -> None:
    manager, host = make_manager()

    def broken(context) -> None:
        raise RuntimeError("boom")

    report = manager.load(
        [PluginSpec("a/broken", config=broken), PluginSpec("b/fine")]
    )

    assert not report.ok
    assert report.failed("a/broken")
    assert report.failures[0].stage == "config"
    assert report.loaded == ["b/fine"]
    assert host.notifications[-1].level == "error"
    assert "a/broken" in host.notifications[-1].message


def test_strict_manager_raises() -> None:
    manager, _ = make_manager(strict=True)

    def broken(context) -> None:
        raise ValueError("bad opts")

    with pytest.raises(PluginConfigError) as excinfo:
        manager.load([PluginSpec("a/broken", config=broken)])

    assert excinfo.value.plugin_id == "a/broken"
    assert excinfo.value.stage == "config"


def test_opts_without_config_use_module_setup() -> None:
    manager, host = make_manager()

    manager.load(
        [PluginSpec("lukas-reineke/indent-blankline.nvim", main="ibl", opts={"enabled": True})]
    )

    assert host.plugin_setups == {"ibl": {"enabled": True}}


def test_build_runs_only_on_first_install() -> None:
    manager, host = make_manager(installed=["nvim-treesitter/nvim-treesitter"])

    report = manager.load(
        [PluginSpec("nvim-treesitter/nvim-treesitter", build=":TSUpdate")]
    )

    assert report.installed == []
    assert host.builds == []

    fresh_manager, fresh_host = make_manager()
    fresh_manager.load([PluginSpec("nvim-treesitter/nvim-treesitter", build=":TSUpdate")])
    assert fresh_host.builds == [":TSUpdate"]
