"""The editor profile: settings, plugin table, bindings and autocommands."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from editor_profile.actions import SnippetExpandOrJump, SnippetJump
from editor_profile.buffer import Buffer
from editor_profile.keymaps import Binding, KeySequence
from editor_profile.runtime.bus import EventBus
from editor_profile.runtime.telemetry import record_event, span
from editor_profile.snippets import (
    LoadReport,
    SnippetEngine,
    SnippetRegistry,
    load_default_snippets,
    load_directory,
)
from editor_profile.wiring import Host, PluginLoadReport, PluginManager

from .autocmds import AUTOCMDS
from .lsp import attach_bindings, make_on_attach, server_configs
from .plugins import PLUGIN_TABLE
from .settings import (
    EditorOptions,
    EditorSettings,
    ExternalTools,
    LspSettings,
    SnippetSettings,
    load_settings,
)


@dataclass(slots=True)
class ProfileReport:
    settings: EditorSettings
    plugins: PluginLoadReport
    snippets: LoadReport
    registry: SnippetRegistry
    bindings: list[str] = field(default_factory=list)


def snippet_bindings(settings: EditorSettings) -> list[Binding]:
    """Insert-mode expand-or-jump and select-mode jump on the selection key."""

    keys = settings.snippets.store_selection_keys
    sequence = KeySequence.parse(
        keys, leader=settings.leader, local_leader=settings.local_leader
    )
    return [
        Binding(
            id="snippet.expand_or_jump",
            mode="insert",
            sequence=sequence,
            action=SnippetExpandOrJump(),
            description="Expand snippet or jump to next placeholder",
            source="luasnip",
        ),
        Binding(
            id="snippet.jump_next",
            mode="select",
            sequence=sequence,
            action=SnippetJump(1),
            description="Jump to next placeholder",
            source="luasnip",
        ),
    ]


def load_snippets(
    registry: SnippetRegistry, settings: EditorSettings
) -> LoadReport:
    """Built-in snippets first, then files under the configured paths.

    Files on the snippet paths replace built-in triggers of the same name.
    """

    report = load_default_snippets(registry)
    for path in settings.snippets.paths:
        report.merge(load_directory(registry, Path(path), replace=True))
    return report


def apply_profile(
    host: Host,
    settings: Optional[EditorSettings] = None,
    snippet_registry: Optional[SnippetRegistry] = None,
    *,
    strict: bool = False,
) -> ProfileReport:
    """Apply the whole profile to ``host``.

    Options and leaders are set before any plugin initialises. The snippet
    registry is frozen on return.
    """

    settings = settings or load_settings()
    registry = snippet_registry or SnippetRegistry()

    with span("profile::apply", component="profile"):
        for name, value in settings.options.items():
            host.set_option(name, value)
        host.set_global("mapleader", settings.leader)
        host.set_global("maplocalleader", settings.local_leader)

        plugins = PluginManager(host, settings, strict=strict).load(PLUGIN_TABLE)

        for autocmd in AUTOCMDS:
            host.create_autocmd(autocmd)

        host.setup_plugin(
            "luasnip",
            {
                "enable_autosnippets": settings.snippets.enable_autosnippets,
                "store_selection_keys": settings.snippets.store_selection_keys,
            },
        )
        snippets = load_snippets(registry, settings)
        bound = [host.set_keymap(binding).id for binding in snippet_bindings(settings)]
        registry.freeze()

    record_event(
        "profile.applied",
        data={
            "plugins": len(plugins.loaded),
            "failures": len(plugins.failures),
            "snippets": len(snippets.registered),
            "skipped_snippets": len(snippets.skipped),
        },
    )
    return ProfileReport(
        settings=settings,
        plugins=plugins,
        snippets=snippets,
        registry=registry,
        bindings=bound,
    )


def build_engine(
    registry: SnippetRegistry,
    buffer: Buffer,
    settings: Optional[EditorSettings] = None,
    *,
    bus: EventBus | None = None,
) -> SnippetEngine:
    settings = settings or EditorSettings()
    options = settings.options
    return SnippetEngine(
        registry,
        buffer,
        autosnippets=settings.snippets.enable_autosnippets,
        tab_width=options.tabstop if options.expandtab else None,
        bus=bus,
    )


__all__ = [
    "AUTOCMDS",
    "PLUGIN_TABLE",
    "EditorOptions",
    "EditorSettings",
    "ExternalTools",
    "LspSettings",
    "ProfileReport",
    "SnippetSettings",
    "apply_profile",
    "attach_bindings",
    "build_engine",
    "load_settings",
    "load_snippets",
    "make_on_attach",
    "server_configs",
    "snippet_bindings",
]
