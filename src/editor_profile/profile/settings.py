"""Immutable editor settings built before any plugin initialises."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

ENV_PREFIX = "EDITOR_PROFILE_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _default_capabilities() -> Mapping[str, Any]:
    return MappingProxyType(
        {
            "textDocument": {
                "completion": {
                    "completionItem": {
                        "snippetSupport": True,
                        "resolveSupport": {
                            "properties": ["documentation", "detail", "additionalTextEdits"]
                        },
                    }
                }
            }
        }
    )


@dataclass(frozen=True, slots=True)
class EditorOptions:
    """Core editor options applied with ``Host.set_option``."""

    tabstop: int = 4
    shiftwidth: int = 4
    expandtab: bool = True
    number: bool = True
    relativenumber: bool = True
    mouse: str = "a"
    ignorecase: bool = True
    smartcase: bool = True
    wrap: bool = False
    encoding: str = "utf-8"
    fileencoding: str = "utf-8"
    undofile: bool = True
    cursorline: bool = True
    scrolloff: int = 8
    signcolumn: str = "yes"

    def items(self) -> Iterator[tuple[str, object]]:
        for item in fields(self):
            yield item.name, getattr(self, item.name)


@dataclass(frozen=True, slots=True)
class SnippetSettings:
    enable_autosnippets: bool = True
    store_selection_keys: str = "<Tab>"
    paths: tuple[str, ...] = ("~/.config/nvim/LuaSnip/",)


@dataclass(frozen=True, slots=True)
class LspSettings:
    ensure_installed: tuple[str, ...] = ("ruff", "lua_ls", "pyright")
    capabilities: Mapping[str, Any] = field(default_factory=_default_capabilities)


@dataclass(frozen=True, slots=True)
class ExternalTools:
    interpreter: str = "python"
    pdf_viewer: str = "skim"
    git: str = "git"


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Everything the profile and plugin callbacks read.

    Instances are never mutated; overrides produce a new value through
    ``dataclasses.replace``.
    """

    options: EditorOptions = field(default_factory=EditorOptions)
    leader: str = " "
    local_leader: str = " "
    colorscheme: str = "tokyonight-night"
    fallback_colorscheme: str = "default"
    snippets: SnippetSettings = field(default_factory=SnippetSettings)
    lsp: LspSettings = field(default_factory=LspSettings)
    tools: ExternalTools = field(default_factory=ExternalTools)


def _flag(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got '{raw}'")


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    *,
    base: Optional[EditorSettings] = None,
) -> EditorSettings:
    """Build settings from ``EDITOR_PROFILE_*`` variables on top of ``base``.

    Recognised names: ``LEADER``, ``LOCAL_LEADER``, ``COLORSCHEME``,
    ``INTERPRETER``, ``PDF_VIEWER``, ``AUTOSNIPPETS`` and ``SNIPPET_PATHS``
    (``os.pathsep`` separated).
    """

    env = os.environ if environ is None else environ
    settings = base or EditorSettings()

    def get(name: str) -> Optional[str]:
        return env.get(f"{ENV_PREFIX}{name}")

    top: dict[str, Any] = {}
    for name, attr in (("LEADER", "leader"), ("LOCAL_LEADER", "local_leader")):
        value = get(name)
        if value is not None:
            top[attr] = value
    colorscheme = get("COLORSCHEME")
    if colorscheme:
        top["colorscheme"] = colorscheme

    tools: dict[str, Any] = {}
    for name, attr in (("INTERPRETER", "interpreter"), ("PDF_VIEWER", "pdf_viewer")):
        value = get(name)
        if value:
            tools[attr] = value
    if tools:
        top["tools"] = replace(settings.tools, **tools)

    snippets: dict[str, Any] = {}
    auto = get("AUTOSNIPPETS")
    if auto is not None:
        snippets["enable_autosnippets"] = _flag(auto, "AUTOSNIPPETS")
    paths = get("SNIPPET_PATHS")
    if paths:
        snippets["paths"] = tuple(p for p in paths.split(os.pathsep) if p)
    if snippets:
        top["snippets"] = replace(settings.snippets, **snippets)

    return replace(settings, **top) if top else settings


__all__ = [
    "ENV_PREFIX",
    "EditorOptions",
    "EditorSettings",
    "ExternalTools",
    "LspSettings",
    "SnippetSettings",
    "load_settings",
]
