"""Autocommands created once all plugins are loaded."""

from __future__ import annotations

from editor_profile.actions import (
    HighlightYank,
    LspMethod,
    LspRequest,
    SetFiletype,
    SyncFileTree,
)
from editor_profile.wiring import Autocmd

AUTOCMDS: tuple[Autocmd, ...] = (
    Autocmd(
        ("VimResized",),
        SyncFileTree(),
        description="Auto-resize the file tree when the window changes",
    ),
    Autocmd(
        ("BufNewFile", "BufRead"),
        SetFiletype("python"),
        pattern="*.py",
        description="Ensure the python filetype",
    ),
    Autocmd(
        ("BufWritePre",),
        LspRequest(LspMethod.FORMAT, asynchronous=True),
        pattern="*.py",
        description="Format on save",
    ),
    Autocmd(
        ("TextYankPost",),
        HighlightYank("IncSearch", 150),
        group="YankHighlight",
        description="Highlight yanked text",
    ),
)

__all__ = ["AUTOCMDS"]
