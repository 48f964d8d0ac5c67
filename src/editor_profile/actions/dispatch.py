"""Single dispatch point translating editor actions into host calls."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING

from editor_profile.runtime.telemetry import span

from .variants import (
    DiagnosticJump,
    EditorAction,
    ExCommand,
    HighlightYank,
    LspRequest,
    OpenPicker,
    RunCurrentFile,
    SetFiletype,
    SnippetExpandOrJump,
    SnippetJump,
    SyncFileTree,
    ToggleTerminal,
)

if TYPE_CHECKING:  # pragma: no cover
    from editor_profile.wiring.host import Host


class ActionError(RuntimeError):
    """Raised when an action cannot run in the current host state."""


def build_run_command(interpreter: str, path: str) -> str:
    """Terminal command line running ``path`` with ``interpreter``."""

    return f"{interpreter} {shlex.quote(path)}"


def dispatch(action: EditorAction, host: "Host") -> object:
    with span(
        "actions::dispatch",
        component="actions",
        metadata={"action": getattr(action, "label", type(action).__name__)},
    ):
        if isinstance(action, LspRequest):
            params = {"async": True} if action.asynchronous else {}
            return host.lsp_request(action.method.value, params)
        if isinstance(action, DiagnosticJump):
            method = "goto_next" if action.direction > 0 else "goto_prev"
            return host.lsp_request(f"diagnostic.{method}", {})
        if isinstance(action, OpenPicker):
            return host.open_picker(action.picker.value)
        if isinstance(action, ExCommand):
            return host.run_ex(action.command)
        if isinstance(action, ToggleTerminal):
            return host.toggle_terminal(action.direction, action.size)
        if isinstance(action, RunCurrentFile):
            path = host.current_file()
            if not path:
                raise ActionError("No file is associated with the current buffer")
            host.toggle_terminal(action.direction, action.size)
            return host.send_to_terminal(build_run_command(action.interpreter, path))
        if isinstance(action, SnippetExpandOrJump):
            return host.snippet_expand_or_jump()
        if isinstance(action, SnippetJump):
            return host.snippet_jump(action.direction)
        if isinstance(action, SetFiletype):
            return host.set_buffer_option("filetype", action.filetype)
        if isinstance(action, HighlightYank):
            return host.highlight_yank(action.group, action.timeout_ms)
        if isinstance(action, SyncFileTree):
            return host.call_plugin("nvim-tree.api", "view.sync")
        raise TypeError(f"Unsupported action {action!r}")


__all__ = ["ActionError", "build_run_command", "dispatch"]
