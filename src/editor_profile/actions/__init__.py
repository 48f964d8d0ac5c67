"""Editor actions and their dispatcher."""

from .variants import (
    ACTION_TYPES,
    DiagnosticJump,
    EditorAction,
    ExCommand,
    HighlightYank,
    LspMethod,
    LspRequest,
    OpenPicker,
    Picker,
    RunCurrentFile,
    SetFiletype,
    SnippetExpandOrJump,
    SnippetJump,
    SyncFileTree,
    ToggleTerminal,
    is_action,
)
from .dispatch import ActionError, build_run_command, dispatch

__all__ = [
    "ACTION_TYPES",
    "ActionError",
    "DiagnosticJump",
    "EditorAction",
    "ExCommand",
    "HighlightYank",
    "LspMethod",
    "LspRequest",
    "OpenPicker",
    "Picker",
    "RunCurrentFile",
    "SetFiletype",
    "SnippetExpandOrJump",
    "SnippetJump",
    "SyncFileTree",
    "ToggleTerminal",
    "build_run_command",
    "dispatch",
    "is_action",
]
