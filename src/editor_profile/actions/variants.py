"""Closed set of editor actions a binding, command or autocommand may carry."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union, get_args


class LspMethod(str, Enum):
    DEFINITION = "definition"
    DECLARATION = "declaration"
    REFERENCES = "references"
    IMPLEMENTATION = "implementation"
    HOVER = "hover"
    RENAME = "rename"
    CODE_ACTION = "code_action"
    FORMAT = "format"
    WORKSPACE_SYMBOL = "workspace_symbol"


class Picker(str, Enum):
    FIND_FILES = "find_files"
    LIVE_GREP = "live_grep"
    BUFFERS = "buffers"
    HELP_TAGS = "help_tags"
    DIAGNOSTICS = "diagnostics"


def _check_direction(direction: int) -> None:
    if direction not in (-1, 1):
        raise ValueError("direction must be -1 or 1")


@dataclass(frozen=True, slots=True)
class LspRequest:
    method: LspMethod
    asynchronous: bool = False

    @property
    def label(self) -> str:
        return f"lsp.{self.method.value}"


@dataclass(frozen=True, slots=True)
class DiagnosticJump:
    direction: int

    def __post_init__(self) -> None:
        _check_direction(self.direction)

    @property
    def label(self) -> str:
        return "diagnostic.next" if self.direction > 0 else "diagnostic.prev"


@dataclass(frozen=True, slots=True)
class OpenPicker:
    picker: Picker

    @property
    def label(self) -> str:
        return f"picker.{self.picker.value}"


@dataclass(frozen=True, slots=True)
class ExCommand:
    """Host command line, e.g. ``NvimTreeToggle`` or a user command."""

    command: str

    def __post_init__(self) -> None:
        if not self.command.strip():
            raise ValueError("command cannot be empty")

    @property
    def label(self) -> str:
        return f"ex.{self.command.split()[0]}"


@dataclass(frozen=True, slots=True)
class ToggleTerminal:
    direction: str = "float"
    size: int = 30

    @property
    def label(self) -> str:
        return "terminal.toggle"


@dataclass(frozen=True, slots=True)
class RunCurrentFile:
    """Run the current file with an external interpreter inside the terminal."""

    interpreter: str = "python"
    direction: str = "float"
    size: int = 30

    @property
    def label(self) -> str:
        return f"run.{self.interpreter}"


@dataclass(frozen=True, slots=True)
class SnippetExpandOrJump:
    @property
    def label(self) -> str:
        return "snippet.expand_or_jump"


@dataclass(frozen=True, slots=True)
class SnippetJump:
    direction: int = 1

    def __post_init__(self) -> None:
        _check_direction(self.direction)

    @property
    def label(self) -> str:
        return "snippet.jump_next" if self.direction > 0 else "snippet.jump_prev"


@dataclass(frozen=True, slots=True)
class SetFiletype:
    filetype: str

    @property
    def label(self) -> str:
        return f"filetype.{self.filetype}"


@dataclass(frozen=True, slots=True)
class HighlightYank:
    group: str = "IncSearch"
    timeout_ms: int = 150

    @property
    def label(self) -> str:
        return "highlight.yank"


@dataclass(frozen=True, slots=True)
class SyncFileTree:
    @property
    def label(self) -> str:
        return "tree.sync"


EditorAction = Union[
    LspRequest,
    DiagnosticJump,
    OpenPicker,
    ExCommand,
    ToggleTerminal,
    RunCurrentFile,
    SnippetExpandOrJump,
    SnippetJump,
    SetFiletype,
    HighlightYank,
    SyncFileTree,
]

ACTION_TYPES: tuple[type, ...] = get_args(EditorAction)


def is_action(value: object) -> bool:
    return isinstance(value, ACTION_TYPES)


__all__ = [
    "ACTION_TYPES",
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
    "is_action",
]
