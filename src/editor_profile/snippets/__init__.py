"""Snippet registry, expansion and tab-stop navigation."""

from .models import ALL_FILETYPES, Expansion, Placeholder, Segment, Snippet, TabStop, Text
from .registry import (
    RegistryFrozenError,
    RegistryStats,
    SnippetConflictError,
    SnippetRegistry,
)
from .expansion import ExpansionContext, expand
from .session import SnippetSession
from .loader import (
    LoadReport,
    SkippedDefinition,
    SnippetDefinitionError,
    load_definitions,
    load_directory,
    load_file,
)
from .defaults import LATEX_FILETYPE, load_default_snippets
from .engine import KeyResult, SnippetEngine

__all__ = [
    "ALL_FILETYPES",
    "Expansion",
    "Placeholder",
    "Segment",
    "Snippet",
    "TabStop",
    "Text",
    "RegistryFrozenError",
    "RegistryStats",
    "SnippetConflictError",
    "SnippetRegistry",
    "ExpansionContext",
    "expand",
    "SnippetSession",
    "LoadReport",
    "SkippedDefinition",
    "SnippetDefinitionError",
    "load_definitions",
    "load_directory",
    "load_file",
    "LATEX_FILETYPE",
    "load_default_snippets",
    "KeyResult",
    "SnippetEngine",
]
