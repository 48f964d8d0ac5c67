"""Built-in LaTeX snippets."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .loader import LoadReport, load_definitions
from .registry import SnippetRegistry

LATEX_FILETYPE = "tex"

# The "item" record carries "strig" instead of "trig" and therefore never
# registers a trigger. It is kept as-is and surfaces as a skipped definition.
LATEX_SNIPPETS: tuple[Mapping[str, Any], ...] = (
    {
        "trig": "ff",
        "snippetType": "autosnippet",
        "dscr": "Simple fraction",
        "body": ["\\frac{", {"insert": 1}, "}{", {"insert": 2}, "}"],
    },
    {
        "trig": "eq",
        "dscr": "Equation block",
        "body": [
            ["\\begin{equation}", " "],
            {"insert": 1},
            ["", "\\end{equation}"],
        ],
    },
    {
        "strig": "item",
        "dscr": "Itemize block",
        "body": [
            ["\\begin{itemize}", " \\item "],
            {"insert": 1},
            ["", "\\end{itemize}"],
        ],
    },
    {
        "trig": "tbb",
        "snippetType": "autosnippet",
        "dscr": "Bold text",
        "body": ["\\textbf{", {"insert": 1}, "}"],
    },
    {
        "trig": "tii",
        "snippetType": "autosnippet",
        "dscr": "Italic text",
        "body": ["\\textit{", {"insert": 1}, "}"],
    },
)


def load_default_snippets(
    registry: SnippetRegistry,
    *,
    replace: bool = False,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> LoadReport:
    """Register the LaTeX snippets, optionally filtered by trigger."""

    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    records = [
        record
        for record in LATEX_SNIPPETS
        if _selected(record.get("trig"), include_set, exclude_set)
    ]
    return load_definitions(
        registry,
        records,
        filetype=LATEX_FILETYPE,
        source="defaults:tex",
        replace=replace,
    )


def _selected(trigger: Any, include: set[str] | None, exclude: set[str]) -> bool:
    # Records without a trigger are kept so the loader can report them.
    if trigger is None:
        return include is None
    if include is not None and trigger not in include:
        return False
    return trigger not in exclude


__all__ = ["LATEX_FILETYPE", "LATEX_SNIPPETS", "load_default_snippets"]
