"""Turn a snippet template into inserted text plus tab-stop ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from editor_profile.runtime.telemetry import span

from .models import Expansion, Placeholder, Snippet, TabStop


@dataclass(frozen=True, slots=True)
class ExpansionContext:
    """Cursor context the snippet is expanded into.

    ``indent`` prefixes every continuation line; ``tab_width`` converts
    literal tabs into spaces when the buffer expands tabs.
    """

    indent: str = ""
    tab_width: Optional[int] = None

    @classmethod
    def from_line(cls, line: str, *, tab_width: Optional[int] = None) -> "ExpansionContext":
        stripped = line.lstrip(" \t")
        return cls(indent=line[: len(line) - len(stripped)], tab_width=tab_width)

    def render(self, text: str) -> str:
        if self.tab_width is not None:
            text = text.replace("\t", " " * self.tab_width)
        if self.indent:
            text = text.replace("\n", "\n" + self.indent)
        return text


def expand(snippet: Snippet, context: Optional[ExpansionContext] = None) -> Expansion:
    """Render ``snippet`` and record one tab stop per placeholder.

    Tab stops are ordered by ascending placeholder index; placeholders that
    share an index keep their textual order.
    """

    ctx = context or ExpansionContext()
    with span(
        "snippets::expand",
        component="snippets",
        metadata={"trigger": snippet.trigger},
    ) as handle:
        pieces: list[str] = []
        stops: list[TabStop] = []
        offset = 0
        for segment in snippet.body:
            if isinstance(segment, Placeholder):
                rendered = ctx.render(segment.default)
                stops.append(TabStop(segment.index, offset, offset + len(rendered)))
            else:
                rendered = ctx.render(segment.value)
            pieces.append(rendered)
            offset += len(rendered)

        stops.sort(key=lambda stop: stop.index)
        handle.add_metadata("tab_stops", len(stops))
        return Expansion(snippet=snippet, text="".join(pieces), tab_stops=tuple(stops))


__all__ = ["ExpansionContext", "expand"]
