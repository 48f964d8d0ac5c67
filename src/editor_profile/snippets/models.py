"""Dataclasses describing snippet templates and their expansions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union

ALL_FILETYPES = "all"


@dataclass(frozen=True, slots=True)
class Text:
    """Literal text segment; may span several lines."""

    value: str

    @classmethod
    def lines(cls, *lines: str) -> "Text":
        return cls("\n".join(lines))


@dataclass(frozen=True, slots=True)
class Placeholder:
    """Editable region visited in ascending ``index`` order.

    Placeholders sharing an index mirror each other.
    """

    index: int
    default: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.index, bool) or not isinstance(self.index, int):
            raise TypeError("placeholder index must be an integer")
        if self.index < 0:
            raise ValueError("placeholder index cannot be negative")


Segment = Union[Text, Placeholder]


def _normalize_body(body: Iterable[Segment]) -> tuple[Segment, ...]:
    segments = tuple(body)
    for segment in segments:
        if not isinstance(segment, (Text, Placeholder)):
            raise TypeError(f"unsupported snippet segment {segment!r}")
    return segments


@dataclass(frozen=True, slots=True)
class Snippet:
    """Trigger-to-template mapping."""

    trigger: str
    body: tuple[Segment, ...]
    auto_expand: bool = False
    filetype: str = ALL_FILETYPES
    description: str = ""
    word_trigger: bool = True

    def __post_init__(self) -> None:
        if not self.trigger:
            raise ValueError("snippet trigger cannot be empty")
        if any(ch.isspace() for ch in self.trigger):
            raise ValueError(f"snippet trigger '{self.trigger}' contains whitespace")
        if not self.filetype:
            raise ValueError("snippet filetype cannot be empty")
        object.__setattr__(self, "body", _normalize_body(self.body))

    @property
    def placeholders(self) -> tuple[Placeholder, ...]:
        return tuple(seg for seg in self.body if isinstance(seg, Placeholder))

    @property
    def tab_stop_indices(self) -> tuple[int, ...]:
        return tuple(sorted({p.index for p in self.placeholders}))


@dataclass(frozen=True, slots=True)
class TabStop:
    """Placeholder range inside the inserted text, ``[start, end)``."""

    index: int
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def shifted(self, delta: int) -> "TabStop":
        return TabStop(self.index, self.start + delta, self.end + delta)


@dataclass(frozen=True, slots=True)
class Expansion:
    snippet: Snippet
    text: str
    tab_stops: tuple[TabStop, ...]

    def mirrors(self, index: int) -> tuple[TabStop, ...]:
        return tuple(stop for stop in self.tab_stops if stop.index == index)


__all__ = [
    "ALL_FILETYPES",
    "Text",
    "Placeholder",
    "Segment",
    "Snippet",
    "TabStop",
    "Expansion",
]
