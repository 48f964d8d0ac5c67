"""Load declarative snippet records into a registry.

Records follow the snippet-engine's table format::

    {"trig": "ff", "snippetType": "autosnippet",
     "body": ["\\\\frac{", {"insert": 1}, "}{", {"insert": 2}, "}"]}

A body item is a string, a list of strings (one literal spanning several
lines), ``{"text": ...}`` or ``{"insert": n, "default": "..."}``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from editor_profile.runtime import telemetry

from .models import ALL_FILETYPES, Placeholder, Segment, Snippet, Text
from .registry import SnippetRegistry

AUTOSNIPPET = "autosnippet"
_KNOWN_TYPES = {AUTOSNIPPET, "snippet"}


class SnippetDefinitionError(ValueError):
    """Raised for malformed snippet records."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(f"{source}: {message}" if source else message)
        self.source = source


@dataclass(frozen=True, slots=True)
class SkippedDefinition:
    """A record that did not register a usable trigger."""

    source: str
    position: int
    keys: tuple[str, ...]
    reason: str


@dataclass(slots=True)
class LoadReport:
    registered: list[Snippet] = field(default_factory=list)
    skipped: list[SkippedDefinition] = field(default_factory=list)

    def merge(self, other: "LoadReport") -> "LoadReport":
        self.registered.extend(other.registered)
        self.skipped.extend(other.skipped)
        return self

    @property
    def triggers(self) -> tuple[str, ...]:
        return tuple(snippet.trigger for snippet in self.registered)


def parse_body(items: Sequence[Any], *, source: str | None = None) -> tuple[Segment, ...]:
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        raise SnippetDefinitionError("'body' must be a list", source=source)
    segments: list[Segment] = []
    for item in items:
        segments.append(_parse_segment(item, source=source))
    return tuple(segments)


def _parse_segment(item: Any, *, source: str | None) -> Segment:
    if isinstance(item, str):
        return Text(item)
    if isinstance(item, list):
        return _lines_to_text(item, source=source)
    if isinstance(item, Mapping):
        if "insert" in item:
            index = item["insert"]
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise SnippetDefinitionError(
                    f"placeholder index must be a non-negative integer, got {index!r}",
                    source=source,
                )
            default = item.get("default", "")
            if not isinstance(default, str):
                raise SnippetDefinitionError(
                    "placeholder default must be a string", source=source
                )
            return Placeholder(index, default)
        if "text" in item:
            value = item["text"]
            if isinstance(value, list):
                return _lines_to_text(value, source=source)
            if isinstance(value, str):
                return Text(value)
    raise SnippetDefinitionError(f"unsupported body item {item!r}", source=source)


def _lines_to_text(lines: list[Any], *, source: str | None) -> Text:
    if not all(isinstance(line, str) for line in lines):
        raise SnippetDefinitionError("text lines must be strings", source=source)
    return Text.lines(*lines)


def parse_record(
    record: Mapping[str, Any], *, filetype: str = ALL_FILETYPES, source: str | None = None
) -> Snippet:
    trigger = record.get("trig")
    if not isinstance(trigger, str) or not trigger:
        raise SnippetDefinitionError("'trig' must be a non-empty string", source=source)
    snippet_type = record.get("snippetType", "snippet")
    if snippet_type not in _KNOWN_TYPES:
        raise SnippetDefinitionError(
            f"unknown snippetType {snippet_type!r}", source=source
        )
    description = record.get("dscr") or record.get("name") or ""
    body = parse_body(record.get("body", ()), source=source)
    try:
        return Snippet(
            trigger=trigger,
            body=body,
            auto_expand=snippet_type == AUTOSNIPPET,
            filetype=filetype,
            description=str(description),
            word_trigger=bool(record.get("wordTrig", True)),
        )
    except ValueError as exc:
        raise SnippetDefinitionError(str(exc), source=source) from exc


def load_definitions(
    registry: SnippetRegistry,
    records: Iterable[Mapping[str, Any]],
    *,
    filetype: str = ALL_FILETYPES,
    source: str = "<memory>",
    replace: bool = False,
    strict: bool = False,
) -> LoadReport:
    """Register every record; records without ``trig`` are reported, not loaded."""

    report = LoadReport()
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise SnippetDefinitionError(
                f"record {position} is not a table", source=source
            )
        if "trig" not in record:
            skipped = SkippedDefinition(
                source=source,
                position=position,
                keys=tuple(sorted(str(key) for key in record)),
                reason="missing 'trig' field",
            )
            if strict:
                raise SnippetDefinitionError(
                    f"record {position} has no 'trig' (keys: {', '.join(skipped.keys)})",
                    source=source,
                )
            telemetry.record_event(
                "snippets.definition_skipped",
                level="warning",
                data={
                    "source": source,
                    "position": position,
                    "keys": skipped.keys,
                    "reason": skipped.reason,
                },
            )
            report.skipped.append(skipped)
            continue
        snippet = parse_record(record, filetype=filetype, source=source)
        report.registered.append(registry.register(snippet, replace=replace))
    return report


def load_file(
    registry: SnippetRegistry,
    path: Path,
    *,
    filetype: str | None = None,
    replace: bool = False,
    strict: bool = False,
) -> LoadReport:
    """Load one JSON file; the filetype defaults to the file stem."""

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except JSONDecodeError as exc:
        raise SnippetDefinitionError(
            f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}",
            source=str(path),
        ) from exc
    if not isinstance(data, list):
        raise SnippetDefinitionError("top level must be a list", source=str(path))
    return load_definitions(
        registry,
        data,
        filetype=filetype or path.stem,
        source=str(path),
        replace=replace,
        strict=strict,
    )


def load_directory(
    registry: SnippetRegistry,
    directory: Path,
    *,
    replace: bool = False,
    strict: bool = False,
) -> LoadReport:
    """Load every ``*.json`` file beneath ``directory`` (one filetype per file)."""

    directory = directory.expanduser()
    report = LoadReport()
    if not directory.is_dir():
        telemetry.record_event(
            "snippets.path_missing", level="debug", data={"path": str(directory)}
        )
        return report
    for path in sorted(directory.glob("*.json")):
        report.merge(load_file(registry, path, replace=replace, strict=strict))
    return report


__all__ = [
    "AUTOSNIPPET",
    "LoadReport",
    "SkippedDefinition",
    "SnippetDefinitionError",
    "load_definitions",
    "load_directory",
    "load_file",
    "parse_body",
    "parse_record",
]
