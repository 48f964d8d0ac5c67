"""High-level buffer facade combining document, cursor state and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import ContextManager, Optional

from editor_profile.runtime import telemetry

from .document import BufferDocument
from .state import BufferState, Cursor
from .sync import BufferMirror
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ensure_offset


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        number: int = 1,
        filetype: str = "",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoTimeline] = None,
    ) -> None:
        self.name = name
        self.number = number
        self.filetype = filetype
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.undo = undo or UndoTimeline()

    @classmethod
    def from_text(
        cls, text: str, *, name: str = "default", number: int = 1, filetype: str = ""
    ) -> "Buffer":
        buffer = cls(
            name=name,
            number=number,
            filetype=filetype,
            document=BufferDocument.from_text(text),
        )
        buffer.state.set_cursor(*buffer.cursor_at(len(text)))
        return buffer

    @property
    def text(self) -> str:
        return self.document.text

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self.text,
            cursor=self.state.cursor,
            selection=self.state.selection,
            attributes=dict(attributes or {}),
        )

    def offset_of(self, cursor: Cursor) -> int:
        row, col = ensure_cursor(self.document, cursor)
        lines = self.document.snapshot()
        return sum(len(lines[i]) + 1 for i in range(row)) + col

    def cursor_at(self, offset: int) -> Cursor:
        ensure_offset(self.document, offset)
        running = 0
        lines = self.document.snapshot()
        for row, line in enumerate(lines):
            if offset <= running + len(line):
                return (row, offset - running)
            running += len(line) + 1
        return (len(lines) - 1, len(lines[-1]))

    @property
    def cursor_offset(self) -> int:
        return self.offset_of(self.state.cursor)

    def line_before_cursor(self) -> str:
        row, col = self.state.cursor
        return self.document.get_line(row)[:col]

    def current_line(self) -> str:
        return self.document.get_line(self.state.cursor[0])

    def replace_offsets(self, start: int, end: int, text: str, *, label: str) -> None:
        ensure_offset(self.document, start)
        ensure_offset(self.document, end)
        if start > end:
            start, end = end, start
        with Transaction(self, label) as tx:
            before_text = self.text
            cursor_before = self.state.cursor
            new_text = before_text[:start] + text + before_text[end:]
            self.document = self.document.with_text(new_text)
            self.state.clear_selection()
            self.state.set_cursor(*self.cursor_at(start + len(text)))
            tx.commit(before_text, cursor_before)

    def select_offsets(self, start: int, end: int) -> None:
        """Place the cursor at ``start`` and select up to ``end`` when non-empty."""

        self.state.set_cursor(*self.cursor_at(start))
        if end > start:
            self.state.set_selection(self.cursor_at(start), self.cursor_at(end))
        else:
            self.state.clear_selection()

    def undo_last(self) -> bool:
        entry = self.undo.undo()
        if entry is None:
            return False
        self._restore(entry.before_text, entry.cursor_before)
        return True

    def _restore(self, text: str, cursor: Cursor) -> None:
        self.document = self.document.with_text(text)
        self.state.clear_selection()
        self.state.set_cursor(*cursor)


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, before_text: str, cursor_before: Cursor) -> None:
        self.buffer.undo.push(
            UndoEntry(
                label=self.label,
                before_text=before_text,
                cursor_before=cursor_before,
            )
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
