"""Linear undo history for buffer edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .state import Cursor


@dataclass(slots=True)
class UndoEntry:
    label: str
    before_text: str
    cursor_before: Cursor


class UndoTimeline:
    def __init__(self) -> None:
        self._entries: List[UndoEntry] = []

    def push(self, entry: UndoEntry) -> None:
        self._entries.append(entry)

    def can_undo(self) -> bool:
        return bool(self._entries)

    def undo(self) -> Optional[UndoEntry]:
        if not self.can_undo():
            return None
        return self._entries.pop()
