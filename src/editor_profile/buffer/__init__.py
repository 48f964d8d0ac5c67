"""Buffer abstractions and undo history."""

from .buffer import Buffer, Transaction
from .document import BufferDocument
from .state import BufferState, Cursor, Selection
from .sync import BufferMirror, BufferValidationError
from .undo import UndoEntry, UndoTimeline
from .validation import ensure_cursor, ensure_offset

__all__ = [
    "BufferDocument",
    "BufferState",
    "Cursor",
    "Selection",
    "UndoTimeline",
    "UndoEntry",
    "Buffer",
    "Transaction",
    "BufferMirror",
    "BufferValidationError",
    "ensure_cursor",
    "ensure_offset",
]
