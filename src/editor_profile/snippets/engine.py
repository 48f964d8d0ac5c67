"""Keystroke-level snippet expansion on top of a text buffer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from editor_profile.buffer import Buffer
from editor_profile.keymaps.models import KeyInput
from editor_profile.runtime import telemetry
from editor_profile.runtime.bus import EventBus

from .expansion import ExpansionContext, expand
from .models import Snippet, TabStop
from .registry import SnippetRegistry
from .session import SnippetSession


@dataclass(slots=True)
class KeyResult:
    """Outcome of a key handled by the engine."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None


class SnippetEngine:
    """Expands snippets into ``buffer`` and drives tab-stop navigation.

    Auto-expanding snippets fire as soon as their trigger is complete before
    the cursor (when ``autosnippets`` is enabled); the others wait for
    ``expand_or_jump``.
    """

    def __init__(
        self,
        registry: SnippetRegistry,
        buffer: Buffer,
        *,
        filetype: str | None = None,
        autosnippets: bool = True,
        tab_width: int | None = None,
        bus: EventBus | None = None,
    ) -> None:
        self.registry = registry
        self.buffer = buffer
        self.filetype = filetype or buffer.filetype or None
        self.autosnippets = autosnippets
        self.tab_width = tab_width
        self.bus = bus or EventBus()
        self.session: Optional[SnippetSession] = None
        self._outer: list[SnippetSession] = []

    @property
    def depth(self) -> int:
        """Number of nested sessions, the active one included."""

        if self.active_session is None:
            return 0
        return len(self._outer) + 1

    @property
    def active_session(self) -> Optional[SnippetSession]:
        if self.session is None or self.session.exited:
            return None
        return self.session

    def expandable(self) -> Optional[Snippet]:
        return self.registry.match_before(
            self.buffer.line_before_cursor(), self.filetype
        )

    def jumpable(self, direction: int = 1) -> bool:
        session = self.active_session
        return session is not None and session.jumpable(direction)

    def expand_or_jump(self) -> KeyResult:
        snippet = self.expandable()
        if snippet is not None:
            return self.expand(snippet)
        if self.jumpable(1):
            return self.jump(1)
        return KeyResult(consumed=False, status="passthrough")

    def expand(self, snippet: Snippet) -> KeyResult:
        """Replace the trigger before the cursor (if typed) with ``snippet``.

        Expanding inside an active session nests the new one; the outer
        session resumes once the inner one is jumped out of.
        """

        cursor = self.buffer.cursor_offset
        start = cursor
        if self.buffer.line_before_cursor().endswith(snippet.trigger):
            start = cursor - len(snippet.trigger)
        context = ExpansionContext.from_line(
            self.buffer.current_line(), tab_width=self.tab_width
        )
        expansion = expand(snippet, context)

        outer, _ = self._enclosing_session(start, cursor)
        if outer is not None:
            self._outer.append(outer)
        self.session = None
        self._replace(start, cursor, expansion.text, label=f"snippet:{snippet.trigger}")
        if expansion.tab_stops:
            self.session = SnippetSession(expansion, origin=start)
        elif self._outer:
            self.session = self._outer.pop()
        self.bus.emit(
            "snippet.expand",
            {
                "trigger": snippet.trigger,
                "filetype": snippet.filetype,
                "tab_stops": len(expansion.tab_stops),
            },
        )
        telemetry.record_event(
            "snippets.expand",
            level="debug",
            data={"trigger": snippet.trigger, "auto": snippet.auto_expand},
        )
        if expansion.tab_stops:
            self._select_active()
        return KeyResult(consumed=True, status="snippet_expand", message=snippet.trigger)

    def jump(self, direction: int = 1) -> KeyResult:
        session = self.active_session
        if session is None or not session.jumpable(direction):
            return KeyResult(consumed=False, status="not_jumpable")
        stop = session.jump(direction)
        if stop is None:
            self._leave_session(session, reason="last_stop")
            return KeyResult(consumed=True, status="snippet_exit")
        self._select_active()
        self.bus.emit("snippet.jump", {"index": stop.index, "direction": direction})
        return KeyResult(consumed=True, status="snippet_jump", message=str(stop.index))

    def type_text(self, text: str) -> KeyResult:
        result = KeyResult(consumed=bool(text), status="insert")
        for char in text:
            self._edit_at_cursor(char)
            if self.autosnippets:
                snippet = self.registry.match_before(
                    self.buffer.line_before_cursor(), self.filetype, auto=True
                )
                if snippet is not None:
                    result = self.expand(snippet)
        return result

    def backspace(self) -> KeyResult:
        if self.buffer.state.selection is None and self.buffer.cursor_offset == 0:
            return KeyResult(consumed=False, status="passthrough")
        self._edit_at_cursor("", delete_before=True)
        return KeyResult(consumed=True, status="delete")

    def undo(self) -> KeyResult:
        if not self.buffer.undo_last():
            return KeyResult(consumed=False, status="undo_empty")
        while self.active_session is not None:
            self._leave_session(self.active_session, reason="undo")
        return KeyResult(consumed=True, status="undo")

    def handle_key(self, key: KeyInput) -> KeyResult:
        token = key.token
        if token == "TAB":
            result = self.expand_or_jump()
            if result.consumed:
                return result
            indent = " " * self.tab_width if self.tab_width else "\t"
            return self.type_text(indent)
        if token in {"shift+TAB", "BACKTAB"}:
            return self.jump(-1)
        if token == "ENTER":
            return self.type_text("\n")
        if token == "BACKSPACE":
            return self.backspace()
        if key.text and not key.modifiers:
            return self.type_text(key.text)
        return KeyResult(consumed=False, status="passthrough")

    def _edit_at_cursor(self, text: str, *, delete_before: bool = False) -> None:
        selection = self.buffer.state.selection
        if selection is not None:
            start, end = sorted(self.buffer.offset_of(pos) for pos in selection)
        else:
            start = end = self.buffer.cursor_offset
            if delete_before:
                start -= 1

        session, target = self._enclosing_session(start, end)
        self._replace(start, end, text, label="insert_text")
        if session is not None and target is not None:
            self._sync_mirrors(session)

    def _enclosing_session(
        self, start: int, end: int
    ) -> tuple[Optional[SnippetSession], Optional[TabStop]]:
        """Leave sessions that do not contain ``start..end``, innermost first."""

        session = self.active_session
        while session is not None:
            target = _enclosing_stop(session, start, end)
            if target is not None:
                return session, target
            if session.contains(start) and session.contains(end):
                return session, None
            self._leave_session(session, reason="left_snippet")
            session = self.active_session
        return None, None

    def _replace(
        self,
        start: int,
        end: int,
        text: str,
        *,
        label: str,
        target: Optional[TabStop] = None,
    ) -> None:
        self.buffer.replace_offsets(start, end, text, label=label)
        removed, inserted = end - start, len(text)
        active = self.active_session
        if active is not None:
            if target is None:
                target = _enclosing_stop(active, start, end)
            active.apply_edit(start, removed, inserted, target=target)
        for outer in self._outer:
            outer.apply_edit(
                start, removed, inserted, target=_enclosing_stop(outer, start, end)
            )

    def _sync_mirrors(self, session: SnippetSession) -> None:
        primary = session.active
        if primary is None or not session.mirrors:
            return
        relative = self.buffer.cursor_offset - primary.start
        value = self.buffer.text[primary.start : primary.end]
        for position in range(len(session.mirrors)):
            mirror = session.mirrors[position]
            if self.buffer.text[mirror.start : mirror.end] == value:
                continue
            self._replace(
                mirror.start, mirror.end, value, label="snippet_mirror", target=mirror
            )
        primary = session.active
        if primary is not None:
            self.buffer.select_offsets(primary.start + relative, primary.start + relative)

    def _select_active(self) -> None:
        session = self.active_session
        if session is None or session.active is None:
            return
        stop = session.active
        self.buffer.select_offsets(stop.start, stop.end)

    def _leave_session(self, session: SnippetSession, *, reason: str) -> None:
        """Exit ``session`` and resume the session it was nested in, if any."""

        if reason == "last_stop":
            self.buffer.select_offsets(session.end_offset, session.end_offset)
        session.exit()
        self.session = self._outer.pop() if self._outer else None
        resumed = self.session.expansion.snippet.trigger if self.session else None
        self.bus.emit(
            "snippet.exit",
            {
                "trigger": session.expansion.snippet.trigger,
                "reason": reason,
                "resumed": resumed,
            },
        )


def _enclosing_stop(session: SnippetSession, start: int, end: int) -> Optional[TabStop]:
    active = session.active
    if active is not None and active.start <= start and end <= active.end:
        return active
    return None


__all__ = ["KeyResult", "SnippetEngine"]
