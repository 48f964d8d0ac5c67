"""Tab-stop navigation over an expanded snippet."""

from __future__ import annotations

from typing import Optional

from .models import Expansion, TabStop


class SnippetSession:
    """Tracks the active tab stop of one expansion inside a buffer.

    Offsets are absolute buffer offsets. Distinct placeholder indices are
    visited in ascending order; jumping past the last one exits the session.
    """

    def __init__(self, expansion: Expansion, origin: int = 0) -> None:
        self.expansion = expansion
        self.origin = origin
        self._stops: list[TabStop] = [
            stop.shifted(origin) for stop in expansion.tab_stops
        ]
        self._order: tuple[int, ...] = tuple(
            dict.fromkeys(stop.index for stop in self._stops)
        )
        self._position = 0
        self._end = origin + len(expansion.text)

    @property
    def order(self) -> tuple[int, ...]:
        return self._order

    @property
    def stops(self) -> tuple[TabStop, ...]:
        return tuple(self._stops)

    @property
    def end_offset(self) -> int:
        return self._end

    @property
    def exited(self) -> bool:
        return self._position >= len(self._order)

    @property
    def active_index(self) -> Optional[int]:
        if self.exited:
            return None
        return self._order[self._position]

    @property
    def active(self) -> Optional[TabStop]:
        index = self.active_index
        if index is None:
            return None
        return next(stop for stop in self._stops if stop.index == index)

    @property
    def mirrors(self) -> tuple[TabStop, ...]:
        primary = self.active
        if primary is None:
            return ()
        return tuple(
            stop
            for stop in self._stops
            if stop.index == primary.index and stop is not primary
        )

    def jumpable(self, direction: int = 1) -> bool:
        if self.exited:
            return False
        if direction > 0:
            return True
        return self._position > 0

    def jump(self, direction: int = 1) -> Optional[TabStop]:
        """Move to the next (or previous) stop; ``None`` once the session exits."""

        if not self.jumpable(direction):
            return self.active
        self._position += 1 if direction > 0 else -1
        return self.active

    def exit(self) -> None:
        self._position = len(self._order)

    def contains(self, offset: int) -> bool:
        return self.origin <= offset <= self._end

    def apply_edit(
        self,
        offset: int,
        removed: int,
        inserted: int,
        *,
        target: Optional[TabStop] = None,
    ) -> None:
        """Shift stop ranges after ``removed`` chars at ``offset`` became ``inserted``."""

        delta = inserted - removed
        edit_end = offset + removed
        updated: list[TabStop] = []
        for stop in self._stops:
            if target is not None and stop == target:
                updated.append(TabStop(stop.index, stop.start, stop.end + delta))
            elif edit_end <= stop.start:
                updated.append(stop.shifted(delta))
            elif offset >= stop.end:
                updated.append(stop)
            else:
                end = max(stop.start, stop.end + delta)
                updated.append(TabStop(stop.index, min(stop.start, offset), end))
        self._stops = updated
        if offset <= self._end:
            self._end = max(self.origin, self._end + delta)


__all__ = ["SnippetSession"]
