"""Dataclasses describing key sequences and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableMapping, Optional

from editor_profile.actions.variants import EditorAction, is_action

MODE_ALIASES = {
    "n": "normal",
    "i": "insert",
    "v": "visual",
    "x": "visual",
    "s": "select",
    "c": "command",
    "t": "terminal",
}
MODES = frozenset(MODE_ALIASES.values())

_MODIFIER_ALIASES = {"c": "ctrl", "s": "shift", "a": "alt", "m": "alt", "d": "cmd"}

_SPECIAL_KEYS = {
    "cr": "ENTER",
    "enter": "ENTER",
    "return": "ENTER",
    "esc": "ESC",
    "tab": "TAB",
    "space": "SPACE",
    "bs": "BACKSPACE",
    "backspace": "BACKSPACE",
    "del": "DELETE",
    "up": "UP",
    "down": "DOWN",
    "left": "LEFT",
    "right": "RIGHT",
    "lt": "<",
    "bar": "|",
    "bslash": "\\",
}


def _normalize_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    values = tuple(m.strip().lower() for m in modifiers if m.strip())
    return tuple(sorted(dict.fromkeys(values)))


def _literal_key(char: str) -> str:
    return "SPACE" if char == " " else char


def normalize_mode(mode: str) -> str:
    name = MODE_ALIASES.get(mode, mode)
    if name not in MODES:
        raise ValueError(f"unknown mode '{mode}'")
    return name


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """Single normalized key press used by key sequences."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        object.__setattr__(self, "modifiers", _normalize_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        if self.modifiers:
            modifier = "+".join(self.modifiers)
            return f"{modifier}+{self.key}"
        return self.key


@dataclass(slots=True)
class KeyInput:
    """Key event delivered by a host adapter."""

    key: str
    modifiers: tuple[str, ...] = ()
    text: Optional[str] = None

    @property
    def token(self) -> str:
        return KeyStroke(self.key, self.modifiers).token


def _parse_bracketed(
    name: str, *, leader: str, local_leader: str
) -> Optional[list[KeyStroke]]:
    lowered = name.lower()
    if lowered == "leader":
        return [KeyStroke(_literal_key(ch)) for ch in leader]
    if lowered == "localleader":
        return [KeyStroke(_literal_key(ch)) for ch in local_leader]
    if lowered in _SPECIAL_KEYS:
        return [KeyStroke(_SPECIAL_KEYS[lowered])]

    parts = name.split("-")
    if len(parts) < 2 or not parts[-1]:
        return None
    prefixes = [part.lower() for part in parts[:-1]]
    if not all(prefix in _MODIFIER_ALIASES for prefix in prefixes):
        return None
    key = parts[-1]
    base = _SPECIAL_KEYS.get(key.lower(), key.lower() if len(key) == 1 else key)
    return [KeyStroke(base, tuple(_MODIFIER_ALIASES[p] for p in prefixes))]


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable collection of keystrokes."""

    strokes: tuple[KeyStroke, ...]
    timeout_ms: int = 1000

    def __post_init__(self) -> None:
        if not self.strokes:
            raise ValueError("KeySequence requires at least one stroke")

    @property
    def tokens(self) -> tuple[str, ...]:
        return tuple(stroke.token for stroke in self.strokes)

    @classmethod
    def from_strings(cls, *keys: str, timeout_ms: int = 1000) -> "KeySequence":
        strokes = tuple(KeyStroke(key) for key in keys if key)
        return cls(strokes=strokes, timeout_ms=timeout_ms)

    @classmethod
    def parse(
        cls,
        notation: str,
        *,
        leader: str = " ",
        local_leader: str = " ",
        timeout_ms: int = 1000,
    ) -> "KeySequence":
        """Parse Vim key notation such as ``<leader>rn``, ``<C-b>`` or ``[d``."""

        strokes: list[KeyStroke] = []
        index = 0
        while index < len(notation):
            char = notation[index]
            if char == "<":
                close = notation.find(">", index + 1)
                if close > index + 1:
                    parsed = _parse_bracketed(
                        notation[index + 1 : close],
                        leader=leader,
                        local_leader=local_leader,
                    )
                    if parsed is not None:
                        strokes.extend(parsed)
                        index = close + 1
                        continue
            strokes.append(KeyStroke(_literal_key(char)))
            index += 1
        return cls(strokes=tuple(strokes), timeout_ms=timeout_ms)


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    result: list[str] = []
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
            result.append(cleaned)
    return tuple(result)


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a key sequence with an editor action.

    ``buffer`` scopes the binding to one buffer; ``None`` means global.
    """

    id: str
    mode: str
    sequence: KeySequence
    action: EditorAction
    description: str = ""
    buffer: Optional[int] = None
    source: Optional[str] = None
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        object.__setattr__(self, "mode", normalize_mode(self.mode))
        if not is_action(self.action):
            raise TypeError(f"binding '{self.id}' has unsupported action {self.action!r}")
        object.__setattr__(self, "tags", _normalize_tags(self.tags))

    @property
    def key_signature(self) -> str:
        return " ".join(self.sequence.tokens)

    @property
    def scope(self) -> str:
        return "global" if self.buffer is None else f"buffer:{self.buffer}"


__all__ = [
    "MODES",
    "KeyStroke",
    "KeyInput",
    "KeySequence",
    "Binding",
    "normalize_mode",
]
