"""Trie-based keymap resolution with telemetry instrumentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Literal, Optional, Sequence, Tuple

from editor_profile.runtime.telemetry import span

from .models import Binding, normalize_mode
from .registry import KeymapRegistry


@dataclass(slots=True)
class TrieNode:
    """Single trie node tracking bindings and child transitions."""

    bindings: list[str] = field(default_factory=list)
    children: Dict[str, "TrieNode"] = field(default_factory=dict)

    def child(self, token: str) -> "TrieNode":
        return self.children.setdefault(token, TrieNode())

    def next_tokens(self) -> tuple[str, ...]:
        return tuple(sorted(self.children.keys()))


@dataclass(slots=True)
class KeymapTrie:
    """Trie of the bindings visible in one mode for one buffer."""

    mode: str
    buffer: Optional[int] = None
    root: TrieNode = field(default_factory=TrieNode)

    def add_binding(self, binding: Binding) -> None:
        node = self.root
        for token in binding.sequence.tokens:
            node = node.child(token)
        node.bindings.append(binding.id)


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome returned from the resolver.

    ``pending`` may still carry ``match`` when the typed sequence is itself
    bound but also prefixes a longer binding; the caller runs it on timeout.
    """

    status: Literal["match", "pending", "miss"]
    match: Optional[Binding] = None
    consumed: int = 0
    next_expected: tuple[str, ...] = ()
    timeout_ms: Optional[int] = None

    @property
    def ambiguous(self) -> bool:
        return self.status == "pending" and self.match is not None


class KeymapResolver:
    """Builds (mode, buffer) tries and resolves typed token sequences."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name
        self._cache: Dict[Tuple[str, Optional[int]], tuple[int, KeymapTrie]] = {}

    def resolve(
        self,
        mode: str,
        tokens: Sequence[str],
        *,
        buffer: Optional[int] = None,
    ) -> ResolutionResult:
        mode = normalize_mode(mode)
        normalized = tuple(tokens)
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"mode": mode, "length": len(normalized), "buffer": buffer},
        ) as handle:
            node = self._ensure_trie(mode, buffer).root
            consumed = 0
            for token in normalized:
                child = node.children.get(token)
                if child is None:
                    handle.add_metadata("status", "miss")
                    return ResolutionResult(status="miss", consumed=consumed)
                node = child
                consumed += 1

            match = self._select_match(node)
            next_expected = node.next_tokens()
            if next_expected:
                handle.add_metadata("status", "pending")
                return ResolutionResult(
                    status="pending",
                    match=match,
                    consumed=consumed,
                    next_expected=next_expected,
                    timeout_ms=self._pending_timeout(node, match),
                )

            if match:
                handle.add_metadata("status", "match")
                handle.add_metadata("binding_id", match.id)
                return ResolutionResult(status="match", match=match, consumed=consumed)

            handle.add_metadata("status", "miss")
            return ResolutionResult(status="miss", consumed=consumed)

    def _ensure_trie(self, mode: str, buffer: Optional[int]) -> KeymapTrie:
        revision = self._registry.revision()
        cached = self._cache.get((mode, buffer))
        if cached and cached[0] == revision:
            return cached[1]

        trie = KeymapTrie(mode=mode, buffer=buffer)
        for binding in self._registry.bindings_for(mode, buffer):
            trie.add_binding(binding)
        self._cache[(mode, buffer)] = (revision, trie)
        return trie

    def _select_match(self, node: TrieNode) -> Optional[Binding]:
        if not node.bindings:
            return None
        candidates = [self._registry.get_binding(binding_id) for binding_id in node.bindings]
        # buffer-local first, then priority, then id
        candidates.sort(key=lambda b: (b.buffer is None, -b.priority, b.id))
        return candidates[0]

    def _pending_timeout(self, node: TrieNode, match: Optional[Binding]) -> Optional[int]:
        timeouts: list[int] = [match.sequence.timeout_ms] if match else []
        stack = list(node.children.values())
        while stack:
            current = stack.pop()
            for binding_id in current.bindings:
                timeouts.append(self._registry.get_binding(binding_id).sequence.timeout_ms)
            stack.extend(current.children.values())
        if not timeouts:
            return None
        return min(timeouts)


__all__ = [
    "KeymapResolver",
    "ResolutionResult",
]
