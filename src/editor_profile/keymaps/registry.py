"""Keymap registry storing global and buffer-local bindings."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, Optional, Tuple

from editor_profile.runtime.telemetry import span

from .models import Binding, normalize_mode

_IndexKey = Tuple[Optional[int], str]


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    binding_count: int
    buffer_local_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding conflicts with existing entries."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns binding metadata indexed by mode, buffer scope and key signature."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._mode_index: Dict[str, Dict[_IndexKey, set[str]]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={
                "binding_id": binding.id,
                "mode": binding.mode,
                "scope": binding.scope,
            },
        ) as handle:
            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)

            if replace:
                for conflict in conflicts:
                    self._remove_binding(conflict)
                    self._bindings.pop(conflict.id, None)
                existing = self._bindings.get(binding.id)
                if existing:
                    self._remove_binding(existing)
                    self._bindings.pop(existing.id, None)
            elif binding.id in self._bindings:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            self._bindings[binding.id] = binding
            self._index_binding(binding)
            self._touch_bindings()
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.pop(binding_id, None)
        if not binding:
            return None
        self._remove_binding(binding)
        self._touch_bindings()
        return binding

    def update_binding(self, binding_id: str, **changes: object) -> Binding:
        with span(
            "keymaps::update_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding_id},
        ) as handle:
            if binding_id not in self._bindings:
                handle.fail("missing_binding")
                raise KeyError(f"Binding '{binding_id}' not found")

            current = self._bindings[binding_id]
            updated = replace(current, **changes)

            self._remove_binding(current)
            conflicts = self.detect_conflicts(updated, ignore=(binding_id,))
            if conflicts:
                self._index_binding(current)
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(updated, conflicts)

            self._bindings[binding_id] = updated
            self._index_binding(updated)
            self._touch_bindings()
            return updated

    def clear_buffer(self, buffer: int) -> list[Binding]:
        """Drop every binding scoped to ``buffer`` (client detached, buffer wiped)."""

        removed = [b for b in self._bindings.values() if b.buffer == buffer]
        for binding in removed:
            self._bindings.pop(binding.id, None)
            self._remove_binding(binding)
        if removed:
            self._touch_bindings()
        return removed

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is None:
            yield from self._bindings.values()
            return
        for bucket in self._mode_index.get(normalize_mode(mode), {}).values():
            for binding_id in sorted(bucket):
                yield self._bindings[binding_id]

    def bindings_for(self, mode: str, buffer: Optional[int] = None) -> Iterator[Binding]:
        """Bindings active in ``mode`` for ``buffer``: globals plus its local ones."""

        for binding in self.iter_bindings(mode):
            if binding.buffer is None or binding.buffer == buffer:
                yield binding

    def stats(self) -> RegistryStats:
        return RegistryStats(
            binding_count=len(self._bindings),
            buffer_local_count=sum(
                1 for binding in self._bindings.values() if binding.buffer is not None
            ),
            modes=tuple(sorted(self._mode_index)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Iterable[str] = ()
    ) -> list[Binding]:
        """Bindings with the same mode, key signature and buffer scope."""

        ignored = set(ignore)
        key = (binding.buffer, binding.key_signature)
        return [
            self._bindings[match_id]
            for match_id in sorted(self._mode_index.get(binding.mode, {}).get(key, set()))
            if match_id not in ignored
        ]

    def _index_binding(self, binding: Binding) -> None:
        by_signature = self._mode_index.setdefault(binding.mode, {})
        bucket = by_signature.setdefault((binding.buffer, binding.key_signature), set())
        bucket.add(binding.id)

    def _remove_binding(self, binding: Binding) -> None:
        mode_bucket = self._mode_index.get(binding.mode)
        if not mode_bucket:
            return
        key = (binding.buffer, binding.key_signature)
        signatures = mode_bucket.get(key)
        if not signatures:
            return
        signatures.discard(binding.id)
        if not signatures:
            mode_bucket.pop(key, None)
        if not mode_bucket:
            self._mode_index.pop(binding.mode, None)

    def _touch_bindings(self) -> None:
        self._revision += 1


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
