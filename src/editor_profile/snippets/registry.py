"""Snippet registry keyed by filetype and trigger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from editor_profile.runtime.telemetry import span

from .models import ALL_FILETYPES, Snippet


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    snippet_count: int
    auto_count: int
    filetypes: tuple[str, ...]


class SnippetConflictError(RuntimeError):
    """Raised when a trigger is already registered for the same filetype."""

    def __init__(self, snippet: Snippet, existing: Snippet):
        super().__init__(
            f"Trigger '{snippet.trigger}' already registered for filetype "
            f"'{snippet.filetype}'"
        )
        self.snippet = snippet
        self.existing = existing


class RegistryFrozenError(RuntimeError):
    """Raised when registering into a registry that has been frozen."""


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == "_"


class SnippetRegistry:
    """Owns snippet definitions for every filetype.

    Triggers are unique per filetype. Snippets registered under
    ``"all"`` are visible from every filetype.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._snippets: Dict[str, Dict[str, Snippet]] = {}
        self._logger_name = logger_name
        self._revision = 0
        self._frozen = False

    def revision(self) -> int:
        return self._revision

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def register(self, snippet: Snippet, *, replace: bool = False) -> Snippet:
        with span(
            "snippets::register",
            logger_name=self._logger_name,
            component="snippets",
            metadata={"trigger": snippet.trigger, "filetype": snippet.filetype},
        ) as handle:
            if self._frozen:
                handle.add_metadata("frozen", True)
                raise RegistryFrozenError(
                    f"Cannot register '{snippet.trigger}': registry is frozen"
                )
            bucket = self._snippets.setdefault(snippet.filetype, {})
            existing = bucket.get(snippet.trigger)
            if existing is not None and not replace:
                raise SnippetConflictError(snippet, existing)
            bucket[snippet.trigger] = snippet
            self._revision += 1
            return snippet

    def resolve(self, trigger: str, filetype: str | None = None) -> Optional[Snippet]:
        """Exact trigger lookup; ``None`` is a negative lookup, not an error."""

        for bucket in self._search_order(filetype):
            snippet = bucket.get(trigger)
            if snippet is not None:
                return snippet
        return None

    def match_before(
        self,
        prefix: str,
        filetype: str | None = None,
        *,
        auto: bool | None = None,
    ) -> Optional[Snippet]:
        """Return the snippet whose trigger ends ``prefix``.

        The longest trigger wins; on equal length the more specific filetype
        bucket wins because it is searched first.
        """

        best: Optional[Snippet] = None
        for bucket in self._search_order(filetype):
            for trigger, snippet in bucket.items():
                if auto is not None and snippet.auto_expand is not auto:
                    continue
                if not prefix.endswith(trigger):
                    continue
                if snippet.word_trigger:
                    head = prefix[: len(prefix) - len(trigger)]
                    if head and _is_word_char(head[-1]):
                        continue
                if best is None or len(trigger) > len(best.trigger):
                    best = snippet
        return best

    def iter_snippets(self, filetype: str | None = None) -> Iterator[Snippet]:
        if filetype is None:
            for bucket in self._snippets.values():
                yield from bucket.values()
            return
        yield from self._snippets.get(filetype, {}).values()

    def filetypes(self) -> tuple[str, ...]:
        return tuple(self._snippets)

    def stats(self) -> RegistryStats:
        snippets = list(self.iter_snippets())
        return RegistryStats(
            snippet_count=len(snippets),
            auto_count=sum(1 for snippet in snippets if snippet.auto_expand),
            filetypes=tuple(sorted(self._snippets)),
        )

    def _search_order(self, filetype: str | None) -> list[Dict[str, Snippet]]:
        if filetype is not None:
            names = [filetype]
            if filetype != ALL_FILETYPES:
                names.append(ALL_FILETYPES)
        else:
            names = [ALL_FILETYPES]
            names.extend(name for name in self._snippets if name != ALL_FILETYPES)
        return [self._snippets[name] for name in names if name in self._snippets]


__all__ = [
    "SnippetRegistry",
    "SnippetConflictError",
    "RegistryFrozenError",
    "RegistryStats",
]
