"""Textual adapter wiring keymaps, host actions and the snippet engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from editor_profile.buffer import Buffer, BufferMirror
from editor_profile.keymaps import KeyInput, KeymapResolver
from editor_profile.profile import ProfileReport, apply_profile, build_engine
from editor_profile.profile.settings import EditorSettings
from editor_profile.snippets import KeyResult, SnippetEngine, SnippetRegistry
from editor_profile.wiring import RecordingHost

SNIPPET_EVENTS = ("snippet.expand", "snippet.jump", "snippet.exit")


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_buffer: Callable[[BufferMirror], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualSnippetAdapter:
    """Routes keys through the keymap resolver before the snippet engine.

    A key bound in the current mode runs its action on the host; when the
    action does not consume the key (nothing to expand or jump to) the key
    falls through to the engine like any other typed character.
    """

    def __init__(
        self,
        host: RecordingHost,
        engine: SnippetEngine,
        resolver: KeymapResolver,
        hooks: TextualUIHooks,
    ) -> None:
        self.host = host
        self.engine = engine
        self.resolver = resolver
        self.hooks = hooks
        self._pending: list[KeyInput] = []
        self._subscribe_events()
        self._refresh_buffer()

    @property
    def mode(self) -> str:
        if self.engine.active_session is not None and self.engine.buffer.state.selection:
            return "select"
        return "insert"

    def handle_textual_key(
        self,
        key: str,
        *,
        text: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> KeyResult:
        """Translate a Textual key event into a KeyInput and run it."""

        key_input = KeyInput(
            key=key, text=text, modifiers=tuple(str(mod).lower() for mod in modifiers)
        )
        self._log_state("key ->", key=key, text=text, mods=key_input.modifiers)
        result = self._handle(key_input)
        self._after_result(result)
        self._log_state("result <-", consumed=result.consumed, status=result.status)
        return result

    def flush_pending(self) -> Optional[KeyResult]:
        """Resolve a pending prefix as if its timeout elapsed."""

        if not self._pending:
            return None
        pending, self._pending = self._pending, []
        outcome = self.resolver.resolve(
            self.mode, [k.token for k in pending], buffer=self.engine.buffer.number
        )
        if outcome.match is not None:
            result = self._run_binding(outcome.match, pending[-1])
        else:
            result = self._feed_engine(pending)
        self._after_result(result)
        return result

    def _handle(self, key_input: KeyInput) -> KeyResult:
        keys = [*self._pending, key_input]
        outcome = self.resolver.resolve(
            self.mode, [k.token for k in keys], buffer=self.engine.buffer.number
        )
        if outcome.status == "pending":
            self._pending = keys
            return KeyResult(consumed=True, status="pending")
        self._pending = []
        if outcome.status == "match" and outcome.match is not None:
            return self._run_binding(outcome.match, key_input)
        return self._feed_engine(keys)

    def _run_binding(self, binding, key_input: KeyInput) -> KeyResult:
        self.hooks.handle_event("keymap.match", binding.id)
        outcome = self.host.execute(binding.action)
        if isinstance(outcome, KeyResult):
            if outcome.consumed:
                return outcome
            return self.engine.handle_key(key_input)
        return KeyResult(consumed=True, status="action", message=binding.action.label)

    def _feed_engine(self, keys: list[KeyInput]) -> KeyResult:
        result = KeyResult(consumed=False, status="passthrough")
        for key_input in keys:
            result = self.engine.handle_key(key_input)
        return result

    def _after_result(self, result: KeyResult) -> None:
        status = f"{self.mode}:{result.status}"
        if result.message:
            status = f"{status} {result.message}"
        self.hooks.update_status(status)
        self._refresh_buffer()

    def _subscribe_events(self) -> None:
        for event in SNIPPET_EVENTS:
            self.engine.bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)

    def _refresh_buffer(self) -> None:
        self.hooks.update_buffer(self.engine.buffer.mirror())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        buffer = self.engine.buffer
        session = self.engine.active_session
        return {
            "mode": self.mode,
            "filetype": self.engine.filetype,
            "cursor": buffer.state.cursor,
            "stop": session.active_index if session else None,
            "pending": len(self._pending),
            "buffer_version": buffer.document.version,
        }


@dataclass(slots=True)
class Playground:
    host: RecordingHost
    engine: SnippetEngine
    resolver: KeymapResolver
    report: ProfileReport


def create_playground(
    *,
    text: str = "",
    filetype: str = "tex",
    path: Optional[str] = None,
    settings: Optional[EditorSettings] = None,
) -> Playground:
    """Apply the profile to a recording host bound to a fresh buffer."""

    settings = settings or EditorSettings()
    registry = SnippetRegistry()
    buffer = Buffer.from_text(text, name=path or "playground", filetype=filetype)
    engine = build_engine(registry, buffer, settings)
    host = RecordingHost(
        engine=engine,
        current_file=path,
        colorschemes=("default", settings.colorscheme),
    )
    report = apply_profile(host, settings, registry)
    return Playground(
        host=host,
        engine=engine,
        resolver=KeymapResolver(host.keymaps),
        report=report,
    )


__all__ = [
    "SNIPPET_EVENTS",
    "Playground",
    "TextualSnippetAdapter",
    "TextualUIHooks",
    "create_playground",
]
