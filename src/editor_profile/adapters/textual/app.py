"""Executable Textual playground for the snippet engine and keymaps."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from editor_profile.buffer import BufferMirror
from editor_profile.profile.settings import ENV_PREFIX, load_settings

from .controller import (
    Playground,
    TextualSnippetAdapter,
    TextualUIHooks,
    create_playground,
)
from .log_stream import NetworkLogStreamer


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""
    event_text: str = ""


class SnippetPlaygroundApp(App[None]):
    """Type into a buffer with the profile's snippets and bindings applied."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}

	#event-line {
		height: 1;
		background: $surface-darken-2;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        *,
        filetype: str = "tex",
        path: Optional[str] = None,
        log_host: str = "127.0.0.1",
        log_port: int | None = 8765,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._filetype = filetype
        self._path = path
        self.playground: Playground | None = None
        self.adapter: TextualSnippetAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None
        self._event_widget: Static | None = None
        self._log_streamer: NetworkLogStreamer | None = None
        self._log_host = log_host
        self._requested_log_port = log_port

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        self._event_widget = Static("", id="event-line")
        yield self._status_widget
        yield self._event_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.playground = create_playground(
            filetype=self._filetype, path=self._path, settings=load_settings()
        )
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
            handle_event=self._handle_event,
            log=self._log_line,
        )
        self.adapter = TextualSnippetAdapter(
            self.playground.host,
            self.playground.engine,
            self.playground.resolver,
            hooks,
        )
        await self._maybe_start_log_stream()
        self.set_interval(1.0, self._flush_pending)

    async def on_unmount(self) -> None:
        if self._log_streamer:
            await self._log_streamer.stop()
            self._log_streamer = None

    def _flush_pending(self) -> None:
        if self.adapter:
            self.adapter.flush_pending()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = mirror.text
        if self._buffer_widget:
            self._buffer_widget.update(self._state.buffer_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _handle_event(self, name: str, payload: Any | None) -> None:
        self._state.event_text = f"{name} {payload}" if payload is not None else name
        if self._event_widget:
            self._event_widget.update(self._state.event_text)

    def _log_line(self, line: str) -> None:
        if self._log_streamer:
            self._log_streamer.log(line)

    async def _maybe_start_log_stream(self) -> None:
        if self._requested_log_port is None:
            return
        self._log_streamer = NetworkLogStreamer(
            self._log_host, self._requested_log_port
        )
        await self._log_streamer.start()
        self._update_status(f"Log stream @ {self._log_host}:{self._log_streamer.port}")
        self._log_line("log stream ready")

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return None
        if key == "tab":
            return ("TAB", None, ())
        if key in {"shift+tab", "backtab"}:
            return ("TAB", None, ("shift",))
        if key in {"enter", "return"}:
            return ("ENTER", None, ())
        if key == "backspace":
            return ("BACKSPACE", None, ())
        if key == "escape":
            return ("ESC", None, ())
        if event.is_printable and event.character:
            if event.character == " ":
                return ("SPACE", " ", ())
            return (event.character, event.character, ())
        *mods, base = key.split("+")
        return (base.upper() if len(base) > 1 else base, None, tuple(mods))


def _env_int(key: str, fallback: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def build_parser(parser: argparse.ArgumentParser | None = None) -> argparse.ArgumentParser:
    parser = parser or argparse.ArgumentParser(
        description="Run the snippet playground."
    )
    parser.add_argument(
        "--filetype",
        default="tex",
        help="Filetype of the playground buffer (default: tex)",
    )
    parser.add_argument(
        "--path",
        default=None,
        help="File path reported to PythonRun and other actions",
    )
    parser.add_argument(
        "--log-host",
        default=os.environ.get(f"{ENV_PREFIX}LOG_HOST", "127.0.0.1"),
        help="Host interface for the TCP log stream (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--log-port",
        type=int,
        default=_env_int(f"{ENV_PREFIX}LOG_PORT", 8765),
        help="TCP port for the log stream (0 for ephemeral, default: 8765)",
    )
    parser.add_argument(
        "--no-log-server",
        action="store_true",
        help="Disable the external log server",
    )
    return parser


def run(args: argparse.Namespace) -> None:
    log_port: int | None = None if args.no_log_server else args.log_port
    app = SnippetPlaygroundApp(
        filetype=args.filetype,
        path=args.path,
        log_host=args.log_host,
        log_port=log_port,
    )
    app.run()


def main(argv: Optional[Sequence[str]] = None) -> None:
    run(build_parser().parse_args(argv))


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
