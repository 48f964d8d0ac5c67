"""Host editor boundary plus an in-memory recording implementation."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence

from editor_profile.actions import EditorAction, dispatch
from editor_profile.keymaps import Binding, KeymapRegistry
from editor_profile.runtime import telemetry

from .models import Autocmd, LanguageServerConfig, Notification, PluginSpec, UserCommand
from .theme import ColorschemeNotFoundError

OnAttach = Callable[[str, int], None]


class Host(Protocol):
    """Plugin-API surface the profile calls into."""

    def set_option(self, name: str, value: object) -> None: ...

    def set_buffer_option(
        self, name: str, value: object, buffer: Optional[int] = None
    ) -> None: ...

    def set_global(self, name: str, value: object) -> None: ...

    def set_keymap(self, binding: Binding) -> Binding: ...

    def create_user_command(self, command: UserCommand) -> None: ...

    def run_user_command(self, name: str) -> object: ...

    def create_autocmd(self, autocmd: Autocmd) -> None: ...

    def fire_autocmd(self, event: str, path: str = "") -> int: ...

    def colorscheme(self, name: str) -> None: ...

    def notify(self, message: str, level: str = "info") -> None: ...

    def install_plugin(self, spec: PluginSpec) -> bool: ...

    def run_build(self, spec: PluginSpec) -> None: ...

    def setup_plugin(self, module: str, options: Mapping[str, Any]) -> None: ...

    def call_plugin(self, module: str, function: str, *args: object) -> object: ...

    def setup_language_server(
        self, config: LanguageServerConfig, on_attach: OnAttach
    ) -> None: ...

    def lsp_request(self, method: str, params: Mapping[str, Any]) -> object: ...

    def open_picker(self, name: str) -> object: ...

    def run_ex(self, command: str) -> object: ...

    def toggle_terminal(self, direction: str, size: int) -> object: ...

    def send_to_terminal(self, command: str) -> object: ...

    def current_file(self) -> Optional[str]: ...

    def highlight_yank(self, group: str, timeout_ms: int) -> object: ...

    def snippet_expand_or_jump(self) -> object: ...

    def snippet_jump(self, direction: int) -> object: ...


@dataclass(frozen=True, slots=True)
class HostCall:
    name: str
    args: tuple[object, ...] = ()


class RecordingHost:
    """Host that records every call instead of driving a real editor.

    Used for dry runs, by the CLI and by the Textual playground. Snippet
    actions are forwarded to ``engine`` when one is attached.
    """

    def __init__(
        self,
        *,
        keymaps: KeymapRegistry | None = None,
        engine: Any = None,
        colorschemes: Sequence[str] = ("default",),
        current_file: Optional[str] = None,
        installed: Sequence[str] = (),
        current_buffer: int = 1,
    ) -> None:
        self.options: Dict[str, object] = {}
        self.buffer_options: Dict[int, Dict[str, object]] = {}
        self.globals: Dict[str, object] = {}
        self.keymaps = keymaps or KeymapRegistry(logger_name="editor_profile.host")
        self.user_commands: Dict[str, UserCommand] = {}
        self.autocmds: list[Autocmd] = []
        self.plugin_setups: Dict[str, Mapping[str, Any]] = {}
        self.language_servers: Dict[str, LanguageServerConfig] = {}
        self.attached: list[tuple[str, int]] = []
        self.notifications: list[Notification] = []
        self.calls: list[HostCall] = []
        self.installed: set[str] = set(installed)
        self.builds: list[str] = []
        self.available_colorschemes = set(colorschemes)
        self.active_colorscheme: Optional[str] = None
        self.engine = engine
        self.current_buffer = current_buffer
        self.file_path = current_file
        self.terminal_open = False
        self.terminal_lines: list[str] = []
        self._on_attach: Dict[str, OnAttach] = {}

    # -- options and state -------------------------------------------------

    def set_option(self, name: str, value: object) -> None:
        self.options[name] = value

    def set_buffer_option(
        self, name: str, value: object, buffer: Optional[int] = None
    ) -> None:
        number = self.current_buffer if buffer is None else buffer
        self.buffer_options.setdefault(number, {})[name] = value
        if name == "filetype" and self.engine is not None:
            if self.engine.buffer.number == number:
                self.engine.filetype = str(value)

    def set_global(self, name: str, value: object) -> None:
        self.globals[name] = value

    def set_keymap(self, binding: Binding) -> Binding:
        return self.keymaps.register_binding(binding, replace=True)

    def notify(self, message: str, level: str = "info") -> None:
        self.notifications.append(Notification(message, level))

    def colorscheme(self, name: str) -> None:
        if name not in self.available_colorschemes:
            raise ColorschemeNotFoundError(name)
        self.active_colorscheme = name

    def current_file(self) -> Optional[str]:
        return self.file_path

    # -- commands and autocommands ----------------------------------------

    def create_user_command(self, command: UserCommand) -> None:
        self.user_commands[command.name] = command

    def run_user_command(self, name: str) -> object:
        try:
            command = self.user_commands[name]
        except KeyError as exc:
            raise KeyError(f"Not an editor command: {name}") from exc
        self._record("run_user_command", name)
        return dispatch(command.action, self)

    def create_autocmd(self, autocmd: Autocmd) -> None:
        self.autocmds.append(autocmd)

    def fire_autocmd(self, event: str, path: str = "") -> int:
        """Run every autocommand registered for ``event`` matching ``path``."""

        matched = [
            autocmd
            for autocmd in self.autocmds
            if event in autocmd.events and fnmatch(path or "", autocmd.pattern)
        ]
        for autocmd in matched:
            dispatch(autocmd.action, self)
        return len(matched)

    def run_ex(self, command: str) -> object:
        name = command.split()[0]
        if name in self.user_commands:
            return self.run_user_command(name)
        self._record("run_ex", command)
        return None

    # -- plugins -----------------------------------------------------------

    def install_plugin(self, spec: PluginSpec) -> bool:
        if spec.id in self.installed:
            return False
        self.installed.add(spec.id)
        self._record("install_plugin", spec.id)
        return True

    def run_build(self, spec: PluginSpec) -> None:
        if spec.build:
            self.builds.append(spec.build)
            self._record("run_build", spec.id, spec.build)

    def setup_plugin(self, module: str, options: Mapping[str, Any]) -> None:
        self.plugin_setups[module] = dict(options)

    def call_plugin(self, module: str, function: str, *args: object) -> object:
        self._record("call_plugin", module, function, *args)
        return None

    def setup_language_server(
        self, config: LanguageServerConfig, on_attach: OnAttach
    ) -> None:
        self.language_servers[config.name] = config
        self._on_attach[config.name] = on_attach

    def attach_language_server(self, name: str, buffer: Optional[int] = None) -> None:
        """Simulate a language-server client attaching to ``buffer``."""

        number = self.current_buffer if buffer is None else buffer
        try:
            callback = self._on_attach[name]
        except KeyError as exc:
            raise KeyError(f"Language server '{name}' is not configured") from exc
        self.attached.append((name, number))
        telemetry.record_event(
            "lsp.attach", level="debug", data={"server": name, "buffer": number}
        )
        callback(name, number)

    # -- actions -----------------------------------------------------------

    def lsp_request(self, method: str, params: Mapping[str, Any]) -> object:
        self._record("lsp_request", method, dict(params))
        return None

    def open_picker(self, name: str) -> object:
        self._record("open_picker", name)
        return None

    def toggle_terminal(self, direction: str, size: int) -> object:
        self.terminal_open = not self.terminal_open
        self._record("toggle_terminal", direction, size)
        return self.terminal_open

    def send_to_terminal(self, command: str) -> object:
        self.terminal_lines.append(command)
        self._record("send_to_terminal", command)
        return command

    def highlight_yank(self, group: str, timeout_ms: int) -> object:
        self._record("highlight_yank", group, timeout_ms)
        return None

    def snippet_expand_or_jump(self) -> object:
        if self.engine is None:
            self._record("snippet_expand_or_jump")
            return None
        return self.engine.expand_or_jump()

    def snippet_jump(self, direction: int) -> object:
        if self.engine is None:
            self._record("snippet_jump", direction)
            return None
        return self.engine.jump(direction)

    def execute(self, action: EditorAction) -> object:
        return dispatch(action, self)

    def calls_named(self, name: str) -> list[HostCall]:
        return [call for call in self.calls if call.name == name]

    def _record(self, name: str, *args: object) -> None:
        self.calls.append(HostCall(name, tuple(args)))


__all__ = ["Host", "HostCall", "OnAttach", "RecordingHost"]
