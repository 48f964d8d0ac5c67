"""Language-server attach bindings and server handlers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from editor_profile.actions import DiagnosticJump, EditorAction, LspMethod, LspRequest
from editor_profile.keymaps import Binding, KeySequence
from editor_profile.runtime.telemetry import record_event
from editor_profile.wiring import LanguageServerConfig

from .settings import EditorSettings

if TYPE_CHECKING:  # pragma: no cover
    from editor_profile.wiring import Host

OMNIFUNC = "v:lua.vim.lsp.omnifunc"

RUFF_ARGS = (
    "--stdin-filename",
    "%f",
    "--fix",
    "--exit-zero",
    "--force-exclude",
    "--isolated",
    "--respect-gitignore",
    "--extend-select",
    "I",
)

# (keys, action, description) in the order they are attached.
ATTACH_KEYS: tuple[tuple[str, EditorAction, str], ...] = (
    ("gd", LspRequest(LspMethod.DEFINITION), "Go to Definition"),
    ("gD", LspRequest(LspMethod.DECLARATION), "Go to Declaration"),
    ("gr", LspRequest(LspMethod.REFERENCES), "Show References"),
    ("gi", LspRequest(LspMethod.IMPLEMENTATION), "Go to Implementation"),
    ("K", LspRequest(LspMethod.HOVER), "Hover Documentation"),
    ("<leader>rn", LspRequest(LspMethod.RENAME), "Rename Symbol"),
    ("<leader>ca", LspRequest(LspMethod.CODE_ACTION), "Code Action"),
    ("<leader>f", LspRequest(LspMethod.FORMAT, asynchronous=True), "Format Document"),
    ("[d", DiagnosticJump(-1), "Go to previous diagnostic"),
    ("]d", DiagnosticJump(1), "Go to next diagnostic"),
    ("<leader>vws", LspRequest(LspMethod.WORKSPACE_SYMBOL), "Workspace Symbols"),
)


def attach_bindings(buffer: int, leader: str = " ") -> list[Binding]:
    """Normal-mode bindings scoped to ``buffer``."""

    bindings = []
    for keys, action, description in ATTACH_KEYS:
        bindings.append(
            Binding(
                id=f"lsp.{buffer}.{keys}",
                mode="normal",
                sequence=KeySequence.parse(keys, leader=leader),
                action=action,
                description=description,
                buffer=buffer,
                source="lsp",
                tags=("lsp",),
            )
        )
    return bindings


def make_on_attach(host: "Host", settings: EditorSettings) -> Callable[[str, int], None]:
    def on_attach(server: str, buffer: int) -> None:
        host.set_buffer_option("omnifunc", OMNIFUNC, buffer)
        for binding in attach_bindings(buffer, settings.leader):
            host.set_keymap(binding)
        record_event(
            "lsp.bindings_attached",
            level="debug",
            data={"server": server, "buffer": buffer, "count": len(ATTACH_KEYS)},
        )

    return on_attach


def server_configs(settings: EditorSettings) -> tuple[LanguageServerConfig, ...]:
    """Handler table: ruff and pyright explicitly, every other server defaulted."""

    capabilities = settings.lsp.capabilities
    explicit = {
        "ruff": LanguageServerConfig(
            name="ruff",
            filetypes=("python",),
            settings={"args": list(RUFF_ARGS), "format": {"enabled": True}},
            capabilities=capabilities,
        ),
        "pyright": LanguageServerConfig(
            name="pyright",
            filetypes=("python",),
            capabilities=capabilities,
        ),
    }
    configs = []
    for name in settings.lsp.ensure_installed:
        configs.append(
            explicit.get(name)
            or LanguageServerConfig(name=name, capabilities=capabilities)
        )
    return tuple(configs)


def setup_language_servers(host: "Host", settings: EditorSettings) -> list[str]:
    on_attach = make_on_attach(host, settings)
    names = []
    for config in server_configs(settings):
        host.setup_language_server(config, on_attach)
        names.append(config.name)
    return names


__all__ = [
    "ATTACH_KEYS",
    "OMNIFUNC",
    "RUFF_ARGS",
    "attach_bindings",
    "make_on_attach",
    "server_configs",
    "setup_language_servers",
]
