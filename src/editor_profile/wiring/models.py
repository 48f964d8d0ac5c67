"""Dataclasses describing the plugin wiring table and host-side records."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from editor_profile.actions.variants import EditorAction, is_action

if TYPE_CHECKING:  # pragma: no cover
    from editor_profile.profile.settings import EditorSettings

    from .host import Host

DEFAULT_PRIORITY = 50

PluginCallback = Callable[["PluginContext"], None]


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if mapping is None:
        return None
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, slots=True)
class PluginSpec:
    """One entry of the wiring table.

    ``init`` runs at startup before any plugin loads; ``config`` runs once
    after the plugin loaded. A spec with ``opts`` and no ``config`` is set
    up through ``module_name`` with those options.
    """

    id: str
    dependencies: tuple[str, ...] = ()
    version: Optional[str] = None
    tag: Optional[str] = None
    priority: Optional[int] = None
    build: Optional[str] = None
    lazy: Optional[bool] = None
    main: Optional[str] = None
    opts: Optional[Mapping[str, Any]] = None
    init: Optional[PluginCallback] = None
    config: Optional[PluginCallback] = None
    description: str = ""

    def __post_init__(self) -> None:
        owner, _, repo = self.id.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(f"plugin id '{self.id}' must look like 'owner/repo'")
        object.__setattr__(self, "dependencies", tuple(self.dependencies))
        object.__setattr__(self, "opts", _freeze(self.opts))
        for name in ("init", "config"):
            callback = getattr(self, name)
            if callback is not None and not callable(callback):
                raise TypeError(f"plugin '{self.id}' {name} must be callable")

    @property
    def name(self) -> str:
        return self.id.split("/", 1)[1]

    @property
    def module_name(self) -> str:
        if self.main:
            return self.main
        name = self.name
        for suffix in (".nvim", ".lua", ".vim"):
            if name.endswith(suffix):
                name = name[: -len(suffix)]
        return name

    @property
    def url(self) -> str:
        return f"https://github.com/{self.id}.git"

    @property
    def effective_priority(self) -> int:
        return DEFAULT_PRIORITY if self.priority is None else self.priority


@dataclass(frozen=True, slots=True)
class PluginContext:
    """Everything a plugin callback may read; passed by value, never shared."""

    spec: PluginSpec
    settings: "EditorSettings"
    host: "Host"


@dataclass(frozen=True, slots=True)
class Autocmd:
    events: tuple[str, ...]
    action: EditorAction
    pattern: str = "*"
    group: Optional[str] = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.events:
            raise ValueError("autocmd requires at least one event")
        if not is_action(self.action):
            raise TypeError(f"unsupported autocmd action {self.action!r}")
        object.__setattr__(self, "events", tuple(self.events))


@dataclass(frozen=True, slots=True)
class UserCommand:
    name: str
    action: EditorAction
    description: str = ""

    def __post_init__(self) -> None:
        if not self.name or not self.name[0].isupper():
            raise ValueError(f"user command '{self.name}' must start with an uppercase letter")
        if not is_action(self.action):
            raise TypeError(f"unsupported command action {self.action!r}")


@dataclass(frozen=True, slots=True)
class LanguageServerConfig:
    name: str
    filetypes: tuple[str, ...] = ()
    settings: Mapping[str, Any] = field(default_factory=dict)
    capabilities: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "filetypes", tuple(self.filetypes))
        object.__setattr__(self, "settings", MappingProxyType(dict(self.settings)))
        object.__setattr__(self, "capabilities", MappingProxyType(dict(self.capabilities)))


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    level: str = "info"


__all__ = [
    "DEFAULT_PRIORITY",
    "Autocmd",
    "LanguageServerConfig",
    "Notification",
    "PluginCallback",
    "PluginContext",
    "PluginSpec",
    "UserCommand",
]
