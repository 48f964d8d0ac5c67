"""Declarative plugin wiring: specs, load order, manager and host boundary."""

from .models import (
    DEFAULT_PRIORITY,
    Autocmd,
    LanguageServerConfig,
    Notification,
    PluginCallback,
    PluginContext,
    PluginSpec,
    UserCommand,
)
from .theme import ColorschemeNotFoundError, apply_colorscheme
from .host import Host, HostCall, OnAttach, RecordingHost
from .order import PluginDependencyError, PluginSpecError, resolve_load_order
from .manager import PluginConfigError, PluginFailure, PluginLoadReport, PluginManager
from .bootstrap import LAZY_URL, BootstrapError, ensure_plugin_manager, plugin_manager_path

__all__ = [
    "DEFAULT_PRIORITY",
    "Autocmd",
    "LanguageServerConfig",
    "Notification",
    "PluginCallback",
    "PluginContext",
    "PluginSpec",
    "UserCommand",
    "ColorschemeNotFoundError",
    "apply_colorscheme",
    "Host",
    "HostCall",
    "OnAttach",
    "RecordingHost",
    "PluginDependencyError",
    "PluginSpecError",
    "resolve_load_order",
    "PluginConfigError",
    "PluginFailure",
    "PluginLoadReport",
    "PluginManager",
    "LAZY_URL",
    "BootstrapError",
    "ensure_plugin_manager",
    "plugin_manager_path",
]
