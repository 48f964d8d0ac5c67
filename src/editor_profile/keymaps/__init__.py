"""Declarative keymaps: models, registry and resolver."""

from .models import MODES, Binding, KeyInput, KeySequence, KeyStroke, normalize_mode
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionResult

__all__ = [
    "MODES",
    "Binding",
    "KeyInput",
    "KeySequence",
    "KeyStroke",
    "normalize_mode",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "KeymapResolver",
    "ResolutionResult",
]
