"""Guarded colorscheme loading."""

from __future__ import annotations

from typing import TYPE_CHECKING

from editor_profile.runtime import telemetry

if TYPE_CHECKING:  # pragma: no cover
    from .host import Host


class ColorschemeNotFoundError(LookupError):
    """Raised by hosts when a colorscheme cannot be loaded."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Colorscheme {name} not found!")
        self.name = name


def apply_colorscheme(host: "Host", name: str, *, fallback: str = "default") -> str:
    """Load ``name``; on failure warn the user and apply ``fallback``.

    Any error raised while loading ``name`` triggers the fallback. Returns
    the name of the colorscheme that ended up active. A failing fallback
    propagates.
    """

    try:
        host.colorscheme(name)
        return name
    except Exception as exc:
        host.notify(f"Colorscheme {name} not found!", "warn")
        telemetry.record_event(
            "theme.fallback",
            level="warning",
            data={"requested": name, "fallback": fallback, "error": str(exc)},
        )
    host.colorscheme(fallback)
    return fallback


__all__ = ["ColorschemeNotFoundError", "apply_colorscheme"]
