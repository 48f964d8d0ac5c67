"""Telemetry and event plumbing shared by every subsystem."""

from .bus import EventBus

__all__ = ["EventBus"]
