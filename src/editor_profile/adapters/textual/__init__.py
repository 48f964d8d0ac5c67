"""Textual playground adapter.

``app`` is not imported here so the controller stays usable without
starting a Textual application.
"""

from .controller import (
    SNIPPET_EVENTS,
    Playground,
    TextualSnippetAdapter,
    TextualUIHooks,
    create_playground,
)
from .log_stream import NetworkLogStreamer

__all__ = [
    "SNIPPET_EVENTS",
    "NetworkLogStreamer",
    "Playground",
    "TextualSnippetAdapter",
    "TextualUIHooks",
    "create_playground",
]
