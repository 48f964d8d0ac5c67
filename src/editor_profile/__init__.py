"""Editor profile: typed snippet registry and declarative plugin wiring."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "keymaps",
    "profile",
    "runtime",
    "snippets",
    "wiring",
]

__version__ = "0.1.0"
