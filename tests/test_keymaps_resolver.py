from __future__ import annotations

from editor_profile.actions import DiagnosticJump, LspMethod, LspRequest, OpenPicker, Picker
from editor_profile.keymaps import Binding, KeySequence, KeymapRegistry, KeymapResolver


def make_binding(
    binding_id: str,
    *,
    mode: str = "normal",
    keys: str = "gd",
    buffer: int | None = None,
    priority: int = 0,
    timeout_ms: int = 1000,
    action=None,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.parse(keys, timeout_ms=timeout_ms),
        action=action or LspRequest(LspMethod.DEFINITION),
        buffer=buffer,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("normal.gd")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("normal", ("g", "d"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.id == binding.id


def test_resolver_reports_pending_for_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gd")]))

    result = resolver.resolve("normal", ("g",))

    assert result.status == "pending"
    assert result.match is None
    assert result.next_expected == ("d",)


def test_resolver_miss() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gd")]))

    result = resolver.resolve("normal", ("x",))

    assert result.status == "miss"
    assert result.consumed == 0


def test_buffer_local_binding_wins_over_global() -> None:
    global_binding = make_binding(
        "global.K", keys="K", action=OpenPicker(Picker.HELP_TAGS), priority=10
    )
    local = make_binding("lsp.K", keys="K", action=LspRequest(LspMethod.HOVER), buffer=4)
    resolver = KeymapResolver(build_registry([global_binding, local]))

    in_buffer = resolver.resolve("normal", ("K",), buffer=4)
    elsewhere = resolver.resolve("normal", ("K",), buffer=5)

    assert in_buffer.match is not None and in_buffer.match.id == "lsp.K"
    assert elsewhere.match is not None and elsewhere.match.id == "global.K"


def test_ambiguous_prefix_is_pending_with_match() -> None:
    short = make_binding(
        "lsp.format",
        keys="<leader>f",
        action=LspRequest(LspMethod.FORMAT, asynchronous=True),
        buffer=1,
        timeout_ms=800,
    )
    long = make_binding(
        "telescope.find_files",
        keys="<leader>ff",
        action=OpenPicker(Picker.FIND_FILES),
        timeout_ms=1200,
    )
    resolver = KeymapResolver(build_registry([short, long]))

    result = resolver.resolve("normal", ("SPACE", "f"), buffer=1)

    assert result.status == "pending"
    assert result.ambiguous
    assert result.match is not None and result.match.id == "lsp.format"
    assert result.next_expected == ("f",)
    assert result.timeout_ms == 800


def test_resolver_cache_invalidates_on_registration() -> None:
    registry = build_registry([make_binding("normal.gd")])
    resolver = KeymapResolver(registry)
    assert resolver.resolve("normal", ("]", "d")).status == "miss"

    registry.register_binding(
        make_binding("diag.next", keys="]d", action=DiagnosticJump(1))
    )

    result = resolver.resolve("normal", ("]", "d"))
    assert result.status == "match"
    assert result.match is not None and result.match.action == DiagnosticJump(1)


def test_modes_are_isolated() -> None:
    resolver = KeymapResolver(build_registry([make_binding("normal.gd")]))

    assert resolver.resolve("insert", ("g", "d")).status == "miss"
