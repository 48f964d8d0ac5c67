import pytest

from editor_profile.actions import LspMethod, LspRequest, OpenPicker, Picker
from editor_profile.keymaps import (
    Binding,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
)


def make_sequence(*keys: str) -> KeySequence:
    return KeySequence.from_strings(*keys)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    sequence: KeySequence | None = None,
    buffer: int | None = None,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=sequence or make_sequence("g", "d"),
        action=LspRequest(LspMethod.DEFINITION),
        buffer=buffer,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    binding = make_binding(binding_id="normal.gd")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="normal")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="normal.gd"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="normal.gd.duplicate"))

    assert [b.id for b in excinfo.value.conflicts] == ["normal.gd"]


def test_buffer_local_binding_does_not_conflict_with_global() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="global"))
    registry.register_binding(make_binding(binding_id="local", buffer=3))

    stats = registry.stats()
    assert stats.binding_count == 2
    assert stats.buffer_local_count == 1


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", sequence=make_sequence("g", "D"))

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]


def test_replace_drops_conflicting_binding_with_other_id() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="old"))

    registry.register_binding(make_binding(binding_id="new"), replace=True)

    assert [b.id for b in registry.iter_bindings()] == ["new"]


def test_update_binding_changes_sequence() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="binding"))

    updated = registry.update_binding(
        "binding", sequence=make_sequence("g", "r"), description="references"
    )

    assert updated.sequence.tokens == ("g", "r")
    assert updated.description == "references"


def test_unregister_binding() -> None:
    registry = KeymapRegistry()
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0


def test_clear_buffer_only_removes_that_buffer() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="global"))
    registry.register_binding(make_binding(binding_id="b1", buffer=1))
    registry.register_binding(make_binding(binding_id="b2", buffer=2))
    before = registry.revision()

    removed = registry.clear_buffer(1)

    assert [b.id for b in removed] == ["b1"]
    assert sorted(b.id for b in registry.iter_bindings()) == ["b2", "global"]
    assert registry.revision() == before + 1


def test_bindings_for_merges_globals_and_buffer_locals() -> None:
    registry = KeymapRegistry()
    registry.register_binding(make_binding(binding_id="global"))
    registry.register_binding(
        make_binding(binding_id="b1", sequence=make_sequence("K"), buffer=1)
    )
    registry.register_binding(
        make_binding(binding_id="b2", sequence=make_sequence("K"), buffer=2)
    )

    ids = sorted(b.id for b in registry.bindings_for("normal", 1))

    assert ids == ["b1", "global"]


def test_binding_rejects_unknown_action() -> None:
    with pytest.raises(TypeError):
        Binding(
            id="bad",
            mode="normal",
            sequence=make_sequence("x"),
            action="telescope.find_files",  # type: ignore[arg-type]
        )


def test_binding_normalizes_mode_alias() -> None:
    binding = Binding(
        id="picker",
        mode="n",
        sequence=make_sequence("x"),
        action=OpenPicker(Picker.FIND_FILES),
    )

    assert binding.mode == "normal"
    assert binding.scope == "global"
