import pytest

from editor_profile.keymaps import KeyInput, KeySequence, KeyStroke, normalize_mode


def tokens(notation: str, **kwargs) -> tuple[str, ...]:
    return KeySequence.parse(notation, **kwargs).tokens


def test_parse_leader_sequences() -> None:
    assert tokens("<leader>rn") == ("SPACE", "r", "n")
    assert tokens("<leader>vws", leader=",") == (",", "v", "w", "s")
    assert tokens("<localleader>ll", local_leader="\\") == ("\\", "l", "l")


def test_parse_special_and_modified_keys() -> None:
    assert tokens("<CR>") == ("ENTER",)
    assert tokens("<Tab>") == ("TAB",)
    assert tokens("<C-b>") == ("ctrl+b",)
    assert tokens("<C-Space>") == ("ctrl+SPACE",)
    assert tokens("<S-Tab>") == ("shift+TAB",)
    assert tokens(":NvimTreeToggle<CR>")[-1] == "ENTER"


def test_parse_plain_and_bracket_keys() -> None:
    assert tokens("gD") == ("g", "D")
    assert tokens("[d") == ("[", "d")
    assert tokens("<notakey") == ("<", "n", "o", "t", "a", "k", "e", "y")


def test_empty_sequence_rejected() -> None:
    with pytest.raises(ValueError):
        KeySequence.parse("")


def test_keystroke_modifiers_are_normalized() -> None:
    stroke = KeyStroke("x", ("Shift", "ctrl", "shift"))

    assert stroke.modifiers == ("ctrl", "shift")
    assert stroke.token == "ctrl+shift+x"


def test_key_input_token_matches_parsed_sequence() -> None:
    assert KeyInput("TAB", ("shift",)).token == tokens("<S-Tab>")[0]


def test_normalize_mode_aliases() -> None:
    assert normalize_mode("i") == "insert"
    assert normalize_mode("s") == "select"
    with pytest.raises(ValueError):
        normalize_mode("replace")
