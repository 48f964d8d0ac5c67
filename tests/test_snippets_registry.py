import pytest

from editor_profile.snippets import (
    LATEX_FILETYPE,
    ExpansionContext,
    Placeholder,
    RegistryFrozenError,
    Snippet,
    SnippetConflictError,
    SnippetRegistry,
    Text,
    expand,
    load_default_snippets,
)


def make_snippet(
    trigger: str = "ff",
    *,
    filetype: str = "tex",
    auto: bool = False,
    body=None,
    word_trigger: bool = True,
) -> Snippet:
    return Snippet(
        trigger=trigger,
        body=body or (Text("\\frac{"), Placeholder(1), Text("}{"), Placeholder(2), Text("}")),
        auto_expand=auto,
        filetype=filetype,
        word_trigger=word_trigger,
    )


def make_defaults() -> SnippetRegistry:
    registry = SnippetRegistry()
    load_default_snippets(registry)
    return registry


def test_fraction_expands_with_two_ordered_stops() -> None:
    snippet = make_defaults().resolve("ff", LATEX_FILETYPE)
    assert snippet is not None and snippet.auto_expand

    expansion = expand(snippet)

    assert expansion.text == "\\frac{}{}"
    assert [(s.index, s.start, s.end) for s in expansion.tab_stops] == [(1, 6, 6), (2, 8, 8)]


def test_equation_block_is_multi_line() -> None:
    snippet = make_defaults().resolve("eq", LATEX_FILETYPE)
    assert snippet is not None and not snippet.auto_expand

    expansion = expand(snippet)

    assert expansion.text == "\\begin{equation}\n \n\\end{equation}"
    assert len(expansion.tab_stops) == 1
    assert expansion.tab_stops[0].start == len("\\begin{equation}\n ")


def test_tab_stops_follow_index_not_position() -> None:
    snippet = make_snippet(
        "sw",
        body=(Placeholder(3, "c"), Text(" "), Placeholder(1, "a"), Text(" "), Placeholder(2, "b")),
    )

    expansion = expand(snippet)

    assert [stop.index for stop in expansion.tab_stops] == [1, 2, 3]
    assert [expansion.text[s.start : s.end] for s in expansion.tab_stops] == ["a", "b", "c"]


def test_expansion_indents_continuation_lines() -> None:
    snippet = make_defaults().resolve("eq", LATEX_FILETYPE)
    assert snippet is not None

    expansion = expand(snippet, ExpansionContext(indent="    "))

    assert expansion.text.splitlines()[2] == "    \\end{equation}"


def test_resolve_is_idempotent_and_unknown_is_none() -> None:
    registry = make_defaults()

    assert registry.resolve("tbb", "tex") is registry.resolve("tbb", "tex")
    assert registry.resolve("nope", "tex") is None
    assert registry.resolve("ff", "python") is None


def test_strig_record_never_registers_item() -> None:
    registry = SnippetRegistry()

    report = load_default_snippets(registry)

    assert registry.resolve("item", "tex") is None
    assert report.triggers == ("ff", "eq", "tbb", "tii")
    assert [skip.keys for skip in report.skipped] == [("body", "dscr", "strig")]


def test_all_filetype_is_visible_from_every_filetype() -> None:
    registry = SnippetRegistry()
    shared = registry.register(make_snippet("todo", filetype="all"))

    assert registry.resolve("todo", "python") is shared
    assert registry.resolve("todo") is shared


def test_duplicate_trigger_conflicts_unless_replaced() -> None:
    registry = SnippetRegistry()
    registry.register(make_snippet())

    with pytest.raises(SnippetConflictError):
        registry.register(make_snippet())

    replacement = registry.register(make_snippet(auto=True), replace=True)
    assert registry.resolve("ff", "tex") is replacement


def test_frozen_registry_rejects_registration() -> None:
    registry = make_defaults()
    registry.freeze()

    with pytest.raises(RegistryFrozenError):
        registry.register(make_snippet("new"))
    assert registry.frozen


def test_match_before_prefers_longest_trigger_and_word_boundary() -> None:
    registry = SnippetRegistry()
    registry.register(make_snippet("ff"))
    registry.register(make_snippet("cff"))

    assert registry.match_before("x cff", "tex").trigger == "cff"
    assert registry.match_before("diff", "tex") is None
    assert registry.match_before("(ff", "tex").trigger == "ff"


def test_match_before_filters_auto_snippets() -> None:
    registry = make_defaults()

    assert registry.match_before("eq", "tex", auto=True) is None
    assert registry.match_before("tbb", "tex", auto=True).trigger == "tbb"


def test_stats_counts_auto_snippets() -> None:
    stats = make_defaults().stats()

    assert stats.snippet_count == 4
    assert stats.auto_count == 3
    assert stats.filetypes == ("tex",)


def test_snippet_rejects_whitespace_trigger_and_negative_index() -> None:
    with pytest.raises(ValueError):
        make_snippet("a b")
    with pytest.raises(ValueError):
        Placeholder(-1)


def test_expansion_converts_tabs_when_width_is_given() -> None:
    snippet = make_snippet(
        "itm",
        body=(Text("\\begin{itemize}\n\t\\item "), Placeholder(1), Text("\n\\end{itemize}")),
    )

    expansion = expand(snippet, ExpansionContext(tab_width=2))

    assert expansion.text == "\\begin{itemize}\n  \\item \n\\end{itemize}"
    assert expansion.tab_stops[0].start == len("\\begin{itemize}\n  \\item ")
    assert "\t\\item" in expand(snippet).text
