import json
from pathlib import Path

import pytest

from editor_profile.snippets import (
    Placeholder,
    SnippetDefinitionError,
    SnippetRegistry,
    Text,
    load_default_snippets,
    load_definitions,
    load_directory,
    load_file,
)
from editor_profile.snippets.loader import parse_record


def write_snippets(directory: Path, name: str, records) -> Path:
    path = directory / name
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_parse_record_reads_all_fields() -> None:
    snippet = parse_record(
        {
            "trig": "sec",
            "snippetType": "autosnippet",
            "name": "Section",
            "wordTrig": False,
            "body": ["\\section{", {"insert": 1, "default": "title"}, "}", ["", ""]],
        },
        filetype="tex",
    )

    assert snippet.auto_expand
    assert not snippet.word_trigger
    assert snippet.description == "Section"
    assert snippet.body == (
        Text("\\section{"),
        Placeholder(1, "title"),
        Text("}"),
        Text("\n"),
    )


@pytest.mark.parametrize(
    "record",
    [
        {"trig": "", "body": []},
        {"trig": "x", "snippetType": "regex", "body": []},
        {"trig": "x", "body": "not a list"},
        {"trig": "x", "body": [{"insert": -1}]},
        {"trig": "x", "body": [{"insert": True}]},
        {"trig": "x", "body": [42]},
        {"trig": "a b", "body": []},
    ],
)
def test_parse_record_rejects_malformed_records(record) -> None:
    with pytest.raises(SnippetDefinitionError):
        parse_record(record)


def test_missing_trig_is_skipped_and_reported() -> None:
    registry = SnippetRegistry()

    report = load_definitions(
        registry,
        [{"strig": "item", "body": []}, {"trig": "ok", "body": ["x"]}],
        filetype="tex",
        source="inline",
    )

    assert report.triggers == ("ok",)
    assert report.skipped[0].position == 0
    assert report.skipped[0].source == "inline"
    assert "trig" in report.skipped[0].reason


def test_missing_trig_raises_in_strict_mode() -> None:
    with pytest.raises(SnippetDefinitionError):
        load_definitions(SnippetRegistry(), [{"strig": "item"}], strict=True)


def test_load_file_uses_stem_as_filetype(tmp_path: Path) -> None:
    path = write_snippets(tmp_path, "python.json", [{"trig": "main", "body": ["if __name__"]}])
    registry = SnippetRegistry()

    report = load_file(registry, path)

    assert report.triggers == ("main",)
    assert registry.resolve("main", "python") is not None
    assert registry.resolve("main", "tex") is None


def test_load_file_reports_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "tex.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(SnippetDefinitionError) as excinfo:
        load_file(SnippetRegistry(), path)

    assert str(path) in str(excinfo.value)


def test_load_directory_overrides_defaults_when_replacing(tmp_path: Path) -> None:
    write_snippets(tmp_path, "tex.json", [{"trig": "ff", "body": ["\\dfrac{", {"insert": 1}, "}"]}])
    write_snippets(tmp_path, "lua.json", [{"trig": "fn", "body": ["function()"]}])
    registry = SnippetRegistry()
    load_default_snippets(registry)

    report = load_directory(registry, tmp_path, replace=True)

    assert sorted(report.triggers) == ["ff", "fn"]
    fraction = registry.resolve("ff", "tex")
    assert fraction is not None and not fraction.auto_expand


def test_load_directory_missing_path_is_empty(tmp_path: Path) -> None:
    report = load_directory(SnippetRegistry(), tmp_path / "absent")

    assert report.registered == []
    assert report.skipped == []


def test_default_snippets_can_be_filtered() -> None:
    registry = SnippetRegistry()

    report = load_default_snippets(registry, include=["tbb"])

    assert report.triggers == ("tbb",)
    assert report.skipped == []
