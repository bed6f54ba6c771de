"""Tests for corpus and fixture loading."""

import json

import pytest

from docsearch.data_loader import (
    FixtureError,
    entry_from_dict,
    load_entries,
    load_fixture,
    parse_js_fixture,
)
from docsearch.index import Entry, Index, InvalidEntry, Kind
from docsearch.matcher import Category


def test_load_entries(std_entries):
    first = std_entries[0]
    assert first.path == ()
    assert first.name == "std"
    assert first.kind is Kind.MODULE

    from_u32 = std_entries[2]
    assert from_u32.path == ("std", "char")
    assert from_u32.inputs == ("u32",)
    assert from_u32.output == "Option"
    assert from_u32.desc == "Converts a u32 to a char."


def test_blank_lines_are_skipped(tmp_path):
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text('\n{"path": "std", "name": "u32", "kind": "primitive"}\n\n')
    assert len(load_entries(str(corpus))) == 1


def test_path_may_be_a_list():
    entry = entry_from_dict({"path": ["std", "vec", "Vec"], "name": "new"})
    assert entry.path_str == "std::vec::Vec"
    assert entry.kind is Kind.FUNCTION


def test_unknown_kind_warns_and_falls_back():
    with pytest.warns(UserWarning, match="Unknown kind"):
        entry = entry_from_dict({"path": "std", "name": "thing", "kind": "gizmo"})
    assert entry.kind is Kind.OTHER


def test_missing_name_fails_at_index_build(tmp_path):
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text(json.dumps({"path": "std::char"}) + "\n")
    with pytest.raises(InvalidEntry):
        Index.build(load_entries(str(corpus)))


def test_malformed_json_propagates(tmp_path):
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text('{"path": "std", "name": \n')
    with pytest.raises(json.JSONDecodeError):
        load_entries(str(corpus))


@pytest.mark.parametrize("line", [
    '{"path": "std", "name": 5}',
    '["std", "u32"]',
    '{"path": 7, "name": "u32"}',
    '{"path": ["std", 1], "name": "u32"}',
    '{"path": "std", "name": "from", "output": 3}',
    '{"path": "std", "name": "from", "inputs": [1]}',
])
def test_wrongly_typed_record_raises_invalid_entry(tmp_path, line):
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text(line + "\n")
    with pytest.raises(InvalidEntry, match="corpus.jsonl:1"):
        load_entries(str(corpus))


def test_index_build_checks_field_types():
    with pytest.raises(InvalidEntry, match="invalid kind"):
        Index.build([Entry(path=(), name="x", kind="fn")])
    with pytest.raises(InvalidEntry, match="non-string name"):
        Index.build([Entry(path=(), name=5)])


def test_load_js_fixture(fixtures_dir):
    fixture = load_fixture(str(fixtures_dir / "from_u.js"))
    assert fixture.name == "from_u"
    assert fixture.query == "from_u"
    assert list(fixture.expected) == [Category.OTHERS]
    assert fixture.expected[Category.OTHERS][0] == ("std::char", "from_u32")
    assert fixture.expected[Category.OTHERS][-1] == ("std::i128", "from_unsigned")
    assert len(fixture.expected[Category.OTHERS]) == 6


def test_load_json_fixture(fixtures_dir):
    fixture = load_fixture(str(fixtures_dir / "u32_signature.json"))
    assert fixture.query == "u32"
    assert fixture.expected[Category.IN_ARGS] == [("std::char", "from_u32"), ("std::char", "from_digit")]


def test_js_fixture_with_double_quotes_and_escapes():
    fixture = parse_js_fixture(
        'const QUERY = "it\'s";\n'
        "const EXPECTED = {'others': [{'path': 'a', 'name': 'it\\'s'},],};\n"
    )
    assert fixture.query == "it's"
    assert fixture.expected[Category.OTHERS] == [("a", "it's")]


def test_js_fixture_with_trailing_comments():
    fixture = parse_js_fixture(
        "// exact: false\n"
        "const QUERY = 'from_u'; // the query\n"
        "const EXPECTED = {\n"
        "    'others': [\n"
        "        {'path': 'std::char', 'name': 'from_u32'}, // note\n"
        "        {'path': 'https://x', 'name': 'a//b'},\n"
        "    ],\n"
        "};\n"
    )
    assert fixture.query == "from_u"
    assert fixture.expected[Category.OTHERS] == [("std::char", "from_u32"), ("https://x", "a//b")]


def test_unknown_category_is_rejected(fixtures_dir):
    with pytest.raises(FixtureError, match="unknown category 'elsewhere'"):
        load_fixture(str(fixtures_dir / "bad_category.json"))


@pytest.mark.parametrize("source", [
    "const EXPECTED = {};",
    "const QUERY = 'x';",
    "const QUERY = 'x'; const EXPECTED = {'others': [{'path': 'a'}]};",
    "const QUERY = 'x'; const EXPECTED = {'others': foo};",
])
def test_malformed_js_fixture(source):
    with pytest.raises(FixtureError):
        parse_js_fixture(source)


def test_json_fixture_needs_query(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"expected": {}}')
    with pytest.raises(FixtureError):
        load_fixture(str(path))
