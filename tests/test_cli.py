"""Tests for the command-line interface."""

import json

from click.testing import CliRunner

from docsearch.cli import cli


def test_search_json(corpus_path):
    result = CliRunner().invoke(cli, ["search", "from_u", "--corpus", corpus_path, "--json"])
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert [row["name"] for row in data["others"]] == [
        "from_u32", "from_utf8", "from_utf8", "from_unique", "from_unsigned", "from_unsigned",
    ]
    assert data["in_args"] == []
    assert data["returned"] == []


def test_search_table_output(corpus_path):
    result = CliRunner().invoke(cli, ["search", "from_u", "-c", corpus_path, "--limit", "3"])
    assert result.exit_code == 0, result.output
    assert "others (3)" in result.output
    assert "from_unique" not in result.output


def test_search_without_results(corpus_path):
    result = CliRunner().invoke(cli, ["search", "nothing_here", "-c", corpus_path])
    assert result.exit_code == 0
    assert "No results found" in result.output


def test_search_invalid_corpus(tmp_path):
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text('{"path": "std", "name": ""}\n')
    result = CliRunner().invoke(cli, ["search", "x", "-c", str(corpus)])
    assert result.exit_code == 1
    assert "Invalid corpus entry" in result.output


def test_search_corpus_line_that_is_not_an_object(tmp_path):
    corpus = tmp_path / "corpus.jsonl"
    corpus.write_text('["std", "u32"]\n')
    result = CliRunner().invoke(cli, ["search", "u32", "-c", str(corpus)])
    assert result.exit_code == 1
    assert "Invalid corpus entry" in result.output


def test_search_rejects_non_positive_limit(corpus_path):
    result = CliRunner().invoke(cli, ["search", "from_u", "-c", corpus_path, "--limit", "0"])
    assert result.exit_code == 2
    assert "--limit" in result.output


def test_check_passing_fixtures(corpus_path, fixtures_dir):
    result = CliRunner().invoke(cli, [
        "check", str(fixtures_dir / "from_u.js"), str(fixtures_dir / "u32_signature.json"),
        "--corpus", corpus_path, "--exact",
    ])
    assert result.exit_code == 0, result.output
    assert "2 passed, 0 failed" in result.output


def test_check_failing_fixture(corpus_path, fixtures_dir):
    result = CliRunner().invoke(cli, [
        "check", str(fixtures_dir / "wrong_order.json"), "--corpus", corpus_path,
    ])
    assert result.exit_code == 1
    assert "FAIL" in result.output
    assert "not in the right place" in result.output


def test_check_invalid_fixture(corpus_path, fixtures_dir):
    result = CliRunner().invoke(cli, [
        "check", str(fixtures_dir / "bad_category.json"), "--corpus", corpus_path,
    ])
    assert result.exit_code == 1
    assert "Invalid fixture" in result.output
