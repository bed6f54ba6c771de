"""Loading utilities for corpus entries and search fixtures."""
import json
import os
import re
import warnings
from typing import Dict, List, NamedTuple, Tuple

from .index import Entry, InvalidEntry, Kind
from .matcher import Category
from .token_utils import split_path


class FixtureError(ValueError):
    """Raised when a fixture file is malformed."""


class Fixture(NamedTuple):
    """A (query, expected results) pair."""
    name: str
    query: str
    expected: Dict[Category, List[Tuple[str, str]]]


_JS_QUERY_RE = re.compile(r"const\s+QUERY\s*=\s*(['\"])((?:\\.|(?!\1).)*)\1\s*;", re.DOTALL)
_JS_EXPECTED_RE = re.compile(r"const\s+EXPECTED\s*=\s*(\{.*\})\s*;", re.DOTALL)
_JS_SINGLE_QUOTED_RE = re.compile(r"'((?:\\.|[^'\\])*)'")
_JS_TRAILING_COMMA_RE = re.compile(r",(\s*[\]}])")


def _parse_kind(value, location: str) -> Kind:
    if value is None:
        return Kind.FUNCTION
    try:
        return Kind(str(value).lower())
    except ValueError:
        warnings.warn(f"Unknown kind {value!r} at {location}; indexing it as 'other'.", UserWarning)
        return Kind.OTHER


def _parse_path(value, location: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        if not all(isinstance(v, str) for v in value):
            raise InvalidEntry(f"{location}: path segments must be strings, got {value!r}")
        return tuple(v for v in value if v)
    if not isinstance(value, str):
        raise InvalidEntry(f"{location}: path must be a string or a list, got {value!r}")
    return split_path(value)


def _optional_str(record: Dict, key: str, location: str):
    value = record.get(key)
    if value is not None and not isinstance(value, str):
        raise InvalidEntry(f"{location}: '{key}' must be a string, got {value!r}")
    return value


def entry_from_dict(record: Dict, location: str = '<dict>') -> Entry:
    """
    Build an Entry from a corpus record.

    Expected keys: path, name, and optionally kind, inputs, output, desc.
    A missing name yields an empty name, which Index.build rejects.

    Raises:
        InvalidEntry: if the record is not an object or a field has the wrong type
    """
    if not isinstance(record, dict):
        raise InvalidEntry(f"{location}: corpus record must be an object, got {type(record).__name__}")

    inputs = record.get('inputs') or ()
    if isinstance(inputs, str):
        inputs = (inputs,)
    if not isinstance(inputs, (list, tuple)) or not all(isinstance(t, str) for t in inputs):
        raise InvalidEntry(f"{location}: 'inputs' must be a list of strings, got {inputs!r}")

    return Entry(
        path=_parse_path(record.get('path'), location),
        name=_optional_str(record, 'name', location) or '',
        kind=_parse_kind(record.get('kind'), location),
        inputs=tuple(inputs),
        output=_optional_str(record, 'output', location) or None,
        desc=_optional_str(record, 'desc', location) or '',
    )


def load_entries(corpus_path: str) -> List[Entry]:
    """
    Load corpus entries from a JSONL file.

    Returns:
        entries in file order
    """
    entries = []
    with open(corpus_path, 'r', encoding='utf-8') as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            record = json.loads(line)
            entries.append(entry_from_dict(record, f"{corpus_path}:{lineno}"))
    return entries


def _strip_js_comments(text: str) -> str:
    """Drop ``//`` line comments that sit outside string literals."""
    out = []
    quote = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            out.append(ch)
            if ch == '\\' and i + 1 < len(text):
                out.append(text[i + 1])
                i += 1
            elif ch == quote:
                quote = None
        elif ch in '\'"':
            quote = ch
            out.append(ch)
        elif text.startswith('//', i):
            newline = text.find('\n', i)
            if newline == -1:
                break
            i = newline
            continue
        else:
            out.append(ch)
        i += 1
    return ''.join(out)


def _js_to_json(text: str) -> str:
    """Turn a JS object literal with single quotes and trailing commas into JSON."""
    def requote(m):
        inner = m.group(1).replace("\\'", "'")
        return json.dumps(inner)

    text = _JS_SINGLE_QUOTED_RE.sub(requote, text)
    return _JS_TRAILING_COMMA_RE.sub(r"\1", text)


def _parse_expected(raw, source: str) -> Dict[Category, List[Tuple[str, str]]]:
    if not isinstance(raw, dict):
        raise FixtureError(f"{source}: expected results must be an object")

    expected = {}
    for key, items in raw.items():
        try:
            category = Category(key)
        except ValueError:
            valid = ', '.join(c.value for c in Category)
            raise FixtureError(f"{source}: unknown category {key!r} (expected one of: {valid})")
        if not isinstance(items, list):
            raise FixtureError(f"{source}: category {key!r} must be a list")

        rows = []
        for item in items:
            if not isinstance(item, dict) or not item.get('name'):
                raise FixtureError(f"{source}: every expected entry in {key!r} needs a name")
            rows.append((item.get('path', ''), item['name']))
        expected[category] = rows
    return expected


def parse_js_fixture(text: str, name: str = '<js>') -> Fixture:
    """Parse ``const QUERY = '...'; const EXPECTED = {...};`` fixture source."""
    text = _strip_js_comments(text)

    query_match = _JS_QUERY_RE.search(text)
    if not query_match:
        raise FixtureError(f"{name}: no QUERY constant found")
    expected_match = _JS_EXPECTED_RE.search(text)
    if not expected_match:
        raise FixtureError(f"{name}: no EXPECTED constant found")

    query = query_match.group(2).replace("\\" + query_match.group(1), query_match.group(1))
    try:
        raw_expected = json.loads(_js_to_json(expected_match.group(1)))
    except json.JSONDecodeError as e:
        raise FixtureError(f"{name}: EXPECTED is not a plain object literal: {e}")

    return Fixture(name, query, _parse_expected(raw_expected, name))


def parse_json_fixture(text: str, name: str = '<json>') -> Fixture:
    """Parse ``{"query": ..., "expected": {...}}`` fixture source."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FixtureError(f"{name}: invalid JSON: {e}")
    if not isinstance(data, dict) or not isinstance(data.get('query'), str):
        raise FixtureError(f"{name}: fixture needs a string 'query'")
    return Fixture(name, data['query'], _parse_expected(data.get('expected', {}), name))


def load_fixture(fixture_path: str) -> Fixture:
    """
    Load a fixture file; ``.js`` files use the JS constant form, anything else JSON.

    Raises:
        FixtureError: if the file cannot be parsed into a fixture
    """
    name = os.path.splitext(os.path.basename(fixture_path))[0]
    with open(fixture_path, 'r', encoding='utf-8') as f:
        text = f.read()

    if fixture_path.endswith('.js'):
        return parse_js_fixture(text, name)
    return parse_json_fixture(text, name)
