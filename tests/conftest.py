"""Shared fixtures: a small std-like corpus and its index."""

import os
import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from docsearch.data_loader import load_entries  # noqa: E402
from docsearch.index import Index  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"
STD_CORPUS = FIXTURES_DIR / "std_corpus.jsonl"


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def corpus_path():
    return str(STD_CORPUS)


@pytest.fixture
def std_entries():
    return load_entries(str(STD_CORPUS))


@pytest.fixture
def std_index(std_entries):
    return Index.build(std_entries)
