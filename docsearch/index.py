"""Immutable search index over documentable entries."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple

import numpy as np

from .token_utils import join_path, normalize_name, split_path


class InvalidEntry(ValueError):
    """Raised when a corpus entry cannot be indexed."""


class Kind(Enum):
    """Kinds of documentable items."""
    MODULE = 'mod'
    FUNCTION = 'fn'
    METHOD = 'method'
    STRUCT = 'struct'
    ENUM = 'enum'
    TRAIT = 'trait'
    TYPEDEF = 'type'
    MACRO = 'macro'
    PRIMITIVE = 'primitive'
    CONSTANT = 'constant'
    OTHER = 'other'


@dataclass(frozen=True)
class Entry:
    """One indexed symbol: its namespace path, short name and kind."""
    path: Tuple[str, ...]
    name: str
    kind: Kind = Kind.FUNCTION
    inputs: Tuple[str, ...] = ()
    output: Optional[str] = None
    desc: str = field(default='', compare=False)

    @classmethod
    def from_path(cls, path: str, name: str, kind: Kind = Kind.FUNCTION, **kwargs) -> 'Entry':
        """Build an entry from a ``::`` separated path string."""
        return cls(path=split_path(path), name=name, kind=kind, **kwargs)

    @property
    def path_str(self) -> str:
        return join_path(self.path)

    @property
    def qualified_name(self) -> str:
        if not self.path:
            return self.name
        return join_path(self.path + (self.name,))


class Index:
    """
    Read-only collection of entries with precomputed lookup arrays.

    Build with Index.build(); the entry tuple and arrays never change
    afterwards, so any number of queries may read it concurrently.
    """

    def __init__(self, entries: Tuple[Entry, ...], offset: int = 0):
        self._entries = entries
        self.offset = offset

        # Vectorized views used by the matcher
        self.names_lower = self._frozen_array([normalize_name(e.name) for e in entries])
        self.name_lengths = self._frozen_array([len(n) for n in self.names_lower], dtype=np.int64)
        self.kinds = self._frozen_array([e.kind.value for e in entries])

        # Normalized signature types, only for entries that carry any
        self.signatures: Dict[int, Tuple[Tuple[str, ...], Optional[str]]] = {}
        for pos, entry in enumerate(entries):
            if entry.inputs or entry.output:
                inputs = tuple(normalize_name(t) for t in entry.inputs)
                output = normalize_name(entry.output) if entry.output else None
                self.signatures[pos] = (inputs, output)

    @staticmethod
    def _frozen_array(values, dtype=None) -> np.ndarray:
        if dtype is None:
            arr = np.array(values, dtype=str) if values else np.array([], dtype=str)
        else:
            arr = np.array(values, dtype=dtype)
        arr.flags.writeable = False
        return arr

    @classmethod
    def build(cls, entries: Iterable[Entry]) -> 'Index':
        """
        Build an index from corpus entries.

        Args:
            entries: entries in corpus order

        Returns:
            New Index

        Raises:
            InvalidEntry: if an entry is not an Entry or has an empty name
        """
        collected = []
        for pos, entry in enumerate(entries):
            if not isinstance(entry, Entry):
                raise InvalidEntry(f"Corpus item #{pos} is not an Entry: {entry!r}")
            if not isinstance(entry.name, str):
                raise InvalidEntry(f"Corpus item #{pos} has a non-string name: {entry.name!r}")
            if not isinstance(entry.kind, Kind):
                raise InvalidEntry(f"Corpus item #{pos} ('{entry.name}') has an invalid kind: {entry.kind!r}")
            if not all(isinstance(s, str) for s in entry.path):
                raise InvalidEntry(f"Corpus item #{pos} ('{entry.name}') has a non-string path segment")
            signature = tuple(entry.inputs) + ((entry.output,) if entry.output is not None else ())
            if not all(isinstance(t, str) for t in signature):
                raise InvalidEntry(f"Corpus item #{pos} ('{entry.name}') has a non-string signature type")
            if not entry.name.strip():
                path = entry.path_str or '<root>'
                raise InvalidEntry(f"Corpus item #{pos} under '{path}' has an empty name")
            collected.append(entry)
        return cls(tuple(collected))

    def all_entries(self) -> Iterator[Entry]:
        """Lazily iterate over entries in corpus order (new iterator per call)."""
        return iter(self._entries)

    def shard(self, start: int, stop: int) -> 'Index':
        """Sub-index over entries[start:stop] that keeps global ordinals."""
        return Index(self._entries[start:stop], offset=self.offset + start)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, pos: int) -> Entry:
        return self._entries[pos]

    def __iter__(self) -> Iterator[Entry]:
        return self.all_entries()

    def __repr__(self) -> str:
        return f"Index(entries={len(self)}, offset={self.offset})"
