"""Query engine: normalize, match, group and order results."""
from typing import Dict, Iterator, List, Optional, Tuple

from .index import Index
from .matcher import Category, Match, match
from .token_utils import parse_query


class ResultSet:
    """
    Categorized, ordered output of a search.

    Every Category is present; groups are tuples of Match in ranking order.
    """

    def __init__(self, query: str, groups: Optional[Dict[Category, Tuple[Match, ...]]] = None):
        self.query = query
        self.groups: Dict[Category, Tuple[Match, ...]] = {c: () for c in Category}
        if groups:
            for category, matches in groups.items():
                self.groups[Category(category)] = tuple(matches)

    def __getitem__(self, category) -> Tuple[Match, ...]:
        return self.groups[Category(category)]

    def __iter__(self) -> Iterator[Match]:
        for category in Category:
            yield from self.groups[category]

    def __len__(self) -> int:
        return sum(len(matches) for matches in self.groups.values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, ResultSet):
            return NotImplemented
        return self.groups == other.groups

    def __repr__(self) -> str:
        sizes = ', '.join(f"{c.value}={len(m)}" for c, m in self.groups.items())
        return f"ResultSet(query={self.query!r}, {sizes})"

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def to_dict(self, include_empty: bool = False) -> Dict[str, List[Dict[str, str]]]:
        """Render as {category: [{'path': ..., 'name': ...}]}, the fixture shape."""
        result = {}
        for category, matches in self.groups.items():
            if not matches and not include_empty:
                continue
            result[category.value] = [
                {'path': m.entry.path_str, 'name': m.entry.name} for m in matches
            ]
        return result


def search(index: Index,
           raw_query: str,
           path_aware: bool = False,
           limit: Optional[int] = None,
           n_jobs: int = 1) -> ResultSet:
    """
    Run a query against an index.

    Args:
        index: index to search (never modified)
        raw_query: user query, optionally prefixed with a kind filter ("fn:from_u")
        path_aware: treat ``::``/``.`` as path separators
        limit: maximum matches per category (None for no cap)
        n_jobs: worker processes for large indices

    Returns:
        ResultSet; empty when the query normalizes to nothing or nothing matches
    """
    parsed = parse_query(raw_query, path_aware=path_aware)
    if not parsed.tokens:
        return ResultSet(raw_query)

    matches = match(
        index,
        parsed.name_token,
        parent_tokens=parsed.parent_tokens,
        kind=parsed.kind,
        n_jobs=n_jobs,
    )

    grouped: Dict[Category, List[Match]] = {c: [] for c in Category}
    for m in matches:
        bucket = grouped[m.category]
        if limit is None or len(bucket) < limit:
            bucket.append(m)

    return ResultSet(raw_query, grouped)
