"""Tiered name matching and scoring over an Index."""
from enum import Enum
from multiprocessing import Pool, cpu_count
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .index import Entry, Index, Kind
from .search_config import (
    PARALLEL_MIN_ENTRIES, SHARDS_PER_WORKER,
    TIER_EXACT, TIER_PREFIX, TIER_SIGNATURE, TIER_SUBSTRING,
)
from .token_utils import natural_path_key, path_contains_tokens


class Category(Enum):
    """Result groups, most specific last."""
    OTHERS = 'others'
    IN_ARGS = 'in_args'
    RETURNED = 'returned'


class MatchTier(Enum):
    EXACT = TIER_EXACT
    PREFIX = TIER_PREFIX
    SUBSTRING = TIER_SUBSTRING
    SIGNATURE = TIER_SIGNATURE


class Match(NamedTuple):
    """A scored association between a query token and an entry."""
    entry: Entry
    score: float
    category: Category
    tier: MatchTier
    position: int       # ordinal of the entry in the full index
    offset: int = 0     # where the token starts inside the name, -1 if absent


def _get_num_workers() -> int:
    """Get number of workers (all cores - 1, minimum 1)."""
    return max(1, cpu_count() - 1)


def score_for(tier: MatchTier, name_length: int) -> float:
    """Tier base plus a length bonus below 1 so shorter names rank higher."""
    return tier.value + 1.0 / (1 + name_length)


def match_sort_key(m: Match) -> Tuple:
    """Descending score, then natural path order, then name, then corpus order."""
    return -m.score, natural_path_key(m.entry.path), m.entry.name, m.position


def _categorize(index: Index, pos: int, token: str) -> Category:
    signature = index.signatures.get(pos)
    if signature is None:
        return Category.OTHERS
    inputs, output = signature
    if output is not None and output == token:
        return Category.RETURNED
    if token in inputs:
        return Category.IN_ARGS
    return Category.OTHERS


def _scan(index: Index, token: str, parent_tokens: Tuple[str, ...],
          kind: Optional[Kind]) -> List[Match]:
    """Serial scan of one index (or shard)."""
    if len(index) == 0 or not token:
        return []

    names = index.names_lower
    offsets = np.char.find(names, token)
    exact = names == token

    tiers = np.zeros(len(index), dtype=np.int8)
    tiers[offsets >= 0] = 1
    tiers[offsets == 0] = 2
    tiers[exact] = 3

    # Entries whose signature mentions the token stay candidates
    signature_hits = np.zeros(len(index), dtype=bool)
    for pos, (inputs, output) in index.signatures.items():
        if output == token or token in inputs:
            signature_hits[pos] = True

    candidates = (tiers > 0) | signature_hits
    if kind is not None:
        candidates &= index.kinds == kind.value

    tier_lookup = {
        3: MatchTier.EXACT,
        2: MatchTier.PREFIX,
        1: MatchTier.SUBSTRING,
        0: MatchTier.SIGNATURE,
    }

    matches = []
    for pos in np.flatnonzero(candidates):
        pos = int(pos)
        entry = index[pos]
        if parent_tokens and not path_contains_tokens(entry.path, parent_tokens):
            continue

        tier = tier_lookup[int(tiers[pos])]
        matches.append(Match(
            entry=entry,
            score=score_for(tier, int(index.name_lengths[pos])),
            category=_categorize(index, pos, token),
            tier=tier,
            position=index.offset + pos,
            offset=int(offsets[pos]),
        ))
    return matches


def _scan_shard(args) -> List[Match]:
    """Scan a single shard (helper for multiprocessing)."""
    shard, token, parent_tokens, kind = args
    return _scan(shard, token, parent_tokens, kind)


def match(index: Index,
          token: str,
          parent_tokens: Sequence[str] = (),
          kind: Optional[Union[Kind, str]] = None,
          n_jobs: int = 1,
          min_parallel: int = PARALLEL_MIN_ENTRIES) -> List[Match]:
    """
    Find and rank entries whose name contains the query token.

    Args:
        index: index to scan
        token: normalized query token
        parent_tokens: normalized path tokens that must occur in the entry path
        kind: optional kind filter (Kind or its wire value)
        n_jobs: worker processes for the sharded scan (-1 for all cores - 1)
        min_parallel: smallest index size that is sharded across workers

    Returns:
        Matches sorted by match_sort_key; empty if nothing matches
    """
    if isinstance(kind, str):
        kind = Kind(kind)
    parent_tokens = tuple(parent_tokens)

    if n_jobs == -1:
        n_jobs = _get_num_workers()

    use_parallel = n_jobs > 1 and len(index) >= min_parallel
    if not use_parallel:
        matches = _scan(index, token, parent_tokens, kind)
    else:
        num_shards = min(len(index), n_jobs * SHARDS_PER_WORKER)
        bounds = np.linspace(0, len(index), num_shards + 1, dtype=np.int64)
        args_list = [
            (index.shard(int(start), int(stop)), token, parent_tokens, kind)
            for start, stop in zip(bounds[:-1], bounds[1:])
            if stop > start
        ]
        matches = []
        with Pool(processes=n_jobs) as pool:
            for shard_matches in pool.map(_scan_shard, args_list):
                matches.extend(shard_matches)

    matches.sort(key=match_sort_key)
    return matches
