"""
Search configuration constants.

These constants control match scoring, result limits and when the
sharded corpus scan kicks in.
"""

# ============================================================================
# Match Tiers
# ============================================================================

# Base score per tier. Length bonus is 1 / (1 + len(name)), always < 1,
# so a higher tier always outranks a lower one.
TIER_EXACT = 3.0
TIER_PREFIX = 2.0
TIER_SUBSTRING = 1.0
TIER_SIGNATURE = 0.0

# ============================================================================
# Result Limits
# ============================================================================

MAX_RESULTS = 200                        # Default per-category cap used by the CLI

# ============================================================================
# Sharded Scan
# ============================================================================

PARALLEL_MIN_ENTRIES = 10000             # Minimum index size before shards go to a worker pool
SHARDS_PER_WORKER = 2                    # Shards handed to each worker

# ============================================================================
# Tokenization
# ============================================================================

PATH_SEPARATOR = '::'
PATH_SPLIT_PATTERN = r'::|\.'            # Separators honored by path-aware queries

# Query prefixes accepted as kind filters ("fn:from_u"), mapped to Kind values
KIND_ALIASES = {
    'mod': 'mod',
    'module': 'mod',
    'fn': 'fn',
    'function': 'fn',
    'method': 'method',
    'struct': 'struct',
    'enum': 'enum',
    'trait': 'trait',
    'type': 'type',
    'typedef': 'type',
    'macro': 'macro',
    'primitive': 'primitive',
    'const': 'constant',
    'constant': 'constant',
}
