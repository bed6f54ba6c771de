"""docsearch - ranked path/name search over documentation symbol indices."""
from .engine import ResultSet, search
from .index import Entry, Index, InvalidEntry, Kind
from .matcher import Category, Match, MatchTier, match
from .token_utils import normalize, parse_query

__version__ = "0.1.0"

__all__ = [
    'Category',
    'Entry',
    'Index',
    'InvalidEntry',
    'Kind',
    'Match',
    'MatchTier',
    'ResultSet',
    'match',
    'normalize',
    'parse_query',
    'search',
]
