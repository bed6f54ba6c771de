"""Query normalization and path tokenization utilities."""
import re
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .search_config import KIND_ALIASES, PATH_SEPARATOR, PATH_SPLIT_PATTERN

_PATH_SPLIT_RE = re.compile(PATH_SPLIT_PATTERN)
# "fn:from_u" but not "std::char"
_KIND_PREFIX_RE = re.compile(r'^\s*([A-Za-z]+)\s*:(?!:)(.*)$', re.DOTALL)
_DIGIT_RUN_RE = re.compile(r'(\d+)')


class ParsedQuery(NamedTuple):
    """Normalized query tokens plus an optional kind filter (a Kind value)."""
    tokens: List[str]
    kind: Optional[str] = None

    @property
    def name_token(self) -> Optional[str]:
        """Token matched against entry names (the last one)."""
        return self.tokens[-1] if self.tokens else None

    @property
    def parent_tokens(self) -> Tuple[str, ...]:
        """Tokens that must match path segments, outermost first."""
        return tuple(self.tokens[:-1])


def normalize(raw: str, path_aware: bool = False) -> List[str]:
    """
    Normalize a raw query or entry name into comparable tokens.

    Args:
        raw: text to normalize
        path_aware: split on path separators (``::`` and ``.``)

    Returns:
        List of lower-cased tokens; empty for empty/whitespace input
    """
    if raw is None:
        return []

    text = raw.strip().lower()
    if not text:
        return []

    if not path_aware:
        return [text]

    tokens = []
    for part in _PATH_SPLIT_RE.split(text):
        part = part.strip()
        if part:
            tokens.append(part)
    return tokens


def normalize_name(name: str) -> str:
    """Normalize a single entry name (or type name) for comparison."""
    tokens = normalize(name)
    return tokens[0] if tokens else ''


def parse_query(raw: str, path_aware: bool = False) -> ParsedQuery:
    """
    Parse a raw query, peeling off a leading ``kind:`` filter.

    Unknown prefixes are kept as part of the query text.
    """
    if raw is None:
        return ParsedQuery([])

    kind = None
    text = raw
    prefix_match = _KIND_PREFIX_RE.match(raw)
    if prefix_match:
        alias = prefix_match.group(1).lower()
        if alias in KIND_ALIASES:
            kind = KIND_ALIASES[alias]
            text = prefix_match.group(2)

    return ParsedQuery(normalize(text, path_aware=path_aware), kind)


def split_path(path: str) -> Tuple[str, ...]:
    """Split a ``std::string::String`` style path into its segments."""
    if not path:
        return ()
    return tuple(segment for segment in path.split(PATH_SEPARATOR) if segment)


def join_path(segments: Sequence[str]) -> str:
    """Inverse of split_path."""
    return PATH_SEPARATOR.join(segments)


def natural_segment_key(segment: str) -> Tuple:
    """
    Sort key for one path segment with digit runs compared numerically.

    "i32" sorts before "i128"; text compares case-insensitively.
    """
    key = []
    for part in _DIGIT_RUN_RE.split(segment):
        if not part:
            continue
        if part.isdigit():
            key.append((0, int(part)))
        else:
            key.append((1, part.lower()))
    return tuple(key)


def natural_path_key(segments: Sequence[str]) -> Tuple:
    """Sort key for a whole path; ties fall back to the raw segments."""
    return tuple(natural_segment_key(s) for s in segments), tuple(segments)


def path_contains_tokens(segments: Sequence[str], parent_tokens: Sequence[str]) -> bool:
    """
    Check that each parent token occurs, in order, in successive path segments.

    Args:
        segments: entry path segments, outermost first
        parent_tokens: normalized query tokens preceding the name token

    Returns:
        True when every token was found in a later segment than the previous one
    """
    if not parent_tokens:
        return True

    lowered = [s.lower() for s in segments]
    pos = 0
    for token in parent_tokens:
        while pos < len(lowered) and token not in lowered[pos]:
            pos += 1
        if pos >= len(lowered):
            return False
        pos += 1
    return True
