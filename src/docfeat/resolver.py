"""
Pattern resolution against a feature vocabulary.

Each pattern becomes a matcher:

1. Hash lookup - fixed patterns and glob patterns without wildcards
2. Vocabulary scan - wildcard globs and regular expressions, compiled once
   per distinct pattern string for the duration of a call

All patterns are compiled before any scanning starts, so a malformed regex
fails the call before work is done. Results are merged by sorting, so the
order patterns are supplied in never affects the output.

Usage:
    from docfeat.resolver import resolve

    positions = resolve(["cat*"], ["cat", "cats", "dog"], "glob", True)
    # array([0, 1])
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple, Sequence

import numpy as np

from docfeat.errors import InvalidPatternError
from docfeat.log import get_logger
from docfeat.patterns import MatchMode

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)

_EMPTY = np.array([], dtype=np.int64)
_GLOB_WILDCARDS = frozenset("*?")


# =============================================================================
# Compilation
# =============================================================================


class Matcher(NamedTuple):
    """Compiled scan for one pattern; a label matches if either side does."""

    # Applied to case-folded labels
    folded: re.Pattern[str] | None
    # Applied to labels as they are
    original: re.Pattern[str] | None


def glob_to_regex(pattern: str) -> str:
    """Translate a glob into an anchored-by-fullmatch regex: ``*`` any run, ``?`` one char."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


def compile_pattern(pattern: str, match_mode: MatchMode, case_insensitive: bool) -> Matcher | None:
    """
    Compile a scanning matcher for ``pattern``.

    Returns None when the pattern is resolved by hash lookup instead.

    A case-insensitive glob is tried both against folded labels and, with
    re.IGNORECASE, against the labels as they are: folding can change a
    label's length ("Straße" -> "strasse"), which moves ``?`` off its
    character.

    Raises:
        InvalidPatternError: If a regex pattern does not compile.
    """
    if match_mode is MatchMode.FIXED:
        return None
    if match_mode is MatchMode.GLOB:
        if not _GLOB_WILDCARDS.intersection(pattern):
            return None
        if not case_insensitive:
            return Matcher(None, re.compile(glob_to_regex(pattern), re.DOTALL))
        return Matcher(
            re.compile(glob_to_regex(pattern.casefold()), re.DOTALL),
            re.compile(glob_to_regex(pattern), re.DOTALL | re.IGNORECASE),
        )

    flags = re.IGNORECASE if case_insensitive else 0
    try:
        return Matcher(None, re.compile(pattern, flags))
    except re.error as exc:
        raise InvalidPatternError(pattern, str(exc)) from exc


def _lookup_index(vocabulary: Sequence[str], case_insensitive: bool) -> dict[str, list[int]]:
    """Label -> ascending positions. Folding can map several labels to one key."""
    index: dict[str, list[int]] = {}
    for position, label in enumerate(vocabulary):
        key = label.casefold() if case_insensitive else label
        index.setdefault(key, []).append(position)
    return index


# =============================================================================
# Matching
# =============================================================================


def _scan(matcher: Matcher, vocabulary: Sequence[str], folded: Sequence[str] | None) -> NDArray[np.int64]:
    if matcher.folded is None:
        fullmatch = matcher.original.fullmatch
        positions = (position for position, label in enumerate(vocabulary) if fullmatch(label))
    else:
        folded_match = matcher.folded.fullmatch
        original_match = matcher.original.fullmatch
        positions = (
            position
            for position, (label, key) in enumerate(zip(vocabulary, folded))
            if folded_match(key) or original_match(label)
        )
    return np.fromiter(positions, dtype=np.int64)


def match_patterns(
    patterns: Sequence[str],
    vocabulary: Sequence[str],
    match_mode: MatchMode | str,
    case_insensitive: bool,
) -> list[NDArray[np.int64]]:
    """
    Match each pattern against the vocabulary.

    Args:
        patterns: Pattern strings
        vocabulary: Feature labels in column order
        match_mode: fixed, glob or regex
        case_insensitive: Fold case (fixed/glob) or set re.IGNORECASE (regex)

    Returns:
        One ascending position array per pattern, in pattern order

    Raises:
        InvalidPatternError: If a regex pattern does not compile.
    """
    match_mode = MatchMode.parse(match_mode)
    if not patterns:
        return []

    # Regex flags do the folding; glob and fixed fold both sides up front.
    fold_labels = case_insensitive and match_mode is not MatchMode.REGEX

    # Planning: compile every distinct pattern before touching the vocabulary
    compiled: dict[str, Matcher | None] = {}
    for pattern in patterns:
        if pattern not in compiled:
            compiled[pattern] = compile_pattern(pattern, match_mode, case_insensitive)

    results: dict[str, NDArray[np.int64]] = {}

    lookups = [pattern for pattern, matcher in compiled.items() if matcher is None]
    if lookups:
        index = _lookup_index(vocabulary, fold_labels)
        for pattern in lookups:
            key = pattern.casefold() if fold_labels else pattern
            positions = index.get(key)
            results[pattern] = np.array(positions, dtype=np.int64) if positions else _EMPTY

    scans = [pattern for pattern, matcher in compiled.items() if matcher is not None]
    if scans:
        folded = [label.casefold() for label in vocabulary] if fold_labels else None
        for pattern in scans:
            results[pattern] = _scan(compiled[pattern], vocabulary, folded)

    logger.debug(
        "matched %d pattern(s) (%d lookup, %d scan) against %d features",
        len(patterns),
        len(lookups),
        len(scans),
        len(vocabulary),
    )
    return [results[pattern] for pattern in patterns]


def merge_positions(matches: Sequence[NDArray[np.int64]]) -> NDArray[np.int64]:
    """Union of per-pattern matches, deduplicated, in ascending column order."""
    if not matches:
        return _EMPTY
    return np.unique(np.concatenate(matches)).astype(np.int64)


def resolve(
    patterns: Sequence[str],
    vocabulary: Sequence[str],
    match_mode: MatchMode | str,
    case_insensitive: bool,
) -> NDArray[np.int64]:
    """Ascending, deduplicated positions of every feature matched by any pattern."""
    return merge_positions(match_patterns(patterns, vocabulary, match_mode, case_insensitive))
