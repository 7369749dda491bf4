"""
Pattern normalization.

Turns whatever the caller passed as ``pattern`` into a flat ``PatternSet``:
a tuple of pattern strings plus the match semantics to apply. The shape of
the source is decided once here; downstream code only sees the tag.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from docfeat.errors import UnsupportedTypeError
from docfeat.matrix import DocumentFeatureMatrix


class MatchMode(str, Enum):
    """How a pattern string is compared with a feature label."""

    FIXED = "fixed"
    GLOB = "glob"
    REGEX = "regex"

    @classmethod
    def parse(cls, value: MatchMode | str) -> MatchMode:
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(repr(m.value) for m in cls)
            raise ValueError(f"match_mode must be one of {choices}, got {value!r}") from None


class SourceKind(Enum):
    NONE = "none"
    LITERAL = "literal"
    DICTIONARY = "dictionary"
    MATRIX = "matrix"


@dataclass(frozen=True)
class PatternSet:
    patterns: tuple[str, ...]
    kind: SourceKind
    match_mode: MatchMode
    case_insensitive: bool

    def __len__(self) -> int:
        return len(self.patterns)

    @property
    def is_empty(self) -> bool:
        return self.kind is SourceKind.NONE


class Dictionary(Mapping):
    """
    Named groups of dictionary entries.

    Values are entries (strings) or lists of entries; a value may also be a
    nested mapping, which adds a level of sub-categories. A space inside an
    entry separates tokens of a multi-word expression, e.g. "New York".

    Example:
        Dictionary({"countries": ["United States", "Sweden"], "misc": "blahblah"})
    """

    def __init__(self, categories: Mapping[str, Any]):
        if not isinstance(categories, Mapping):
            raise UnsupportedTypeError(categories, "Dictionary", expected="a mapping of category to entries")
        self._categories = dict(categories)
        # Validate eagerly so a bad entry surfaces at construction
        list(self.entries())

    def __getitem__(self, key: str) -> Any:
        return self._categories[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __repr__(self) -> str:
        return f"Dictionary({len(self)} categories)"

    def entries(self) -> Iterator[str]:
        """All entries, depth first, in category order."""
        return _flatten_entries(self._categories)


def _flatten_entries(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for child in value.values():
            yield from _flatten_entries(child)
    elif isinstance(value, Iterable):
        for child in value:
            yield from _flatten_entries(child)
    else:
        raise UnsupportedTypeError(value, "dictionary entry", expected="str")


def _literal_patterns(source: Iterable[Any]) -> tuple[str, ...]:
    patterns = tuple(source)
    for pattern in patterns:
        if not isinstance(pattern, str):
            raise UnsupportedTypeError(pattern, "pattern", expected="str")
    return patterns


def normalize_patterns(
    source: Any,
    concatenator: str,
    match_mode: MatchMode | str = MatchMode.GLOB,
    case_insensitive: bool = True,
) -> PatternSet:
    """
    Flatten a pattern source into a ``PatternSet``.

    Args:
        source: None, a string, an iterable of strings, a Dictionary (or any
            mapping of category to entries), or a DocumentFeatureMatrix.
        concatenator: Replaces spaces inside dictionary entries so that
            multi-word entries match compound feature labels.
        match_mode: Requested matching semantics.
        case_insensitive: Requested case policy.

    Returns:
        PatternSet. A matrix source always yields fixed, case-sensitive
        matching against its vocabulary.

    Raises:
        UnsupportedTypeError: If the source shape is not recognized.
        ValueError: If match_mode is unknown.
    """
    match_mode = MatchMode.parse(match_mode)

    if source is None:
        return PatternSet((), SourceKind.NONE, match_mode, case_insensitive)

    if isinstance(source, DocumentFeatureMatrix):
        return PatternSet(source.features, SourceKind.MATRIX, MatchMode.FIXED, False)

    if isinstance(source, Mapping):
        entries = source.entries() if isinstance(source, Dictionary) else _flatten_entries(source)
        patterns = tuple(entry.replace(" ", concatenator) for entry in entries)
        return PatternSet(patterns, SourceKind.DICTIONARY, match_mode, case_insensitive)

    if isinstance(source, str):
        return PatternSet((source,), SourceKind.LITERAL, match_mode, case_insensitive)

    if isinstance(source, Iterable) and not isinstance(source, (bytes, bytearray)):
        return PatternSet(_literal_patterns(source), SourceKind.LITERAL, match_mode, case_insensitive)

    raise UnsupportedTypeError(
        source,
        "select",
        expected="None, str, an iterable of str, a Dictionary or a DocumentFeatureMatrix",
    )
