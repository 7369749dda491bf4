import itertools

import numpy as np
import pytest

from docfeat.errors import InvalidPatternError
from docfeat.resolver import glob_to_regex, match_patterns, resolve


@pytest.mark.parametrize(
    "vocabulary, patterns, match_mode, case_insensitive, expected",
    [
        (["a", "ab", "abc"], ["ab"], "fixed", True, [1]),
        (["cat", "cats", "dog"], ["cat*"], "glob", True, [0, 1]),
        (["cat", "cats", "dog"], ["?at"], "glob", True, [0]),
        (["cat", "cats", "dog"], ["*"], "glob", True, [0, 1, 2]),
        (["Cat", "CATS", "dog"], ["cat*"], "glob", True, [0, 1]),
        (["Cat", "CATS", "dog"], ["cat*"], "glob", False, []),
        (["Cat", "cat", "dog"], ["CAT"], "fixed", True, [0, 1]),
        (["Cat", "cat", "dog"], ["CAT"], "fixed", False, []),
        (["Cat", "cat", "dog"], ["Cat"], "glob", False, [0]),
        # regex is anchored to the whole label
        (["cats", "scat", "dogs"], ["cat"], "regex", True, []),
        (["cats", "scat", "dogs"], [".*s"], "regex", True, [0, 2]),
        (["Cats", "scat", "dogs"], ["c.*"], "regex", True, [0]),
        (["Cats", "scat", "dogs"], ["c.*"], "regex", False, []),
        # glob metacharacters other than * and ? are literal
        (["a.b", "axb", "[ab]"], ["a.b"], "glob", True, [0]),
        (["a.b", "axb", "[ab]"], ["[ab]*"], "glob", True, [2]),
        # full Unicode case folding
        (["STRASSE", "straße"], ["strasse"], "fixed", True, [0, 1]),
        (["STRASSE", "Straße"], ["STRA*"], "glob", True, [0, 1]),
        # ? spans a character whose folded form is longer
        (["Straße"], ["Stra?e"], "glob", True, [0]),
        (["STRAßE", "strasse"], ["stra?e"], "glob", True, [0]),
    ],
)
def test_resolve(vocabulary, patterns, match_mode, case_insensitive, expected):
    result = resolve(patterns, vocabulary, match_mode, case_insensitive)
    assert result.dtype == np.int64
    assert result.tolist() == expected


def test_union_is_deduplicated_and_ascending():
    vocabulary = ["tax", "taxes", "trade", "tariff", "growth"]
    result = resolve(["tr*", "ta*", "tax", "taxes"], vocabulary, "glob", True)
    assert result.tolist() == [0, 1, 2, 3]


def test_pattern_order_does_not_matter():
    vocabulary = ["alpha", "beta", "gamma", "delta", "epsilon"]
    patterns = ["*ta", "g*", "alpha"]
    expected = resolve(patterns, vocabulary, "glob", True).tolist()
    for permutation in itertools.permutations(patterns):
        assert resolve(list(permutation), vocabulary, "glob", True).tolist() == expected


def test_no_match_is_not_an_error():
    assert resolve(["zzz*"], ["a", "b"], "glob", True).tolist() == []
    assert resolve([], ["a", "b"], "glob", True).tolist() == []


def test_match_patterns_per_pattern():
    vocabulary = ["cat", "cats", "dog"]
    matches = match_patterns(["dog", "cat*", "bird", "dog"], vocabulary, "glob", True)
    assert [m.tolist() for m in matches] == [[2], [0, 1], [], [2]]


@pytest.mark.parametrize("pattern", ["(", "[a-", "*oops"])
def test_invalid_regex(pattern):
    with pytest.raises(InvalidPatternError) as exc_info:
        resolve(["fine", pattern], ["a"], "regex", True)
    assert exc_info.value.pattern == pattern
    assert isinstance(exc_info.value, ValueError)


def test_invalid_regex_is_fine_as_glob():
    assert resolve(["("], ["(", "a"], "glob", True).tolist() == [0]


def test_case_insensitive_glob_never_narrower():
    vocabulary = ["Straße", "STRASSE", "Maße", "dog"]
    for pattern in ["Stra?e", "M?SSE", "*ß*", "MA?E"]:
        sensitive = set(resolve([pattern], vocabulary, "glob", False).tolist())
        insensitive = set(resolve([pattern], vocabulary, "glob", True).tolist())
        assert sensitive <= insensitive


@pytest.mark.parametrize(
    "glob, regex",
    [
        ("cat*", "cat.*"),
        ("?at", ".at"),
        ("a.b", r"a\.b"),
    ],
)
def test_glob_to_regex(glob, regex):
    assert glob_to_regex(glob) == regex
