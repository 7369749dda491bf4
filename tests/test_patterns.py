import numpy as np
import pytest

from docfeat.errors import UnsupportedTypeError
from docfeat.matrix import DocumentFeatureMatrix
from docfeat.patterns import Dictionary, MatchMode, SourceKind, normalize_patterns


def test_none_source():
    pattern_set = normalize_patterns(None, "_")
    assert pattern_set.kind is SourceKind.NONE
    assert pattern_set.is_empty
    assert pattern_set.patterns == ()


def test_literal_list_unchanged():
    pattern_set = normalize_patterns(["New York", "tax*"], "_", "regex", False)
    assert pattern_set.kind is SourceKind.LITERAL
    assert pattern_set.patterns == ("New York", "tax*")
    assert pattern_set.match_mode is MatchMode.REGEX
    assert pattern_set.case_insensitive is False


def test_single_string():
    pattern_set = normalize_patterns("tax*", "_")
    assert pattern_set.patterns == ("tax*",)


def test_dictionary_entries_concatenated():
    dictionary = Dictionary(
        {
            "countries": ["United States", "Sweden", "France"],
            "wordsEndingInY": ["by", "my"],
            "notintext": "blahblah",
        }
    )
    pattern_set = normalize_patterns(dictionary, "_")

    assert pattern_set.kind is SourceKind.DICTIONARY
    assert pattern_set.patterns == ("United_States", "Sweden", "France", "by", "my", "blahblah")


def test_nested_mapping_flattened_depth_first():
    mapping = {
        "economy": {"tax": ["income tax", "vat"], "trade": ["free trade"]},
        "places": ["New York"],
    }
    pattern_set = normalize_patterns(mapping, "+")
    assert pattern_set.patterns == ("income+tax", "vat", "free+trade", "New+York")


def test_matrix_source_forces_fixed_case_sensitive():
    reference = DocumentFeatureMatrix(np.zeros((1, 3)), features=["Y", "z", "w*"])
    pattern_set = normalize_patterns(reference, "_", "regex", True)

    assert pattern_set.kind is SourceKind.MATRIX
    assert pattern_set.patterns == ("Y", "z", "w*")
    assert pattern_set.match_mode is MatchMode.FIXED
    assert pattern_set.case_insensitive is False


@pytest.mark.parametrize("source", [42, 3.5, b"bytes", ["ok", 7]])
def test_unsupported_sources(source):
    with pytest.raises(UnsupportedTypeError):
        normalize_patterns(source, "_")


def test_bad_dictionary_entry():
    with pytest.raises(UnsupportedTypeError):
        Dictionary({"numbers": [1, 2]})


def test_unknown_match_mode():
    with pytest.raises(ValueError, match="match_mode"):
        normalize_patterns(["a"], "_", "fuzzy")


def test_dictionary_is_a_mapping():
    dictionary = Dictionary({"a": ["x"], "b": ["y z"]})
    assert list(dictionary) == ["a", "b"]
    assert dictionary["b"] == ["y z"]
    assert len(dictionary) == 2
    assert list(dictionary.entries()) == ["x", "y z"]
