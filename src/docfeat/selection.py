"""
Feature selection on document-feature matrices.

``select`` keeps or removes features whose labels match a pattern source,
then narrows the result by label length. When the pattern source is itself
a matrix and features are kept, the result is projected onto that matrix's
exact feature set: features missing from ``x`` are added as zero columns
and columns are put in the reference order. This is what lets a model
trained on one vocabulary score documents counted with another.

A call runs in two phases. Planning (``plan_selection``) normalizes and
resolves patterns and computes the kept positions without building any
matrix; every error is raised here. Materialization then slices, pads and
reorders columns.

Usage:
    from docfeat import keep, remove, select

    select(x, ["tax*", "econom*"])
    remove(x, stopwords, match_mode="fixed")
    select(test_matrix, train_matrix)  # same features as train_matrix
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from docfeat.config import Config
from docfeat.errors import ConflictingArgumentError, UnsupportedTypeError
from docfeat.log import get_logger, report
from docfeat.matrix import DocumentFeatureMatrix
from docfeat.patterns import MatchMode, PatternSet, SourceKind, normalize_patterns
from docfeat.resolver import match_patterns, merge_positions

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = get_logger(__name__)

# Sentinel so length bounds are read from Config at call time
_DEFAULT: Any = object()


class SelectionMode(str, Enum):
    KEEP = "keep"
    REMOVE = "remove"

    @classmethod
    def parse(cls, value: SelectionMode | str) -> SelectionMode:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"mode must be 'keep' or 'remove', got {value!r}") from None


@dataclass(frozen=True)
class SelectionResult:
    matched_positions: NDArray[np.int64]
    kept_positions: NDArray[np.int64]
    matched_patterns: int
    pattern_set: PatternSet
    mode: SelectionMode

    @property
    def padding(self) -> bool:
        """Whether the result must be projected onto the reference features."""
        return self.pattern_set.kind is SourceKind.MATRIX and self.mode is SelectionMode.KEEP


# =============================================================================
# Selection Executor
# =============================================================================


def length_mask(features: Sequence[str], min_len: int, max_len: int | None) -> NDArray[np.bool_]:
    """True where a label's length in characters lies within [min_len, max_len]."""
    lengths = np.fromiter((len(label) for label in features), dtype=np.int64, count=len(features))
    mask = lengths >= min_len
    if max_len is not None:
        mask &= lengths <= max_len
    return mask


def execute(
    features: Sequence[str],
    matched_positions: NDArray[np.int64],
    mode: SelectionMode | str,
    min_len: int,
    max_len: int | None,
    padding: bool = False,
) -> NDArray[np.int64]:
    """
    Combine matched positions with keep/remove and the length filter.

    Args:
        features: Feature labels of the matrix being selected from
        matched_positions: Ascending positions from the resolver
        mode: keep or remove
        min_len: Minimum label length in characters
        max_len: Maximum label length in characters, None for no limit
        padding: Projection mode; skips the length filter

    Returns:
        Ascending positions to keep (possibly empty)
    """
    mode = SelectionMode.parse(mode)
    matched_positions = np.asarray(matched_positions, dtype=np.int64)

    if mode is SelectionMode.KEEP:
        kept = matched_positions
    else:
        kept = np.setdiff1d(np.arange(len(features), dtype=np.int64), matched_positions, assume_unique=True)

    if not padding:
        kept = kept[length_mask(features, min_len, max_len)[kept]]

    return kept.astype(np.int64)


def plan_selection(
    x: DocumentFeatureMatrix,
    pattern: Any = None,
    mode: SelectionMode | str = SelectionMode.KEEP,
    match_mode: MatchMode | str = MatchMode.GLOB,
    case_insensitive: bool = True,
    min_len: int = _DEFAULT,
    max_len: int | None = _DEFAULT,
) -> SelectionResult:
    """
    Compute which columns of ``x`` a selection keeps, without building a matrix.

    Raises:
        UnsupportedTypeError: If x or pattern has an unrecognized type.
        InvalidPatternError: If a regex pattern does not compile.
        ValueError: If mode or match_mode is unknown.
    """
    if not isinstance(x, DocumentFeatureMatrix):
        raise UnsupportedTypeError(x, "select", expected="DocumentFeatureMatrix")
    mode = SelectionMode.parse(mode)
    if min_len is _DEFAULT:
        min_len = Config.min_len
    if max_len is _DEFAULT:
        max_len = Config.max_len

    pattern_set = normalize_patterns(pattern, x.meta.concatenator, match_mode, case_insensitive)

    if pattern_set.is_empty:
        if mode is SelectionMode.KEEP:
            matched = np.arange(x.nfeat, dtype=np.int64)
        else:
            matched = np.array([], dtype=np.int64)
        matched_patterns = 0
    else:
        matches = match_patterns(
            pattern_set.patterns, x.features, pattern_set.match_mode, pattern_set.case_insensitive
        )
        matched = merge_positions(matches)
        matched_patterns = len({p for p, positions in zip(pattern_set.patterns, matches) if positions.size})

    padding = pattern_set.kind is SourceKind.MATRIX and mode is SelectionMode.KEEP
    kept = execute(x.features, matched, mode, min_len, max_len, padding=padding)

    return SelectionResult(
        matched_positions=matched,
        kept_positions=kept,
        matched_patterns=matched_patterns,
        pattern_set=pattern_set,
        mode=mode,
    )


# =============================================================================
# Projection Aligner
# =============================================================================


def align_features(
    x: DocumentFeatureMatrix,
    reference: DocumentFeatureMatrix | Sequence[str],
) -> DocumentFeatureMatrix:
    """
    Re-express ``x`` over exactly the reference features, in reference order.

    Features of ``x`` absent from the reference are dropped; reference
    features absent from ``x`` become all-zero padding columns. Counts of
    shared features are unchanged.
    """
    if not isinstance(x, DocumentFeatureMatrix):
        raise UnsupportedTypeError(x, "align_features", expected="DocumentFeatureMatrix")
    if isinstance(reference, DocumentFeatureMatrix):
        target = list(reference.features)
    elif isinstance(reference, str):
        raise UnsupportedTypeError(reference, "align_features", expected="a matrix or a sequence of labels")
    else:
        target = [str(label) for label in reference]
    if len(set(target)) != len(target):
        raise ValueError("reference features must be unique")

    shared = np.array(
        sorted(x.feature_index[label] for label in target if label in x.feature_index),
        dtype=np.int64,
    )
    return _project(x.slice_columns(shared), target)


def _project(subset: DocumentFeatureMatrix, target: list[str]) -> DocumentFeatureMatrix:
    missing = [label for label in target if label not in subset.feature_index]
    return subset.insert_zero_columns(missing).reorder_columns(target)


# =============================================================================
# Public entry points
# =============================================================================


def _report(plan: SelectionResult, nfeat_before: int, nfeat_after: int) -> None:
    action = "kept" if plan.mode is SelectionMode.KEEP else "removed"
    changed = abs(nfeat_after - nfeat_before) if plan.mode is SelectionMode.REMOVE else nfeat_after
    supplied = len(set(plan.pattern_set.patterns))
    noun = "feature" if changed == 1 else "features"
    if plan.pattern_set.is_empty:
        report(logger, "%s %d %s (no patterns supplied)", action, changed, noun)
    else:
        report(
            logger,
            "%s %d %s, from %d supplied (%s) pattern(s), %d of which matched",
            action,
            changed,
            noun,
            supplied,
            plan.pattern_set.match_mode.value,
            plan.matched_patterns,
        )
    report(logger, "feature count changed by %+d (%d -> %d)", nfeat_after - nfeat_before, nfeat_before, nfeat_after)


def select(
    x: DocumentFeatureMatrix,
    pattern: Any = None,
    mode: SelectionMode | str = SelectionMode.KEEP,
    match_mode: MatchMode | str = MatchMode.GLOB,
    case_insensitive: bool = True,
    min_len: int = _DEFAULT,
    max_len: int | None = _DEFAULT,
    verbose: bool = False,
) -> DocumentFeatureMatrix:
    """
    Select features from a document-feature matrix by label.

    Args:
        x: Matrix to select from
        pattern: None, a string or iterable of strings, a Dictionary (or a
            mapping of category to entries), or a DocumentFeatureMatrix
        mode: "keep" or "remove" the matched features
        match_mode: "glob" wildcards, "regex", or "fixed" exact matching
        case_insensitive: Ignore case when matching
        min_len: Minimum label length in characters (default Config.min_len)
        max_len: Maximum label length, None for no limit (default Config.max_len)
        verbose: Log how many patterns matched and the change in feature count

    Returns:
        A new DocumentFeatureMatrix. With a matrix as ``pattern`` and
        mode "keep", its features are identical to that matrix's, in the
        same order; ``match_mode`` and ``case_insensitive`` are then forced
        to "fixed" and False, and the length bounds are not applied.

    Raises:
        UnsupportedTypeError: If x or pattern has an unrecognized type.
        InvalidPatternError: If a regex pattern does not compile.
        ValueError: If mode or match_mode is unknown.
    """
    plan = plan_selection(x, pattern, mode, match_mode, case_insensitive, min_len, max_len)

    result = x.slice_columns(plan.kept_positions)
    if plan.padding:
        result = _project(result, list(plan.pattern_set.patterns))

    if verbose:
        _report(plan, x.nfeat, result.nfeat)
    return result


def remove(x: DocumentFeatureMatrix, pattern: Any = None, **kwargs: Any) -> DocumentFeatureMatrix:
    """``select`` with mode="remove"."""
    if "mode" in kwargs:
        raise ConflictingArgumentError("mode", "remove")
    return select(x, pattern, mode=SelectionMode.REMOVE, **kwargs)


def keep(x: DocumentFeatureMatrix, pattern: Any = None, **kwargs: Any) -> DocumentFeatureMatrix:
    """``select`` with mode="keep"."""
    if "mode" in kwargs:
        raise ConflictingArgumentError("mode", "keep")
    return select(x, pattern, mode=SelectionMode.KEEP, **kwargs)
