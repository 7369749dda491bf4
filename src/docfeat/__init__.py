"""Select and project features of sparse document-feature matrices."""

from docfeat.config import Config
from docfeat.errors import (
    ConflictingArgumentError,
    DocfeatError,
    InvalidPatternError,
    UnsupportedTypeError,
)
from docfeat.matrix import DocumentFeatureMatrix, MatrixMeta
from docfeat.patterns import Dictionary, MatchMode, PatternSet, SourceKind, normalize_patterns
from docfeat.resolver import match_patterns, resolve
from docfeat.selection import (
    SelectionMode,
    SelectionResult,
    align_features,
    execute,
    keep,
    plan_selection,
    remove,
    select,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ConflictingArgumentError",
    "Dictionary",
    "DocfeatError",
    "DocumentFeatureMatrix",
    "InvalidPatternError",
    "MatchMode",
    "MatrixMeta",
    "PatternSet",
    "SelectionMode",
    "SelectionResult",
    "SourceKind",
    "UnsupportedTypeError",
    "align_features",
    "execute",
    "keep",
    "match_patterns",
    "normalize_patterns",
    "plan_selection",
    "remove",
    "resolve",
    "select",
]
