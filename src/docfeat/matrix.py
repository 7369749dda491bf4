"""
Sparse document-feature matrix.

Rows are documents, columns are features. The vocabulary (``features``)
fixes the column order and is the public contract other components match
patterns against. Column operations never mutate the matrix they are
called on; each returns a new ``DocumentFeatureMatrix``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterable, Sequence

import numpy as np
from scipy.sparse import csr_matrix, issparse, lil_matrix

from docfeat.config import Config

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True)
class MatrixMeta:
    """Attributes carried along with the cell values."""

    concatenator: str = Config.default_concatenator
    weighting: str = Config.default_weighting
    # Labels of all-zero columns inserted by a projection
    padding_features: tuple[str, ...] = ()
    attrs: dict[str, Any] = field(default_factory=dict)

    def copy(self, **changes: Any) -> MatrixMeta:
        changes.setdefault("attrs", dict(self.attrs))
        return replace(self, **changes)


def _unique_labels(labels: Iterable[Any], what: str) -> tuple[str, ...]:
    labels = tuple(str(label) for label in labels)
    if len(set(labels)) != len(labels):
        duplicated = [label for label, n in Counter(labels).items() if n > 1]
        raise ValueError(f"{what} must be unique; duplicated: {duplicated[:10]}")
    return labels


class DocumentFeatureMatrix:
    """
    Sparse document-by-feature matrix.

    Args:
        cells: Array-like or scipy sparse matrix of shape (n_documents, n_features).
        documents: Document identifiers. Defaults to "0", "1", ...
        features: Feature labels. Defaults to "feat0", "feat1", ...
        meta: Carried attributes (concatenator, weighting, padding, extras).

    Attributes:
        cells (csr_matrix): The cell values.
        documents (tuple[str, ...]): Unique document identifiers, row order.
        features (tuple[str, ...]): Unique feature labels, column order.
        meta (MatrixMeta): Carried attributes.
    """

    def __init__(
        self,
        cells,
        documents: Sequence[str] | None = None,
        features: Sequence[str] | None = None,
        meta: MatrixMeta | None = None,
    ):
        if issparse(cells):
            cells = csr_matrix(cells)
        else:
            array = np.asarray(cells)
            if array.ndim != 2:
                raise ValueError(f"cells must be two-dimensional, got {array.ndim} dimension(s)")
            cells = csr_matrix(array)

        n_docs, n_feats = cells.shape
        if documents is None:
            documents = [str(i) for i in range(n_docs)]
        if features is None:
            features = [f"feat{i}" for i in range(n_feats)]

        self.documents = _unique_labels(documents, "document identifiers")
        self.features = _unique_labels(features, "feature labels")
        if (len(self.documents), len(self.features)) != cells.shape:
            raise ValueError(
                f"cells have shape {cells.shape} but there are {len(self.documents)} "
                f"documents and {len(self.features)} features"
            )

        self.cells = cells
        self.meta = meta if meta is not None else MatrixMeta()
        self._feature_index: dict[str, int] | None = None

    @classmethod
    def from_documents(
        cls,
        documents: list[list[str]],
        ids: list[str] | None = None,
        concatenator: str = Config.default_concatenator,
    ) -> DocumentFeatureMatrix:
        """Count pre-tokenized documents; features appear in first-occurrence order."""
        vocab: dict[str, int] = {}
        for doc in documents:
            for term in doc:
                if term not in vocab:
                    vocab[term] = len(vocab)

        counts = lil_matrix((len(documents), len(vocab)), dtype=np.float64)
        for doc_idx, doc in enumerate(documents):
            for term, count in Counter(doc).items():
                counts[doc_idx, vocab[term]] = count

        return cls(
            csr_matrix(counts),
            documents=ids,
            features=list(vocab),
            meta=MatrixMeta(concatenator=concatenator),
        )

    def __repr__(self) -> str:
        return (
            f"DocumentFeatureMatrix({self.ndoc} documents, {self.nfeat} features, "
            f"weighting={self.meta.weighting!r})"
        )

    @property
    def ndoc(self) -> int:
        return len(self.documents)

    @property
    def nfeat(self) -> int:
        return len(self.features)

    @property
    def shape(self) -> tuple[int, int]:
        return self.cells.shape

    @property
    def featnames(self) -> list[str]:
        return list(self.features)

    @property
    def docnames(self) -> list[str]:
        return list(self.documents)

    @property
    def padding(self) -> bool:
        """Whether the matrix holds zero columns inserted by a projection."""
        return bool(self.meta.padding_features)

    @property
    def feature_index(self) -> dict[str, int]:
        if self._feature_index is None:
            self._feature_index = {label: idx for idx, label in enumerate(self.features)}
        return self._feature_index

    def vocabulary(self) -> tuple[str, ...]:
        return self.features

    def column_count(self) -> int:
        return self.cells.shape[1]

    def get_feature_id(self, label: str) -> int | None:
        return self.feature_index.get(label)

    def toarray(self) -> NDArray[np.float64]:
        return self.cells.toarray()

    def equals(self, other: DocumentFeatureMatrix) -> bool:
        """Same documents, same features in the same order, same cell values."""
        if not isinstance(other, DocumentFeatureMatrix):
            return False
        if self.documents != other.documents or self.features != other.features:
            return False
        return (self.cells != other.cells).nnz == 0

    # -------------------------------------------------------------------------
    # Column operations
    # -------------------------------------------------------------------------

    def _with_columns(self, cells: csr_matrix, features: Sequence[str], meta: MatrixMeta) -> DocumentFeatureMatrix:
        return DocumentFeatureMatrix(cells, documents=self.documents, features=features, meta=meta)

    def slice_columns(self, positions: Sequence[int] | NDArray[np.int64]) -> DocumentFeatureMatrix:
        """Keep the columns at ``positions``, in the order given."""
        positions = np.asarray(positions, dtype=np.int64).reshape(-1)
        if positions.size and (positions.min() < 0 or positions.max() >= self.nfeat):
            raise IndexError(f"column positions out of range for {self.nfeat} features")

        features = [self.features[i] for i in positions.tolist()]
        kept = set(features)
        meta = self.meta.copy(
            padding_features=tuple(label for label in self.meta.padding_features if label in kept)
        )
        return self._with_columns(self.cells[:, positions], features, meta)

    def insert_zero_columns(self, labels: Sequence[str]) -> DocumentFeatureMatrix:
        """Append an all-zero column for each label and record them as padding."""
        labels = list(labels)
        if not labels:
            return self._with_columns(self.cells.copy(), self.features, self.meta.copy())

        clashing = [label for label in labels if label in self.feature_index]
        if clashing:
            raise ValueError(f"features already present: {clashing[:10]}")

        # Appended columns hold no stored entries, so only the width changes.
        cells = csr_matrix(
            (self.cells.data.copy(), self.cells.indices.copy(), self.cells.indptr.copy()),
            shape=(self.ndoc, self.nfeat + len(labels)),
        )
        meta = self.meta.copy(padding_features=self.meta.padding_features + tuple(labels))
        return self._with_columns(cells, list(self.features) + labels, meta)

    def reorder_columns(self, target_order: Sequence[str]) -> DocumentFeatureMatrix:
        """Permute columns so the features read exactly as ``target_order``."""
        target_order = list(target_order)
        if len(target_order) != self.nfeat or set(target_order) != set(self.features):
            raise ValueError("target order must be a permutation of the matrix features")

        positions = np.array([self.feature_index[label] for label in target_order], dtype=np.int64)
        return self._with_columns(self.cells[:, positions], target_order, self.meta.copy())
