"""Typed containers for contingency tables and run configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable

import numpy as np
import pandas as pd
import scipy.sparse as sp

from biotab.core.errors import InvalidInputError
from biotab.core.ordering import reindex_positions


def _label_index(labels: tuple) -> pd.Index:
    return pd.Index(list(labels), dtype=object)


@dataclass(frozen=True, eq=False)
class ContingencyMatrix:
    """Co-occurrence counts between two label domains.

    - `counts`: sparse (R, C) int64 counts, rows follow `row_labels`.
    - `row_labels` / `col_labels`: the observed label domains.
    """

    counts: sp.csr_matrix
    row_labels: tuple
    col_labels: tuple

    def __post_init__(self) -> None:
        counts = sp.csr_matrix(self.counts, dtype=np.int64, copy=True)
        rows = tuple(self.row_labels)
        cols = tuple(self.col_labels)
        if counts.shape != (len(rows), len(cols)):
            raise InvalidInputError(
                f"Counts shape {counts.shape} does not match "
                f"{len(rows)} row labels x {len(cols)} column labels."
            )
        if counts.nnz and counts.data.min() < 0:
            raise InvalidInputError("Counts must be non-negative.")
        counts.sum_duplicates()
        for buf in (counts.data, counts.indices, counts.indptr):
            buf.setflags(write=False)
        object.__setattr__(self, "counts", counts)
        object.__setattr__(self, "row_labels", rows)
        object.__setattr__(self, "col_labels", cols)

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.row_labels), len(self.col_labels))

    @property
    def total(self) -> int:
        return int(self.counts.sum())

    def row_sums(self) -> np.ndarray:
        return np.asarray(self.counts.sum(axis=1), dtype=np.int64).ravel()

    def col_sums(self) -> np.ndarray:
        return np.asarray(self.counts.sum(axis=0), dtype=np.int64).ravel()

    def to_dense(self) -> np.ndarray:
        return self.counts.toarray()

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.to_dense(),
            index=_label_index(self.row_labels),
            columns=_label_index(self.col_labels),
        )

    def equals(self, other: object) -> bool:
        if not isinstance(other, ContingencyMatrix):
            return False
        return (
            self.row_labels == other.row_labels
            and self.col_labels == other.col_labels
            and np.array_equal(self.to_dense(), other.to_dense())
        )

    def reorder_rows(self, order: Iterable[Hashable]) -> "ContingencyMatrix":
        perm = reindex_positions(self.row_labels, order, axis="row")
        return ContingencyMatrix(
            counts=self.counts[perm, :],
            row_labels=tuple(self.row_labels[i] for i in perm),
            col_labels=self.col_labels,
        )

    def reorder_columns(self, order: Iterable[Hashable]) -> "ContingencyMatrix":
        perm = reindex_positions(self.col_labels, order, axis="column")
        return ContingencyMatrix(
            counts=self.counts[:, perm],
            row_labels=self.row_labels,
            col_labels=tuple(self.col_labels[i] for i in perm),
        )


@dataclass(frozen=True, eq=False)
class PercentMatrix:
    """Row-wise percentages derived from a `ContingencyMatrix`.

    `zero_rows` lists rows whose count total was zero; they hold 0.0 in every
    column. `collapsed` lists source columns folded into an "other" column.
    """

    values: np.ndarray
    row_labels: tuple
    col_labels: tuple
    zero_rows: tuple = ()
    collapsed: tuple = field(default=())

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float, copy=True)
        rows = tuple(self.row_labels)
        cols = tuple(self.col_labels)
        if values.ndim != 2 or values.shape != (len(rows), len(cols)):
            raise InvalidInputError(
                f"Percent values shape {values.shape} does not match "
                f"{len(rows)} row labels x {len(cols)} column labels."
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(self, "row_labels", rows)
        object.__setattr__(self, "col_labels", cols)
        object.__setattr__(self, "zero_rows", tuple(self.zero_rows))
        object.__setattr__(self, "collapsed", tuple(self.collapsed))

    @property
    def shape(self) -> tuple[int, int]:
        return (len(self.row_labels), len(self.col_labels))

    def row_totals(self) -> np.ndarray:
        return self.values.sum(axis=1)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            np.array(self.values),
            index=_label_index(self.row_labels),
            columns=_label_index(self.col_labels),
        )

    def reorder_columns(self, order: Iterable[Hashable]) -> "PercentMatrix":
        perm = reindex_positions(self.col_labels, order, axis="column")
        return PercentMatrix(
            values=self.values[:, perm],
            row_labels=self.row_labels,
            col_labels=tuple(self.col_labels[i] for i in perm),
            zero_rows=self.zero_rows,
            collapsed=self.collapsed,
        )


@dataclass(frozen=True)
class CrosstabConfig:
    """Parameters for one cross-tabulation run."""

    row_key: str | None = None
    col_key: str | None = None
    label_order: str = "appearance"
    column_order: tuple[str, ...] | None = None
    min_column_share: float | None = None
    other_label: str = "other"
    zero_rows: str = "zero"
