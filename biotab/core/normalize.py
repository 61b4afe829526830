"""Row-wise percentage normalization and low-share column collapsing."""

from __future__ import annotations

import math
import warnings

import numpy as np

from biotab.core.errors import DegenerateInputError, InvalidInputError
from biotab.core.types import ContingencyMatrix, PercentMatrix

ZERO_ROW_POLICIES: tuple[str, ...] = ("zero", "raise")
DEFAULT_OTHER_LABEL = "other"


def normalize_rows(matrix: ContingencyMatrix, *, zero_rows: str = "zero") -> PercentMatrix:
    """Convert counts to row-wise percentages (each non-empty row sums to 100).

    Rows with a zero total are left all-zero and reported in
    `PercentMatrix.zero_rows` with a `RuntimeWarning` (``zero_rows="zero"``),
    or rejected with `DegenerateInputError` (``zero_rows="raise"``).
    """
    if zero_rows not in ZERO_ROW_POLICIES:
        raise InvalidInputError(
            f"Unknown zero-row policy '{zero_rows}'. Use one of: {', '.join(ZERO_ROW_POLICIES)}."
        )

    counts = matrix.to_dense().astype(float)
    sums = counts.sum(axis=1)
    zero_mask = sums == 0
    zero_labels = tuple(matrix.row_labels[i] for i in np.flatnonzero(zero_mask))

    if zero_labels:
        listed = ", ".join(repr(r) for r in zero_labels)
        if zero_rows == "raise":
            raise DegenerateInputError(f"Rows with zero total cannot be normalized: {listed}.")
        warnings.warn(
            f"Rows with zero total left as all-zero percentages: {listed}.",
            RuntimeWarning,
            stacklevel=2,
        )

    pct = np.zeros_like(counts)
    # Scale first: whole-number shares (29 of 100) must land exactly on 29.0.
    np.divide(counts * 100.0, sums[:, None], out=pct, where=~zero_mask[:, None])
    return PercentMatrix(
        values=pct,
        row_labels=matrix.row_labels,
        col_labels=matrix.col_labels,
        zero_rows=zero_labels,
    )


def select_and_collapse_columns(
    percent: PercentMatrix,
    min_column_share: float,
    *,
    other_label: str = DEFAULT_OTHER_LABEL,
) -> PercentMatrix:
    """Keep columns reaching `min_column_share` in any row; fold the rest into `other_label`.

    A column is kept when its maximum percentage across all rows is
    ``>= min_column_share``. Kept columns retain their order and the synthetic
    column is appended last, so every row total is unchanged.
    """
    try:
        threshold = float(min_column_share)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            f"min_column_share must be a number, got {min_column_share!r}."
        ) from exc
    if not math.isfinite(threshold) or threshold < 0.0 or threshold > 100.0:
        raise InvalidInputError(f"min_column_share must be within [0, 100], got {threshold}.")

    values = np.asarray(percent.values, dtype=float)
    col_max = np.max(values, axis=0, initial=0.0)
    keep = col_max >= threshold

    kept_labels = tuple(percent.col_labels[i] for i in np.flatnonzero(keep))
    collapsed_labels = tuple(percent.col_labels[i] for i in np.flatnonzero(~keep))
    if other_label in kept_labels:
        raise InvalidInputError(
            f"other_label '{other_label}' collides with a kept column; choose another label."
        )

    other = values[:, ~keep].sum(axis=1)
    out = np.column_stack([values[:, keep], other])
    return PercentMatrix(
        values=out,
        row_labels=percent.row_labels,
        col_labels=kept_labels + (other_label,),
        zero_rows=percent.zero_rows,
        collapsed=percent.collapsed + collapsed_labels,
    )
