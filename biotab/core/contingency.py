"""Cross-tabulation of two parallel categorical label sequences."""

from __future__ import annotations

from typing import Hashable, Iterable

import numpy as np
import pandas as pd
import scipy.sparse as sp

from biotab.core.errors import InvalidInputError
from biotab.core.ordering import natural_sort_key
from biotab.core.types import ContingencyMatrix

LABEL_ORDERS: tuple[str, ...] = ("appearance", "sorted")


def _as_label_array(name: str, labels: Iterable[Hashable]) -> np.ndarray:
    if isinstance(labels, (str, bytes)):
        raise InvalidInputError(f"{name} must be a sequence of labels, not a single string.")
    items = list(labels)
    arr = np.empty(len(items), dtype=object)
    for i, value in enumerate(items):
        arr[i] = value

    null_mask = np.asarray(pd.isna(arr), dtype=bool)
    if null_mask.any():
        first = int(np.flatnonzero(null_mask)[0])
        raise InvalidInputError(
            f"{name} contains {int(null_mask.sum())} missing label(s); first at position {first}."
        )
    return arr


def _factorize(name: str, arr: np.ndarray, order: str) -> tuple[np.ndarray, tuple]:
    """Integer codes plus the label domain, in first-appearance or natural order."""
    if arr.size == 0:
        return np.zeros(0, dtype=np.intp), ()
    try:
        codes, uniques = pd.factorize(arr, sort=False)
    except TypeError as exc:
        raise InvalidInputError(f"{name} contains unhashable labels.") from exc

    domain = list(uniques)
    if order == "sorted":
        ranked = sorted(range(len(domain)), key=lambda k: natural_sort_key(domain[k]))
        remap = np.empty(len(domain), dtype=np.intp)
        remap[ranked] = np.arange(len(domain), dtype=np.intp)
        codes = remap[codes]
        domain = [domain[k] for k in ranked]
    return np.asarray(codes, dtype=np.intp), tuple(domain)


def build_contingency(
    labels_a: Iterable[Hashable],
    labels_b: Iterable[Hashable],
    *,
    order: str = "appearance",
) -> ContingencyMatrix:
    """Count co-occurrences of `labels_a` (rows) and `labels_b` (columns).

    Both sequences describe the same observations, position by position.
    Row and column domains are the distinct observed values, in order of first
    appearance (``order="appearance"``) or natural sort order
    (``order="sorted"``). Every observation contributes exactly one count, so
    the matrix total equals the sequence length.

    Raises `InvalidInputError` on a length mismatch, missing or unhashable
    labels, or an unknown `order`.
    """
    if order not in LABEL_ORDERS:
        raise InvalidInputError(
            f"Unknown label order '{order}'. Use one of: {', '.join(LABEL_ORDERS)}."
        )
    arr_a = _as_label_array("labels_a", labels_a)
    arr_b = _as_label_array("labels_b", labels_b)
    if arr_a.size != arr_b.size:
        raise InvalidInputError(
            f"labels_a and labels_b must have the same length ({arr_a.size} != {arr_b.size})."
        )

    codes_a, rows = _factorize("labels_a", arr_a, order)
    codes_b, cols = _factorize("labels_b", arr_b, order)
    shape = (len(rows), len(cols))

    if arr_a.size == 0:
        counts = sp.csr_matrix(shape, dtype=np.int64)
    else:
        ones = np.ones(arr_a.size, dtype=np.int64)
        # Duplicate (row, col) pairs are summed on conversion to CSR.
        counts = sp.coo_matrix((ones, (codes_a, codes_b)), shape=shape).tocsr()

    return ContingencyMatrix(counts=counts, row_labels=rows, col_labels=cols)
