"""Per-row majority assignment tables for reconciling two labelings."""

from __future__ import annotations

from typing import Any, Hashable

import numpy as np
import pandas as pd

from biotab.core.types import ContingencyMatrix

MAJORITY_COLUMNS: tuple[str, ...] = (
    "row_label",
    "n",
    "majority_label",
    "majority_count",
    "majority_percent",
    "runner_up_label",
    "runner_up_percent",
)


def majority_table(matrix: ContingencyMatrix) -> pd.DataFrame:
    """Dominant column label for every row of `matrix`.

    Ties resolve to the earlier column. Rows with no counts report a missing
    label and NaN percentages; the runner-up is missing when no second column
    has counts.
    """
    dense = matrix.to_dense()
    records: list[dict[str, Any]] = []
    for i, row_label in enumerate(matrix.row_labels):
        row = dense[i]
        n = int(row.sum())
        rec: dict[str, Any] = {
            "row_label": row_label,
            "n": n,
            "majority_label": None,
            "majority_count": 0,
            "majority_percent": float("nan"),
            "runner_up_label": None,
            "runner_up_percent": float("nan"),
        }
        if n > 0:
            ranked = np.argsort(-row, kind="mergesort")
            top = int(ranked[0])
            rec["majority_label"] = matrix.col_labels[top]
            rec["majority_count"] = int(row[top])
            rec["majority_percent"] = 100.0 * float(row[top]) / n
            if ranked.size > 1 and row[ranked[1]] > 0:
                second = int(ranked[1])
                rec["runner_up_label"] = matrix.col_labels[second]
                rec["runner_up_percent"] = 100.0 * float(row[second]) / n
        records.append(rec)
    return pd.DataFrame.from_records(records, columns=list(MAJORITY_COLUMNS))


def majority_labels(matrix: ContingencyMatrix) -> dict[Hashable, Hashable]:
    table = majority_table(matrix)
    return {
        row_label: label
        for row_label, label in zip(table["row_label"], table["majority_label"])
        if pd.notna(label)
    }
