"""Adapters between AnnData-style `.obs` tables and contingency matrices."""

from __future__ import annotations

from typing import Any, Iterable

import pandas as pd

from biotab.core.contingency import build_contingency
from biotab.core.types import ContingencyMatrix
from biotab.summary import majority_labels

ROW_KEY_CANDIDATES: tuple[str, ...] = (
    "seurat_clusters",
    "leiden",
    "louvain",
    "cluster",
    "clusters",
)
COL_KEY_CANDIDATES: tuple[str, ...] = (
    "predicted.id",
    "predicted_id",
    "predicted_celltype",
    "cell_type",
    "celltype",
)


def obs_frame(adata_or_frame: Any) -> pd.DataFrame:
    """Return the observation table of an AnnData-like object or a DataFrame."""
    if isinstance(adata_or_frame, pd.DataFrame):
        return adata_or_frame
    obs = getattr(adata_or_frame, "obs", None)
    if not isinstance(obs, pd.DataFrame):
        raise TypeError(
            "Expected an AnnData-like object with a pandas .obs table or a DataFrame, "
            f"got {type(adata_or_frame).__name__}."
        )
    return obs


def detect_obs_col(adata_or_frame: Any, provided: str | None, candidates: Iterable[str]) -> str:
    obs = obs_frame(adata_or_frame)
    if provided is not None:
        if provided in obs.columns:
            return str(provided)
        raise KeyError(f"adata.obs['{provided}'] not found.")
    candidates = list(candidates)
    for c in candidates:
        if c in obs.columns:
            return str(c)
    raise KeyError(f"Required column not found. Tried: {', '.join(candidates)}")


def crosstab_obs(
    adata_or_frame: Any,
    row_key: str | None = None,
    col_key: str | None = None,
    *,
    order: str = "appearance",
) -> ContingencyMatrix:
    """Cross-tabulate two observation columns, e.g. clusters against predicted cell types.

    Missing keys are auto-detected from common cluster / prediction column names.
    """
    obs = obs_frame(adata_or_frame)
    row_col = detect_obs_col(obs, row_key, ROW_KEY_CANDIDATES)
    col_col = detect_obs_col(obs, col_key, COL_KEY_CANDIDATES)
    return build_contingency(obs[row_col], obs[col_col], order=order)


def majority_annotation(
    adata_or_frame: Any,
    row_key: str | None = None,
    col_key: str | None = None,
) -> pd.Series:
    """Label every observation with the dominant `col_key` value of its `row_key` group.

    Returns a new Series aligned to the obs index; the input is not modified.
    """
    obs = obs_frame(adata_or_frame)
    row_col = detect_obs_col(obs, row_key, ROW_KEY_CANDIDATES)
    col_col = detect_obs_col(obs, col_key, COL_KEY_CANDIDATES)
    mapping = majority_labels(build_contingency(obs[row_col], obs[col_col]))
    return pd.Series(
        [mapping[value] for value in obs[row_col]],
        index=obs.index,
        name=f"{col_col}_majority",
        dtype=object,
    )
