"""Input readers, output writers, and logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd
import scanpy as sc

TABLE_SEPARATORS: dict[str, str] = {".csv": ",", ".tsv": "\t", ".txt": "\t"}


def ensure_dir(path: str | Path) -> None:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)


def write_json(path: str | Path, payload: dict[str, Any]) -> None:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True, default=str)


def write_table(path: str | Path, frame: pd.DataFrame, *, index_label: str | None = None) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(out.as_posix(), index=index_label is not None, index_label=index_label)
    return out


def setup_logger(log_path: Path, logger_name: str) -> logging.Logger:
    ensure_dir(log_path.parent)
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    fh = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    fh.setFormatter(formatter)
    logger.addHandler(fh)
    sh = logging.StreamHandler()
    sh.setFormatter(formatter)
    logger.addHandler(sh)
    return logger


def read_label_table(path: str | Path) -> pd.DataFrame:
    """Read per-observation labels from a delimited table or the `.obs` of an `.h5ad` file.

    Delimited tables are read as strings so cluster IDs such as ``"01"`` keep
    their spelling; empty cells become missing values.
    """
    in_path = Path(path)
    if not in_path.exists():
        raise FileNotFoundError(f"Input file '{in_path}' not found.")
    suffix = in_path.suffix.lower()
    if suffix == ".h5ad":
        return sc.read_h5ad(in_path).obs.copy()
    if suffix in TABLE_SEPARATORS:
        return pd.read_csv(in_path, sep=TABLE_SEPARATORS[suffix], dtype=str)
    raise ValueError(
        f"Unsupported input format for '{in_path}'. "
        f"Use .h5ad or one of: {', '.join(sorted(TABLE_SEPARATORS))}."
    )
