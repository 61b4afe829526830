from __future__ import annotations

import logging
from pathlib import Path

import anndata as ad
import numpy as np
import pandas as pd
import pytest

from biotab.io import read_label_table, setup_logger, write_json, write_table
from biotab.obs import crosstab_obs


def test_read_csv_keeps_label_spelling(tmp_path: Path):
    path = tmp_path / "cells.csv"
    path.write_text("seurat_clusters,predicted.id\n01,B\n1,T\n", encoding="utf-8")
    obs = read_label_table(path)
    assert list(obs["seurat_clusters"]) == ["01", "1"]
    assert crosstab_obs(obs).row_labels == ("01", "1")


def test_read_tsv(tmp_path: Path):
    path = tmp_path / "cells.tsv"
    path.write_text("leiden\tcell_type\n0\tNK\n", encoding="utf-8")
    obs = read_label_table(path)
    assert list(obs.columns) == ["leiden", "cell_type"]


def test_read_h5ad_obs(tmp_path: Path):
    obs = pd.DataFrame(
        {"leiden": ["0", "1", "1"], "cell_type": ["B", "T", "T"]},
        index=["c0", "c1", "c2"],
    )
    path = tmp_path / "cells.h5ad"
    ad.AnnData(X=np.zeros((3, 1), dtype=np.float32), obs=obs).write_h5ad(path)
    loaded = read_label_table(path)
    assert list(loaded.index) == ["c0", "c1", "c2"]
    m = crosstab_obs(loaded)
    np.testing.assert_array_equal(m.to_dense(), [[1, 0], [0, 2]])


def test_read_rejects_missing_and_unknown_formats(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_label_table(tmp_path / "absent.csv")
    bad = tmp_path / "cells.parquet"
    bad.write_bytes(b"")
    with pytest.raises(ValueError, match="Unsupported input format"):
        read_label_table(bad)


def test_writers_create_parent_dirs(tmp_path: Path):
    frame = pd.DataFrame({"B": [1, 2]}, index=["0", "1"])
    out = write_table(tmp_path / "nested" / "counts.csv", frame, index_label="cluster")
    assert out.read_text(encoding="utf-8").splitlines()[0] == "cluster,B"
    write_json(tmp_path / "nested" / "summary.json", {"n": 3})
    assert (tmp_path / "nested" / "summary.json").exists()


def test_setup_logger_writes_file(tmp_path: Path):
    log_path = tmp_path / "logs" / "run.log"
    logger = setup_logger(log_path, "biotab_test_io")
    logger.info("hello %s", "world")
    for handler in logger.handlers:
        handler.flush()
    assert "| INFO | hello world" in log_path.read_text(encoding="utf-8")
    assert logger.level == logging.INFO


def test_setup_logger_closes_previous_handlers(tmp_path: Path):
    first = setup_logger(tmp_path / "a.log", "biotab_test_reopen")
    old_handlers = list(first.handlers)
    second = setup_logger(tmp_path / "b.log", "biotab_test_reopen")
    assert second is first
    file_handlers = [h for h in old_handlers if isinstance(h, logging.FileHandler)]
    assert file_handlers
    assert all(h.stream is None for h in file_handlers)
    assert not any(h in second.handlers for h in old_handlers)
