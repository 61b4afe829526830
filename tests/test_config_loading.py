from __future__ import annotations

import json
from pathlib import Path

import pytest

from biotab.config import crosstab_config_from_dict, load_json_config
from biotab.core.types import CrosstabConfig


def test_load_project_config():
    root = Path(__file__).resolve().parents[1]
    data = load_json_config(root / "configs" / "pbmc_crosstab.json")
    cfg = crosstab_config_from_dict(data)
    assert cfg.row_key == "seurat_clusters"
    assert cfg.col_key == "predicted.id"
    assert cfg.label_order == "sorted"
    assert cfg.column_order[0] == "B"
    assert cfg.min_column_share == 10.0


def test_invalid_json_reports_line_and_column(tmp_path: Path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"a": 1,}\n', encoding="utf-8")
    with pytest.raises(ValueError, match=r"line \d+, column \d+"):
        load_json_config(bad)


def test_non_object_json_config_rejected(tmp_path: Path):
    bad = tmp_path / "list.json"
    bad.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    with pytest.raises(ValueError, match="expected JSON object"):
        load_json_config(bad)


def test_non_json_extension_rejected(tmp_path: Path):
    bad = tmp_path / "cfg.yaml"
    bad.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError, match="Use a .json config file"):
        load_json_config(bad)


def test_missing_config_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_json_config(tmp_path / "absent.json")


def test_empty_mapping_gives_defaults():
    assert crosstab_config_from_dict({}) == CrosstabConfig()


@pytest.mark.parametrize(
    "data, message",
    [
        ({"row_kye": "leiden"}, "Unknown config key"),
        ({"row_key": ""}, "non-empty string"),
        ({"label_order": "random"}, "label_order"),
        ({"zero_rows": "drop"}, "zero_rows"),
        ({"column_order": "B,T"}, "list of strings"),
        ({"min_column_share": True}, "must be a number"),
        ({"min_column_share": 150}, r"\[0, 100\]"),
    ],
)
def test_invalid_config_values_rejected(data, message):
    with pytest.raises(ValueError, match=message):
        crosstab_config_from_dict(data)
