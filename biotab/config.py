"""Configuration loading utilities for biotab runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from biotab.core.contingency import LABEL_ORDERS
from biotab.core.normalize import ZERO_ROW_POLICIES
from biotab.core.types import CrosstabConfig

_STR_KEYS = ("row_key", "col_key", "other_label")


def load_json_config(path: str | Path) -> dict[str, Any]:
    """Load and validate a run config from a JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    if config_path.suffix.lower() != ".json":
        raise ValueError(
            f"Unsupported config format for '{config_path}'. Use a .json config file."
        )

    try:
        with open(config_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"Invalid JSON in config '{config_path}' at line {exc.lineno}, "
            f"column {exc.colno}: {exc.msg}"
        ) from exc

    if not isinstance(data, dict):
        raise ValueError(
            f"Invalid config root in '{config_path}': expected JSON object, got {type(data).__name__}."
        )
    return data


def crosstab_config_from_dict(data: dict[str, Any]) -> CrosstabConfig:
    """Validate a config mapping into a `CrosstabConfig`.

    Keys that are not `CrosstabConfig` fields are rejected so typos surface early.
    """
    allowed = set(CrosstabConfig.__dataclass_fields__)
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"Unknown config key(s): {', '.join(unknown)}.")

    kwargs: dict[str, Any] = {}
    for key in _STR_KEYS:
        if key in data and data[key] is not None:
            if not isinstance(data[key], str) or data[key].strip() == "":
                raise ValueError(f"Config '{key}' must be a non-empty string.")
            kwargs[key] = data[key]

    if "label_order" in data:
        if data["label_order"] not in LABEL_ORDERS:
            raise ValueError(f"Config 'label_order' must be one of: {', '.join(LABEL_ORDERS)}.")
        kwargs["label_order"] = data["label_order"]

    if "zero_rows" in data:
        if data["zero_rows"] not in ZERO_ROW_POLICIES:
            raise ValueError(f"Config 'zero_rows' must be one of: {', '.join(ZERO_ROW_POLICIES)}.")
        kwargs["zero_rows"] = data["zero_rows"]

    if data.get("column_order") is not None:
        order = data["column_order"]
        if not isinstance(order, list) or not all(isinstance(x, str) for x in order):
            raise ValueError("Config 'column_order' must be a list of strings.")
        kwargs["column_order"] = tuple(order)

    if data.get("min_column_share") is not None:
        share = data["min_column_share"]
        if isinstance(share, bool) or not isinstance(share, (int, float)):
            raise ValueError("Config 'min_column_share' must be a number.")
        if not 0.0 <= float(share) <= 100.0:
            raise ValueError("Config 'min_column_share' must be within [0, 100].")
        kwargs["min_column_share"] = float(share)

    return CrosstabConfig(**kwargs)
