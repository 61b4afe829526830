"""Command-line interface for biotab cross-tabulation runs."""

from __future__ import annotations

import argparse
import dataclasses
from pathlib import Path
from typing import Iterable

from biotab.config import crosstab_config_from_dict, load_json_config
from biotab.core.contingency import LABEL_ORDERS
from biotab.core.normalize import ZERO_ROW_POLICIES, normalize_rows, select_and_collapse_columns
from biotab.core.types import CrosstabConfig
from biotab.io import ensure_dir, read_label_table, setup_logger, write_json, write_table
from biotab.obs import COL_KEY_CANDIDATES, ROW_KEY_CANDIDATES, crosstab_obs, detect_obs_col
from biotab.summary import majority_table


def _split_order(text: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in text.split(",") if part.strip() != "")


def _resolve_config(args: argparse.Namespace) -> CrosstabConfig:
    cfg = CrosstabConfig()
    if args.config is not None:
        cfg = crosstab_config_from_dict(load_json_config(args.config))

    overrides = {}
    if args.row_key is not None:
        overrides["row_key"] = args.row_key
    if args.col_key is not None:
        overrides["col_key"] = args.col_key
    if args.label_order is not None:
        overrides["label_order"] = args.label_order
    if args.column_order is not None:
        overrides["column_order"] = _split_order(args.column_order)
    if args.min_column_share is not None:
        overrides["min_column_share"] = args.min_column_share
    if args.other_label is not None:
        overrides["other_label"] = args.other_label
    if args.zero_rows is not None:
        overrides["zero_rows"] = args.zero_rows
    return dataclasses.replace(cfg, **overrides)


def crosstab_main(argv: Iterable[str] | None = None) -> int:
    """Cross-tabulate two label columns and write count/percent tables.

    Args:
        argv: Command-line arguments (if None, uses sys.argv).

    Returns:
        Exit code (0 for success).
    """
    parser = argparse.ArgumentParser(description="biotab cross-tabulation")
    parser.add_argument("--input", required=True, help="Label table (.csv/.tsv) or .h5ad file")
    parser.add_argument("--outdir", required=True, help="Output directory")
    parser.add_argument("--config", default=None, help="Optional JSON run config")
    parser.add_argument("--row-key", default=None, help="Column for matrix rows (e.g. clusters)")
    parser.add_argument("--col-key", default=None, help="Column for matrix columns (e.g. predicted types)")
    parser.add_argument("--label-order", choices=LABEL_ORDERS, default=None)
    parser.add_argument(
        "--column-order", default=None, help="Comma-separated canonical column order"
    )
    parser.add_argument(
        "--min-column-share",
        type=float,
        default=None,
        help="Collapse columns whose maximum row percentage is below this value",
    )
    parser.add_argument("--other-label", default=None, help="Name of the collapsed column")
    parser.add_argument("--zero-rows", choices=ZERO_ROW_POLICIES, default=None)
    args = parser.parse_args(list(argv) if argv is not None else None)

    outdir = Path(args.outdir)
    ensure_dir(outdir)
    logger = setup_logger(outdir / "logs" / "biotab.log", "biotab")
    cfg = _resolve_config(args)

    obs = read_label_table(args.input)
    row_key = detect_obs_col(obs, cfg.row_key, ROW_KEY_CANDIDATES)
    col_key = detect_obs_col(obs, cfg.col_key, COL_KEY_CANDIDATES)
    logger.info("Loaded %d observations from %s", obs.shape[0], args.input)
    logger.info("Rows: %s, columns: %s", row_key, col_key)

    matrix = crosstab_obs(obs, row_key, col_key, order=cfg.label_order)
    if cfg.column_order:
        matrix = matrix.reorder_columns(cfg.column_order)
    logger.info("Contingency matrix: %d x %d, total %d", *matrix.shape, matrix.total)

    percent = normalize_rows(matrix, zero_rows=cfg.zero_rows)
    if percent.zero_rows:
        logger.warning("Zero-total rows left at 0%%: %s", ", ".join(map(str, percent.zero_rows)))

    # All tables are derived before the first write; a failure leaves no outputs.
    tables = {
        "counts": ("counts.csv", matrix.to_frame(), row_key),
        "percent": ("percent.csv", percent.to_frame(), row_key),
        "majority": ("majority.csv", majority_table(matrix), None),
    }

    collapsed_labels: list[str] = []
    if cfg.min_column_share is not None:
        collapsed = select_and_collapse_columns(
            percent, cfg.min_column_share, other_label=cfg.other_label
        )
        collapsed_labels = [str(c) for c in collapsed.collapsed]
        logger.info(
            "Collapsed %d column(s) below %.2f%% into '%s'",
            len(collapsed_labels),
            cfg.min_column_share,
            cfg.other_label,
        )
        tables["percent_collapsed"] = ("percent_collapsed.csv", collapsed.to_frame(), row_key)

    artifacts = {
        name: write_table(outdir / filename, frame, index_label=index_label)
        for name, (filename, frame, index_label) in tables.items()
    }

    summary = {
        "input": str(args.input),
        "row_key": row_key,
        "col_key": col_key,
        "n_observations": matrix.total,
        "n_rows": matrix.shape[0],
        "n_columns": matrix.shape[1],
        "zero_rows": [str(r) for r in percent.zero_rows],
        "collapsed_columns": collapsed_labels,
        "config": dataclasses.asdict(cfg),
        "artifacts": {k: v.as_posix() for k, v in artifacts.items()},
    }
    write_json(outdir / "summary.json", summary)
    for name, path in artifacts.items():
        logger.info("Wrote %s: %s", name, path.as_posix())
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (if None, uses sys.argv).

    Returns:
        Exit code.
    """
    parser = argparse.ArgumentParser(description="biotab CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("crosstab", help="Cross-tabulate two label columns", add_help=False)

    args, remainder = parser.parse_known_args(list(argv) if argv is not None else None)
    if args.command == "crosstab":
        return crosstab_main(remainder)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
