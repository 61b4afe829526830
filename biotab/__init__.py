"""biotab public API."""

from biotab._version import __version__
from biotab.core.contingency import build_contingency
from biotab.core.errors import (
    DegenerateInputError,
    InvalidInputError,
    UnknownColumnError,
    UnknownRowError,
)
from biotab.core.normalize import normalize_rows, select_and_collapse_columns
from biotab.core.types import ContingencyMatrix, PercentMatrix
from biotab.obs import crosstab_obs, majority_annotation
from biotab.summary import majority_labels, majority_table


def read_label_table(*args, **kwargs):
    """Lazy wrapper to avoid importing scanpy at import time."""
    from biotab.io import read_label_table as _read_label_table

    return _read_label_table(*args, **kwargs)


__all__ = [
    "__version__",
    "ContingencyMatrix",
    "PercentMatrix",
    "InvalidInputError",
    "DegenerateInputError",
    "UnknownColumnError",
    "UnknownRowError",
    "build_contingency",
    "normalize_rows",
    "select_and_collapse_columns",
    "crosstab_obs",
    "majority_annotation",
    "majority_labels",
    "majority_table",
    "read_label_table",
]
