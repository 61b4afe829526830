"""Core cross-tabulation subpackage."""

from biotab.core.contingency import build_contingency
from biotab.core.errors import (
    BiotabError,
    DegenerateInputError,
    InvalidInputError,
    UnknownColumnError,
    UnknownLabelError,
    UnknownRowError,
)
from biotab.core.normalize import normalize_rows, select_and_collapse_columns
from biotab.core.ordering import natural_sort_key, sorted_labels
from biotab.core.types import ContingencyMatrix, CrosstabConfig, PercentMatrix

__all__ = [
    "ContingencyMatrix",
    "PercentMatrix",
    "CrosstabConfig",
    "BiotabError",
    "InvalidInputError",
    "DegenerateInputError",
    "UnknownLabelError",
    "UnknownColumnError",
    "UnknownRowError",
    "build_contingency",
    "normalize_rows",
    "select_and_collapse_columns",
    "natural_sort_key",
    "sorted_labels",
]
