"""Label ordering and reindexing helpers."""

from __future__ import annotations

import re
from typing import Any, Hashable, Iterable, Sequence

import numpy as np

from biotab.core.errors import InvalidInputError, UnknownColumnError, UnknownRowError

_DIGITS = re.compile(r"([0-9]+)")


def natural_sort_key(label: Any) -> tuple:
    """Numeric-aware sort key, so cluster ``"10"`` sorts after ``"9"``."""
    text = str(label)
    parts = []
    for chunk in _DIGITS.split(text):
        if chunk == "":
            continue
        if _DIGITS.fullmatch(chunk):
            parts.append((0, int(chunk), ""))
        else:
            parts.append((1, 0, chunk.lower()))
    return tuple(parts), text


def sorted_labels(labels: Iterable[Hashable]) -> list:
    return sorted(labels, key=natural_sort_key)


def reindex_positions(
    current: Sequence[Hashable],
    order: Iterable[Hashable],
    *,
    axis: str = "column",
) -> np.ndarray:
    """Positions that move `order` to the front of `current`.

    Labels of `current` not named in `order` follow in their existing order.
    Raises `UnknownColumnError` / `UnknownRowError` when `order` names a label
    that is not in `current`.
    """
    if axis not in ("row", "column"):
        raise ValueError(f"axis must be 'row' or 'column', got {axis!r}.")
    if isinstance(order, (str, bytes)):
        raise InvalidInputError("Label order must be a sequence of labels, not a string.")

    requested = list(order)
    positions = {label: i for i, label in enumerate(current)}
    seen: set = set()
    missing = []
    try:
        for label in requested:
            if label in seen:
                raise InvalidInputError(f"Duplicate {axis} label in requested order: {label!r}.")
            seen.add(label)
            if label not in positions:
                missing.append(label)
    except TypeError as exc:
        raise InvalidInputError(f"Requested {axis} order contains an unhashable label.") from exc

    if missing:
        err = UnknownColumnError if axis == "column" else UnknownRowError
        raise err(
            f"Requested {axis} order names labels absent from the matrix: "
            + ", ".join(repr(m) for m in missing)
        )

    front = [positions[label] for label in requested]
    rest = [i for i, label in enumerate(current) if label not in seen]
    return np.asarray(front + rest, dtype=np.intp)
