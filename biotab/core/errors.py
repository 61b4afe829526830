"""Error types raised by biotab operations."""

from __future__ import annotations


class BiotabError(Exception):
    """Base class for biotab errors."""


class InvalidInputError(BiotabError, ValueError):
    """Label sequences or parameters that cannot be tabulated."""


class DegenerateInputError(BiotabError, ValueError):
    """A row with zero total count where a percentage is required."""


class UnknownLabelError(BiotabError, KeyError):
    """A requested label ordering names a label absent from the matrix."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable.
        return str(self.args[0]) if self.args else ""


class UnknownColumnError(UnknownLabelError):
    pass


class UnknownRowError(UnknownLabelError):
    pass
