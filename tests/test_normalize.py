from __future__ import annotations

import numpy as np
import pytest

from biotab.core.contingency import build_contingency
from biotab.core.errors import DegenerateInputError, InvalidInputError, UnknownColumnError
from biotab.core.normalize import normalize_rows, select_and_collapse_columns
from biotab.core.types import ContingencyMatrix


def _percent():
    m = build_contingency(["0", "0", "1", "1", "1"], ["B", "T", "B", "B", "T"])
    return normalize_rows(m)


def test_row_percentages_concrete():
    pm = _percent()
    assert pm.row_labels == ("0", "1")
    assert pm.col_labels == ("B", "T")
    np.testing.assert_allclose(np.round(pm.values, 2), [[50.0, 50.0], [66.67, 33.33]])
    assert pm.zero_rows == ()


def test_nonempty_rows_sum_to_100():
    rng = np.random.default_rng(1)
    a = rng.choice(["c0", "c1", "c2", "c3", "c4"], size=500).tolist()
    b = rng.choice(["B", "T", "NK", "Mono", "DC"], size=500).tolist()
    pm = normalize_rows(build_contingency(a, b))
    np.testing.assert_allclose(pm.row_totals(), 100.0, rtol=1e-6)


def _with_zero_row():
    return ContingencyMatrix(
        counts=np.array([[1, 3], [0, 0]]), row_labels=("a", "b"), col_labels=("x", "y")
    )


def test_zero_row_left_as_zero_with_warning():
    with pytest.warns(RuntimeWarning, match="zero total"):
        pm = normalize_rows(_with_zero_row())
    np.testing.assert_allclose(pm.values, [[25.0, 75.0], [0.0, 0.0]])
    assert pm.zero_rows == ("b",)


def test_zero_row_raise_policy():
    with pytest.raises(DegenerateInputError, match="'b'"):
        normalize_rows(_with_zero_row(), zero_rows="raise")


def test_unknown_zero_row_policy():
    with pytest.raises(InvalidInputError, match="zero-row policy"):
        normalize_rows(_with_zero_row(), zero_rows="nan")


def test_empty_matrix_normalizes_to_empty():
    pm = normalize_rows(build_contingency([], []))
    assert pm.shape == (0, 0)


def test_percent_values_are_read_only():
    pm = _percent()
    with pytest.raises(ValueError):
        pm.values[0, 0] = 1.0


def test_collapse_uses_column_maximum_across_rows():
    out = select_and_collapse_columns(_percent(), 60.0)
    # B reaches 66.67 in row "1"; T peaks at 50.
    assert out.col_labels == ("B", "other")
    assert out.collapsed == ("T",)
    np.testing.assert_allclose(np.round(out.values, 2), [[50.0, 50.0], [66.67, 33.33]])


def test_collapse_threshold_is_inclusive():
    out = select_and_collapse_columns(_percent(), 50.0)
    assert out.col_labels == ("B", "T", "other")
    assert out.collapsed == ()
    np.testing.assert_array_equal(out.values[:, -1], [0.0, 0.0])


def test_collapse_preserves_row_totals():
    rng = np.random.default_rng(2)
    a = rng.choice([str(i) for i in range(8)], size=400).tolist()
    b = rng.choice(["B", "T", "NK", "Mono", "DC", "pDC", "Platelet"], size=400).tolist()
    pm = normalize_rows(build_contingency(a, b))
    out = select_and_collapse_columns(pm, 20.0, other_label="rest")
    assert out.col_labels[-1] == "rest"
    np.testing.assert_allclose(out.row_totals(), pm.row_totals(), rtol=1e-9)
    assert set(out.col_labels[:-1]) | set(out.collapsed) == set(pm.col_labels)
    assert not set(out.col_labels[:-1]) & set(out.collapsed)


def test_collapse_full_share_keeps_only_pure_columns():
    m = ContingencyMatrix(
        counts=np.array([[2, 0], [1, 1]]), row_labels=("a", "b"), col_labels=("x", "y")
    )
    out = select_and_collapse_columns(normalize_rows(m), 100.0)
    assert out.col_labels == ("x", "other")
    np.testing.assert_allclose(out.values, [[100.0, 0.0], [50.0, 50.0]])


@pytest.mark.parametrize("threshold", [-1.0, 100.5, float("nan"), "high", None])
def test_collapse_threshold_validated(threshold):
    with pytest.raises(InvalidInputError, match="min_column_share"):
        select_and_collapse_columns(_percent(), threshold)


def test_other_label_collision_rejected():
    m = build_contingency(["a", "a"], ["other", "x"])
    with pytest.raises(InvalidInputError, match="collides"):
        select_and_collapse_columns(normalize_rows(m), 0.0)


def test_other_label_may_reuse_a_collapsed_name():
    m = build_contingency(["a", "a", "a", "a"], ["x", "x", "x", "other"])
    out = select_and_collapse_columns(normalize_rows(m), 50.0)
    assert out.col_labels == ("x", "other")
    np.testing.assert_allclose(out.values, [[75.0, 25.0]])


def test_percent_reorder_columns():
    pm = _percent().reorder_columns(["T", "B"])
    assert pm.col_labels == ("T", "B")
    np.testing.assert_allclose(pm.values[0], [50.0, 50.0])
    with pytest.raises(UnknownColumnError):
        pm.reorder_columns(["Mono"])


def test_whole_number_share_is_exact_and_kept_at_threshold():
    m = build_contingency(["a"] * 100, ["x"] * 29 + ["y"] * 71)
    pm = normalize_rows(m)
    assert pm.values[0, 0] == 29.0
    out = select_and_collapse_columns(pm, 29.0)
    assert out.col_labels == ("x", "y", "other")
    assert out.collapsed == ()
