from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional, Tuple

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def rref(
    matrix: npt.ArrayLike,
    n_unknowns: Optional[int] = None,
    tolerance: float = 1e-12,
) -> Tuple[npt.NDArray[np.float64], Dict[int, int]]:
    """
    Reduce a matrix to reduced row-echelon form by Gauss-Jordan elimination.

    For each column in turn the remaining row with the largest magnitude in that
    column is swapped up as pivot, normalized to 1, and the column is eliminated
    from every other row, above and below. Columns whose remaining entries are
    all below the zero threshold get no pivot.

    Args:
        matrix: Coefficient matrix, usually augmented with a right-hand side column.
        n_unknowns: Number of leading columns eligible as pivots. Defaults to all
            columns; pass `n_cols - 1` for an augmented system.
        tolerance: Entries smaller than `tolerance * max(1, max|a_ij|)` count as zero.

    Returns:
        A tuple containing the reduced matrix (a copy) and a mapping from each
        pivot column to its row.
    """
    a = np.array(matrix, dtype=np.float64, copy=True)
    if a.ndim != 2:
        raise ValueError(f"Expected a 2D matrix, got shape {a.shape}.")

    n_rows, n_cols = a.shape
    if n_unknowns is None:
        n_unknowns = n_cols
    pivots: Dict[int, int] = {}
    if n_rows == 0 or a.size == 0:
        return a, pivots

    threshold = tolerance * max(1.0, float(np.max(np.abs(a))))

    row = 0
    for lead in range(n_unknowns):
        if row >= n_rows:
            break

        pivot = row + int(np.argmax(np.abs(a[row:, lead])))
        if abs(a[pivot, lead]) <= threshold:
            a[row:, lead] = 0.0
            continue
        if pivot != row:
            a[[row, pivot]] = a[[pivot, row]]

        a[row] /= a[row, lead]
        others = np.arange(n_rows) != row
        a[others] -= np.outer(a[others, lead], a[row])
        a[others, lead] = 0.0

        pivots[lead] = row
        row += 1

    a[np.abs(a) <= threshold] = 0.0
    return a, pivots
