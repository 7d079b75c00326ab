"""Dense linear solver for the nodal equations.

Gaussian elimination with partial pivoting. A pivot smaller than
``pivot_tolerance`` marks the system singular; the solver then returns an
all-zero solution flagged ``singular`` instead of raising, and the caller
decides how to report it.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

PIVOT_TOLERANCE = 1e-8


@dataclass
class LinearSolution:
    """Solution vector plus the singularity flag."""
    x: np.ndarray
    singular: bool = False


def gaussian_solve(
    a: np.ndarray,
    b: np.ndarray,
    pivot_tolerance: float = PIVOT_TOLERANCE,
) -> LinearSolution:
    """Solve ``a @ x = b``.

    Algorithm:
    1. For each column, swap the row with the largest |value| at or below
       the diagonal into the pivot position (matrix row and rhs entry)
    2. If that pivot is below tolerance, stop: singular
    3. Eliminate the column below the pivot
    4. Back-substitute from the last row up

    The inputs are copied, never modified.
    """
    m = np.array(a, dtype=float)
    rhs = np.array(b, dtype=float)
    n = m.shape[0]

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(m[col:, col])))
        if pivot_row != col:
            m[[col, pivot_row]] = m[[pivot_row, col]]
            rhs[[col, pivot_row]] = rhs[[pivot_row, col]]

        if abs(m[col, col]) < pivot_tolerance:
            return LinearSolution(x=np.zeros(n), singular=True)

        if col + 1 < n:
            factors = m[col + 1:, col] / m[col, col]
            m[col + 1:, col:] -= np.outer(factors, m[col, col:])
            rhs[col + 1:] -= factors * rhs[col]

    x = np.zeros(n)
    for row in range(n - 1, -1, -1):
        x[row] = (rhs[row] - m[row, row + 1:] @ x[row + 1:]) / m[row, row]

    return LinearSolution(x=x, singular=False)


def with_ground(solution: LinearSolution, n_nodes: int) -> np.ndarray:
    """Full node-voltage vector: ground (0 V) followed by the solved nodes."""
    if n_nodes <= 1:
        return np.zeros(n_nodes)
    return np.concatenate(([0.0], solution.x[: n_nodes - 1]))
