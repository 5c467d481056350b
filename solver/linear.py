"""Dense complex linear system solver.

Gaussian elimination with partial pivoting on an augmented ``n × (n+1)``
working copy, followed by back substitution.  Complex numbers are handled as
:class:`~solver.types.ComplexValue` pairs with the arithmetic below.
"""

import math

from solver import config
from solver.errors import SingularMatrixError, SystemShapeError
from solver.types import ComplexValue

ZERO = ComplexValue(0.0, 0.0)


# ── Complex arithmetic ───────────────────────────────────────────────────

def c_add(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    return ComplexValue(a.re + b.re, a.im + b.im)


def c_sub(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    return ComplexValue(a.re - b.re, a.im - b.im)


def c_mul(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    return ComplexValue(a.re * b.re - a.im * b.im, a.re * b.im + a.im * b.re)


def c_div(a: ComplexValue, b: ComplexValue) -> ComplexValue:
    """Divide *a* by *b*.

    Raises ZeroDivisionError when *b* is exactly zero, so no NaN ever leaves
    this function.
    """
    d = b.re * b.re + b.im * b.im
    if d == 0:
        raise ZeroDivisionError("complex division by zero")
    return ComplexValue((a.re * b.re + a.im * b.im) / d, (a.im * b.re - a.re * b.im) / d)


def c_abs2(c: ComplexValue) -> float:
    """Squared magnitude ``re² + im²``."""
    return c.re * c.re + c.im * c.im


def c_abs(c: ComplexValue) -> float:
    return math.sqrt(c_abs2(c))


# ── Elimination ──────────────────────────────────────────────────────────

def _check_shape(matrix, vector) -> int:
    n = len(matrix)
    if not config.MIN_SYSTEM_SIZE <= n <= config.MAX_SYSTEM_SIZE:
        raise SystemShapeError(
            f"System size must be between {config.MIN_SYSTEM_SIZE} and "
            f"{config.MAX_SYSTEM_SIZE}, got {n}."
        )
    for r, row in enumerate(matrix):
        if len(row) != n:
            raise SystemShapeError(
                f"Matrix must be square: row {r + 1} has {len(row)} entries, expected {n}."
            )
    if len(vector) != n:
        raise SystemShapeError(
            f"Vector must have {n} entries to match the matrix, got {len(vector)}."
        )
    return n


def augment(matrix, vector) -> list[list[ComplexValue]]:
    """Return a fresh ``n × (n+1)`` matrix ``[A | b]``.

    The rows are new lists, so elimination never touches the caller's data.
    """
    n = _check_shape(matrix, vector)
    return [
        [ComplexValue(c.re, c.im) for c in matrix[i]] + [ComplexValue(vector[i].re, vector[i].im)]
        for i in range(n)
    ]


def forward_eliminate(matrix, vector):
    """Reduce ``[A | b]`` to upper-triangular form.

    Returns ``(aug, pivots)`` where *aug* is the reduced augmented matrix and
    *pivots* holds one dict per column: ``column``, the source ``row`` that
    was swapped in, and the pivot ``magnitude``.

    Raises SingularMatrixError when a pivot's squared magnitude is below
    ``config.PIVOT_TOLERANCE``.
    """
    aug = augment(matrix, vector)
    n = len(aug)
    pivots = []

    for i in range(n):
        # Strict '>' keeps the earliest row when magnitudes tie.
        max_row = i
        for k in range(i + 1, n):
            if c_abs(aug[k][i]) > c_abs(aug[max_row][i]):
                max_row = k
        aug[i], aug[max_row] = aug[max_row], aug[i]

        pivot = aug[i][i]
        if c_abs2(pivot) < config.PIVOT_TOLERANCE:
            raise SingularMatrixError(column=i)
        pivots.append({"column": i, "row": max_row, "magnitude": c_abs(pivot)})

        for k in range(i + 1, n):
            factor = c_div(aug[k][i], pivot)
            for j in range(i, n + 1):
                aug[k][j] = c_sub(aug[k][j], c_mul(factor, aug[i][j]))

    return aug, pivots


def back_substitute(aug) -> list[ComplexValue]:
    """Solve an upper-triangular augmented matrix from the last row up."""
    n = len(aug)
    x = [ZERO] * n
    for i in range(n - 1, -1, -1):
        acc = aug[i][n]
        for j in range(i + 1, n):
            acc = c_sub(acc, c_mul(aug[i][j], x[j]))
        x[i] = c_div(acc, aug[i][i])
    return x


def solve_system(matrix, vector) -> list[ComplexValue]:
    """Solve ``A·x = b`` for a square complex system of size 1 to 10.

    *matrix* is a list of rows of :class:`ComplexValue`, *vector* a list of
    :class:`ComplexValue`.  Neither is modified.

    Raises SystemShapeError for unsupported shapes and SingularMatrixError
    when the matrix has no unique solution.
    """
    aug, _ = forward_eliminate(matrix, vector)
    return back_substitute(aug)
