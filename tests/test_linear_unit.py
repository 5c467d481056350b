"""Tests for complex arithmetic and Gaussian elimination."""

import copy

import numpy as np
import pytest

from solver import config
from solver.errors import SingularMatrixError, SystemShapeError
from solver.linear import (
    augment,
    back_substitute,
    c_abs,
    c_abs2,
    c_add,
    c_div,
    c_mul,
    c_sub,
    forward_eliminate,
    solve_system,
)
from solver.types import ComplexValue


def _cv(z) -> ComplexValue:
    return ComplexValue.from_complex(z)


def _matrix(rows) -> list[list[ComplexValue]]:
    return [[_cv(z) for z in row] for row in rows]


def _vector(values) -> list[ComplexValue]:
    return [_cv(z) for z in values]


def _residual(rows, rhs, x) -> float:
    a = np.array(rows, dtype=complex)
    b = np.array(rhs, dtype=complex)
    xs = np.array([complex(v) for v in x])
    return float(np.max(np.abs(a @ xs - b)))


# ── Complex arithmetic ───────────────────────────────────────────────────

class TestArithmetic:
    def test_mul(self):
        assert c_mul(_cv(1 + 2j), _cv(3 + 4j)) == ComplexValue(-5.0, 10.0)

    def test_div(self):
        assert c_div(_cv(-5 + 10j), _cv(3 + 4j)) == ComplexValue(1.0, 2.0)

    def test_add_and_sub(self):
        assert c_add(_cv(1 + 2j), _cv(3 - 1j)) == ComplexValue(4.0, 1.0)
        assert c_sub(_cv(1 + 2j), _cv(3 - 1j)) == ComplexValue(-2.0, 3.0)

    def test_abs(self):
        assert c_abs(_cv(3 + 4j)) == 5.0
        assert c_abs2(_cv(3 + 4j)) == 25.0

    def test_div_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            c_div(_cv(1 + 1j), ComplexValue(0.0, 0.0))

    def test_operations_return_new_values(self):
        a = _cv(1 + 1j)
        b = _cv(2 + 0j)
        result = c_mul(a, b)
        assert result is not a and result is not b
        assert a == ComplexValue(1.0, 1.0)


# ── Solving ──────────────────────────────────────────────────────────────

class TestSolveSystem:
    def test_identity_returns_rhs(self):
        rhs = [1 + 2j, -3j, 4.5]
        x = solve_system(_matrix(np.eye(3)), _vector(rhs))
        for got, want in zip(x, rhs):
            assert complex(got) == pytest.approx(want)

    def test_concrete_two_by_two(self):
        rows = [[2 + 1j, -1], [-1, 2]]
        rhs = [1, 1j]
        x = solve_system(_matrix(rows), _vector(rhs))
        assert len(x) == 2
        assert all(np.isfinite(complex(v)) for v in x)
        assert _residual(rows, rhs, x) < 1e-9

    def test_random_invertible_systems(self):
        rng = np.random.default_rng(1234)
        for n in (1, 2, 5, 10):
            a = rng.normal(size=(n, n)) + 1j * rng.normal(size=(n, n)) + 3 * n * np.eye(n)
            b = rng.normal(size=n) + 1j * rng.normal(size=n)
            x = solve_system(_matrix(a), _vector(b))
            assert _residual(a, b, x) < 1e-6

    def test_matches_numpy(self):
        a = np.array([[1 + 1j, 2, 0], [0.5j, -1, 3], [4, 1 - 1j, 1]])
        b = np.array([1, 2j, -1])
        x = solve_system(_matrix(a), _vector(b))
        expected = np.linalg.solve(a, b)
        assert [complex(v) for v in x] == pytest.approx(list(expected))

    def test_single_unknown(self):
        x = solve_system([[ComplexValue(0.0, 2.0)]], [ComplexValue(4.0, 0.0)])
        assert complex(x[0]) == pytest.approx(-2j)

    def test_needs_row_swap(self):
        rows = [[0, 1], [1, 0]]
        rhs = [2, 3]
        x = solve_system(_matrix(rows), _vector(rhs))
        assert [complex(v) for v in x] == pytest.approx([3, 2])

    def test_inputs_are_not_mutated(self):
        matrix = _matrix([[0, 1], [2 + 1j, 3]])
        vector = _vector([1, 1j])
        matrix_before = copy.deepcopy(matrix)
        vector_before = copy.deepcopy(vector)
        solve_system(matrix, vector)
        assert matrix == matrix_before
        assert vector == vector_before

    def test_augment_is_an_independent_copy(self):
        matrix = _matrix([[1, 2], [3, 4]])
        vector = _vector([5, 6])
        aug = augment(matrix, vector)
        assert len(aug) == 2 and len(aug[0]) == 3
        assert aug[1][2] == vector[1]
        assert all(aug[i] is not matrix[i] for i in range(2))


class TestPivoting:
    def test_largest_magnitude_row_is_chosen(self):
        _, pivots = forward_eliminate(_matrix([[1, 2], [3, 4]]), _vector([1, 1]))
        assert pivots[0]["row"] == 1
        assert pivots[0]["magnitude"] == pytest.approx(3.0)

    def test_tie_keeps_earliest_row(self):
        _, pivots = forward_eliminate(_matrix([[1, 1], [-1, 2]]), _vector([1, 1]))
        assert pivots[0]["row"] == 0

    def test_tie_across_real_and_imaginary(self):
        rows = [[1j, 1, 0], [1, 2, 0], [-1j, 0, 1]]
        _, pivots = forward_eliminate(_matrix(rows), _vector([1, 1, 1]))
        assert pivots[0]["row"] == 0

    def test_near_tie_compares_true_magnitudes(self):
        # 1 + 2**-52 is one ulp above 1.0 but its square root rounds to 1.0.
        first = _cv(1)
        second = _cv(complex(1, 2**-26))
        assert c_abs2(second) > c_abs2(first)
        assert c_abs(second) == c_abs(first)

        matrix = [[first, _cv(0)], [second, _cv(1)]]
        _, pivots = forward_eliminate(matrix, _vector([1, 1]))
        assert pivots[0]["row"] == 0

    def test_back_substitute_on_triangular(self):
        aug = _matrix([[2, 1, 5], [0, 4, 8]])
        x = back_substitute(aug)
        assert [complex(v) for v in x] == pytest.approx([1.5, 2])


class TestSingularAndShape:
    def test_dependent_rows_are_singular(self):
        with pytest.raises(SingularMatrixError) as exc:
            solve_system(_matrix([[1, 1], [1, 1]]), _vector([1, 2]))
        assert exc.value.column == 1
        assert exc.value.code == "SINGULAR_MATRIX"
        assert "linearly dependent" in str(exc.value)

    def test_zero_one_by_one_is_singular(self):
        with pytest.raises(SingularMatrixError) as exc:
            solve_system(_matrix([[0]]), _vector([1]))
        assert exc.value.column == 0

    def test_threshold_uses_squared_magnitude(self):
        # |1e-6|² = 1e-12 is below the tolerance, |1e-4|² = 1e-8 is not.
        with pytest.raises(SingularMatrixError):
            solve_system(_matrix([[1e-6]]), _vector([1]))
        x = solve_system(_matrix([[1e-4]]), _vector([1]))
        assert x[0].re == pytest.approx(1e4)

    def test_empty_system_rejected(self):
        with pytest.raises(SystemShapeError):
            solve_system([], [])

    def test_oversized_system_rejected(self):
        n = config.MAX_SYSTEM_SIZE + 1
        with pytest.raises(SystemShapeError, match="between"):
            solve_system(_matrix(np.eye(n)), _vector([1] * n))

    def test_non_square_rejected(self):
        with pytest.raises(SystemShapeError, match="square"):
            solve_system(_matrix([[1, 2], [3]]), _vector([1, 2]))

    def test_vector_length_mismatch_rejected(self):
        with pytest.raises(SystemShapeError, match="Vector"):
            solve_system(_matrix([[1, 0], [0, 1]]), _vector([1]))
