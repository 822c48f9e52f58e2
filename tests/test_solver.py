from fractions import Fraction

import numpy as np
import pytest

from labmath import InfiniteSolutionsError, LinearSystemError, Matrix, round_error, solve
from labmath.errors import DimensionMismatchError, MissingVariableNamesError
from labmath.examples import (
    augmentation_example,
    dependent_system_example,
    independent_system_example,
)


def test_unique_solution():
    coefficients = Matrix.from_rows([[2, 1], [1, -1]])
    solution = solve(coefficients, [5, 1], ["x", "y"])
    assert list(solution) == ["x", "y"]
    assert solution["x"] == pytest.approx(2.0)
    assert solution["y"] == pytest.approx(1.0)
    assert isinstance(solution["x"], np.float64)


def test_infinite_solutions_raise():
    coefficients = Matrix.from_rows([[1, 1], [2, 2]])
    with pytest.raises(InfiniteSolutionsError):
        solve(coefficients, [2, 4], ["x", "y"])


def test_infinite_solutions_is_a_linear_system_error():
    assert issubclass(InfiniteSolutionsError, LinearSystemError)


def test_inconsistent_system_returns_none():
    coefficients = Matrix.from_rows([[1, 1], [2, 2]])
    assert solve(coefficients, [2, 5], ["x", "y"]) is None
    assert solve(Matrix.from_rows([[1, 1], [1, 1]]), [1, 2], ["x", "y"]) is None


def test_reference_systems():
    solution = augmentation_example().solve()
    assert solution == pytest.approx({"x": 3.0, "y": -1.0, "z": 4.0})

    solution = independent_system_example().solve()
    assert solution == pytest.approx({"x": 4.0, "y": 7.0, "z": -2.0})

    with pytest.raises(InfiniteSolutionsError):
        dependent_system_example().solve()


def test_constants_as_matrix():
    coefficients = Matrix.from_rows([[2, 1], [1, -1]])
    constants = Matrix(2, 1, [5, 1])
    assert solve(coefficients, constants, ["a", "b"]) == pytest.approx({"a": 2.0, "b": 1.0})


def test_float_constants_are_not_truncated():
    coefficients = Matrix.from_rows([[2, 0], [0, 2]])
    solution = solve(coefficients, [1.0, 3.0], ["x", "y"])
    assert solution == pytest.approx({"x": 0.5, "y": 1.5})


def test_fraction_system_stays_exact():
    coefficients = Matrix.from_rows([[Fraction(2), Fraction(1)], [Fraction(1), Fraction(-1)]])
    solution = solve(coefficients, [Fraction(5), Fraction(1)], ["x", "y"])
    assert solution == {"x": Fraction(2), "y": Fraction(1)}
    assert isinstance(solution["x"], Fraction)


def test_rounder_is_applied():
    solution = solve(Matrix(1, 1, [3]), [1], ["x"], rounder=round_error)
    assert solution["x"] == round(1 / 3, 13)


def test_overdetermined_consistent_system():
    coefficients = Matrix.from_rows([[1, 1], [1, -1], [2, 1]])
    assert solve(coefficients, [3, 1, 5], ["x", "y"]) == pytest.approx({"x": 2.0, "y": 1.0})


def test_overdetermined_inconsistent_system():
    coefficients = Matrix.from_rows([[1, 1], [1, -1], [2, 1]])
    assert solve(coefficients, [3, 1, 6], ["x", "y"]) is None


def test_elimination_swaps_zero_pivot():
    coefficients = Matrix.from_rows([[0, 1], [1, 0], [1, 1]])
    assert solve(coefficients, [2, 3, 5], ["x", "y"]) == pytest.approx({"x": 3.0, "y": 2.0})


def test_underdetermined_system_has_infinite_solutions():
    with pytest.raises(InfiniteSolutionsError):
        solve(Matrix.from_rows([[1, 1, 1]]), [3], ["x", "y", "z"])


def test_variable_names_are_required():
    coefficients = Matrix.from_rows([[2, 1], [1, -1]])
    with pytest.raises(MissingVariableNamesError):
        solve(coefficients, [5, 1], ["x"])


def test_constants_shape_is_checked():
    coefficients = Matrix.from_rows([[2, 1], [1, -1]])
    with pytest.raises(DimensionMismatchError):
        solve(coefficients, [5, 1, 0], ["x", "y"])
    with pytest.raises(DimensionMismatchError):
        solve(coefficients, Matrix(2, 2), ["x", "y"])
    with pytest.raises(DimensionMismatchError):
        solve(coefficients, [], ["x", "y"])


def test_inputs_are_not_modified():
    coefficients = Matrix.from_rows([[1, 1], [1, -1], [2, 1]])
    solve(coefficients, [3, 1, 5], ["x", "y"])
    assert coefficients.to_rows() == [[1, 1], [1, -1], [2, 1]]


def test_integer_overflow_is_solved_with_fractions():
    # det = -1, but a * d alone exceeds int64
    coefficients = Matrix.from_rows([[4_000_000_001, 4_000_000_000], [4_000_000_000, 3_999_999_999]])
    solution = solve(coefficients, [1, 1], ["x", "y"])
    assert solution == {"x": 1.0, "y": -1.0}
    assert isinstance(solution["x"], np.float64)


def test_float_overflow_is_solved_with_fractions():
    coefficients = Matrix.from_rows([[1e200, 0.0], [0.0, 1e200]])
    solution = solve(coefficients, [2e200, 3e200], ["x", "y"])
    assert solution == pytest.approx({"x": 2.0, "y": 3.0})
