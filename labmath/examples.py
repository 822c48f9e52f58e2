"""Reference exercises from a first linear algebra course."""
from __future__ import annotations

from typing import Tuple

from .config import LinearSystem
from .matrix import Matrix
from .scalars import ScalarType

SHORT = ScalarType.INT16


def scaled_sum_example() -> Tuple[Matrix, Matrix]:
    """Return the two 3x3 operands of exercise 80, computed as ``3 * a + b``."""

    a = Matrix(3, 3, [2, -1, 5, -3, 4, 7, 1, -1, 0], scalar_type=SHORT)
    b = Matrix(3, 3, [1, 4, 0, -3, 6, -5, 1, 0, -1], scalar_type=SHORT)
    return a, b


def product_pair_example() -> Tuple[Matrix, Matrix]:
    """Return a 2x2 and a 2x3 matrix (exercise 81); only ``a * b`` is defined."""

    a = Matrix(2, 2, [1, 3, -2, 1], scalar_type=SHORT)
    b = Matrix(2, 3, [1, 2, 1, -3, 4, -5], scalar_type=SHORT)
    return a, b


def sum_and_product_example() -> Tuple[Matrix, Matrix]:
    m = Matrix(3, 3, [4, 3, 5, -3, -7, 1, 8, 0, 0], scalar_type=SHORT)
    n = Matrix(3, 3, [4, 5, 1, 0, 1, -4, 6, 2, -1], scalar_type=SHORT)
    return m, n


def augmentation_example() -> LinearSystem:
    """Exercise 88: a 3x3 system with a unique solution (x=3, y=-1, z=4)."""

    return LinearSystem(
        coefficients=Matrix(3, 3, [2, 1, -1, 3, -3, 1, 1, -2, 1], scalar_type=SHORT),
        constants=Matrix(3, 1, [1, 16, 9], scalar_type=SHORT),
        variable_names=["x", "y", "z"],
        label="Exercise 88",
    )


def determinant_example() -> Matrix:
    """Exercise 89: det = -2."""

    return Matrix(2, 2, [3, 7, 2, 4], scalar_type=SHORT)


def dependent_system_example() -> LinearSystem:
    """Test 2, question 7a: the third equation is a combination of the first two."""

    return LinearSystem(
        coefficients=Matrix(3, 3, [3, -1, -2, 2, 6, -9, 1, -7, 7], scalar_type=SHORT),
        constants=Matrix(3, 1, [19, 68, -49], scalar_type=SHORT),
        variable_names=["x", "y", "z"],
        label="Test 2 7a",
    )


def independent_system_example() -> LinearSystem:
    """Test 2, question 7b: unique solution (x=4, y=7, z=-2)."""

    return LinearSystem(
        coefficients=Matrix(3, 3, [3, -1, -2, 2, 6, -9, -12, 6, 7], scalar_type=SHORT),
        constants=Matrix(3, 1, [9, 68, -20], scalar_type=SHORT),
        variable_names=["x", "y", "z"],
        label="Test 2 7b",
    )


def inversion_chain_example() -> Tuple[Matrix, Matrix, Matrix, Matrix]:
    """Test 2, question 8: matrices A, B, C (1x3) and D (3x1).

    ``A`` has determinant -10 and ``A^-1 * D`` is ``(3, -4, 9)``.
    """

    a = Matrix(3, 3, [1, 3, 4, -3, 5, 7, 4, 0, -1], scalar_type=SHORT)
    b = Matrix(3, 3, [7, -4, 3, 2, -7, -5, -5, 2, 4], scalar_type=SHORT)
    c = Matrix(1, 3, [1, 2, 4], scalar_type=SHORT)
    d = Matrix(3, 1, [27, 34, 3], scalar_type=SHORT)
    return a, b, c, d


def manual_inversion(a: Matrix) -> Matrix:
    """Reduce ``[a | I]`` by hand with the line commands of question 8e.

    Only meaningful for the ``A`` of :func:`inversion_chain_example`; the
    result is diagonal on the left with pivots 70, 70 and -5.
    """

    work = a.augment_with_identity()
    work.run_command(1, 3, 1, None)
    work.run_command(2, -4, None, 1)
    work.run_command(2, None, 6, 7)
    work.run_command(0, 5, None, 4)
    work.run_command(1, None, 5, 19)
    work.run_command(0, 14, -3, None)
    return work


__all__ = [
    "scaled_sum_example",
    "product_pair_example",
    "sum_and_product_example",
    "augmentation_example",
    "determinant_example",
    "dependent_system_example",
    "independent_system_example",
    "inversion_chain_example",
    "manual_inversion",
]
