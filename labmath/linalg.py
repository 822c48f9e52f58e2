"""Gauss-Jordan inversion and linear system solving on :class:`~labmath.matrix.Matrix`.

Elimination runs in the matrix's own scalar type with fraction-free line
combinations (``pivot * line - entry * pivot_line``), so integer, decimal and
fraction matrices are reduced without rounding.  Only the final scaling of
each line by its pivot, and the check of the result, happen in the floating
phase type (FLOAT64 for everything but fractions).  A numpy overflow during
the exact work switches the computation to fractions.
"""
from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
import logging
import math
import numbers
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .arithmetic import arithmetic_for
from .errors import (
    DimensionMismatchError,
    MatrixError,
    MissingVariableNamesError,
    NotSquareError,
)
from .matrix import Matrix
from .scalars import ScalarConverter, ScalarType

logger = logging.getLogger(__name__)

# Largest distance from the identity accepted when verifying an inverse.
VERIFY_TOLERANCE = 1e-6

Rounder = Callable[[Any], Any]
Constants = Union[Matrix, Sequence[Any]]


class LinearSystemError(MatrixError, RuntimeError):
    """Raised when a linear system cannot be solved by this engine."""


class InfiniteSolutionsError(LinearSystemError):
    """Raised for consistent systems with fewer independent equations than unknowns."""


def floating_phase_type(scalar_type: ScalarType) -> ScalarType:
    """Type used to scale pivots and divide determinants for ``scalar_type``."""
    if scalar_type is ScalarType.FRACTION:
        return ScalarType.FRACTION
    return ScalarType.FLOAT64


def eliminate_lower_left(work: Matrix, columns: Optional[int] = None) -> List[Tuple[int, int]]:
    """Zero the entries under the pivots of ``work`` in place.

    ``columns`` limits the pass to the coefficient block (defaults to the
    augmented column, or every column).  A zero pivot is replaced by the first
    lower line holding a nonzero entry in that column; a column without any is
    skipped.  Returns the ``(line, column)`` position of every pivot found.
    """

    if columns is None:
        columns = work.augmented_column if work.is_augmented else work.columns
    arithmetic = arithmetic_for(work.scalar_type)
    lines = work.lines
    pivots: List[Tuple[int, int]] = []
    line = 0
    for column in range(columns):
        if line >= lines:
            break
        if arithmetic.is_zero(work[line, column]):
            candidate = next(
                (l for l in range(line + 1, lines) if not arithmetic.is_zero(work[l, column])),
                None,
            )
            if candidate is None:
                continue
            work.swap_lines(line, candidate)
        pivot = work[line, column]
        for l in range(line + 1, lines):
            entry = work[l, column]
            if not arithmetic.is_zero(entry):
                work.combine_lines(l, ((l, pivot), (line, arithmetic.negate(entry))))
        pivots.append((line, column))
        line += 1
    return pivots


def eliminate_upper_right(work: Matrix, size: int) -> None:
    """Zero the entries above the diagonal of the leading ``size`` x ``size`` block."""

    arithmetic = arithmetic_for(work.scalar_type)
    for column in range(size - 1, 0, -1):
        pivot = work[column, column]
        for l in range(column - 1, -1, -1):
            entry = work[l, column]
            if not arithmetic.is_zero(entry):
                work.combine_lines(l, ((l, pivot), (column, arithmetic.negate(entry))))


def _is_finite(value: Any) -> bool:
    if isinstance(value, Fraction) or isinstance(value, numbers.Integral):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def _all_finite(matrix: Matrix) -> bool:
    return all(_is_finite(value) for value in matrix.values)


def _is_identity(block: Matrix, tolerance: float) -> bool:
    for (i, j), value in _cells(block):
        expected = 1.0 if i == j else 0.0
        # written so that NaN fails the check
        if not abs(float(value) - expected) <= tolerance:
            return False
    return True


def _cells(matrix: Matrix):
    columns = matrix.columns
    for index, value in enumerate(matrix.values):
        yield divmod(index, columns), value


def _reduce_exact(work: Matrix, size: int) -> int:
    """Run both elimination passes on ``[A | I]``; returns the pivot count.

    numpy overflow and invalid operations raise ``FloatingPointError`` here
    instead of wrapping around or producing ``inf``.
    """

    with np.errstate(over="raise", invalid="raise"):
        pivots = eliminate_lower_left(work, size)
        if len(pivots) == size:
            eliminate_upper_right(work, size)
    return len(pivots)


def invert(
    matrix: Matrix,
    *,
    rounder: Optional[Rounder] = None,
    tolerance: float = VERIFY_TOLERANCE,
) -> Optional[Matrix]:
    """Return the inverse of ``matrix`` by Gauss-Jordan elimination, or ``None``.

    ``None`` means the matrix is singular (or its inverse could not be
    verified); it is an expected outcome, not an error.  The inverse is cast
    back to the scalar type of ``matrix``; an optional ``rounder`` is applied
    to the normalized working matrix before verification.

    When the exact elimination overflows the matrix's own type, the whole
    computation is redone with fractions.
    """

    if not matrix.is_square:
        raise NotSquareError(
            f"Only square matrices can be inverted, this one is {matrix.lines}x{matrix.columns}."
        )
    size = matrix.lines
    if not _all_finite(matrix):
        logger.debug("Matrix %dx%d holds non-finite values", size, size)
        return None

    phase = floating_phase_type(matrix.scalar_type)
    work = matrix.augment_with_identity()
    try:
        pivots = _reduce_exact(work, size)
    except FloatingPointError:
        logger.debug("Elimination overflowed %s, retrying with fractions", matrix.scalar_type.value)
        phase = ScalarType.FRACTION
        work = matrix.cast(ScalarType.FRACTION).augment_with_identity()
        pivots = _reduce_exact(work, size)
    if pivots < size:
        logger.debug("Matrix %dx%d is singular: %d pivots found", size, size, pivots)
        return None

    normalized = work.cast(phase)
    for line in range(size):
        diagonal = normalized[line, line]
        normalized.combine_lines(line, ((line, 1 / diagonal),))
    if rounder is not None:
        normalized.round_errors(rounder)

    inverse = normalized.right()
    if not _is_identity(normalized.left(), tolerance) or not _all_finite(inverse):
        logger.debug("Inverse of %dx%d matrix failed verification", size, size)
        return None
    try:
        return inverse.cast(matrix.scalar_type)
    except OverflowError:
        logger.debug("Inverse of %dx%d matrix does not fit %s", size, size, matrix.scalar_type.value)
        return None


def _constants_matrix(constants: Constants, lines: int) -> Matrix:
    if isinstance(constants, Matrix):
        if constants.columns != 1:
            raise DimensionMismatchError(
                f"The constants must form a single column, got {constants.lines}x{constants.columns}."
            )
        column = constants
    else:
        values = list(constants)
        if not values:
            raise DimensionMismatchError("At least one constant is required.")
        column = Matrix(len(values), 1, values)
    if column.lines != lines:
        raise DimensionMismatchError(
            f"The system has {lines} equations but {column.lines} constants."
        )
    return column


def _finish(value: Any, rounder: Optional[Rounder]) -> Any:
    return rounder(value) if rounder is not None else value


def _solve_cramer(coefficients: Matrix, constants: Matrix) -> Optional[List[Any]]:
    determinant = coefficients.determinant()
    if arithmetic_for(coefficients.scalar_type).is_zero(determinant):
        logger.debug("Cramer's rule not applicable: the determinant is zero")
        return None
    phase = floating_phase_type(coefficients.scalar_type)
    divide = arithmetic_for(phase).divide
    denominator = ScalarConverter.convert(determinant, phase)
    found: List[Any] = []
    for k in range(coefficients.columns):
        replaced = coefficients.clone()
        for line in range(coefficients.lines):
            replaced[line, k] = constants[line, 0]
        numerator = ScalarConverter.convert(replaced.determinant(), phase)
        found.append(divide(numerator, denominator))
    return found


def _solve_diagonal(coefficients: Matrix, constants: Matrix) -> Optional[List[Any]]:
    work = coefficients.augment(constants)
    unknowns = coefficients.columns
    pivots = eliminate_lower_left(work, unknowns)

    arithmetic = arithmetic_for(work.scalar_type)
    for line in range(work.lines):
        if all(arithmetic.is_zero(work[line, j]) for j in range(unknowns)):
            if not arithmetic.is_zero(work[line, unknowns]):
                logger.debug("Linear system has no solution: line %d reads 0 = %s", line, work[line, unknowns])
                return None
    if len(pivots) < unknowns:
        logger.debug("Linear system has %d independent equations for %d unknowns", len(pivots), unknowns)
        raise InfiniteSolutionsError(
            f"The system has infinitely many solutions ({len(pivots)} independent equations "
            f"for {unknowns} unknowns); such systems are not solved."
        )

    # Every column has its pivot on the diagonal once the rank is complete.
    phase = floating_phase_type(work.scalar_type)
    phase_arithmetic = arithmetic_for(phase)
    found: List[Any] = [None] * unknowns
    for variable in range(unknowns - 1, -1, -1):
        remainder = ScalarConverter.convert(work[variable, unknowns], phase)
        for solved in range(variable + 1, unknowns):
            term = phase_arithmetic.multiply(ScalarConverter.convert(work[variable, solved], phase), found[solved])
            remainder = phase_arithmetic.sub(remainder, term)
        pivot = ScalarConverter.convert(work[variable, variable], phase)
        found[variable] = phase_arithmetic.divide(remainder, pivot)
    return found


def _solve_values(coefficients: Matrix, constants: Matrix) -> Optional[List[Any]]:
    with np.errstate(over="raise", invalid="raise"):
        if coefficients.is_square:
            found = _solve_cramer(coefficients, constants)
            if found is not None:
                return found
        return _solve_diagonal(coefficients, constants)


def solve(
    coefficients: Matrix,
    constants: Constants,
    variable_names: Sequence[str],
    *,
    rounder: Optional[Rounder] = None,
) -> Optional[Dict[str, Any]]:
    """Solve ``coefficients x = constants`` and bind each value to its variable name.

    Square systems with a nonzero determinant are solved with Cramer's rule;
    the others by Gaussian elimination and back-substitution.  Returns the
    ``{name: value}`` mapping, ``None`` when the system has no solution, and
    raises :class:`InfiniteSolutionsError` when it has infinitely many.

    Values are in the floating phase type of the system.  When the exact work
    overflows a numpy type, the system is solved again with fractions.
    """

    names = list(variable_names)
    if len(names) != coefficients.columns:
        raise MissingVariableNamesError(
            f"{coefficients.columns} variable names are required, got {len(names)}."
        )
    column = _constants_matrix(constants, coefficients.lines)
    if column.scalar_type.rank > coefficients.scalar_type.rank:
        coefficients = coefficients.cast(column.scalar_type)
    elif column.scalar_type is not coefficients.scalar_type:
        column = column.cast(coefficients.scalar_type)

    phase = floating_phase_type(coefficients.scalar_type)
    try:
        found = _solve_values(coefficients, column)
    except FloatingPointError:
        logger.debug("Solving overflowed %s, retrying with fractions", coefficients.scalar_type.value)
        found = _solve_values(coefficients.cast(ScalarType.FRACTION), column.cast(ScalarType.FRACTION))
    if found is None:
        return None
    return {
        name: _finish(ScalarConverter.convert(value, phase), rounder)
        for name, value in zip(names, found)
    }


__all__ = [
    "VERIFY_TOLERANCE",
    "LinearSystemError",
    "InfiniteSolutionsError",
    "floating_phase_type",
    "eliminate_lower_left",
    "eliminate_upper_right",
    "invert",
    "solve",
]
