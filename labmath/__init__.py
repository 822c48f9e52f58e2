"""Generic matrix engine: container, determinant, Gauss-Jordan inversion and linear systems."""

import logging

from .errors import (
    MatrixError,
    DimensionError,
    ValueCountMismatchError,
    DimensionMismatchError,
    NotSquareError,
    NotAugmentedError,
    IndexOutOfRangeError,
    ArgumentCountMismatchError,
    MissingVariableNamesError,
    UnsupportedScalarTypeError,
)
from .scalars import ScalarType, ScalarConverter
from .arithmetic import arithmetic_for, add_scalars, subtract_scalars, multiply_scalars
from .roundoff import round_error
from .matrix import Matrix, MAX_DIMENSION
from .linalg import LinearSystemError, InfiniteSolutionsError, invert, solve
from .config import LinearSystem, load_system_from_json

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "MatrixError",
    "DimensionError",
    "ValueCountMismatchError",
    "DimensionMismatchError",
    "NotSquareError",
    "NotAugmentedError",
    "IndexOutOfRangeError",
    "ArgumentCountMismatchError",
    "MissingVariableNamesError",
    "UnsupportedScalarTypeError",
    "ScalarType",
    "ScalarConverter",
    "arithmetic_for",
    "add_scalars",
    "subtract_scalars",
    "multiply_scalars",
    "round_error",
    "Matrix",
    "MAX_DIMENSION",
    "LinearSystemError",
    "InfiniteSolutionsError",
    "invert",
    "solve",
    "LinearSystem",
    "load_system_from_json",
]
