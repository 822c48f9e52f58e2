"""Exceptions raised by the matrix engine."""


class MatrixError(Exception):
    """Base class of every error raised for malformed matrix input."""


class DimensionError(MatrixError, ValueError):
    """Raised when a matrix would be built with invalid dimensions."""


class ValueCountMismatchError(MatrixError, ValueError):
    """Raised when an initializer does not hold exactly ``lines * columns`` values."""


class DimensionMismatchError(MatrixError, ValueError):
    """Raised when the shapes of two operands are incompatible."""


class NotSquareError(DimensionMismatchError):
    """Raised when an operation requires a square matrix."""


class NotAugmentedError(MatrixError, ValueError):
    """Raised when a matrix without an augmented boundary is split."""


class IndexOutOfRangeError(MatrixError, IndexError):
    """Raised when a line or column index is beyond the matrix bounds."""


class ArgumentCountMismatchError(MatrixError, ValueError):
    """Raised when a line command does not list one coefficient per line."""


class MissingVariableNamesError(MatrixError, ValueError):
    """Raised when a linear system does not name every unknown."""


class UnsupportedScalarTypeError(MatrixError, TypeError):
    """Raised when a value type does not support the matrix arithmetic."""


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
]
