"""Fixed-size matrices of a single scalar type.

A :class:`Matrix` owns a dense row-major list of cells.  Its shape is fixed at
construction; cells change in place only through the indexer and the two
line primitives (:meth:`Matrix.swap_lines` and :meth:`Matrix.combine_lines`,
of which :meth:`Matrix.run_command` is the dense form).  Every other operation
returns a new, independent matrix.
"""
from __future__ import annotations

import logging
import operator
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .arithmetic import Arithmetic, arithmetic_for, scalar_multiplier
from .errors import (
    ArgumentCountMismatchError,
    DimensionError,
    DimensionMismatchError,
    IndexOutOfRangeError,
    NotAugmentedError,
    NotSquareError,
    ValueCountMismatchError,
)
from .roundoff import round_error
from .scalars import ScalarConverter, ScalarType

logger = logging.getLogger(__name__)

MAX_DIMENSION = 255

Terms = Union[Mapping[int, Any], Iterable[Tuple[int, Any]]]
Position = Tuple[int, int]


def _check_dimension(name: str, value: Any) -> int:
    try:
        size = operator.index(value)
    except TypeError:
        raise DimensionError(f"The number of {name} must be an integer, got {value!r}.") from None
    if size < 1:
        raise DimensionError(f"There must be at least one {name[:-1]} in the matrix.")
    if size > MAX_DIMENSION:
        raise DimensionError(
            f"A matrix cannot have more than {MAX_DIMENSION} {name}, {size} were requested."
        )
    return size


class Matrix:
    """A ``lines`` x ``columns`` grid of one scalar type.

    ``values`` is a flat, line by line initializer.  When it is omitted the
    matrix is filled with zeros of ``scalar_type``; when ``scalar_type`` is
    omitted it is inferred from the values (FLOAT64 for an empty matrix).

    ``augmented_column`` marks the first column of an appended block, such as
    the constants of a linear system or the identity block used for
    inversion.  It must lie strictly inside the matrix.
    """

    __hash__ = None  # cells are mutable
    # Let numpy scalars defer to __rmul__ instead of wrapping the matrix in an array.
    __array_ufunc__ = None

    def __init__(
        self,
        lines: int,
        columns: int,
        values: Optional[Iterable[Any]] = None,
        *,
        scalar_type: Optional[Union[ScalarType, str, type]] = None,
        augmented_column: Optional[int] = None,
    ) -> None:
        lines = _check_dimension("lines", lines)
        columns = _check_dimension("columns", columns)
        cells = list(values) if values is not None else []
        count = lines * columns
        if cells and len(cells) != count:
            raise ValueCountMismatchError(
                f"For this {lines}x{columns} matrix, {count} values are expected, got {len(cells)}."
            )
        resolved = ScalarType.parse(scalar_type) if scalar_type is not None else ScalarType.infer(cells)
        arithmetic = arithmetic_for(resolved)
        if cells:
            cells = [ScalarConverter.convert(value, resolved) for value in cells]
        else:
            cells = [arithmetic.zero] * count
        self._assign(lines, columns, resolved, arithmetic, cells, augmented_column)

    def _assign(
        self,
        lines: int,
        columns: int,
        scalar_type: ScalarType,
        arithmetic: Arithmetic,
        cells: List[Any],
        augmented_column: Optional[int],
    ) -> None:
        if augmented_column is not None:
            augmented_column = operator.index(augmented_column)
            if not 1 <= augmented_column < columns:
                raise DimensionError(
                    f"The augmented column must be between 1 and {columns - 1}, got {augmented_column}."
                )
        self._lines = lines
        self._columns = columns
        self._scalar_type = scalar_type
        self._arithmetic = arithmetic
        self._values = cells
        self._augmented_column = augmented_column

    @classmethod
    def _build(
        cls,
        lines: int,
        columns: int,
        scalar_type: ScalarType,
        cells: List[Any],
        augmented_column: Optional[int] = None,
    ) -> "Matrix":
        """Wrap already converted cells without copying or converting them again."""
        matrix = cls.__new__(cls)
        matrix._assign(
            _check_dimension("lines", lines),
            _check_dimension("columns", columns),
            scalar_type,
            arithmetic_for(scalar_type),
            cells,
            augmented_column,
        )
        return matrix

    @classmethod
    def from_rows(
        cls,
        rows: Sequence[Sequence[Any]],
        *,
        scalar_type: Optional[Union[ScalarType, str, type]] = None,
        augmented_column: Optional[int] = None,
    ) -> "Matrix":
        """Build a matrix from nested line lists."""
        if not rows:
            raise DimensionError("There must be at least one line in the matrix.")
        columns = len(rows[0])
        for index, row in enumerate(rows):
            if len(row) != columns:
                raise ValueCountMismatchError(
                    f"Line {index} has {len(row)} values while line 0 has {columns}."
                )
        flat = [value for row in rows for value in row]
        return cls(len(rows), columns, flat, scalar_type=scalar_type, augmented_column=augmented_column)

    @classmethod
    def identity(cls, size: int, scalar_type: Union[ScalarType, str, type] = ScalarType.INT64) -> "Matrix":
        matrix = cls(size, size, scalar_type=scalar_type)
        one = matrix._arithmetic.one
        for i in range(matrix._lines):
            matrix._values[i * matrix._columns + i] = one
        return matrix

    @classmethod
    def signature(cls, size: int, scalar_type: Union[ScalarType, str, type] = ScalarType.INT64) -> "Matrix":
        """Checkerboard of +1/-1 where cell (i, j) is +1 when ``i + j`` is even."""
        matrix = cls(size, size, scalar_type=scalar_type)
        plus, minus = matrix._arithmetic.one, matrix._arithmetic.minus_one
        matrix._values = [
            plus if (i + j) % 2 == 0 else minus
            for i in range(matrix._lines)
            for j in range(matrix._columns)
        ]
        return matrix

    @staticmethod
    def signature_of(i: int, j: int) -> int:
        return 1 if (i + j) % 2 == 0 else -1

    # ------------------------------------------------------------------
    # Shape and access
    # ------------------------------------------------------------------
    @property
    def lines(self) -> int:
        return self._lines

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def shape(self) -> Tuple[int, int]:
        return self._lines, self._columns

    @property
    def scalar_type(self) -> ScalarType:
        return self._scalar_type

    @property
    def augmented_column(self) -> Optional[int]:
        return self._augmented_column

    @property
    def is_augmented(self) -> bool:
        return self._augmented_column is not None

    @property
    def is_square(self) -> bool:
        return self._lines == self._columns

    @property
    def values(self) -> Tuple[Any, ...]:
        return tuple(self._values)

    def _check_line(self, line: Any, name: str = "line") -> int:
        try:
            index = operator.index(line)
        except TypeError:
            raise IndexOutOfRangeError(f"The {name} index must be an integer, got {line!r}.") from None
        if not 0 <= index < self._lines:
            raise IndexOutOfRangeError(
                f"The {name} index {index} is outside the {self._lines} lines of the matrix."
            )
        return index

    def _check_column(self, column: Any, name: str = "column") -> int:
        try:
            index = operator.index(column)
        except TypeError:
            raise IndexOutOfRangeError(f"The {name} index must be an integer, got {column!r}.") from None
        if not 0 <= index < self._columns:
            raise IndexOutOfRangeError(
                f"The {name} index {index} is outside the {self._columns} columns of the matrix."
            )
        return index

    def _offset(self, key: Any) -> int:
        if not isinstance(key, tuple) or len(key) != 2:
            raise IndexOutOfRangeError("Matrix cells are addressed by a (line, column) pair.")
        line = self._check_line(key[0])
        column = self._check_column(key[1])
        return line * self._columns + column

    def __getitem__(self, key: Position) -> Any:
        return self._values[self._offset(key)]

    def __setitem__(self, key: Position, value: Any) -> None:
        self._values[self._offset(key)] = ScalarConverter.convert(value, self._scalar_type)

    def row(self, line: int) -> List[Any]:
        start = self._check_line(line) * self._columns
        return self._values[start:start + self._columns]

    def column(self, column: int) -> List[Any]:
        index = self._check_column(column)
        return self._values[index::self._columns]

    def to_rows(self) -> List[List[Any]]:
        c = self._columns
        return [self._values[i * c:(i + 1) * c] for i in range(self._lines)]

    def find(self, value: Any) -> Optional[Position]:
        """Return the first (line, column) holding ``value``, scanning line by line."""
        for index, cell in enumerate(self._values):
            if cell == value:
                return divmod(index, self._columns)
        return None

    # ------------------------------------------------------------------
    # Copies and comparisons
    # ------------------------------------------------------------------
    def clone(self) -> "Matrix":
        return self._build(self._lines, self._columns, self._scalar_type, list(self._values), self._augmented_column)

    def cast(self, scalar_type: Union[ScalarType, str, type]) -> "Matrix":
        """Return a copy converted cell by cell to ``scalar_type``."""
        target = ScalarType.parse(scalar_type)
        cells = [ScalarConverter.convert(value, target) for value in self._values]
        return self._build(self._lines, self._columns, target, cells, self._augmented_column)

    def same_size(self, other: "Matrix") -> bool:
        return self._lines == other._lines and self._columns == other._columns

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        if not self.same_size(other) or self._augmented_column != other._augmented_column:
            return False
        return all(a == b for a, b in zip(self._values, other._values))

    def __repr__(self) -> str:
        cells = ", ".join(str(value) for value in self._values)
        suffix = f", augmented_column={self._augmented_column}" if self.is_augmented else ""
        return (
            f"Matrix({self._lines}, {self._columns}, [{cells}], "
            f"scalar_type={self._scalar_type.value!r}{suffix})"
        )

    def __str__(self) -> str:
        last = self._lines - 1
        rendered = []
        for i, row in enumerate(self.to_rows()):
            if self._lines == 1:
                opening, closing = "[", "]"
            elif i == 0:
                opening, closing = "/", "\\"
            elif i == last:
                opening, closing = "\\", "/"
            else:
                opening, closing = "|", "|"
            cells = []
            for j, value in enumerate(row):
                text = str(value)
                if j == self._augmented_column:
                    cells[-1] += "|"
                cells.append(text)
            rendered.append(opening + "\t".join(cells) + closing)
        return "\n".join(rendered) + f" {self._lines}x{self._columns} of {self._scalar_type.value}"

    # ------------------------------------------------------------------
    # Algebra
    # ------------------------------------------------------------------
    def _common_type(self, other: "Matrix") -> ScalarType:
        if other._scalar_type.rank > self._scalar_type.rank:
            return other._scalar_type
        return self._scalar_type

    def _cells_as(self, scalar_type: ScalarType) -> List[Any]:
        if scalar_type is self._scalar_type:
            return self._values
        return [ScalarConverter.convert(value, scalar_type) for value in self._values]

    def _elementwise(self, other: "Matrix", verb: str, pick: Callable[[Arithmetic], Callable]) -> "Matrix":
        if not self.same_size(other):
            raise DimensionMismatchError(
                f"To {verb} matrices, their dimensions must be identical. They are "
                f"{self._lines}x{self._columns} and {other._lines}x{other._columns}."
            )
        target = self._common_type(other)
        op = pick(arithmetic_for(target))
        cells = [op(a, b) for a, b in zip(self._cells_as(target), other._cells_as(target))]
        boundary = self._augmented_column if self._augmented_column == other._augmented_column else None
        return self._build(self._lines, self._columns, target, cells, boundary)

    def __add__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._elementwise(other, "add", lambda arithmetic: arithmetic.add)

    def __sub__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self._elementwise(other, "subtract", lambda arithmetic: arithmetic.sub)

    def multiply(self, k: Any) -> "Matrix":
        """Multiply every cell by the scalar ``k``; the result keeps this matrix's type."""
        mul = scalar_multiplier(ScalarType.of(k), self._scalar_type)
        cells = [mul(k, value) for value in self._values]
        return self._build(self._lines, self._columns, self._scalar_type, cells, self._augmented_column)

    def matmul(self, other: "Matrix") -> "Matrix":
        """Return the product ``self x other``; the operation is not commutative."""
        if self._columns != other._lines:
            raise DimensionMismatchError(
                f"Cannot multiply a {self._lines}x{self._columns} matrix with a "
                f"{other._lines}x{other._columns} matrix."
            )
        target = self._common_type(other)
        arithmetic = arithmetic_for(target)
        add, mul = arithmetic.add, arithmetic.multiply
        a, b = self._cells_as(target), other._cells_as(target)
        inner, width = self._columns, other._columns
        cells = []
        for i in range(self._lines):
            for j in range(width):
                total = arithmetic.zero
                for x in range(inner):
                    total = add(total, mul(a[i * inner + x], b[x * width + j]))
                cells.append(total)
        return self._build(self._lines, width, target, cells)

    def __mul__(self, other: Any) -> "Matrix":
        if isinstance(other, Matrix):
            return self.matmul(other)
        return self.multiply(other)

    def __rmul__(self, k: Any) -> "Matrix":
        return self.multiply(k)

    def __matmul__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.matmul(other)

    def __truediv__(self, k: Any) -> "Matrix":
        if isinstance(k, Matrix):
            return NotImplemented
        arithmetic = self._arithmetic
        divisor = arithmetic.convert(k)
        cells = [arithmetic.divide(value, divisor) for value in self._values]
        return self._build(self._lines, self._columns, self._scalar_type, cells, self._augmented_column)

    def __neg__(self) -> "Matrix":
        return self.multiply(-1)

    def augment(self, values: "Matrix") -> "Matrix":
        """Return ``[self | values]`` with the boundary set at ``self.columns``."""
        if values._lines != self._lines:
            raise DimensionMismatchError(
                f"Cannot augment a {self._lines}-line matrix with a {values._lines}-line matrix."
            )
        target = self._common_type(values)
        left, right = self._cells_as(target), values._cells_as(target)
        lc, rc = self._columns, values._columns
        cells = []
        for i in range(self._lines):
            cells.extend(left[i * lc:(i + 1) * lc])
            cells.extend(right[i * rc:(i + 1) * rc])
        return self._build(self._lines, lc + rc, target, cells, lc)

    def __or__(self, other: "Matrix") -> "Matrix":
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.augment(other)

    def augment_with_identity(self) -> "Matrix":
        return self.augment(Matrix.identity(self._lines, self._scalar_type))

    def left(self) -> "Matrix":
        """Return the block before the augmented column."""
        if self._augmented_column is None:
            raise NotAugmentedError("The current matrix is not an augmented matrix.")
        boundary = self._augmented_column
        rows = self.to_rows()
        cells = [value for row in rows for value in row[:boundary]]
        return self._build(self._lines, boundary, self._scalar_type, cells)

    def right(self) -> "Matrix":
        """Return the block starting at the augmented column."""
        if self._augmented_column is None:
            raise NotAugmentedError("The current matrix is not an augmented matrix.")
        boundary = self._augmented_column
        rows = self.to_rows()
        cells = [value for row in rows for value in row[boundary:]]
        return self._build(self._lines, self._columns - boundary, self._scalar_type, cells)

    def __invert__(self) -> Optional["Matrix"]:
        from .linalg import invert

        return invert(self)

    # ------------------------------------------------------------------
    # Line primitives (mutating)
    # ------------------------------------------------------------------
    def swap_lines(self, first: int, second: int) -> None:
        """Exchange two lines in place."""
        first = self._check_line(first, "first")
        second = self._check_line(second, "second")
        if first == second:
            return
        c = self._columns
        a, b = first * c, second * c
        values = self._values
        values[a:a + c], values[b:b + c] = values[b:b + c], values[a:a + c]

    def combine_lines(self, destination: int, terms: Terms) -> None:
        """Replace line ``destination`` by the sum of ``coefficient * line`` over ``terms``.

        ``terms`` maps line indices to coefficients (a mapping or ``(line,
        coefficient)`` pairs).  Lines that are not listed, or listed with
        ``None``, do not take part in the sum; the destination itself only
        contributes when it is listed.
        """
        destination = self._check_line(destination, "destination")
        pairs = terms.items() if isinstance(terms, Mapping) else terms
        arithmetic = self._arithmetic
        add, mul = arithmetic.add, arithmetic.multiply
        c = self._columns
        values = self._values
        accumulator = [arithmetic.zero] * c
        for line, coefficient in pairs:
            start = self._check_line(line) * c
            if coefficient is None:
                continue
            k = arithmetic.convert(coefficient)
            for j in range(c):
                accumulator[j] = add(accumulator[j], mul(k, values[start + j]))
        values[destination * c:(destination + 1) * c] = accumulator

    def run_command(self, destination: int, *coefficients: Any) -> None:
        """Run a line command: one coefficient per line, ``None`` to leave a line out.

        ``m.run_command(1, -2, 3, None)`` replaces line 1 by ``-2 * L0 + 3 * L1``.
        Coefficients are positional only; unpack a list with ``*``.
        """
        destination = self._check_line(destination, "destination")
        if len(coefficients) != self._lines:
            raise ArgumentCountMismatchError(
                f"The coefficients must have the same number of elements as the number of lines "
                f"of the matrix, which is {self._lines}. If a line is not involved in the command, "
                f"pass None as its value."
            )
        self.combine_lines(destination, enumerate(coefficients))

    def round_errors(self, rounder: Callable[[Any], Any] = round_error) -> None:
        """Apply ``rounder`` to every cell in place."""
        target = self._scalar_type
        self._values = [ScalarConverter.convert(rounder(value), target) for value in self._values]

    # ------------------------------------------------------------------
    # Determinant
    # ------------------------------------------------------------------
    def _submatrix(self, line: int, column: int) -> "Matrix":
        cells = [
            value
            for index, value in enumerate(self._values)
            if index // self._columns != line and index % self._columns != column
        ]
        return self._build(self._lines - 1, self._columns - 1, self._scalar_type, cells)

    def minor(self, line: int, column: int) -> "Matrix":
        """Return the matrix without line ``line`` and column ``column``."""
        if self.is_augmented:
            raise DimensionMismatchError("The minor cannot be taken on an augmented matrix.")
        line = self._check_line(line)
        column = self._check_column(column)
        return self._submatrix(line, column)

    def determinant(self) -> Any:
        """Determinant by cofactor expansion along the first line, exact in the matrix type."""
        if not self.is_square:
            raise NotSquareError(
                f"A determinant is possible for square matrices only, this one is "
                f"{self._lines}x{self._columns}."
            )
        arithmetic = self._arithmetic
        v = self._values
        n = self._lines
        if n == 1:
            return v[0]
        if n == 2:
            return arithmetic.sub(arithmetic.multiply(v[0], v[3]), arithmetic.multiply(v[1], v[2]))
        det = arithmetic.zero
        for j in range(n):
            sign = arithmetic.one if j % 2 == 0 else arithmetic.minus_one
            cofactor = self._submatrix(0, j).determinant()
            det = arithmetic.add(det, arithmetic.multiply(arithmetic.multiply(v[j], sign), cofactor))
        return det


__all__ = ["Matrix", "MAX_DIMENSION"]
