"""Serialization helpers for matrices and linear systems."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from fractions import Fraction
import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, IO, List, Optional, Tuple, Union

from .linalg import solve
from .matrix import Matrix
from .scalars import ScalarType

logger = logging.getLogger(__name__)

_DEFAULT_SCALAR_TYPE = ScalarType.FLOAT64
_JSONSource = Union[str, Path, IO[str]]
Solution = Optional[Dict[str, Any]]


def _value_to_json(value: Any) -> Any:
    if isinstance(value, (Decimal, Fraction)):
        return str(value)
    # numpy scalars expose the matching builtin through item()
    if hasattr(value, "item"):
        return value.item()
    return value


def _value_from_json(value: Any, scalar_type: ScalarType) -> Any:
    if isinstance(value, str):
        if scalar_type is ScalarType.DECIMAL:
            return Decimal(value)
        if scalar_type is ScalarType.FRACTION:
            return Fraction(value)
        return float(value)
    return value


def _resolve_scalar_type(value: Any) -> ScalarType:
    """Return a scalar type from a saved name, defaulting when it is missing."""

    if value is None or value == "":
        return _DEFAULT_SCALAR_TYPE
    return ScalarType.parse(value)


def matrix_to_dict(matrix: Matrix) -> Dict[str, Any]:
    """Serialize a :class:`Matrix` to a JSON-compatible dictionary."""

    data: Dict[str, Any] = {
        "lines": matrix.lines,
        "columns": matrix.columns,
        "scalar_type": matrix.scalar_type.value,
        "values": [_value_to_json(value) for value in matrix.values],
    }
    if matrix.augmented_column is not None:
        data["augmented_column"] = matrix.augmented_column
    return data


def matrix_from_dict(data: Dict[str, Any]) -> Matrix:
    """Create a :class:`Matrix` from JSON data holding flat ``values`` or nested ``rows``."""

    scalar_type = _resolve_scalar_type(data.get("scalar_type"))
    augmented_column = data.get("augmented_column")
    if augmented_column is not None:
        augmented_column = int(augmented_column)

    if "rows" in data:
        rows = [[_value_from_json(value, scalar_type) for value in row] for row in data["rows"]]
        return Matrix.from_rows(rows, scalar_type=scalar_type, augmented_column=augmented_column)

    values = [_value_from_json(value, scalar_type) for value in data.get("values", [])]
    lines = int(data.get("lines", 1))
    columns = int(data.get("columns", len(values) // lines if lines else 0))
    return Matrix(lines, columns, values, scalar_type=scalar_type, augmented_column=augmented_column)


def _default_names(count: int) -> List[str]:
    return [f"x{index + 1}" for index in range(count)]


def _column_from_data(data: Any, scalar_type: ScalarType) -> Matrix:
    if isinstance(data, dict):
        return matrix_from_dict(data)
    values = [_value_from_json(value, scalar_type) for value in data]
    return Matrix(len(values), 1, values, scalar_type=scalar_type)


@dataclass
class LinearSystem:
    """Container for a full linear system definition."""

    coefficients: Matrix
    constants: Matrix
    variable_names: List[str] = field(default_factory=list)
    label: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.variable_names:
            self.variable_names = _default_names(self.coefficients.columns)

    def solve(self, *, rounder: Optional[Callable[[Any], Any]] = None) -> Solution:
        """Solve the system; see :func:`labmath.linalg.solve` for the outcomes."""

        return solve(self.coefficients, self.constants, self.variable_names, rounder=rounder)

    def augmented(self) -> Matrix:
        return self.coefficients | self.constants

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representing the system."""

        return {
            "label": self.label,
            "description": self.description,
            "variable_names": list(self.variable_names),
            "coefficients": matrix_to_dict(self.coefficients),
            "constants": matrix_to_dict(self.constants),
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        """Serialize the system to a JSON string."""

        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LinearSystem":
        """Create a system from a dictionary."""

        coefficients = matrix_from_dict(data.get("coefficients", {}))
        constants = _column_from_data(data.get("constants", []), coefficients.scalar_type)
        names = [str(name) for name in data.get("variable_names", [])]
        return cls(
            coefficients=coefficients,
            constants=constants,
            variable_names=names,
            label=str(data.get("label", "")),
            description=str(data.get("description", "")),
        )

    @classmethod
    def from_json(cls, source: _JSONSource) -> "LinearSystem":
        """Load a system from a JSON file path or file-like object."""

        if hasattr(source, "read"):
            data = json.load(source)  # type: ignore[arg-type]
        else:
            path = Path(source)
            logger.debug("Loading linear system from %s", path)
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        if not isinstance(data, dict):
            raise ValueError("Linear system JSON must contain an object at the top level")
        return cls.from_dict(data)

    def save(self, target: Union[str, Path, IO[str]], *, indent: Optional[int] = 2) -> None:
        """Write the system to disk or a file-like object."""

        payload = self.to_json(indent=indent)
        if hasattr(target, "write"):
            target.write(payload)  # type: ignore[arg-type]
        else:
            path = Path(target)
            path.write_text(payload, encoding="utf-8")


def load_system_from_json(source: _JSONSource) -> Tuple[LinearSystem, Solution]:
    """Load a :class:`LinearSystem` from JSON and solve it."""

    system = LinearSystem.from_json(source)
    return system, system.solve()


__all__ = [
    "LinearSystem",
    "load_system_from_json",
    "matrix_from_dict",
    "matrix_to_dict",
]
