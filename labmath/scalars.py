"""Scalar types supported by the matrix engine and conversions between them."""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from fractions import Fraction
import numbers
from typing import Any, Dict, Iterable

import numpy as np

from .errors import UnsupportedScalarTypeError


class ScalarType(str, Enum):
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    DECIMAL = "decimal"
    FRACTION = "fraction"

    @property
    def is_integer(self) -> bool:
        return self in (ScalarType.INT16, ScalarType.INT32, ScalarType.INT64)

    @property
    def is_floating(self) -> bool:
        return self in (ScalarType.FLOAT32, ScalarType.FLOAT64)

    @property
    def is_exact(self) -> bool:
        """True for types whose arithmetic never rounds (integers aside from overflow)."""
        return self.is_integer or self is ScalarType.FRACTION

    @property
    def python_type(self) -> type:
        return _CONSTRUCTORS[self]

    @property
    def rank(self) -> int:
        return _RANKS.index(self)

    @classmethod
    def of(cls, value: Any) -> "ScalarType":
        """Return the scalar type of a single value."""
        resolved = _TYPE_LOOKUP.get(type(value))
        if resolved is not None:
            return resolved
        # Subclasses (e.g. IntEnum members) fall back on the abstract hierarchy.
        if isinstance(value, bool) or not isinstance(value, numbers.Number):
            raise UnsupportedScalarTypeError(
                f"Type {type(value).__name__} does not support matrix arithmetic."
            )
        if isinstance(value, numbers.Integral):
            return cls.INT64
        if isinstance(value, numbers.Rational):
            return cls.FRACTION
        if isinstance(value, numbers.Real):
            return cls.FLOAT64
        raise UnsupportedScalarTypeError(
            f"Type {type(value).__name__} does not support matrix arithmetic."
        )

    @classmethod
    def infer(cls, values: Iterable[Any]) -> "ScalarType":
        """Return the widest scalar type among ``values`` (FLOAT64 when empty)."""
        widest = None
        for value in values:
            current = cls.of(value)
            if widest is None or current.rank > widest.rank:
                widest = current
        return widest if widest is not None else cls.FLOAT64

    @classmethod
    def parse(cls, name: Any) -> "ScalarType":
        """Resolve a scalar type from its name, an alias or a Python/numpy type."""
        if isinstance(name, cls):
            return name
        if isinstance(name, type):
            for member, constructor in _CONSTRUCTORS.items():
                if constructor is name:
                    return member
            if name is int:
                return cls.INT64
            if name is float:
                return cls.FLOAT64
            raise UnsupportedScalarTypeError(f"Type {name.__name__} does not support matrix arithmetic.")
        if not isinstance(name, str):
            raise UnsupportedScalarTypeError(f"Unknown scalar type {name!r}")
        normalized = name.strip().lower().replace(" ", "").replace("-", "").replace("_", "")
        resolved = _ALIASES.get(normalized)
        if resolved is None:
            raise UnsupportedScalarTypeError(f"Unknown scalar type {name!r}")
        return resolved


_CONSTRUCTORS: Dict[ScalarType, type] = {
    ScalarType.INT16: np.int16,
    ScalarType.INT32: np.int32,
    ScalarType.INT64: np.int64,
    ScalarType.FLOAT32: np.float32,
    ScalarType.FLOAT64: np.float64,
    ScalarType.DECIMAL: Decimal,
    ScalarType.FRACTION: Fraction,
}

_RANKS = [
    ScalarType.INT16,
    ScalarType.INT32,
    ScalarType.INT64,
    ScalarType.FLOAT32,
    ScalarType.FLOAT64,
    ScalarType.DECIMAL,
    ScalarType.FRACTION,
]

_TYPE_LOOKUP: Dict[type, ScalarType] = {
    np.int16: ScalarType.INT16,
    np.int32: ScalarType.INT32,
    np.int64: ScalarType.INT64,
    int: ScalarType.INT64,
    np.float32: ScalarType.FLOAT32,
    np.float64: ScalarType.FLOAT64,
    float: ScalarType.FLOAT64,
    Decimal: ScalarType.DECIMAL,
    Fraction: ScalarType.FRACTION,
}

_ALIASES: Dict[str, ScalarType] = {
    "int16": ScalarType.INT16,
    "short": ScalarType.INT16,
    "int32": ScalarType.INT32,
    "int": ScalarType.INT64,
    "integer": ScalarType.INT64,
    "int64": ScalarType.INT64,
    "long": ScalarType.INT64,
    "float32": ScalarType.FLOAT32,
    "single": ScalarType.FLOAT32,
    "float": ScalarType.FLOAT64,
    "float64": ScalarType.FLOAT64,
    "double": ScalarType.FLOAT64,
    "decimal": ScalarType.DECIMAL,
    "fraction": ScalarType.FRACTION,
    "rational": ScalarType.FRACTION,
}


class ScalarConverter:
    """Handles widening and narrowing of values between scalar types."""

    @staticmethod
    def convert(value: Any, to_type: ScalarType) -> Any:
        if isinstance(value, bool):
            raise UnsupportedScalarTypeError("Type bool does not support matrix arithmetic.")
        if to_type.is_integer:
            return _CONSTRUCTORS[to_type](_to_int(value))
        if to_type.is_floating:
            return _CONSTRUCTORS[to_type](float(value))
        if to_type is ScalarType.DECIMAL:
            return _to_decimal(value)
        if to_type is ScalarType.FRACTION:
            return _to_fraction(value)
        raise UnsupportedScalarTypeError(f"Unknown scalar type {to_type!r}")

    @classmethod
    def zero(cls, scalar_type: ScalarType) -> Any:
        return cls.convert(0, scalar_type)

    @classmethod
    def one(cls, scalar_type: ScalarType) -> Any:
        return cls.convert(1, scalar_type)

    @classmethod
    def minus_one(cls, scalar_type: ScalarType) -> Any:
        return cls.convert(-1, scalar_type)


def _to_int(value: Any) -> int:
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (Decimal, Fraction)):
        return round(value)
    # round() on a Python float is half-to-even
    return round(float(value))


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, numbers.Integral):
        return Decimal(int(value))
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    # str() gives the shortest representation for the value's own precision
    return Decimal(str(value))


def _to_fraction(value: Any) -> Fraction:
    if isinstance(value, Fraction):
        return value
    if isinstance(value, numbers.Integral):
        return Fraction(int(value))
    if isinstance(value, Decimal):
        return Fraction(value)
    return Fraction(str(value))


__all__ = ["ScalarType", "ScalarConverter"]
