"""Per-type arithmetic tables used by the matrix engine.

numpy integers and floats, :class:`~decimal.Decimal` and
:class:`~fractions.Fraction` share no common arithmetic protocol that keeps
results in the operand type (``np.int16 + int`` silently widens, ``Decimal *
float`` fails).  Each supported :class:`~labmath.scalars.ScalarType` therefore
gets a small table of operations whose results are always re-wrapped in that
type.  Tables are built on first use and cached for the process lifetime.
"""
from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
import logging
import operator
from typing import Any, Callable, Optional

from .errors import UnsupportedScalarTypeError
from .scalars import ScalarConverter, ScalarType

logger = logging.getLogger(__name__)

BinaryOp = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class Arithmetic:
    """Closed set of operations for one scalar type."""

    scalar_type: ScalarType
    add: BinaryOp
    sub: BinaryOp
    multiply: BinaryOp
    divide: BinaryOp
    zero: Any
    one: Any
    minus_one: Any

    def negate(self, value: Any) -> Any:
        return self.sub(self.zero, value)

    def is_zero(self, value: Any) -> bool:
        return value == self.zero

    def convert(self, value: Any) -> Any:
        return ScalarConverter.convert(value, self.scalar_type)


def _wrap(scalar_type: ScalarType, symbol: str, op: BinaryOp) -> BinaryOp:
    constructor = scalar_type.python_type

    def apply(a: Any, b: Any) -> Any:
        return constructor(op(a, b))

    sample = ScalarConverter.one(scalar_type)
    try:
        apply(sample, sample)
    except TypeError as exc:
        raise UnsupportedScalarTypeError(
            f"Type {scalar_type.value} does not support the {symbol} operator."
        ) from exc
    return apply


def _integer_divider(scalar_type: ScalarType) -> BinaryOp:
    def apply(a: Any, b: Any) -> Any:
        # Exact quotient, then the same half-to-even narrowing as any other conversion.
        return ScalarConverter.convert(Fraction(int(a), int(b)), scalar_type)

    return apply


@lru_cache(maxsize=None)
def arithmetic_for(scalar_type: ScalarType) -> Arithmetic:
    """Return the cached arithmetic table of ``scalar_type``."""

    scalar_type = ScalarType.parse(scalar_type)
    logger.debug("Building arithmetic table for %s", scalar_type.value)
    if scalar_type.is_integer:
        divide = _integer_divider(scalar_type)
    else:
        divide = _wrap(scalar_type, "/", operator.truediv)
    return Arithmetic(
        scalar_type=scalar_type,
        add=_wrap(scalar_type, "+", operator.add),
        sub=_wrap(scalar_type, "-", operator.sub),
        multiply=_wrap(scalar_type, "*", operator.mul),
        divide=divide,
        zero=ScalarConverter.zero(scalar_type),
        one=ScalarConverter.one(scalar_type),
        minus_one=ScalarConverter.minus_one(scalar_type),
    )


@lru_cache(maxsize=None)
def scalar_multiplier(scalar_type: ScalarType, target_type: ScalarType) -> BinaryOp:
    """Return ``multiply(k, b)`` for a ``scalar_type`` factor and a ``target_type`` operand.

    The factor is converted to the target type first so that the product keeps
    the operand's type (an integer factor scaling a decimal matrix stays decimal).
    """

    multiply = arithmetic_for(target_type).multiply
    if scalar_type is target_type:
        return multiply

    def apply(k: Any, b: Any) -> Any:
        return multiply(ScalarConverter.convert(k, target_type), b)

    return apply


def _common(values) -> Arithmetic:
    return arithmetic_for(ScalarType.infer(values))


def add_scalars(a: Any, b: Any) -> Any:
    arithmetic = _common((a, b))
    return arithmetic.add(arithmetic.convert(a), arithmetic.convert(b))


def subtract_scalars(a: Any, b: Any) -> Any:
    arithmetic = _common((a, b))
    return arithmetic.sub(arithmetic.convert(a), arithmetic.convert(b))


def multiply_scalars(a: Any, b: Any, c: Optional[Any] = None) -> Any:
    operands = (a, b) if c is None else (a, b, c)
    arithmetic = _common(operands)
    product = arithmetic.multiply(arithmetic.convert(a), arithmetic.convert(b))
    if c is not None:
        product = arithmetic.multiply(product, arithmetic.convert(c))
    return product


__all__ = [
    "Arithmetic",
    "arithmetic_for",
    "scalar_multiplier",
    "add_scalars",
    "subtract_scalars",
    "multiply_scalars",
]
