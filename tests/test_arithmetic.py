from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from labmath.arithmetic import (
    add_scalars,
    arithmetic_for,
    multiply_scalars,
    scalar_multiplier,
    subtract_scalars,
)
from labmath.scalars import ScalarType


def test_results_keep_operand_type():
    arithmetic = arithmetic_for(ScalarType.INT16)
    total = arithmetic.add(np.int16(2), np.int16(3))
    assert total == 5
    assert isinstance(total, np.int16)

    product = arithmetic_for(ScalarType.DECIMAL).multiply(Decimal("1.5"), Decimal("2"))
    assert product == Decimal("3")
    assert isinstance(product, Decimal)


def test_tables_are_cached():
    assert arithmetic_for(ScalarType.FLOAT64) is arithmetic_for(ScalarType.FLOAT64)


def test_integer_division_rounds_exact_quotient():
    divide = arithmetic_for(ScalarType.INT64).divide
    assert divide(np.int64(7), np.int64(2)) == 4
    assert divide(np.int64(5), np.int64(2)) == 2
    assert divide(np.int64(-9), np.int64(3)) == -3


def test_fraction_division_is_exact():
    divide = arithmetic_for(ScalarType.FRACTION).divide
    assert divide(Fraction(1), Fraction(3)) == Fraction(1, 3)


def test_constants_and_helpers():
    arithmetic = arithmetic_for(ScalarType.FLOAT32)
    assert arithmetic.zero == 0
    assert arithmetic.one == 1
    assert arithmetic.minus_one == -1
    assert arithmetic.negate(np.float32(2.5)) == np.float32(-2.5)
    assert arithmetic.is_zero(np.float32(0))
    assert not arithmetic.is_zero(np.float32(1e-30))
    assert isinstance(arithmetic.convert(3), np.float32)


def test_scalar_multiplier_converts_factor_to_operand_type():
    multiply = scalar_multiplier(ScalarType.INT64, ScalarType.DECIMAL)
    result = multiply(2, Decimal("1.5"))
    assert result == Decimal("3.0")
    assert isinstance(result, Decimal)

    same = scalar_multiplier(ScalarType.FLOAT64, ScalarType.FLOAT64)
    assert same is arithmetic_for(ScalarType.FLOAT64).multiply


def test_mixed_scalar_helpers_widen():
    total = add_scalars(np.int16(1), 2.5)
    assert total == pytest.approx(3.5)
    assert isinstance(total, np.float64)

    assert subtract_scalars(Fraction(1, 2), 1) == Fraction(-1, 2)

    product = multiply_scalars(2, 3, 4)
    assert product == 24
    assert isinstance(product, np.int64)
    assert multiply_scalars(Fraction(1, 2), 4) == Fraction(2)
