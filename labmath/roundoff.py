"""Rounding of accumulated floating point calculation errors."""
from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, localcontext
from typing import Any

import numpy as np

# Significant digits kept by each binary floating point type, minus two guard digits.
FLOAT32_DIGITS = 7 - 2
FLOAT64_DIGITS = 15 - 2
DECIMAL_PLACES = 25


def round_error(value: Any) -> Any:
    """Round off calculation noise such as ``0.30000000000000004``.

    Binary floats are rounded half-to-even to a fixed number of decimals,
    decimals to 25 places with trailing zeros removed.  Integers and fractions
    are exact and returned unchanged.
    """

    if isinstance(value, np.float32):
        return np.float32(round(float(value), FLOAT32_DIGITS))
    if isinstance(value, np.float64):
        return np.float64(round(float(value), FLOAT64_DIGITS))
    if isinstance(value, float):
        return round(value, FLOAT64_DIGITS)
    if isinstance(value, Decimal):
        if not value.is_finite():
            return value
        with localcontext() as context:
            context.prec = max(context.prec, value.adjusted() + DECIMAL_PLACES + 2)
            rounded = value.quantize(Decimal(1).scaleb(-DECIMAL_PLACES), rounding=ROUND_HALF_EVEN)
        text = format(rounded, "f")
        return Decimal(text.rstrip("0").rstrip(".")) if "." in text else rounded
    return value


__all__ = ["round_error", "FLOAT32_DIGITS", "FLOAT64_DIGITS", "DECIMAL_PLACES"]
