"""Unit conversion utilities.

Everything is computed in inches. Lengths typed as feet/inches/fractions are
flattened to a total, combined, then decomposed back for display.
"""

import math
from typing import Tuple

from .errors import InvalidExpressionError
from .tokens import ImperialToken, LengthToken

INCHES_PER_FOOT = 12
SQUARE_INCHES_PER_SQUARE_FOOT = INCHES_PER_FOOT ** 2
CUBIC_INCHES_PER_CUBIC_FOOT = INCHES_PER_FOOT ** 3

_COMMON_DENOMINATORS = (2, 4, 8, 16, 32)
_TOLERANCE = 1 / 64


def check_finite(value: float) -> float:
    """Return ``value`` as a float, rejecting totals too large to represent."""
    try:
        value = float(value)
    except OverflowError:
        raise InvalidExpressionError("number too large") from None
    if not math.isfinite(value):
        raise InvalidExpressionError("number too large")
    return value


def to_total_inches(token) -> float:
    """Total inches of a typed or computed length."""
    if isinstance(token, LengthToken):
        return token.total_inches
    if isinstance(token, ImperialToken):
        fraction = token.numerator / token.denominator if token.denominator else 0.0
        whole = check_finite(token.feet * INCHES_PER_FOOT + token.inches)
        return whole + fraction
    raise TypeError(f"Not a length: {type(token).__name__}")


def decimal_to_fraction(decimal: float, max_denominator: int = 32) -> Tuple[int, int]:
    """Closest common fraction for a value in ``[0, 1)``.

    Tries halves, quarters, eighths, sixteenths and thirty-seconds in turn and
    keeps the first whose rounded numerator lands within 1/64. Falls back to
    thirty-seconds. Zero numerators come back as ``(0, 1)``.
    """
    if decimal == 0:
        return 0, 1

    for denominator in _COMMON_DENOMINATORS:
        if denominator > max_denominator:
            break
        numerator = round(decimal * denominator)
        if abs(numerator / denominator - decimal) < _TOLERANCE:
            return (numerator, denominator) if numerator else (0, 1)

    numerator = round(decimal * 32)
    return (numerator, 32) if numerator else (0, 1)


def length_from_inches(total_inches: float) -> LengthToken:
    """Decompose a total into feet, whole inches and a display fraction.

    Negative totals decompose their magnitude: feet and inches carry the sign,
    the fraction stays non-negative.
    """
    total_inches = check_finite(total_inches)
    sign = -1 if total_inches < 0 else 1
    magnitude = abs(total_inches)

    feet = math.floor(magnitude / INCHES_PER_FOOT)
    remaining = magnitude - feet * INCHES_PER_FOOT
    inches = math.floor(remaining)
    numerator, denominator = decimal_to_fraction(remaining - inches)

    # rounding can produce n/n
    if numerator and numerator == denominator:
        inches += 1
        numerator, denominator = 0, 1
    if inches >= INCHES_PER_FOOT:
        feet += 1
        inches -= INCHES_PER_FOOT

    return LengthToken(
        total_inches=total_inches,
        feet=sign * feet if feet else 0,
        inches=sign * inches if inches else 0,
        numerator=numerator,
        denominator=denominator,
    )
