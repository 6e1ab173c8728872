"""
Display formatting for math tokens.

Renders operands, operators and results into the text shown on the
calculator display, e.g. ``"5ft 3 1/4in + 3.14"`` or ``"2ft 6in (30in)"``.
"""

import math
from typing import Iterable, Tuple

from .tokens import (
    AreaToken,
    ImperialToken,
    LengthToken,
    OperatorToken,
    ScalarSolutionToken,
    ScalarToken,
    VolumeToken,
)
from .units import CUBIC_INCHES_PER_CUBIC_FOOT, SQUARE_INCHES_PER_SQUARE_FOOT


def format_number(num: float) -> str:
    """Format number for display."""
    num = float(num)
    if num.is_integer():
        return str(int(num))
    # "g" drops trailing zeros itself
    return f"{num:.10g}"


def simplify_fraction(numerator: int, denominator: int) -> Tuple[int, int]:
    """Reduce a fraction by its GCD; a zero numerator reduces to ``0/1``."""
    if numerator == 0:
        return 0, 1
    divisor = math.gcd(abs(numerator), abs(denominator))
    return numerator // divisor, denominator // divisor


def _format_feet_inches(feet: int, inches: int, numerator: int, denominator: int) -> str:
    parts = []
    if feet:
        parts.append(f"{feet}ft")

    if inches or numerator > 0:
        inches_str = str(inches) if inches else ""
        if numerator > 0:
            n, d = simplify_fraction(numerator, denominator)
            inches_str = f"{inches_str} {n}/{d}" if inches_str else f"{n}/{d}"
        parts.append(f"{inches_str}in")

    return " ".join(parts) if parts else "0"


def format_imperial(token: ImperialToken) -> str:
    return _format_feet_inches(token.feet, token.inches, token.numerator, token.denominator)


def format_length(token: LengthToken) -> str:
    """Feet/inches rendering followed by the exact total in brackets."""
    text = _format_feet_inches(
        abs(token.feet), abs(token.inches), token.numerator, token.denominator
    )
    if token.total_inches < 0 and text != "0":
        text = f"-{text}"
    return f"{text} ({format_number(token.total_inches)}in)"


def _composite(total: float, per_big_unit: int, big_label: str, small_label: str) -> str:
    sign = "-" if total < 0 else ""
    magnitude = abs(total)
    big = math.floor(magnitude / per_big_unit)
    remainder = magnitude - big * per_big_unit

    parts = []
    if big > 0:
        parts.append(f"{big} {big_label}")
    if remainder > 0:
        parts.append(f"{remainder:.2f} {small_label}")

    if not parts:
        return f"0 {small_label}"
    return sign + " ".join(parts)


def format_square_inches(square_inches: float) -> str:
    """``"2 sq.ft 4.00 sq.in"`` style composite area text."""
    return _composite(square_inches, SQUARE_INCHES_PER_SQUARE_FOOT, "sq.ft", "sq.in")


def format_cubic_inches(cubic_inches: float) -> str:
    return _composite(cubic_inches, CUBIC_INCHES_PER_CUBIC_FOOT, "cu.ft", "cu.in")


def format_token(token) -> str:
    if isinstance(token, ImperialToken):
        return format_imperial(token)
    if isinstance(token, ScalarToken):
        return token.value or "0"
    if isinstance(token, OperatorToken):
        return f" {token.operator} "
    if isinstance(token, LengthToken):
        return format_length(token)
    if isinstance(token, AreaToken):
        return f"{token.display_value} ({format_number(token.total_square_inches)} sq.in)"
    if isinstance(token, VolumeToken):
        return f"{token.display_value} ({format_number(token.total_cubic_inches)} cu.in)"
    if isinstance(token, ScalarSolutionToken):
        return token.value
    raise TypeError(f"Unknown math token: {type(token).__name__}")


def format_tokens(tokens: Iterable) -> str:
    """Render a whole math-token sequence as one display string."""
    return "".join(format_token(token) for token in tokens)
