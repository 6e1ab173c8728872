"""
=============================================================================
MODULE NAME: tokens.py
=============================================================================

INPUT FILES:
- None (token dataclasses only).

OUTPUT FILES:
- None. Structures feed the validator, accumulator, evaluator and formatter.

VERSION HISTORY:
- v1.0 (2026-10-19): Keystroke tokens and the typed math-token union.

LAST UPDATED: 2026-10-19

NOTES:
- InputToken is one key press; it validates its key on construction.
- MathToken is a closed union of frozen dataclasses. Consumers dispatch on
  the concrete class and raise TypeError for anything they do not know.
=============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple, Union

DIGITS = "0123456789"
DECIMAL_POINT = "."
OPERATORS: Tuple[str, ...] = ("+", "-", "x", "/")
EQUALS = "="
FRACTION_DENOMINATORS: Tuple[int, ...] = (2, 4, 8, 16, 32)
SELECTABLE_DENOMINATORS: Tuple[int, ...] = (8, 16, 32)
DEFAULT_DENOMINATOR = 16

CLEAR = "Clear"
BACKSPACE = "Backspace"
ERROR_TIMEOUT = "ErrorTimeout"
CONTROL_KEYS: Tuple[str, ...] = (CLEAR, BACKSPACE, ERROR_TIMEOUT)


class Pad(str, Enum):
    """Where a key press came from."""

    FEET = "Feet"
    INCHES = "Inches"
    SCALAR = "Scalar"
    OPERATOR = "Operator"
    CONTROL = "Control"


class EntryMode(str, Enum):
    """Current entry mode of the input state machine."""

    INPUT = "Input"
    IMPERIAL = "Imperial"
    SCALAR = "Scalar"
    ERROR = "Error"


def parse_fraction(key: str) -> Tuple[int, int]:
    """Split a ``"n/d"`` fraction literal into ``(n, d)``.

    Raises:
        ValueError: If the literal is malformed or the denominator unsupported.
    """
    parts = key.split("/")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid fraction literal: {key!r}")
    numerator, denominator = int(parts[0]), int(parts[1])
    if denominator not in FRACTION_DENOMINATORS:
        raise ValueError(f"Unsupported fraction denominator: {denominator}")
    if not 0 < numerator < denominator:
        raise ValueError(f"Fraction numerator out of range: {key!r}")
    return numerator, denominator


@dataclass(frozen=True, slots=True)
class InputToken:
    """A single key press from the front end."""

    pad: Pad
    key: str

    def __post_init__(self) -> None:
        pad = Pad(self.pad)
        object.__setattr__(self, "pad", pad)
        key = self.key
        if pad in (Pad.FEET, Pad.INCHES):
            if not (key in DIGITS and len(key) == 1):
                parse_fraction(key)
        elif pad is Pad.SCALAR:
            if not ((key in DIGITS and len(key) == 1) or key == DECIMAL_POINT):
                raise ValueError(f"Invalid scalar key: {key!r}")
        elif pad is Pad.OPERATOR:
            if key not in OPERATORS and key != EQUALS:
                raise ValueError(f"Invalid operator: {key!r}")
        elif key not in CONTROL_KEYS:
            raise ValueError(f"Invalid control command: {key!r}")

    @property
    def is_digit(self) -> bool:
        return len(self.key) == 1 and self.key in DIGITS

    @property
    def is_fraction(self) -> bool:
        return "/" in self.key and self.pad in (Pad.FEET, Pad.INCHES)

    @property
    def is_operand(self) -> bool:
        return self.pad in (Pad.FEET, Pad.INCHES, Pad.SCALAR)


def create_token(pad: Union[Pad, str], key: str) -> InputToken:
    return InputToken(Pad(pad), key)


# ---------------------------------------------------------------------------
# Math tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ImperialToken:
    """A length operand as typed: feet, inches and an optional fraction."""

    kind: ClassVar[str] = "Imperial"

    feet: int = 0
    inches: int = 0
    numerator: int = 0
    denominator: int = DEFAULT_DENOMINATOR

    @property
    def has_fraction(self) -> bool:
        return self.numerator > 0


@dataclass(frozen=True, slots=True)
class ScalarToken:
    """A dimensionless operand; text is kept so ``"3."`` survives typing."""

    kind: ClassVar[str] = "Scalar"

    value: str = ""


@dataclass(frozen=True, slots=True)
class OperatorToken:
    kind: ClassVar[str] = "Operator"

    operator: str


@dataclass(frozen=True, slots=True)
class LengthToken:
    """A computed length: exact total plus its feet/inches/fraction form."""

    kind: ClassVar[str] = "Length"

    total_inches: float
    feet: int
    inches: int
    numerator: int
    denominator: int


@dataclass(frozen=True, slots=True)
class AreaToken:
    kind: ClassVar[str] = "Area"

    total_square_inches: float
    display_value: str


@dataclass(frozen=True, slots=True)
class VolumeToken:
    kind: ClassVar[str] = "Volume"

    total_cubic_inches: float
    display_value: str


@dataclass(frozen=True, slots=True)
class ScalarSolutionToken:
    kind: ClassVar[str] = "ScalarSolution"

    value: str


MathToken = Union[
    ImperialToken,
    ScalarToken,
    OperatorToken,
    LengthToken,
    AreaToken,
    VolumeToken,
    ScalarSolutionToken,
]

RESULT_TYPES = (LengthToken, AreaToken, VolumeToken, ScalarSolutionToken)


def is_operator(token: MathToken, symbol: str | None = None) -> bool:
    if not isinstance(token, OperatorToken):
        return False
    return symbol is None or token.operator == symbol


__all__ = [
    "DIGITS",
    "DECIMAL_POINT",
    "OPERATORS",
    "EQUALS",
    "FRACTION_DENOMINATORS",
    "SELECTABLE_DENOMINATORS",
    "DEFAULT_DENOMINATOR",
    "CLEAR",
    "BACKSPACE",
    "ERROR_TIMEOUT",
    "CONTROL_KEYS",
    "Pad",
    "EntryMode",
    "parse_fraction",
    "InputToken",
    "create_token",
    "ImperialToken",
    "ScalarToken",
    "OperatorToken",
    "LengthToken",
    "AreaToken",
    "VolumeToken",
    "ScalarSolutionToken",
    "MathToken",
    "RESULT_TYPES",
    "is_operator",
]
