"""
=============================================================================
MODULE NAME: evaluator.py
=============================================================================

INPUT FILES:
- None. Consumes math-token sequences produced by `accumulator.accumulate()`.

OUTPUT FILES:
- None. Returns a `CalculationResult` holding the replacement token list.

VERSION HISTORY:
- v1.0 (2026-10-19): Precedence-aware evaluation with unit-typed reduction.

LAST UPDATED: 2026-10-19

NOTES:
- Infix is converted to postfix with the shunting-yard algorithm; `x` and `/`
  bind tighter than `+` and `-`, all operators are left-associative.
- Lengths are combined as total inches. Computed lengths keep their exact
  total so chained steps do not accumulate fraction rounding.
- A failed evaluation hands back the input tokens untouched.
=============================================================================
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .errors import (
    CalculatorError,
    DivisionByZeroError,
    EmptyExpressionError,
    InvalidExpressionError,
    NoEqualsFoundError,
    UnsupportedOperationError,
)
from .formatting import format_cubic_inches, format_number, format_square_inches
from .tokens import (
    EQUALS,
    AreaToken,
    ImperialToken,
    LengthToken,
    MathToken,
    OperatorToken,
    ScalarSolutionToken,
    ScalarToken,
    VolumeToken,
    is_operator,
)
from .units import check_finite, length_from_inches, to_total_inches

logger = logging.getLogger(__name__)

PRECEDENCE: Dict[str, int] = {
    "+": 1,
    "-": 1,
    "x": 2,
    "/": 2,
}

_SCALAR_OPS: Dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "x": operator.mul,
    "/": operator.truediv,
}

IMPERIAL = ImperialToken.kind
SCALAR = ScalarToken.kind
AREA = AreaToken.kind
VOLUME = VolumeToken.kind


@dataclass(slots=True)
class CalculationResult:
    """Outcome of one evaluation: replacement tokens plus any error."""

    new_tokens: List[MathToken]
    error: Optional[CalculatorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def evaluate(tokens: Sequence[MathToken]) -> CalculationResult:
    """
    Evaluate everything before the last ``=`` in ``tokens``.

    Args:
        tokens: Math-token sequence ending in (or containing) an ``=`` operator

    Returns:
        CalculationResult with a single result token on success, or the
        original tokens and the error on failure
    """
    original = list(tokens)
    equals_index = find_last_equals(original)
    if equals_index == -1:
        return CalculationResult(original, NoEqualsFoundError())

    try:
        result = evaluate_expression(original[:equals_index])
    except CalculatorError as e:
        logger.info("Evaluation failed: %s", e)
        return CalculationResult(original, e)
    return CalculationResult([result])


def find_last_equals(tokens: Sequence[MathToken]) -> int:
    for index in range(len(tokens) - 1, -1, -1):
        if is_operator(tokens[index], EQUALS):
            return index
    return -1


def evaluate_expression(tokens: Sequence[MathToken]) -> MathToken:
    """Reduce an ``=``-free expression to one result token.

    Raises:
        CalculatorError: On malformed input or an unsupported combination.
    """
    if not tokens:
        raise EmptyExpressionError()

    if len(tokens) == 1:
        return to_solution(tokens[0])

    postfix = to_postfix(tokens)
    return evaluate_postfix(postfix)


def to_solution(token: MathToken) -> MathToken:
    if isinstance(token, ImperialToken):
        return length_from_inches(to_total_inches(token))
    if isinstance(token, ScalarToken):
        return ScalarSolutionToken(token.value)
    if isinstance(token, (LengthToken, AreaToken, VolumeToken, ScalarSolutionToken)):
        return token
    if isinstance(token, OperatorToken):
        raise InvalidExpressionError("not enough operands")
    raise TypeError(f"Unknown math token: {type(token).__name__}")


def to_postfix(tokens: Sequence[MathToken]) -> List[MathToken]:
    """Shunting-yard conversion from infix to postfix order."""
    output: List[MathToken] = []
    stack: List[OperatorToken] = []

    for token in tokens:
        if not is_operator(token):
            output.append(token)
            continue
        if token.operator not in PRECEDENCE:
            raise InvalidExpressionError(f"unexpected '{token.operator}'")
        precedence = PRECEDENCE[token.operator]
        while stack and PRECEDENCE[stack[-1].operator] >= precedence:
            output.append(stack.pop())
        stack.append(token)

    while stack:
        output.append(stack.pop())
    return output


def evaluate_postfix(postfix: Sequence[MathToken]) -> MathToken:
    values: List[MathToken] = []
    for token in postfix:
        if not is_operator(token):
            values.append(token)
            continue
        if len(values) < 2:
            raise InvalidExpressionError("not enough operands")
        right = values.pop()
        left = values.pop()
        values.append(apply_operator(left, token.operator, right))

    if len(values) != 1:
        raise InvalidExpressionError("incorrect number of operands")
    return to_solution(values[0])


def operand_kind(token: MathToken) -> str:
    """Base kind used for rule lookup; prior solutions fold back to operands."""
    if isinstance(token, (ImperialToken, LengthToken)):
        return IMPERIAL
    if isinstance(token, (ScalarToken, ScalarSolutionToken)):
        return SCALAR
    if isinstance(token, AreaToken):
        return AREA
    if isinstance(token, VolumeToken):
        return VOLUME
    if isinstance(token, OperatorToken):
        return OperatorToken.kind
    raise TypeError(f"Unknown math token: {type(token).__name__}")


def scalar_value(token: MathToken) -> float:
    text = token.value
    if text in ("", "."):
        return 0.0
    return check_finite(float(text))


def apply_operator(left: MathToken, op: str, right: MathToken) -> MathToken:
    """Combine two operands under the unit rules."""
    left_kind = operand_kind(left)
    right_kind = operand_kind(right)
    kinds = (left_kind, right_kind)

    if kinds == (IMPERIAL, IMPERIAL):
        if op in ("+", "-"):
            total = _SCALAR_OPS[op](to_total_inches(left), to_total_inches(right))
            return length_from_inches(total)
        if op == "x":
            square_inches = check_finite(to_total_inches(left) * to_total_inches(right))
            return AreaToken(square_inches, format_square_inches(square_inches))
        if op == "/":
            divisor = to_total_inches(right)
            if divisor == 0:
                raise DivisionByZeroError()
            ratio = check_finite(to_total_inches(left) / divisor)
            return ScalarSolutionToken(format_number(ratio))

    if op == "x" and kinds in ((SCALAR, IMPERIAL), (IMPERIAL, SCALAR)):
        scalar, length = (left, right) if left_kind == SCALAR else (right, left)
        return length_from_inches(scalar_value(scalar) * to_total_inches(length))

    if op == "x" and kinds in ((AREA, IMPERIAL), (IMPERIAL, AREA)):
        area, length = (left, right) if left_kind == AREA else (right, left)
        cubic_inches = check_finite(area.total_square_inches * to_total_inches(length))
        return VolumeToken(cubic_inches, format_cubic_inches(cubic_inches))

    if kinds == (SCALAR, SCALAR) and op in _SCALAR_OPS:
        divisor = scalar_value(right)
        if op == "/" and divisor == 0:
            raise DivisionByZeroError()
        value = check_finite(_SCALAR_OPS[op](scalar_value(left), divisor))
        return ScalarSolutionToken(format_number(value))

    if kinds == (IMPERIAL, SCALAR) and op == "/":
        divisor = scalar_value(right)
        if divisor == 0:
            raise DivisionByZeroError()
        return length_from_inches(to_total_inches(left) / divisor)

    raise UnsupportedOperationError(left_kind, op, right_kind)
