"""
Math-token accumulation.

Folds the accepted key presses into typed operands and operators, and edits
that folded form for backspace. ``expand`` writes an edited sequence back as
a canonical key log so the two views stay in step.
"""

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Union

from .tokens import (
    DECIMAL_POINT,
    DEFAULT_DENOMINATOR,
    ImperialToken,
    InputToken,
    MathToken,
    OperatorToken,
    Pad,
    ScalarToken,
    parse_fraction,
)

Operand = Union[ImperialToken, ScalarToken]


def accumulate(tokens: Iterable[InputToken]) -> List[MathToken]:
    """Fold an accepted-token log into a math-token sequence."""
    math_tokens: List[MathToken] = []
    current: Optional[Operand] = None

    for token in tokens:
        if token.pad is Pad.CONTROL:
            continue

        if token.pad is Pad.OPERATOR:
            if current is not None:
                math_tokens.append(current)
                current = None
            math_tokens.append(OperatorToken(token.key))
            continue

        if token.pad is Pad.SCALAR:
            if not isinstance(current, ScalarToken):
                if current is not None:
                    math_tokens.append(current)
                current = ScalarToken()
            current = _extend_scalar(current, token)
            continue

        if not isinstance(current, ImperialToken):
            if current is not None:
                math_tokens.append(current)
            current = ImperialToken()
        current = _extend_imperial(current, token)

    if current is not None:
        math_tokens.append(current)
    return math_tokens


def _extend_imperial(operand: ImperialToken, token: InputToken) -> ImperialToken:
    if token.is_fraction:
        numerator, denominator = parse_fraction(token.key)
        return replace(operand, numerator=numerator, denominator=denominator)
    digit = int(token.key)
    if token.pad is Pad.FEET:
        return replace(operand, feet=operand.feet * 10 + digit)
    return replace(operand, inches=operand.inches * 10 + digit)


def _extend_scalar(operand: ScalarToken, token: InputToken) -> ScalarToken:
    if token.key == DECIMAL_POINT and DECIMAL_POINT in operand.value:
        return operand
    return ScalarToken(operand.value + token.key)


def remove_last_useful_token(tokens: Sequence[MathToken]) -> List[MathToken]:
    """
    Undo the most recent piece of input in a math-token sequence.

    Imperial operands lose a feet digit, then an inches digit, then their
    fraction, and disappear once nothing is left. Scalars lose their last
    character. Operators and results are removed whole.
    """
    if not tokens:
        return []

    head, last = list(tokens[:-1]), tokens[-1]

    if isinstance(last, ImperialToken):
        if last.feet > 0:
            last = replace(last, feet=last.feet // 10)
        elif last.inches > 0:
            last = replace(last, inches=last.inches // 10)
        elif last.has_fraction:
            last = replace(last, numerator=0, denominator=DEFAULT_DENOMINATOR)
        if last.feet or last.inches or last.has_fraction:
            head.append(last)
        return head

    if isinstance(last, ScalarToken):
        if len(last.value) > 1:
            head.append(ScalarToken(last.value[:-1]))
        return head

    return head


def expand(tokens: Iterable[MathToken]) -> List[InputToken]:
    """
    Rebuild a key log that accumulates back to ``tokens``.

    Only typed operands and operators can be expanded; computed results
    have no keystroke form.
    """
    log: List[InputToken] = []
    for token in tokens:
        if isinstance(token, OperatorToken):
            log.append(InputToken(Pad.OPERATOR, token.operator))
        elif isinstance(token, ImperialToken):
            log.extend(_expand_imperial(token))
        elif isinstance(token, ScalarToken):
            log.extend(InputToken(Pad.SCALAR, ch) for ch in (token.value or "0"))
        else:
            raise TypeError(f"Cannot expand {type(token).__name__} into key presses")
    return log


def _expand_imperial(token: ImperialToken) -> List[InputToken]:
    keys: List[InputToken] = []
    if token.feet:
        keys.extend(InputToken(Pad.FEET, ch) for ch in str(token.feet))
    if token.inches:
        keys.extend(InputToken(Pad.INCHES, ch) for ch in str(token.inches))
    if token.has_fraction:
        keys.append(InputToken(Pad.INCHES, f"{token.numerator}/{token.denominator}"))
    if not keys:
        keys.append(InputToken(Pad.FEET, "0"))
    return keys
