"""Keystroke validation.

Decides whether a key press may join the accepted-token log given the
current entry mode and the previously accepted token. Rejections raise a
``CalculatorError``; nothing is mutated here.
"""

from typing import Optional, Sequence

from .errors import (
    ConsecutiveOperatorError,
    EmptyExpressionError,
    InvalidExpressionError,
    MixedTypeError,
)
from .tokens import EntryMode, InputToken, Pad


def validate_token(
    mode: EntryMode, token: InputToken, previous: Optional[InputToken] = None
) -> None:
    """
    Check one key press against the entry mode.

    Args:
        mode: Current entry mode of the session
        token: Key press to check
        previous: Last accepted token in the log, if any

    Raises:
        ConsecutiveOperatorError: Operator directly after an operator
        EmptyExpressionError: Operator with no operand before it
        MixedTypeError: Scalar key inside an Imperial operand or vice versa
        InvalidExpressionError: Any non-control key while in Error mode
    """
    if token.pad is Pad.CONTROL:
        return

    if token.pad is Pad.OPERATOR:
        if previous is not None and previous.pad is Pad.OPERATOR:
            raise ConsecutiveOperatorError()
        if mode is EntryMode.INPUT:
            raise EmptyExpressionError()
        if mode in (EntryMode.IMPERIAL, EntryMode.SCALAR):
            return
        raise InvalidExpressionError("invalid state for operator")

    if token.pad is Pad.SCALAR:
        if mode is EntryMode.IMPERIAL:
            raise MixedTypeError()
        if mode in (EntryMode.INPUT, EntryMode.SCALAR):
            return
        raise InvalidExpressionError("invalid state for scalar input")

    # Feet / Inches
    if mode is EntryMode.SCALAR:
        raise MixedTypeError()
    if mode in (EntryMode.INPUT, EntryMode.IMPERIAL):
        return
    raise InvalidExpressionError("invalid state for Imperial input")


def validate_sequence(tokens: Sequence[InputToken]) -> None:
    """Reject a log holding two adjacent operators."""
    for prev, current in zip(tokens, tokens[1:]):
        if prev.pad is Pad.OPERATOR and current.pad is Pad.OPERATOR:
            raise ConsecutiveOperatorError()
