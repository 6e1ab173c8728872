"""
Error taxonomy for the calculator core.

Every error here is recoverable: the validator and evaluator raise them,
the session reports them to the user and leaves its state untouched.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable error categories surfaced to the front end."""

    EMPTY_EXPRESSION = "EmptyExpression"
    CONSECUTIVE_OPERATOR = "ConsecutiveOperator"
    MIXED_TYPE = "MixedType"
    DIVISION_BY_ZERO = "DivisionByZero"
    UNSUPPORTED_OPERATION = "UnsupportedOperation"
    INVALID_EXPRESSION = "InvalidExpression"
    NO_EQUALS_FOUND = "NoEqualsFound"


class CalculatorError(Exception):
    """Base class for every user-facing calculator error."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class EmptyExpressionError(CalculatorError):
    kind = ErrorKind.EMPTY_EXPRESSION

    def __init__(self):
        super().__init__("That doesn't make any sense")


class ConsecutiveOperatorError(CalculatorError):
    kind = ErrorKind.CONSECUTIVE_OPERATOR

    def __init__(self):
        super().__init__("Cannot enter consecutive operators")


class MixedTypeError(CalculatorError):
    kind = ErrorKind.MIXED_TYPE

    def __init__(self):
        super().__init__("Cannot mix scalar and Imperial measurements")


class DivisionByZeroError(CalculatorError):
    kind = ErrorKind.DIVISION_BY_ZERO

    def __init__(self):
        super().__init__("Division by zero")


class UnsupportedOperationError(CalculatorError):
    kind = ErrorKind.UNSUPPORTED_OPERATION

    def __init__(self, left_kind: str, operator: str, right_kind: str):
        super().__init__(f"Unsupported operation: {left_kind} {operator} {right_kind}")
        self.left_kind = left_kind
        self.operator = operator
        self.right_kind = right_kind


class InvalidExpressionError(CalculatorError):
    kind = ErrorKind.INVALID_EXPRESSION

    def __init__(self, reason: str):
        super().__init__(f"Invalid expression: {reason}")
        self.reason = reason


class NoEqualsFoundError(CalculatorError):
    kind = ErrorKind.NO_EQUALS_FOUND

    def __init__(self):
        super().__init__("No equals operator found")


__all__ = [
    "ErrorKind",
    "CalculatorError",
    "EmptyExpressionError",
    "ConsecutiveOperatorError",
    "MixedTypeError",
    "DivisionByZeroError",
    "UnsupportedOperationError",
    "InvalidExpressionError",
    "NoEqualsFoundError",
]
