"""Imperial feet/inches/fraction calculator core."""

from .accumulator import accumulate, expand, remove_last_useful_token
from .config import SessionConfig
from .errors import CalculatorError, ErrorKind
from .evaluator import CalculationResult, evaluate
from .formatting import format_token, format_tokens
from .session import CalculatorSession, EvaluationResult, HistoryEntry, SubmitResult
from .state_machine import CalculatorState, apply, initial_state
from .tokens import EntryMode, InputToken, Pad, create_token
from .validation import validate_sequence, validate_token

__all__ = [
    "accumulate",
    "expand",
    "remove_last_useful_token",
    "SessionConfig",
    "CalculatorError",
    "ErrorKind",
    "CalculationResult",
    "evaluate",
    "format_token",
    "format_tokens",
    "CalculatorSession",
    "EvaluationResult",
    "HistoryEntry",
    "SubmitResult",
    "CalculatorState",
    "apply",
    "initial_state",
    "EntryMode",
    "InputToken",
    "Pad",
    "create_token",
    "validate_sequence",
    "validate_token",
]
