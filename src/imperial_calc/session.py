"""
Calculator session.

Owns everything one user is doing: the accepted-key log, the live pad state,
the carried result of the last calculation, the error overlay with its
recovery timers, and a short calculation history. Every key press is handled
to completion under the session lock.
"""

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass, replace
from typing import Dict, List, Optional

from .accumulator import accumulate, expand, remove_last_useful_token
from .config import SessionConfig
from .errors import CalculatorError
from .evaluator import evaluate
from .formatting import format_token, format_tokens
from .state_machine import CalculatorState, Measurements, apply, initial_state, replay
from .tokens import (
    BACKSPACE,
    CLEAR,
    DEFAULT_DENOMINATOR,
    EQUALS,
    ERROR_TIMEOUT,
    RESULT_TYPES,
    SELECTABLE_DENOMINATORS,
    AreaToken,
    EntryMode,
    ImperialToken,
    InputToken,
    LengthToken,
    MathToken,
    Pad,
    ScalarSolutionToken,
    ScalarToken,
    VolumeToken,
)
from .validation import validate_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    expression: str
    result: str


@dataclass(frozen=True, slots=True)
class SubmitResult:
    """What the front end needs after one key press."""

    accepted: bool
    state: CalculatorState
    display: str
    error: Optional[CalculatorError] = None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind.value if self.error else None


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    result_display: str
    expression_display: str
    error: Optional[CalculatorError] = None

    @property
    def error_kind(self) -> Optional[str]:
        return self.error.kind.value if self.error else None


def mode_for(token: MathToken) -> EntryMode:
    """Entry mode implied by a trailing token."""
    if isinstance(token, (ImperialToken, LengthToken, AreaToken, VolumeToken)):
        return EntryMode.IMPERIAL
    if isinstance(token, (ScalarToken, ScalarSolutionToken)):
        return EntryMode.SCALAR
    return EntryMode.INPUT


class CalculatorSession:
    """Calculator session managing input, evaluation and error recovery."""

    def __init__(self, config: Optional[SessionConfig] = None):
        self.config = config or SessionConfig()
        self.config.validate()
        self._lock = threading.RLock()
        self._history: deque = deque(maxlen=self.config.history_size)
        self._timers: List[threading.Timer] = []
        self._generation = 0
        self._denominator = self.config.fraction_denominator
        self._state = initial_state(self._denominator)
        self._log: List[InputToken] = []
        self._carry: Optional[MathToken] = None
        self._error: Optional[CalculatorError] = None
        self._last_expression = ""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> CalculatorState:
        with self._lock:
            return self._state

    @property
    def mode(self) -> EntryMode:
        with self._lock:
            return self._state.mode

    @property
    def measurements(self) -> Measurements:
        with self._lock:
            return self._state.measurements

    @property
    def fraction_denominator(self) -> int:
        with self._lock:
            return self._denominator

    @property
    def input_tokens(self) -> List[InputToken]:
        with self._lock:
            return list(self._log)

    @property
    def math_tokens(self) -> List[MathToken]:
        with self._lock:
            tokens = accumulate(self._log)
            if self._carry is not None:
                tokens.insert(0, self._carry)
            return tokens

    @property
    def display(self) -> str:
        return format_tokens(self.math_tokens)

    @property
    def error(self) -> Optional[CalculatorError]:
        with self._lock:
            return self._error

    @property
    def error_message(self) -> Optional[str]:
        with self._lock:
            return self._error.message if self._error else None

    @property
    def history(self) -> List[HistoryEntry]:
        with self._lock:
            return list(self._history)

    def snapshot(self) -> Dict:
        """Plain-dict view of the session for JSON responses."""
        with self._lock:
            return {
                "mode": self._state.mode.value,
                "display": self.display,
                "error": self.error_message,
                "error_kind": self._error.kind.value if self._error else None,
                "active_pad": self._state.active_pad,
                "fraction_denominator": self._denominator,
                "measurements": asdict(self._state.measurements),
                "history": [asdict(entry) for entry in self._history],
                "input_token_count": len(self._log),
            }

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def submit(self, token: InputToken) -> SubmitResult:
        """
        Process one key press.

        Args:
            token: Key press from the front end

        Returns:
            SubmitResult describing whether the key was accepted, the new
            state and display, and the error when it was rejected
        """
        if token.pad is Pad.CONTROL:
            if token.key == CLEAR:
                return self.clear()
            if token.key == BACKSPACE:
                return self.backspace()
            if token.key == ERROR_TIMEOUT:
                return self.error_timeout()

        with self._lock:
            logger.debug("Processing token %s %r (mode=%s)", token.pad.value, token.key, self.mode.value)
            self._cancel_timers()
            if self._state.mode is EntryMode.ERROR:
                self._recover()

            # a new operand right after a result starts a new calculation
            if token.is_operand and self._carry is not None and not self._log:
                self._carry = None
                self._state = initial_state(self._denominator)

            previous = self._log[-1] if self._log else None
            try:
                validate_token(self._state.mode, token, previous)
            except CalculatorError as e:
                return self._reject(e)

            self._state = apply(self._state, token)
            self._log.append(token)
            self._error = None

            if token.pad is Pad.OPERATOR and token.key == EQUALS:
                return self._evaluate()
            return self._result(True)

    def request_evaluation(self) -> EvaluationResult:
        """Press ``=`` and report the outcome."""
        with self._lock:
            outcome = self.submit(InputToken(Pad.OPERATOR, EQUALS))
            if outcome.error is not None:
                return EvaluationResult(
                    result_display="",
                    expression_display=outcome.display,
                    error=outcome.error,
                )
            return EvaluationResult(
                result_display=outcome.display,
                expression_display=self._last_expression,
            )

    def backspace(self) -> SubmitResult:
        """Remove the most recent piece of input and clear any error."""
        with self._lock:
            self._cancel_timers()
            edited = remove_last_useful_token(self.math_tokens)
            self._store(edited)
            self._error = None
            self._state = self._rebuild_state()
            return self._result(True)

    def clear(self) -> SubmitResult:
        """Reset to an empty expression, keeping the fraction denominator."""
        with self._lock:
            self._cancel_timers()
            self._state = apply(self._state, InputToken(Pad.CONTROL, CLEAR))
            self._log = []
            self._carry = None
            self._error = None
            return self._result(True)

    def reset(self) -> SubmitResult:
        """Clear, then also drop the history and restore the configured denominator."""
        with self._lock:
            self._denominator = self.config.fraction_denominator
            self._history.clear()
            self._last_expression = ""
            self._state = initial_state(self._denominator)
            return self.clear()

    def error_timeout(self) -> SubmitResult:
        """Leave Error mode for the mode the current expression implies."""
        with self._lock:
            if self._state.mode is EntryMode.ERROR:
                self._recover()
            return self._result(True)

    def set_fraction_denominator(self, denominator: int) -> SubmitResult:
        """Select the inches-pad fraction denominator (8, 16 or 32).

        Any fraction already picked for the operand being composed is reset.
        """
        if denominator not in SELECTABLE_DENOMINATORS:
            raise ValueError(f"denominator must be one of {SELECTABLE_DENOMINATORS}")

        with self._lock:
            self._denominator = denominator
            tokens = self.math_tokens
            if tokens and isinstance(tokens[-1], ImperialToken) and tokens[-1].has_fraction:
                tokens[-1] = replace(tokens[-1], numerator=0, denominator=DEFAULT_DENOMINATOR)
                self._store(tokens)
                if self._state.mode is not EntryMode.ERROR:
                    self._state = self._rebuild_state()

            measurements = self._state.measurements
            inches = replace(measurements.inches, numerator=0, denominator=denominator)
            self._state = replace(
                self._state,
                fraction_denominator=denominator,
                measurements=replace(measurements, inches=inches),
            )
            return self._result(True)

    def close(self) -> None:
        with self._lock:
            self._cancel_timers()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _evaluate(self) -> SubmitResult:
        tokens = self.math_tokens
        outcome = evaluate(tokens)
        if outcome.error is not None:
            # withdraw the pending "="
            self._log.pop()
            self._state = self._rebuild_state()
            return self._reject(outcome.error)

        result = outcome.new_tokens[0]
        self._last_expression = format_tokens(tokens[:-1])
        entry = HistoryEntry(self._last_expression, format_token(result))
        self._history.append(entry)
        logger.info("Evaluated %s = %s", entry.expression, entry.result)

        self._carry = result
        self._log = []
        self._state = self._rebuild_state()
        return self._result(True)

    def _reject(self, error: CalculatorError) -> SubmitResult:
        logger.info("Rejected input: %s", error.message)
        self._error = error
        self._state = replace(self._state, mode=EntryMode.ERROR)
        self._start_timers()
        return self._result(False)

    def _recover(self) -> None:
        self._state = self._rebuild_state()

    def _rebuild_state(self) -> CalculatorState:
        base = initial_state(self._denominator)
        if self._carry is not None:
            base = replace(base, mode=mode_for(self._carry))
        return replay(self._log, base)

    def _store(self, tokens: List[MathToken]) -> None:
        """Write an edited math-token sequence back as carry + key log."""
        if tokens and isinstance(tokens[0], RESULT_TYPES):
            self._carry, rest = tokens[0], tokens[1:]
        else:
            self._carry, rest = None, tokens
        self._log = expand(rest)

    def _result(self, accepted: bool) -> SubmitResult:
        return SubmitResult(
            accepted=accepted,
            state=self._state,
            display=self.display,
            error=self._error,
        )

    def _start_timers(self) -> None:
        if not self.config.auto_recover:
            return
        generation = self._generation
        schedule = (
            (self.config.error_mode_timeout, self._on_mode_timeout),
            (self.config.error_banner_timeout, self._on_banner_timeout),
        )
        for delay, callback in schedule:
            timer = threading.Timer(delay, callback, args=(generation,))
            timer.daemon = True
            timer.start()
            self._timers.append(timer)

    def _cancel_timers(self) -> None:
        self._generation += 1
        for timer in self._timers:
            timer.cancel()
        self._timers = []

    def _on_mode_timeout(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self.error_timeout()

    def _on_banner_timeout(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._error = None
