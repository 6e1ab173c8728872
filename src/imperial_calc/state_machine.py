"""
Input state machine.

Tracks the entry mode and the live per-pad values shown on the keypads.
``apply`` is a pure transition: it never mutates the state it is given.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional

from .tokens import (
    BACKSPACE,
    CLEAR,
    DECIMAL_POINT,
    DEFAULT_DENOMINATOR,
    ERROR_TIMEOUT,
    EntryMode,
    InputToken,
    Pad,
    parse_fraction,
)

FEET_PAD = "feet"
INCHES_PAD = "inches"
SCALAR_PAD = "scalar"


@dataclass(frozen=True, slots=True)
class PadValue:
    whole: int = 0
    numerator: int = 0
    denominator: int = DEFAULT_DENOMINATOR


@dataclass(frozen=True, slots=True)
class ScalarValue:
    value: str = ""


@dataclass(frozen=True, slots=True)
class Measurements:
    feet: PadValue = field(default_factory=PadValue)
    inches: PadValue = field(default_factory=PadValue)
    scalar: ScalarValue = field(default_factory=ScalarValue)


@dataclass(frozen=True, slots=True)
class CalculatorState:
    mode: EntryMode = EntryMode.INPUT
    measurements: Measurements = field(default_factory=Measurements)
    active_pad: Optional[str] = None
    fraction_denominator: int = DEFAULT_DENOMINATOR


def initial_state(fraction_denominator: int = DEFAULT_DENOMINATOR) -> CalculatorState:
    return CalculatorState(
        measurements=Measurements(inches=PadValue(denominator=fraction_denominator)),
        fraction_denominator=fraction_denominator,
    )


def apply(state: CalculatorState, token: InputToken) -> CalculatorState:
    """Return the state that follows ``state`` after ``token``."""
    if token.pad is Pad.CONTROL:
        return _apply_control(state, token)
    if token.pad is Pad.OPERATOR:
        return _apply_operator(state)
    if token.pad is Pad.SCALAR:
        return _apply_scalar(state, token)
    return _apply_imperial(state, token)


def _apply_control(state: CalculatorState, token: InputToken) -> CalculatorState:
    if token.key == CLEAR:
        return initial_state(state.fraction_denominator)
    if token.key == BACKSPACE:
        return _apply_backspace(state)
    if token.key == ERROR_TIMEOUT and state.mode is EntryMode.ERROR:
        return replace(state, mode=EntryMode.INPUT)
    return state


def _apply_operator(state: CalculatorState) -> CalculatorState:
    if state.mode in (EntryMode.IMPERIAL, EntryMode.SCALAR):
        return replace(state, mode=EntryMode.INPUT)
    if state.mode is EntryMode.INPUT:
        return replace(state, mode=EntryMode.ERROR)
    return state


def _apply_scalar(state: CalculatorState, token: InputToken) -> CalculatorState:
    if state.mode is EntryMode.IMPERIAL:
        return replace(state, active_pad=SCALAR_PAD, mode=EntryMode.ERROR)

    mode = EntryMode.SCALAR if state.mode is EntryMode.INPUT else state.mode
    current = state.measurements.scalar.value
    if token.key == DECIMAL_POINT:
        value = current if DECIMAL_POINT in current else current + DECIMAL_POINT
    else:
        value = current + token.key

    measurements = replace(state.measurements, scalar=ScalarValue(value))
    return replace(state, mode=mode, active_pad=SCALAR_PAD, measurements=measurements)


def _apply_imperial(state: CalculatorState, token: InputToken) -> CalculatorState:
    pad_name = FEET_PAD if token.pad is Pad.FEET else INCHES_PAD
    if state.mode is EntryMode.SCALAR:
        return replace(state, active_pad=pad_name, mode=EntryMode.ERROR)

    mode = EntryMode.IMPERIAL if state.mode is EntryMode.INPUT else state.mode
    current: PadValue = getattr(state.measurements, pad_name)
    if token.is_fraction:
        numerator, denominator = parse_fraction(token.key)
        updated = replace(current, numerator=numerator, denominator=denominator)
    else:
        updated = replace(current, whole=current.whole * 10 + int(token.key))

    measurements = replace(state.measurements, **{pad_name: updated})
    return replace(state, mode=mode, active_pad=pad_name, measurements=measurements)


def _apply_backspace(state: CalculatorState) -> CalculatorState:
    if state.active_pad is None:
        return state

    if state.active_pad == SCALAR_PAD:
        scalar = ScalarValue(state.measurements.scalar.value[:-1])
        return replace(state, measurements=replace(state.measurements, scalar=scalar))

    current: PadValue = getattr(state.measurements, state.active_pad)
    updated = replace(current, whole=current.whole // 10)
    return replace(
        state, measurements=replace(state.measurements, **{state.active_pad: updated})
    )


def replay(tokens: Iterable[InputToken], state: CalculatorState) -> CalculatorState:
    """Fold ``tokens`` through ``apply`` starting from ``state``."""
    for token in tokens:
        state = apply(state, token)
    return state
