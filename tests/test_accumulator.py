"""Tests for math-token accumulation and backspace."""

from imperial_calc.accumulator import accumulate, expand, remove_last_useful_token
from imperial_calc.formatting import format_tokens
from imperial_calc.tokens import (
    ImperialToken,
    LengthToken,
    OperatorToken,
    ScalarToken,
    create_token,
)


def test_feet_digits_accumulate():
    tokens = accumulate([create_token("Feet", "5"), create_token("Feet", "2")])
    assert tokens == [ImperialToken(52, 0, 0, 16)]


def test_inches_with_fraction():
    tokens = accumulate([create_token("Inches", "3"), create_token("Inches", "1/2")])
    assert tokens == [ImperialToken(0, 3, 1, 2)]


def test_scalar_decimal():
    keys = [create_token("Scalar", k) for k in ("3", ".", "1", ".", "4")]
    assert accumulate(keys) == [ScalarToken("3.14")]


def test_operator_splits_operands():
    tokens = accumulate(
        [
            create_token("Feet", "5"),
            create_token("Operator", "+"),
            create_token("Inches", "3"),
            create_token("Inches", "1/4"),
        ]
    )
    assert tokens == [ImperialToken(5, 0), OperatorToken("+"), ImperialToken(0, 3, 1, 4)]


def test_fraction_overwrites_and_order_is_free():
    tokens = accumulate(
        [
            create_token("Inches", "2/16"),
            create_token("Inches", "4"),
            create_token("Feet", "5"),
            create_token("Inches", "3/8"),
        ]
    )
    assert tokens == [ImperialToken(5, 4, 3, 8)]


def test_control_tokens_ignored():
    tokens = accumulate(
        [create_token("Scalar", "7"), create_token("Control", "Backspace"), create_token("Scalar", "1")]
    )
    assert tokens == [ScalarToken("71")]


def test_equals_kept_for_evaluator():
    tokens = accumulate([create_token("Scalar", "7"), create_token("Operator", "=")])
    assert tokens == [ScalarToken("7"), OperatorToken("=")]


def test_backspace_exhausts_imperial_then_operator():
    tokens = [ScalarToken("2"), OperatorToken("x"), ImperialToken(12, 3, 1, 4)]
    seen = []
    while tokens:
        tokens = remove_last_useful_token(tokens)
        seen.append(format_tokens(tokens))
    assert seen == [
        "2 x 1ft 3 1/4in",
        "2 x 3 1/4in",
        "2 x 1/4in",
        "2 x ",
        "2",
        "",
    ]


def test_backspace_scalar_characters():
    tokens = remove_last_useful_token([ScalarToken("3.5")])
    assert tokens == [ScalarToken("3.")]
    tokens = remove_last_useful_token(tokens)
    assert tokens == [ScalarToken("3")]
    assert remove_last_useful_token(tokens) == []


def test_backspace_drops_result_token():
    assert remove_last_useful_token([LengthToken(30, 2, 6, 0, 1)]) == []
    assert remove_last_useful_token([]) == []


def test_backspace_does_not_mutate_input():
    tokens = [ImperialToken(4, 0)]
    remove_last_useful_token(tokens)
    assert tokens == [ImperialToken(4, 0)]


def test_expand_round_trip():
    tokens = [
        ImperialToken(12, 4, 3, 8),
        OperatorToken("x"),
        ScalarToken("2.5"),
        OperatorToken("-"),
        ImperialToken(0, 0, 1, 2),
        OperatorToken("+"),
        ImperialToken(0, 0),
    ]
    assert accumulate(expand(tokens)) == tokens
