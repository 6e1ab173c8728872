"""Tests for expression evaluation."""

import pytest

from imperial_calc.errors import ErrorKind
from imperial_calc.evaluator import evaluate, to_postfix
from imperial_calc.tokens import (
    AreaToken,
    ImperialToken,
    LengthToken,
    OperatorToken,
    ScalarSolutionToken,
    ScalarToken,
    VolumeToken,
)
from imperial_calc.units import length_from_inches, to_total_inches


def imp(feet, inches, numerator=0, denominator=16):
    return ImperialToken(feet, inches, numerator, denominator)


def sc(value):
    return ScalarToken(value)


def op(symbol):
    return OperatorToken(symbol)


def test_add_lengths():
    """1ft 6in + 8 1/4in = 2ft 2 1/4in."""
    result = evaluate([imp(1, 6), op("+"), imp(0, 8, 1, 4), op("=")])
    assert result.error is None
    assert result.new_tokens == [LengthToken(26.25, 2, 2, 1, 4)]


def test_subtract_lengths():
    result = evaluate([imp(2, 0), op("-"), imp(0, 6), op("=")])
    assert result.new_tokens == [LengthToken(18, 1, 6, 0, 1)]


def test_negative_subtraction_carries_sign():
    result = evaluate([imp(1, 0), op("-"), imp(2, 0), op("=")])
    assert result.error is None
    assert result.new_tokens == [LengthToken(-12, -1, 0, 0, 1)]


def test_negative_total_keeps_fraction_positive():
    length = length_from_inches(-13.5)
    assert (length.feet, length.inches, length.numerator, length.denominator) == (-1, -1, 1, 2)


def test_scalar_times_length_both_orders():
    left = evaluate([sc("3"), op("x"), imp(0, 4), op("=")])
    right = evaluate([imp(0, 4), op("x"), sc("3"), op("=")])
    assert left.new_tokens == [LengthToken(12, 1, 0, 0, 1)]
    assert right.new_tokens == left.new_tokens


def test_length_times_length_is_area():
    result = evaluate([imp(0, 5), op("x"), imp(0, 10), op("=")])
    assert result.new_tokens == [AreaToken(50, "50.00 sq.in")]


def test_area_in_square_feet():
    result = evaluate([imp(1, 0), op("x"), imp(2, 0), op("=")])
    assert result.new_tokens == [AreaToken(288, "2 sq.ft")]


def test_volume_in_cubic_inches():
    result = evaluate([imp(0, 4), op("x"), imp(0, 3), op("x"), imp(0, 5), op("=")])
    assert result.new_tokens == [VolumeToken(60, "60.00 cu.in")]


def test_volume_in_cubic_feet():
    result = evaluate([imp(1, 0), op("x"), imp(2, 0), op("x"), imp(3, 0), op("=")])
    assert result.new_tokens == [VolumeToken(10368, "6 cu.ft")]


def test_length_times_area_is_volume():
    result = evaluate([imp(0, 6), op("x"), imp(0, 8), op("x"), imp(1, 0), op("=")])
    assert result.new_tokens == [VolumeToken(576, "576.00 cu.in")]


def test_scalar_arithmetic():
    assert evaluate([sc("5.5"), op("+"), sc("3.2"), op("=")]).new_tokens == [
        ScalarSolutionToken("8.7")
    ]
    assert evaluate([sc("7"), op("-"), sc("2"), op("=")]).new_tokens == [
        ScalarSolutionToken("5")
    ]
    assert evaluate([sc("1"), op("/"), sc("4"), op("=")]).new_tokens == [
        ScalarSolutionToken("0.25")
    ]


def test_divide_lengths_is_ratio():
    result = evaluate([imp(1, 0), op("/"), imp(2, 0), op("=")])
    assert result.new_tokens == [ScalarSolutionToken("0.5")]

    result = evaluate([imp(6, 0), op("/"), imp(2, 0), op("=")])
    assert result.new_tokens == [ScalarSolutionToken("3")]


def test_divide_length_by_scalar():
    result = evaluate([imp(6, 0), op("/"), sc("3"), op("=")])
    assert result.new_tokens == [LengthToken(24, 2, 0, 0, 1)]


def test_single_operand():
    result = evaluate([imp(1, 6, 1, 4), op("=")])
    assert result.new_tokens == [LengthToken(18.25, 1, 6, 1, 4)]

    result = evaluate([sc("3.5"), op("=")])
    assert result.new_tokens == [ScalarSolutionToken("3.5")]


def test_multiplication_before_addition():
    """1ft + 3 x 2in = 1ft 6in."""
    result = evaluate([imp(1, 0), op("+"), sc("3"), op("x"), imp(0, 2), op("=")])
    assert result.new_tokens == [LengthToken(18, 1, 6, 0, 1)]


def test_left_to_right_for_equal_precedence():
    result = evaluate([sc("10"), op("-"), sc("3"), op("+"), sc("2"), op("=")])
    assert result.new_tokens == [ScalarSolutionToken("9")]

    result = evaluate([sc("3"), op("+"), sc("4"), op("x"), sc("2"), op("=")])
    assert result.new_tokens == [ScalarSolutionToken("11")]


def test_mixed_chain():
    result = evaluate([sc("2.5"), op("x"), imp(0, 4), op("+"), imp(1, 0), op("=")])
    assert result.new_tokens == [LengthToken(22, 1, 10, 0, 1)]

    result = evaluate([imp(2, 3), op("+"), imp(1, 6), op("-"), imp(0, 8), op("=")])
    assert result.new_tokens == [LengthToken(37, 3, 1, 0, 1)]


def test_prior_result_is_reused_exactly():
    third = evaluate([imp(0, 1), op("/"), sc("3"), op("=")]).new_tokens[0]
    assert (third.numerator, third.denominator) == (11, 32)

    result = evaluate([third, op("x"), sc("3"), op("=")])
    length = result.new_tokens[0]
    assert length.total_inches == pytest.approx(1)
    assert (length.feet, length.inches, length.numerator) == (0, 1, 0)


def test_division_by_zero_returns_input():
    tokens = [sc("5"), op("/"), sc("0"), op("=")]
    result = evaluate(tokens)
    assert result.error.kind is ErrorKind.DIVISION_BY_ZERO
    assert result.error.message == "Division by zero"
    assert result.new_tokens == tokens


def test_length_divided_by_zero():
    assert evaluate([imp(1, 0), op("/"), sc("0"), op("=")]).error.kind is ErrorKind.DIVISION_BY_ZERO
    assert evaluate([imp(1, 0), op("/"), imp(0, 0), op("=")]).error.kind is ErrorKind.DIVISION_BY_ZERO


def test_missing_equals():
    tokens = [sc("5"), op("+"), sc("3")]
    result = evaluate(tokens)
    assert result.error.kind is ErrorKind.NO_EQUALS_FOUND
    assert result.error.message == "No equals operator found"
    assert result.new_tokens == tokens


def test_empty_expression():
    result = evaluate([op("=")])
    assert result.error.kind is ErrorKind.EMPTY_EXPRESSION
    assert result.error.message == "That doesn't make any sense"


def test_operand_shortage():
    for tokens in (
        [imp(0, 5), op("x"), op("+"), op("-"), op("=")],
        [op("+"), sc("5"), op("=")],
        [sc("5"), op("+"), op("=")],
    ):
        result = evaluate(tokens)
        assert result.error.kind is ErrorKind.INVALID_EXPRESSION
        assert "not enough operands" in result.error.message
        assert result.new_tokens == tokens


def test_adjacent_operands():
    result = evaluate([sc("5"), sc("3"), op("=")])
    assert "incorrect number of operands" in result.error.message


def test_multiple_equals_fails_unchanged():
    tokens = [sc("5"), op("+"), sc("3"), op("="), sc("2"), op("=")]
    result = evaluate(tokens)
    assert result.error is not None
    assert result.new_tokens == tokens


def test_unsupported_combinations():
    result = evaluate([imp(5, 0), op("+"), sc("3"), op("=")])
    assert result.error.kind is ErrorKind.UNSUPPORTED_OPERATION
    assert result.error.message == "Unsupported operation: Imperial + Scalar"

    area = AreaToken(50, "50.00 sq.in")
    result = evaluate([area, op("/"), imp(0, 5), op("=")])
    assert result.error.message == "Unsupported operation: Area / Imperial"


def test_to_postfix_orders_by_precedence():
    tokens = [sc("1"), op("+"), sc("2"), op("x"), sc("3")]
    assert to_postfix(tokens) == [sc("1"), sc("2"), sc("3"), op("x"), op("+")]


@pytest.mark.parametrize(
    "token",
    [
        imp(0, 0, 1, 2),
        imp(0, 3, 1, 4),
        imp(2, 7, 3, 8),
        imp(10, 11, 1, 16),
        imp(0, 1, 5, 32),
    ],
)
def test_decompose_round_trip(token):
    length = length_from_inches(to_total_inches(token))
    assert abs(to_total_inches(length) - to_total_inches(token)) <= 1 / 64
    rebuilt = ImperialToken(length.feet, length.inches, length.numerator, length.denominator)
    assert abs(to_total_inches(rebuilt) - to_total_inches(token)) <= 1 / 64


def test_results_too_large_are_invalid():
    huge = sc("1" + "0" * 300)
    result = evaluate([huge, op("x"), huge, op("=")])
    assert result.error.kind is ErrorKind.INVALID_EXPRESSION
    assert result.error.message == "Invalid expression: number too large"

    result = evaluate([sc("9" * 320), op("x"), imp(0, 2), op("=")])
    assert result.error.message == "Invalid expression: number too large"

    tokens = [imp(int("9" * 320), 0), op("+"), imp(0, 1), op("=")]
    result = evaluate(tokens)
    assert result.error.kind is ErrorKind.INVALID_EXPRESSION
    assert result.new_tokens == tokens
