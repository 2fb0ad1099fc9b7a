"""Unit tests for strict numeric parsing and its messages."""

from __future__ import annotations

from decimal import Decimal

import pytest

from formrules import messages
from formrules.graph_validator import DIMENSION_SPEC, PERCENTILE_SPEC, YAXIS_SPEC
from formrules.numeric import NumericErrorKind, NumericSpec, parse_decimal, validate_numeric

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("raw", ["20,5", "1,3", "88,9", "0,1"])
def test_comma_input_is_never_truncated(raw: str) -> None:
    """Comma-containing input is not a number, whatever precedes the comma."""

    assert parse_decimal(raw) is None
    result = validate_numeric(raw, YAXIS_SPEC, mandatory=True)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.not_a_number


@pytest.mark.parametrize("raw", ["1e5", "0x10", "1.2.3", "--1", "+", ".", "12 3", "inf", "NaN"])
def test_parse_decimal_rejects_non_literals(raw: str) -> None:
    assert parse_decimal(raw) is None


@pytest.mark.parametrize(("raw", "expected"), [("5", "5"), ("-0.25", "-0.25"), ("+7.", "7"), (".5", "0.5")])
def test_parse_decimal_accepts_plain_literals(raw: str, expected: str) -> None:
    assert parse_decimal(raw) == Decimal(expected)


@pytest.mark.parametrize("raw", ["-100", "-1", "0", "19", "65536", ""])
def test_dimension_out_of_range(raw: str) -> None:
    """Integer dimensions outside [20, 65535] are range errors; blank reads as 0."""

    result = validate_numeric(raw, DIMENSION_SPEC, mandatory=True)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.out_of_range
    assert result.error.raw == (raw or "0")


@pytest.mark.parametrize("raw", ["test", "value", "-"])
def test_dimension_text_is_reported_as_zero(raw: str) -> None:
    result = validate_numeric(raw, DIMENSION_SPEC, mandatory=True)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.out_of_range
    assert messages.numeric_error_message(result.error, "Width") == (
        'Incorrect value "0" for "Width" field: must be between 20 and 65535.'
    )


@pytest.mark.parametrize("raw", ["1.2", "15.5", "900.0"])
def test_dimension_rejects_fractions(raw: str) -> None:
    result = validate_numeric(raw, DIMENSION_SPEC, mandatory=True)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.not_integer
    assert messages.numeric_error_message(result.error, "Height") == 'Field "Height" is not integer.'


@pytest.mark.parametrize("raw", ["20", "900", "65535", " 200 "])
def test_dimension_accepts_in_range_integers(raw: str) -> None:
    result = validate_numeric(raw, DIMENSION_SPEC, mandatory=True)
    assert result.ok
    assert result.value == Decimal(raw.strip())


def test_fraction_digits_are_counted_literally() -> None:
    assert validate_numeric("99.9999", PERCENTILE_SPEC).ok
    result = validate_numeric("1.99999", PERCENTILE_SPEC)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.too_many_fractional_digits


def test_fraction_digits_take_precedence_over_range() -> None:
    result = validate_numeric("101.12345", PERCENTILE_SPEC)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.too_many_fractional_digits


@pytest.mark.parametrize("raw", ["12345678999999998", "-90000000000000000", "10000000000000000"])
def test_magnitude_beyond_ceiling_is_too_large(raw: str) -> None:
    result = validate_numeric(raw, YAXIS_SPEC, mandatory=True)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.number_too_large
    assert messages.numeric_error_message(result.error, "yaxismin") == (
        'Field "yaxismin" is not correct: a number is too large'
    )


def test_largest_storable_value_is_accepted() -> None:
    assert validate_numeric("9999999999999999", YAXIS_SPEC).ok
    assert validate_numeric("-9999999999999999.9999", YAXIS_SPEC).ok


def test_negative_percentile_is_out_of_range() -> None:
    result = validate_numeric("-900000", PERCENTILE_SPEC)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.out_of_range
    assert messages.numeric_error_message(result.error, "Percentile line (left)") == (
        'Incorrect value "-900000" for "Percentile line (left)" field: must be between 0 and 100, '
        "and have no more than 4 digits after the decimal point."
    )


def test_blank_input_depends_on_mandatory_flag() -> None:
    optional = validate_numeric("  ", YAXIS_SPEC)
    assert optional.ok
    assert optional.value is None

    required = validate_numeric(None, YAXIS_SPEC, mandatory=True)
    assert required.error is not None
    assert required.error.kind is NumericErrorKind.mandatory
    assert messages.numeric_error_message(required.error, "yaxismax") == 'Field "yaxismax" is mandatory.'


def test_unbounded_negative_rule_reports_zero_floor() -> None:
    spec = NumericSpec(max_value=Decimal(10), allow_negative=False)
    result = validate_numeric("-1", spec)
    assert result.error is not None
    assert messages.numeric_error_message(result.error, "Delay") == (
        'Incorrect value "-1" for "Delay" field: must be between 0 and 10.'
    )


def test_format_number_drops_exponent_and_trailing_zeros() -> None:
    assert messages.format_number(Decimal("65535")) == "65535"
    assert messages.format_number(Decimal("1E+2")) == "100"
    assert messages.format_number(Decimal("0.5000")) == "0.5"


@pytest.mark.parametrize("raw", ["20,5", "50,9", "900px", "1 000"])
def test_dimension_with_digits_is_not_coerced(raw: str) -> None:
    """Malformed numbers in dimensions are not a number, never read as 0 or truncated."""

    result = validate_numeric(raw, DIMENSION_SPEC, mandatory=True)
    assert result.error is not None
    assert result.error.kind is NumericErrorKind.not_a_number
    assert messages.numeric_error_message(result.error, "Width") == (
        'Field "Width" is not correct: a number is expected'
    )
