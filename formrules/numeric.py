"""Strict numeric parsing for form inputs.

Form inputs arrive as raw strings typed by a user (or a browser driver). This
module turns them into Decimals under locale-strict rules:

- only an optional leading sign, digits, and a single dot are accepted
  (a comma is never treated as a decimal separator),
- fractional digits are counted literally and capped per field,
- magnitudes at or beyond a storable ceiling are reported separately from
  range violations.

The module is pure: no Django imports, no database access.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Final

# Largest magnitude a graph numeric column can store (exclusive).
STORABLE_CEILING: Final[Decimal] = Decimal("1e16")

_NUMBER_RE: Final[re.Pattern[str]] = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_HAS_DIGIT_RE: Final[re.Pattern[str]] = re.compile(r"\d")


class NumericErrorKind(Enum):
    """Reasons a raw numeric input can be rejected."""

    mandatory = "mandatory"
    not_a_number = "not_a_number"
    not_integer = "not_integer"
    too_many_fractional_digits = "too_many_fractional_digits"
    number_too_large = "number_too_large"
    out_of_range = "out_of_range"


@dataclass(frozen=True, slots=True)
class NumericSpec:
    """Parsing and bounds rules for one numeric field.

    Args:
        min_value: Inclusive lower bound, or None for no lower bound.
        max_value: Inclusive upper bound, or None for no upper bound.
        max_fraction_digits: Maximum digits after the decimal point; 0 means
            the field is integer-only.
        allow_negative: When False, negative values are reported as out of
            range even if no lower bound is declared.
        ceiling: Exclusive magnitude ceiling independent of the bounds.
        coerce_invalid: When True, blank input and text without any digit is
            read as `0` and checked against the bounds. Malformed numbers such
            as `20,5` are still reported as not a number. Integer dimension
            fields behave this way.
    """

    min_value: Decimal | None = None
    max_value: Decimal | None = None
    max_fraction_digits: int = 0
    allow_negative: bool = True
    ceiling: Decimal = STORABLE_CEILING
    coerce_invalid: bool = False

    @property
    def integer_only(self) -> bool:
        """Return True when the field accepts integers only."""

        return self.max_fraction_digits == 0


@dataclass(frozen=True, slots=True)
class NumericError:
    """A rejected numeric input.

    Attributes:
        kind: Rejection reason.
        raw: The raw string reported back to the user. For coerced fields this
            is the coerced value (`"0"`), not the original text.
        spec: Field rules that produced the rejection.
    """

    kind: NumericErrorKind
    raw: str
    spec: NumericSpec


@dataclass(frozen=True, slots=True)
class NumericResult:
    """Outcome of validating a numeric input.

    Exactly one of `value` / `error` is meaningful. `value` is None with no
    error when an optional field was left blank.
    """

    value: Decimal | None = None
    error: NumericError | None = None

    @property
    def ok(self) -> bool:
        """Return True when the input was accepted."""

        return self.error is None


def parse_decimal(raw: str) -> Decimal | None:
    """Parse a strict decimal literal, returning None for anything else.

    Args:
        raw: Candidate string, already trimmed.

    Returns:
        Decimal value, or None when the text is not a plain decimal literal.
    """

    if not _NUMBER_RE.match(raw):
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        return None


def fraction_digits(raw: str) -> int:
    """Return the number of digits written after the decimal point."""

    if "." not in raw:
        return 0
    return len(raw.split(".", 1)[1])


def validate_numeric(raw: str | None, spec: NumericSpec, *, mandatory: bool = False) -> NumericResult:
    """Validate a raw numeric input against a field spec.

    Rules are applied in precedence order: mandatory, not-a-number, fraction
    digits (not-integer for integer-only fields), storable ceiling, bounds.

    Args:
        raw: Raw input text; None is treated as blank.
        spec: Field rules.
        mandatory: Whether a blank input is an error.

    Returns:
        NumericResult carrying the parsed value or the first violated rule.
    """

    text = (raw or "").strip()

    if not text:
        if spec.coerce_invalid:
            return _check_bounds("0", Decimal(0), spec)
        if mandatory:
            return _fail(NumericErrorKind.mandatory, text, spec)
        return NumericResult()

    value = parse_decimal(text)
    if value is None:
        if spec.coerce_invalid and not _HAS_DIGIT_RE.search(text):
            return _check_bounds("0", Decimal(0), spec)
        return _fail(NumericErrorKind.not_a_number, text, spec)

    if spec.integer_only and "." in text:
        return _fail(NumericErrorKind.not_integer, text, spec)
    if fraction_digits(text) > spec.max_fraction_digits:
        return _fail(NumericErrorKind.too_many_fractional_digits, text, spec)

    if abs(value) >= spec.ceiling:
        return _fail(NumericErrorKind.number_too_large, text, spec)

    return _check_bounds(text, value, spec)


def _check_bounds(text: str, value: Decimal, spec: NumericSpec) -> NumericResult:
    """Apply the inclusive [min, max] bounds and the negative-value rule."""

    if not spec.allow_negative and value < 0:
        return _fail(NumericErrorKind.out_of_range, text, spec)
    if spec.min_value is not None and value < spec.min_value:
        return _fail(NumericErrorKind.out_of_range, text, spec)
    if spec.max_value is not None and value > spec.max_value:
        return _fail(NumericErrorKind.out_of_range, text, spec)
    return NumericResult(value=value)


def _fail(kind: NumericErrorKind, text: str, spec: NumericSpec) -> NumericResult:
    return NumericResult(error=NumericError(kind=kind, raw=text, spec=spec))
