"""User-facing message grammar for form validation.

The wording here is consumed verbatim by UI tests and API clients, so every
template is fixed. Field labels are passed in by the caller.
"""

from __future__ import annotations

from decimal import Decimal

from .numeric import NumericError, NumericErrorKind

FIELD_ERROR_HEADER = "Page received incorrect data"


def format_number(value: Decimal) -> str:
    """Render a bound without exponent or trailing zeros (`100`, `0.5`)."""

    if value == value.to_integral_value():
        return str(value.quantize(Decimal(1)))
    return format(value.normalize(), "f")


def out_of_range(raw: str, label: str, *, min_value: Decimal, max_value: Decimal, max_fraction_digits: int) -> str:
    """Return the range-violation message, including the fraction clause when relevant."""

    message = (
        f'Incorrect value "{raw}" for "{label}" field: must be between '
        f"{format_number(min_value)} and {format_number(max_value)}"
    )
    if max_fraction_digits > 0:
        message += f", and have no more than {max_fraction_digits} digits after the decimal point"
    return message + "."


def not_a_number(label: str) -> str:
    return f'Field "{label}" is not correct: a number is expected'


def too_many_fractional_digits(label: str) -> str:
    return f'Field "{label}" is not correct: a number has too many fractional digits'


def number_too_large(label: str) -> str:
    return f'Field "{label}" is not correct: a number is too large'


def not_integer(label: str) -> str:
    return f'Field "{label}" is not integer.'


def mandatory(label: str) -> str:
    return f'Field "{label}" is mandatory.'


def empty_text(label: str) -> str:
    return f'Incorrect value for field "{label}": cannot be empty.'


def unexpected_value(label: str) -> str:
    return f'Incorrect value for field "{label}": unexpected value.'


def missing_items(entity_label: str, name: str) -> str:
    return f'Missing items for {entity_label} "{name}".'


def missing_item_prototypes(name: str) -> str:
    return f'Graph prototype "{name}" must have at least one item prototype.'


def incorrect_colour(value: str) -> str:
    return f'Incorrect colour "{value}".'


def reference_not_found() -> str:
    return "No permissions to referred object or it does not exist!"


def registry_unavailable() -> str:
    return "Cannot resolve item references: the item registry is unavailable."


def duplicate_graph_name(name: str) -> str:
    return f'Graph with name "{name}" already exists in graphs or graph prototypes.'


def numeric_error_message(error: NumericError, label: str) -> str:
    """Translate a NumericError into its user-facing message.

    Args:
        error: Rejection returned by `validate_numeric`.
        label: Field label shown to the user.

    Returns:
        Formatted message string.

    Raises:
        ValueError: When an out-of-range error has no declared bounds.
    """

    kind = error.kind
    if kind is NumericErrorKind.mandatory:
        return mandatory(label)
    if kind is NumericErrorKind.not_a_number:
        return not_a_number(label)
    if kind is NumericErrorKind.not_integer:
        return not_integer(label)
    if kind is NumericErrorKind.too_many_fractional_digits:
        return too_many_fractional_digits(label)
    if kind is NumericErrorKind.number_too_large:
        return number_too_large(label)

    spec = error.spec
    min_value = spec.min_value if spec.min_value is not None else (Decimal(0) if not spec.allow_negative else None)
    max_value = spec.max_value if spec.max_value is not None else spec.ceiling
    if min_value is None:
        raise ValueError(f"Out-of-range error for {label!r} has no lower bound to report.")
    return out_of_range(
        error.raw,
        label,
        min_value=min_value,
        max_value=max_value,
        max_fraction_digits=spec.max_fraction_digits,
    )
