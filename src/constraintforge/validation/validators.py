"""Validator factories for rules derived from field constraints.

Each ``make_*`` function captures a label and the rule parameters and
returns an async validator ``(value, all_values, meta=None)`` that yields
either one ValidationError or None:

- required / boolean_required: a value must be supplied
- minimum_length / maximum_length: length bounds
- min_value / max_value: numeric bounds
- number / number_fraction: whole numbers, numbers with limited decimals

Apart from the required rules, a None value is never an error; whether a
value must be present is the required rule's business.
"""

import re
from collections.abc import Sized
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from constraintforge.validation.patterns import NUMBER_PATTERN, fraction_number_pattern
from constraintforge.validation.types import (
    ErrorType,
    FieldValidator,
    FractionPatternFn,
    ValidationError,
)

_DATE_TYPES = (date, datetime, time)


# =============================================================================
# Value helpers
# =============================================================================


def _is_empty(value: Any) -> bool:
    """Check if a value counts as not supplied for the required rule.

    Booleans always count as empty here; boolean fields use
    make_boolean_required instead. Dates are never empty.
    """
    if value is None or isinstance(value, bool):
        return True
    if isinstance(value, _DATE_TYPES):
        return False
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset, Mapping)):
        return len(value) == 0
    return False


def _length(value: Any) -> int | None:
    if isinstance(value, Sized):
        return len(value)
    return None


def _as_number(value: Any) -> float | int | Decimal | None:
    """Numeric view of a value, or None if it has none.

    Numeric strings ("4", " -2.5") are compared as numbers, so text inputs
    can be checked against numeric bounds.
    """
    if isinstance(value, Decimal):
        return None if value.is_nan() else value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and value.strip():
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
        return None if number.is_nan() else number
    return None


def _stringify(value: Any) -> str:
    """Render a value the way a form input would show it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _compile(pattern: "re.Pattern[str] | str") -> "re.Pattern[str]":
    return re.compile(pattern)


# =============================================================================
# Required
# =============================================================================


def make_required(label: str) -> FieldValidator:
    """Fail on None, blank strings, empty collections and booleans."""

    async def validate_required(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        if _is_empty(value):
            return ValidationError(
                type=ErrorType.REQUIRED,
                label=label,
                value=value,
                reasons={"required": "required"},
            )
        return None

    return validate_required


def make_boolean_required(label: str) -> FieldValidator:
    """Pass only for the literals True and False."""

    async def validate_boolean_required(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        if value is True or value is False:
            return None
        return ValidationError(
            type=ErrorType.REQUIRED,
            label=label,
            value=value,
            reasons={"required": "required"},
        )

    return validate_boolean_required


# =============================================================================
# Length
# =============================================================================


def make_minimum_length(label: str, minimum_length: int) -> FieldValidator:
    async def validate_minimum_length(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        length = _length(value)
        if length is not None and length < minimum_length:
            return ValidationError(
                type=ErrorType.MINIMUM_LENGTH,
                label=label,
                value=value,
                reasons={"minimum_length": minimum_length},
            )
        return None

    return validate_minimum_length


def make_maximum_length(label: str, maximum_length: int) -> FieldValidator:
    async def validate_maximum_length(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        length = _length(value)
        if length is not None and length > maximum_length:
            return ValidationError(
                type=ErrorType.MAXIMUM_LENGTH,
                label=label,
                value=value,
                reasons={"maximum_length": maximum_length},
            )
        return None

    return validate_maximum_length


# =============================================================================
# Range
# =============================================================================


def make_min_value(label: str, min_value: float) -> FieldValidator:
    async def validate_min_value(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        number = _as_number(value)
        if number is not None and number < min_value:
            return ValidationError(
                type=ErrorType.MIN_VALUE,
                label=label,
                value=value,
                reasons={"min_value": min_value},
            )
        return None

    return validate_min_value


def make_max_value(label: str, max_value: float) -> FieldValidator:
    async def validate_max_value(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        number = _as_number(value)
        if number is not None and number > max_value:
            return ValidationError(
                type=ErrorType.MAX_VALUE,
                label=label,
                value=value,
                reasons={"max_value": max_value},
            )
        return None

    return validate_max_value


# =============================================================================
# Number formats
# =============================================================================


def make_number(
    label: str,
    pattern: "re.Pattern[str] | str" = NUMBER_PATTERN,
) -> FieldValidator:
    """Whole numbers only, checked against ``pattern`` (full match)."""
    regex = _compile(pattern)

    async def validate_number(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        if value is not None and regex.fullmatch(_stringify(value)) is None:
            return ValidationError(
                type=ErrorType.NUMBER,
                label=label,
                value=value,
                reasons={"regex": regex},
            )
        return None

    return validate_number


def make_number_fraction(
    label: str,
    fraction_length: int,
    pattern_fn: FractionPatternFn = fraction_number_pattern,
) -> FieldValidator:
    """Numbers with at most ``fraction_length`` decimals.

    ``pattern_fn`` is called on every validation, so it may depend on state
    that changes after the validator was built (a locale setting, say).
    """

    async def validate_number_fraction(
        value: Any, all_values: Mapping[str, Any] | None = None, meta: Any = None
    ) -> ValidationError | None:
        regex = _compile(pattern_fn(fraction_length))
        if value is not None and regex.fullmatch(_stringify(value)) is None:
            return ValidationError(
                type=ErrorType.NUMBER_FRACTION,
                label=label,
                value=value,
                reasons={"regex": regex, "fraction_length": fraction_length},
            )
        return None

    return validate_number_fraction
