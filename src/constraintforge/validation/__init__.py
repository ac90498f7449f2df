"""Field validation built from constraints.

Usage:
    from constraintforge.validation import ValidationComposer

    composer = ValidationComposer(store)
    validate = composer.build_validator("SuperHero.name", "Name")
"""

from constraintforge.validation.composer import (
    DEFAULT_ASYNC_DEBOUNCE_MS,
    CancellableDelay,
    CompositeValidator,
    TrainState,
    ValidationComposer,
    derive_validators,
)
from constraintforge.validation.patterns import NUMBER_PATTERN, fraction_number_pattern
from constraintforge.validation.types import (
    ErrorType,
    FieldValidator,
    FractionPatternFn,
    ValidationError,
)
from constraintforge.validation.validators import (
    make_boolean_required,
    make_max_value,
    make_maximum_length,
    make_min_value,
    make_minimum_length,
    make_number,
    make_number_fraction,
    make_required,
)

__all__ = [
    # Types
    "ErrorType",
    "FieldValidator",
    "FractionPatternFn",
    "ValidationError",
    # Patterns
    "NUMBER_PATTERN",
    "fraction_number_pattern",
    # Validators
    "make_boolean_required",
    "make_max_value",
    "make_maximum_length",
    "make_min_value",
    "make_minimum_length",
    "make_number",
    "make_number_fraction",
    "make_required",
    # Composer
    "DEFAULT_ASYNC_DEBOUNCE_MS",
    "CancellableDelay",
    "CompositeValidator",
    "TrainState",
    "ValidationComposer",
    "derive_validators",
]
