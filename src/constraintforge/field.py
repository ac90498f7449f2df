"""Bind constraint-derived validation to form fields.

A ConstrainedField is the thin layer a form library talks to: it owns one
CompositeValidator, built on first use, and exposes it as the field's
validation hook. A field without anything to validate exposes None rather
than a no-op function.

Example:
    name = ConstrainedField(
        name="name",
        constraint_key="SuperHero.name",
        label="Name",
        composer=ValidationComposer(store),
    )
    form_field.validate = name.validator  # None when nothing applies
"""

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Mapping

from constraintforge.validation.composer import (
    DEFAULT_ASYNC_DEBOUNCE_MS,
    CompositeValidator,
    ValidationComposer,
)
from constraintforge.validation.types import FieldValidator, FractionPatternFn


@dataclass
class ConstrainedField:
    """A form field validated against the constraints for ``constraint_key``.

    Attributes:
        name: Field name in the form values
        constraint_key: "Entity.property" key into the constraints
        label: Label carried by every error of this field
        composer: Composer bound to the application's constraint store
        validators: Extra synchronous validators, run before derived ones
        async_validators: Validators run after the sync phase passes
        fraction_pattern: Replacement for the default fraction pattern
        async_debounce_ms: Debounce before the async phase
    """

    name: str
    constraint_key: str
    label: str
    composer: ValidationComposer
    validators: Sequence[FieldValidator] = field(default_factory=tuple)
    async_validators: Sequence[FieldValidator] = field(default_factory=tuple)
    fraction_pattern: FractionPatternFn | None = None
    async_debounce_ms: int = DEFAULT_ASYNC_DEBOUNCE_MS

    @cached_property
    def validator(self) -> CompositeValidator | None:
        """The field's validation hook, or None when nothing applies."""
        return self.composer.build_validator(
            self.constraint_key,
            self.label,
            self.validators,
            self.async_validators,
            fraction_pattern=self.fraction_pattern,
            async_debounce_ms=self.async_debounce_ms,
        )

    async def validate(
        self,
        value: Any,
        all_values: Mapping[str, Any] | None = None,
        meta: Any = None,
    ) -> list[Any] | None:
        """Validate a value, or return None when no validation is attached."""
        if self.validator is None:
            return None
        return await self.validator(value, all_values, meta)


async def validate_fields(
    fields: Iterable[ConstrainedField],
    values: Mapping[str, Any],
) -> dict[str, list[Any]]:
    """Validate every field against the form values concurrently.

    Returns:
        Errors keyed by field name; fields that pass are left out
    """
    bound = [f for f in fields if f.validator is not None]
    results = await asyncio.gather(
        *(f.validate(values.get(f.name), values) for f in bound)
    )
    return {f.name: errors for f, errors in zip(bound, results) if errors}
