"""Compose derived and user-supplied validators into one field validator.

The ValidationComposer looks up a field's constraints in the store, turns
them into validators and combines those with the caller's own validators
into a CompositeValidator.

Running a CompositeValidator (one "train") works in two phases:
1. Synchronous phase: all sync validators run concurrently. Any errors are
   returned at once and the async phase is skipped.
2. Asynchronous phase: after a debounce delay, the async validators run
   concurrently. A newer call cancels the delay of an older one, and
   results of a train that is no longer current are discarded (None).

Usage:
    composer = ValidationComposer(store)
    validate = composer.build_validator("Hero.name", "Name")
    if validate is not None:
        errors = await validate("ab", {"name": "ab"})
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Mapping

from constraintforge.constraints.classifier import most_specific_field_type
from constraintforge.constraints.resolver import get_field_constraint
from constraintforge.constraints.store import ConstraintStore
from constraintforge.constraints.types import FieldConstraint, FieldType
from constraintforge.validation import validators as rules
from constraintforge.validation.patterns import fraction_number_pattern
from constraintforge.validation.types import FieldValidator, FractionPatternFn

logger = logging.getLogger(__name__)

DEFAULT_ASYNC_DEBOUNCE_MS = 200


# =============================================================================
# Cancellable Delay
# =============================================================================


class CancellableDelay:
    """A delay that can be cut short.

    Awaiting it yields True once the delay has elapsed, or False if
    cancel() was called first.

    Must be created from within a running event loop.
    """

    def __init__(self, seconds: float):
        loop = asyncio.get_running_loop()
        self._future: asyncio.Future[bool] = loop.create_future()
        self._handle = loop.call_later(seconds, self._settle, True)

    def _settle(self, proceed: bool) -> None:
        if not self._future.done():
            self._future.set_result(proceed)

    def cancel(self) -> None:
        self._handle.cancel()
        self._settle(False)

    @property
    def done(self) -> bool:
        return self._future.done()

    def __await__(self):
        return self._future.__await__()


@dataclass
class TrainState:
    """Mutable per-field state shared by all trains of one validator.

    Attributes:
        current_train: Identifier of the most recently started train
        pending_delay: Debounce delay of the train waiting for its async phase
    """

    current_train: str | None = None
    pending_delay: CancellableDelay | None = None


# =============================================================================
# Composite Validator
# =============================================================================


class CompositeValidator:
    """The single validation function attached to one form field.

    An instance belongs to exactly one field; its train state must not be
    shared between fields.
    """

    def __init__(
        self,
        validators: Sequence[FieldValidator],
        async_validators: Sequence[FieldValidator] = (),
        async_debounce_ms: int = DEFAULT_ASYNC_DEBOUNCE_MS,
    ):
        self.validators = tuple(validators)
        self.async_validators = tuple(async_validators)
        self.async_debounce_ms = async_debounce_ms
        self._state = TrainState()

    @property
    def state(self) -> TrainState:
        return self._state

    async def __call__(
        self,
        value: Any,
        all_values: Mapping[str, Any] | None = None,
        meta: Any = None,
    ) -> list[Any] | None:
        """Validate a value.

        Args:
            value: The field value
            all_values: Values of every field in the form
            meta: Field state from the form library, passed through

        Returns:
            The errors in validator order, or None when the value is valid
            or this call was superseded by a newer one
        """
        if all_values is None:
            all_values = {}

        train_id = uuid.uuid4().hex
        self._state.current_train = train_id
        self._cancel_pending_delay()

        results = await asyncio.gather(
            *(validator(value, all_values, meta) for validator in self.validators)
        )
        errors = [result for result in results if result is not None]
        if errors:
            return errors

        if not self.async_validators:
            return None

        if not self._is_current(train_id):
            logger.debug("Validation train %s superseded before debounce", train_id)
            return None

        self._cancel_pending_delay()
        delay = CancellableDelay(self.async_debounce_ms / 1000)
        self._state.pending_delay = delay
        proceed = await delay
        if self._state.pending_delay is delay:
            self._state.pending_delay = None

        if not proceed:
            logger.debug("Validation train %s cancelled during debounce", train_id)
            return None

        async_results = await asyncio.gather(
            *(validator(value, all_values, meta) for validator in self.async_validators)
        )

        if not self._is_current(train_id):
            logger.debug("Discarding stale async results of train %s", train_id)
            return None

        async_errors = [result for result in async_results if result is not None]
        return async_errors or None

    def _is_current(self, train_id: str) -> bool:
        return self._state.current_train == train_id

    def _cancel_pending_delay(self) -> None:
        pending = self._state.pending_delay
        if pending is not None:
            pending.cancel()
            self._state.pending_delay = None


# =============================================================================
# Derived Validators
# =============================================================================


def derive_validators(
    constraint: FieldConstraint,
    label: str,
    fraction_pattern: FractionPatternFn | None = None,
) -> list[FieldValidator]:
    """Turn a field's constraints into validators.

    Validators come in a fixed order: required, length (min, max),
    range (min, max), number format.
    """
    derived: list[FieldValidator] = []
    field_type = most_specific_field_type(constraint.types)

    if constraint.required:
        if field_type == FieldType.BOOLEAN:
            derived.append(rules.make_boolean_required(label))
        else:
            derived.append(rules.make_required(label))

    if field_type == FieldType.TEXT:
        if constraint.minimum_length is not None:
            derived.append(rules.make_minimum_length(label, constraint.minimum_length))
        if constraint.maximum_length is not None:
            derived.append(rules.make_maximum_length(label, constraint.maximum_length))

    if constraint.min is not None:
        derived.append(rules.make_min_value(label, constraint.min))
    if constraint.max is not None:
        derived.append(rules.make_max_value(label, constraint.max))

    if field_type == FieldType.NUMBER:
        if constraint.fraction_length is not None and constraint.fraction_length > 0:
            derived.append(
                rules.make_number_fraction(
                    label,
                    constraint.fraction_length,
                    fraction_pattern or fraction_number_pattern,
                )
            )
        else:
            derived.append(rules.make_number(label))

    return derived


# =============================================================================
# Validation Composer
# =============================================================================


class ValidationComposer:
    """Builds composite validators from the constraints in a store."""

    def __init__(self, store: ConstraintStore):
        self.store = store

    def build_validator(
        self,
        constraint_key: str,
        label: str,
        validators: Sequence[FieldValidator] = (),
        async_validators: Sequence[FieldValidator] = (),
        fraction_pattern: FractionPatternFn | None = None,
        async_debounce_ms: int = DEFAULT_ASYNC_DEBOUNCE_MS,
    ) -> CompositeValidator | None:
        """Build the validator for one field.

        User validators run first, in their given order, followed by the
        validators derived from the field's constraints. A missing
        constraints document or constraint key is logged as a warning and
        only the user validators are used.

        The result should be built once per field configuration and reused.

        Args:
            constraint_key: "Entity.property" key into the constraints
            label: Field label carried by every error
            validators: User validators for the synchronous phase
            async_validators: User validators for the asynchronous phase
            fraction_pattern: Replacement for the default fraction pattern
            async_debounce_ms: Debounce before the asynchronous phase

        Returns:
            A CompositeValidator, or None when there is nothing to validate
        """
        working = list(validators)

        document = self.store.get()
        if document is None:
            logger.warning(
                'Constraints are empty, but a validator was built for "%s". '
                "Make sure the constraints are loaded before the form is displayed.",
                constraint_key,
            )
        else:
            constraint = get_field_constraint(constraint_key, document)
            if constraint is None:
                logger.warning(
                    'Constraints for "%s" not found, but a validator was built for it. '
                    "Check the constraint key.",
                    constraint_key,
                )
            else:
                working.extend(derive_validators(constraint, label, fraction_pattern))

        if not working and not async_validators:
            return None

        return CompositeValidator(
            working,
            async_validators,
            async_debounce_ms=async_debounce_ms,
        )
