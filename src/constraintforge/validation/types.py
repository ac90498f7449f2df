"""Core types for field validation.

A validator inspects one field value and returns at most one
ValidationError. Validators are always async so that derived rules and
user-supplied checks (which may call a backend) compose uniformly.
"""

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class ErrorType(Enum):
    """Kind of rule a ValidationError reports on."""

    REQUIRED = "ERROR_REQUIRED"
    MINIMUM_LENGTH = "ERROR_MINIMUM_LENGTH"
    MAXIMUM_LENGTH = "ERROR_MAXIMUM_LENGTH"
    MIN_VALUE = "ERROR_MIN_VALUE"
    MAX_VALUE = "ERROR_MAX_VALUE"
    NUMBER = "ERROR_NUMBER"
    NUMBER_FRACTION = "ERROR_NUMBER_FRACTION"


@dataclass(frozen=True)
class ValidationError:
    """A single field validation failure.

    Attributes:
        type: Which rule was violated
        label: Caller-supplied field label, used to build a message
        value: The rejected input, unchanged
        reasons: The threshold or pattern that was violated, e.g.
                 {"minimum_length": 3} or {"regex": re.compile(...)}
    """

    type: ErrorType
    label: str
    value: Any
    reasons: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "label": self.label,
            "value": self.value,
            "reasons": {
                _camel_case(key): _plain(reason) for key, reason in self.reasons.items()
            },
        }


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _plain(reason: Any) -> Any:
    if isinstance(reason, re.Pattern):
        return reason.pattern
    return reason


# Signature: async (value, all_values, meta) -> error | None
# Derived validators return ValidationError; user validators may return
# any error object.
FieldValidator = Callable[[Any, Mapping[str, Any], Any], Awaitable[Any | None]]

# Builds the fraction pattern for a given fraction length
FractionPatternFn = Callable[[int], "re.Pattern[str]"]
