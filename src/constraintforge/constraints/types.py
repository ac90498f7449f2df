"""Types describing server-supplied field constraints.

A constraints document maps entity names to their properties, and each
property to a FieldConstraint:

    {
      "SuperHero": {
        "name": {
          "javaType": "java.lang.String",
          "types": ["text"],
          "required": true,
          "minimumLength": null,
          "maximumLength": 50,
          "fractionLength": null,
          "radix": null,
          "pattern": null,
          "min": null,
          "max": null,
          "name": "name"
        }
      }
    }

Property names may contain dots ("address.city").
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class FieldType(Enum):
    """Canonical field types, declared from most to least specific.

    Declaration order is significant: the classifier picks the member that
    comes first. TEXT is the universal fallback and must stay last.
    """

    ENUM = "enum"
    BOOLEAN = "boolean"
    COLOR = "color"
    DATETIME_LOCAL = "datetime-local"
    DATETIME = "datetime"
    MONTH = "month"
    WEEK = "week"
    DATE = "date"
    TIME = "time"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    URL = "url"
    PASSWORD = "password"
    FILE = "file"
    IMAGE = "image"
    TEXT = "text"


@dataclass(frozen=True)
class FieldConstraint:
    """Validation metadata for one entity property.

    Every constraint is optional; None means "no constraint of this kind",
    never zero.

    Attributes:
        name: Name of the property this constraint describes
        java_type: Server-side class name (opaque passthrough)
        types: Declared semantic type tags, possibly overlapping
        required: Whether a value must be supplied
        minimum_length: Minimum length of a text value
        maximum_length: Maximum length of a text value
        fraction_length: Digits allowed after the decimal point
        radix: Numeric radix (passthrough, not validated)
        pattern: Server-side regex (passthrough, not validated)
        min: Minimum numeric value
        max: Maximum numeric value
    """

    name: str = ""
    java_type: str | None = None
    types: tuple[str, ...] | None = None
    required: bool | None = None
    minimum_length: int | None = None
    maximum_length: int | None = None
    fraction_length: int | None = None
    radix: int | None = None
    pattern: str | None = None
    min: float | None = None
    max: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldConstraint":
        """Create FieldConstraint from a decoded JSON/YAML mapping."""
        types = data.get("types")
        if isinstance(types, str):
            types = [types]

        return cls(
            name=data.get("name") or "",
            java_type=data.get("javaType"),
            types=tuple(types) if types is not None else None,
            required=data.get("required"),
            minimum_length=data.get("minimumLength"),
            maximum_length=data.get("maximumLength"),
            fraction_length=data.get("fractionLength"),
            radix=data.get("radix"),
            pattern=data.get("pattern"),
            min=data.get("min"),
            max=data.get("max"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "javaType": self.java_type,
            "types": list(self.types) if self.types is not None else None,
            "required": self.required,
            "minimumLength": self.minimum_length,
            "maximumLength": self.maximum_length,
            "fractionLength": self.fraction_length,
            "radix": self.radix,
            "pattern": self.pattern,
            "min": self.min,
            "max": self.max,
            "name": self.name,
        }


# Entity name -> property name -> constraint
ConstraintsDocument = dict[str, dict[str, FieldConstraint]]


def parse_constraints(raw: Mapping[str, Any]) -> ConstraintsDocument:
    """Convert a decoded constraints document into FieldConstraint records.

    Entries that are already FieldConstraint instances are kept as-is.
    """
    document: ConstraintsDocument = {}
    for entity_name, properties in raw.items():
        entity: dict[str, FieldConstraint] = {}
        for property_name, constraint in (properties or {}).items():
            if isinstance(constraint, FieldConstraint):
                entity[property_name] = constraint
            else:
                entity[property_name] = FieldConstraint.from_dict(constraint or {})
        document[entity_name] = entity
    return document
