"""Constraint metadata: storage, lookup and type classification."""

from constraintforge.constraints.classifier import (
    FIELD_TYPE_ORDER,
    most_specific_field_type,
)
from constraintforge.constraints.resolver import (
    get_field_constraint,
    split_constraint_key,
)
from constraintforge.constraints.schema import (
    ConstraintIssue,
    validate_constraints_document,
)
from constraintforge.constraints.store import ConstraintStore
from constraintforge.constraints.types import (
    ConstraintsDocument,
    FieldConstraint,
    FieldType,
    parse_constraints,
)

__all__ = [
    "ConstraintIssue",
    "ConstraintStore",
    "ConstraintsDocument",
    "FIELD_TYPE_ORDER",
    "FieldConstraint",
    "FieldType",
    "get_field_constraint",
    "most_specific_field_type",
    "parse_constraints",
    "split_constraint_key",
    "validate_constraints_document",
]
