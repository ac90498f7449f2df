"""constraintforge: form field validation derived from server constraints.

Usage:
    from constraintforge import (
        ConstraintConfig,
        ConstraintStore,
        ConstrainedField,
        ValidationComposer,
    )

    # At application start
    store = ConstraintStore(ConstraintConfig(constraints_url="/api/constraints"))
    await store.load()

    # Per form field
    composer = ValidationComposer(store)
    field = ConstrainedField("name", "SuperHero.name", "Name", composer)
"""

from constraintforge.config import ConstraintConfig
from constraintforge.constraints import (
    ConstraintStore,
    ConstraintsDocument,
    FieldConstraint,
    FieldType,
)
from constraintforge.errors import (
    ConstraintConfigurationError,
    ConstraintDocumentError,
    ConstraintError,
    ConstraintLoadError,
)
from constraintforge.field import ConstrainedField, validate_fields
from constraintforge.validation import (
    CompositeValidator,
    ErrorType,
    ValidationComposer,
    ValidationError,
)

__all__ = [
    # Configuration
    "ConstraintConfig",
    # Constraints
    "ConstraintStore",
    "ConstraintsDocument",
    "FieldConstraint",
    "FieldType",
    # Validation
    "CompositeValidator",
    "ErrorType",
    "ValidationComposer",
    "ValidationError",
    # Fields
    "ConstrainedField",
    "validate_fields",
    # Errors
    "ConstraintConfigurationError",
    "ConstraintDocumentError",
    "ConstraintError",
    "ConstraintLoadError",
]
