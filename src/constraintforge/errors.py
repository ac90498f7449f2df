"""Exceptions raised by constraintforge.

Field validation failures are never raised; they are returned as
``ValidationError`` records. Only configuration and loading problems
surface as exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from constraintforge.constraints.schema import ConstraintIssue


class ConstraintError(Exception):
    """Base class for constraint loading and configuration errors."""
    pass


class ConstraintConfigurationError(ConstraintError):
    """The constraint service was used before it was configured."""
    pass


class ConstraintLoadError(ConstraintError):
    """Fetching the constraints document failed."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ConstraintDocumentError(ConstraintError):
    """A constraints document does not have the expected shape."""

    def __init__(self, message: str, issues: list[ConstraintIssue]):
        super().__init__(message)
        self.issues = issues
