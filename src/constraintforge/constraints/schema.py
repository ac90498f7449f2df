"""
constraints/schema.py: JSON Schema validation for constraints documents.

Checks the shape of a decoded constraints document (from the constraints
endpoint or a local YAML/JSON file) before it is stored.

Usage:
    from constraintforge.constraints.schema import validate_constraints_document

    issues = validate_constraints_document(raw)
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "constraints.schema.json"


@dataclass
class ConstraintIssue:
    """A single finding for a constraints document."""

    message: str
    path: str = ""           # e.g. "Hero/name/required"
    severity: str = "error"  # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}]{loc}: {self.message}"


@lru_cache(maxsize=1)
def _load_validator() -> Draft202012Validator:
    with _SCHEMA_PATH.open() as fh:
        schema = json.load(fh)
    return Draft202012Validator(schema)


def _issue_path(error: ValidationError) -> str:
    """Locate an issue as entity/property/attribute.

    Property names keep their dots ("Hero/address.city/maximumLength") and list
    positions are appended as an index ("Hero/name/types[0]").
    """
    path = ""
    for part in error.absolute_path:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f"/{part}"
        else:
            path = str(part)
    return path


def validate_constraints_document(raw: Any) -> list[ConstraintIssue]:
    """
    Validate a decoded constraints document against the JSON Schema.

    Args:
        raw: The decoded document (``None`` is reported as empty).

    Returns:
        A list of :class:`ConstraintIssue` objects (empty on success).
    """
    if raw is None:
        return [ConstraintIssue(message="Document is empty")]

    validator = _load_validator()
    return [
        ConstraintIssue(message=error.message, path=_issue_path(error))
        for error in sorted(validator.iter_errors(raw), key=lambda e: list(map(str, e.absolute_path)))
    ]
