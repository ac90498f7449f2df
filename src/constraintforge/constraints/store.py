"""Holder for the constraints document used when building validators.

The store is created once at application start and handed to whatever
needs it (usually a ValidationComposer). Every write replaces the whole
document; a failed load leaves the previous document in place.

Usage:
    store = ConstraintStore(ConstraintConfig(constraints_url="/api/constraints"))
    await store.load()

    # or, when the data is already at hand (tests, server-side rendering)
    store.set({"Hero": {"name": {"required": True, "types": ["text"]}}})
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import httpx
import yaml

from constraintforge.config import ConstraintConfig
from constraintforge.constraints.schema import validate_constraints_document
from constraintforge.constraints.types import (
    ConstraintsDocument,
    FieldConstraint,
    parse_constraints,
)
from constraintforge.errors import (
    ConstraintConfigurationError,
    ConstraintDocumentError,
    ConstraintLoadError,
)

logger = logging.getLogger(__name__)


class ConstraintStore:
    """Process-wide constraints document with explicit load/set operations."""

    def __init__(
        self,
        config: ConstraintConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the store.

        Args:
            config: Transport configuration; may also be supplied later
                    through configure()
            client: Optional HTTP client to fetch with. When omitted, a
                    client is created for each load() call.
        """
        self._config = config
        self._client = client
        self._document: ConstraintsDocument | None = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, config: ConstraintConfig) -> None:
        """Set the transport configuration used by load()."""
        self._config = config

    @property
    def config(self) -> ConstraintConfig:
        """The transport configuration.

        Raises:
            ConstraintConfigurationError: If configure() was never called
        """
        if self._config is None:
            raise ConstraintConfigurationError(
                "The constraint service is not initialized."
            )
        return self._config

    # ------------------------------------------------------------------
    # Document access
    # ------------------------------------------------------------------

    def get(self) -> ConstraintsDocument | None:
        """Return the current document, or None when nothing is loaded."""
        return self._document

    def set(self, document: Mapping[str, Any] | None) -> None:
        """Replace the current document.

        Raw mappings are checked against the constraints schema and parsed
        into FieldConstraint records. Passing None clears the store.

        Raises:
            ConstraintDocumentError: If the document is malformed; the
                current document is kept
        """
        if document is None:
            self._document = None
            return

        self._check(_as_raw(document), source="set()")
        self._document = parse_constraints(document)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> ConstraintsDocument:
        """Fetch the constraints document with a GET and store it.

        Raises:
            ConstraintConfigurationError: If the store is not configured
            ConstraintLoadError: On transport failure, a non-2xx response
                or a body that is not JSON
            ConstraintDocumentError: If the body is not a constraints document
        """
        config = self.config
        url = config.constraints_url
        auth: Any = None
        if config.needs_authentication:
            auth = config.credentials if config.credentials is not None else httpx.USE_CLIENT_DEFAULT

        try:
            if self._client is not None:
                response = await self._client.get(url, auth=auth, timeout=config.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(url, auth=auth, timeout=config.timeout)
        except httpx.HTTPError as exc:
            raise ConstraintLoadError(
                f"Failed to fetch constraints from {url}: {exc}", url=url
            ) from exc

        if not response.is_success:
            raise ConstraintLoadError(
                f"Failed to fetch constraints from {url}: HTTP {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            raw = response.json()
        except ValueError as exc:
            raise ConstraintLoadError(
                f"Constraints from {url} are not valid JSON: {exc}",
                url=url,
                status_code=response.status_code,
            ) from exc

        return self._store(raw, source=url)

    def load_file(self, path: Path) -> ConstraintsDocument:
        """Read a YAML or JSON constraints file and store it.

        Raises:
            ConstraintDocumentError: If the file cannot be parsed or does
                not contain a constraints document
        """
        try:
            with path.open() as fh:
                raw = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConstraintDocumentError(
                f"Failed to parse constraints file {path}: {exc}", issues=[]
            ) from exc

        return self._store(raw, source=str(path))

    def _store(self, raw: Any, *, source: str) -> ConstraintsDocument:
        self._check(raw, source=source)

        document = parse_constraints(raw)
        self._document = document
        logger.info("Loaded constraints for %d entities from %s", len(document), source)
        return document

    def _check(self, raw: Any, *, source: str) -> None:
        issues = validate_constraints_document(raw)
        if issues:
            raise ConstraintDocumentError(
                f"Invalid constraints document from {source}: "
                + "; ".join(str(issue) for issue in issues),
                issues=issues,
            )


def _as_raw(document: Mapping[str, Any]) -> Any:
    """Wire form of a document that may already hold FieldConstraint records."""
    if not isinstance(document, Mapping):
        return document
    return {
        entity_name: {
            property_name: (
                constraint.to_dict() if isinstance(constraint, FieldConstraint) else constraint
            )
            for property_name, constraint in properties.items()
        }
        if isinstance(properties, Mapping)
        else properties
        for entity_name, properties in document.items()
    }
